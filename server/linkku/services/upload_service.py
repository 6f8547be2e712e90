# server/linkku/services/upload_service.py

import logging
import os
import uuid
from typing import Optional

from flask import current_app
from werkzeug.datastructures import FileStorage

from linkku.errors import ValidationFailed

logger = logging.getLogger(__name__)


ALLOWED_MIME_TYPES = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}

UPLOAD_DIRECTORIES = {
    "article_image": "articles",
    "category_icon": "category-icons",
    "linktree_photo": "linktree-photos",
}


class UploadService:

    @staticmethod
    def upload_root() -> str:
        return os.path.abspath(current_app.config["UPLOAD_FOLDER"])

    @staticmethod
    def _measure(file: FileStorage) -> int:
        stream = file.stream
        stream.seek(0, os.SEEK_END)
        size = stream.tell()
        stream.seek(0)
        return size

    @staticmethod
    def save_image(file: Optional[FileStorage], kind: str) -> dict:
        """Validate and store an uploaded image; returns its public path."""
        if kind not in UPLOAD_DIRECTORIES:
            raise ValueError(f"Unknown upload kind: {kind}")

        if file is None or not file.filename:
            raise ValidationFailed({"file": "No file uploaded"})

        mimetype = (file.mimetype or "").lower()
        if mimetype not in ALLOWED_MIME_TYPES:
            raise ValidationFailed(
                {"file": "Invalid file type. Only JPEG, PNG, GIF, and WebP are allowed"},
            )

        size = UploadService._measure(file)
        max_size = current_app.config.get("MAX_UPLOAD_SIZE", 5 * 1024 * 1024)
        if size > max_size:
            raise ValidationFailed(
                {"file": f"File too large. Maximum size is {max_size // (1024 * 1024)}MB"},
            )
        if size == 0:
            raise ValidationFailed({"file": "Uploaded file is empty"})

        directory = UPLOAD_DIRECTORIES[kind]
        filename = f"{uuid.uuid4().hex}.{ALLOWED_MIME_TYPES[mimetype]}"
        target_dir = os.path.join(UploadService.upload_root(), directory)
        os.makedirs(target_dir, exist_ok=True)

        file.save(os.path.join(target_dir, filename))
        logger.info(f"Stored upload {directory}/{filename} ({size} bytes)")

        return {
            "url": f"/uploads/{directory}/{filename}",
            "filename": filename,
            "size": size,
            "mimetype": mimetype,
        }
