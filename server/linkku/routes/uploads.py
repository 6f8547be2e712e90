# server/linkku/routes/uploads.py

import logging

from flask import Blueprint, request, current_app, send_from_directory

from linkku.services.upload_service import UploadService
from linkku.utils.auth import require_capability

uploads_bp = Blueprint("uploads", __name__)
logger = logging.getLogger(__name__)


def api_response():
    return current_app.api_response


@uploads_bp.route("/api/upload/category-icon", methods=["POST"])
@require_capability("upload", "category_icon")
def upload_category_icon():
    result = UploadService.save_image(request.files.get("file"), "category_icon")

    return api_response().success(data=result, message="Icon uploaded", status=201)


@uploads_bp.route("/api/upload/linktree-photo", methods=["POST"])
@require_capability("upload", "linktree_photo")
def upload_linktree_photo():
    result = UploadService.save_image(request.files.get("file"), "linktree_photo")

    return api_response().success(data=result, message="Photo uploaded", status=201)


@uploads_bp.route("/uploads/<path:filename>", methods=["GET"])
def serve_upload(filename: str):
    # send_from_directory refuses paths that escape the folder
    return send_from_directory(UploadService.upload_root(), filename, max_age=86400)
