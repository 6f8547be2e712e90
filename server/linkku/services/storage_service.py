# server/linkku/services/storage_service.py

import logging
import os
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Set

from linkku.errors import ValidationFailed
from linkku.extensions import db
from linkku.models.article import Article
from linkku.models.category import Category
from linkku.models.linktree import Linktree
from linkku.services.upload_service import UploadService
from linkku.utils.helpers import format_file_size

logger = logging.getLogger(__name__)

UPLOADS_PREFIX = "/uploads/"


class StorageCleanupService:
    """Finds uploaded files that no database row points at."""

    @staticmethod
    def referenced_paths() -> Set[str]:
        columns = (Category.icon, Article.featured_image, Linktree.photo)

        referenced = set()
        for column in columns:
            rows = db.session.query(column).filter(column.like(f"{UPLOADS_PREFIX}%")).all()
            referenced.update(value for (value,) in rows if value)

        return referenced

    @staticmethod
    def scan_files() -> List[dict]:
        root = UploadService.upload_root()
        files = []

        if not os.path.isdir(root):
            return files

        for dirpath, _dirnames, filenames in os.walk(root):
            for filename in filenames:
                full_path = os.path.join(dirpath, filename)
                relative = os.path.relpath(full_path, root).replace(os.sep, "/")
                stat = os.stat(full_path)
                files.append({
                    "path": f"{UPLOADS_PREFIX}{relative}",
                    "directory": relative.split("/")[0] if "/" in relative else "",
                    "size": stat.st_size,
                    "lastModified": datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat(),
                    "_mtime": stat.st_mtime,
                })

        return files

    @staticmethod
    def get_stats() -> dict:
        files = StorageCleanupService.scan_files()
        referenced = StorageCleanupService.referenced_paths()

        directories: Dict[str, dict] = {}
        unused = []
        total_size = 0
        unused_size = 0

        for entry in files:
            total_size += entry["size"]

            key = entry["directory"] or "root"
            bucket = directories.setdefault(key, {"total": 0, "used": 0, "unused": 0})
            bucket["total"] += 1

            if entry["path"] in referenced:
                bucket["used"] += 1
            else:
                bucket["unused"] += 1
                unused_size += entry["size"]
                unused.append(entry)

        unused.sort(key=lambda e: e["_mtime"], reverse=True)

        return {
            "totalFiles": len(files),
            "totalSize": total_size,
            "totalSizeFormatted": format_file_size(total_size),
            "usedFiles": len(files) - len(unused),
            "unusedFiles": len(unused),
            "unusedSize": unused_size,
            "unusedSizeFormatted": format_file_size(unused_size),
            "directories": directories,
            "unusedFileList": [
                {
                    "path": e["path"],
                    "size": e["size"],
                    "sizeFormatted": format_file_size(e["size"]),
                    "lastModified": e["lastModified"],
                }
                for e in unused
            ],
        }

    @staticmethod
    def _resolve(path: str) -> str:
        """Map a public /uploads/... path to a file inside the upload root, or ''."""
        root = UploadService.upload_root()

        relative = path[len(UPLOADS_PREFIX):] if path.startswith(UPLOADS_PREFIX) else path.lstrip("/")
        candidate = os.path.realpath(os.path.join(root, relative))

        if os.path.commonpath([candidate, os.path.realpath(root)]) != os.path.realpath(root):
            return ""
        return candidate

    @staticmethod
    def _public_path(full_path: str) -> str:
        root = os.path.realpath(UploadService.upload_root())
        return UPLOADS_PREFIX + os.path.relpath(full_path, root).replace(os.sep, "/")

    @staticmethod
    def delete_files(paths: Iterable[str]) -> dict:
        if not isinstance(paths, list) or not paths:
            raise ValidationFailed({"files": "A non-empty list of file paths is required"})

        referenced = StorageCleanupService.referenced_paths()

        deleted = 0
        freed = 0
        errors = []

        for path in paths:
            if not isinstance(path, str) or not path:
                errors.append({"path": path, "error": "Invalid path"})
                continue

            full_path = StorageCleanupService._resolve(path)
            if not full_path:
                errors.append({"path": path, "error": "Path is outside the upload directory"})
                continue

            if StorageCleanupService._public_path(full_path) in referenced:
                errors.append({"path": path, "error": "File is still referenced"})
                continue

            if not os.path.isfile(full_path):
                errors.append({"path": path, "error": "File not found"})
                continue

            try:
                size = os.path.getsize(full_path)
                os.remove(full_path)
            except OSError as e:
                logger.error(f"Failed to delete {path}: {e}")
                errors.append({"path": path, "error": "Failed to delete file"})
                continue

            deleted += 1
            freed += size

        logger.info(f"Storage cleanup removed {deleted} file(s), freed {format_file_size(freed)}")

        return {
            "deletedCount": deleted,
            "freedSpace": freed,
            "freedSpaceFormatted": format_file_size(freed),
            "errors": errors,
        }

    @staticmethod
    def delete_all_unused() -> dict:
        stats = StorageCleanupService.get_stats()
        paths = [entry["path"] for entry in stats["unusedFileList"]]
        if not paths:
            return {"deletedCount": 0, "freedSpace": 0, "freedSpaceFormatted": format_file_size(0), "errors": []}
        return StorageCleanupService.delete_files(paths)
