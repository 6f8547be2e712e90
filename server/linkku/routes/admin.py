# server/linkku/routes/admin.py

import logging

from flask import Blueprint, request, current_app

from linkku.errors import ValidationFailed
from linkku.services.analytics_service import AnalyticsService
from linkku.services.settings_service import SettingsService
from linkku.services.storage_service import StorageCleanupService
from linkku.services.upload_service import UploadService
from linkku.utils.request_data import json_body
from linkku.utils.auth import require_capability, get_current_user

admin_bp = Blueprint("admin", __name__)
logger = logging.getLogger(__name__)


def api_response():
    return current_app.api_response


@admin_bp.route("/dashboard/stats", methods=["GET"])
@require_capability("dashboard", "read")
def dashboard_stats():
    return api_response().success(data=AnalyticsService.dashboard_stats(get_current_user()))


@admin_bp.route("/analytics", methods=["GET"])
@require_capability("analytics", "read")
def analytics():
    return api_response().success(data=AnalyticsService.platform_analytics())


@admin_bp.route("/settings", methods=["GET"])
@require_capability("setting", "read")
def get_settings():
    return api_response().success(data={"settings": SettingsService.get_all()})


@admin_bp.route("/settings", methods=["POST", "PATCH", "PUT"])
@require_capability("setting", "update")
def update_settings():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationFailed({"settings": "A JSON object of settings is required"})

    updated = SettingsService.update(data)

    return api_response().success(
        data={"settings": SettingsService.get_all(), "updated": updated},
        message="Settings saved",
    )


@admin_bp.route("/upload", methods=["POST"])
@require_capability("upload", "article_image")
def upload_article_image():
    result = UploadService.save_image(request.files.get("file"), "article_image")

    return api_response().success(data=result, message="File uploaded", status=201)


# Superadmin storage maintenance

@admin_bp.route("/system-cleanup/stats", methods=["GET"])
@require_capability("storage", "read")
def storage_stats():
    return api_response().success(data=StorageCleanupService.get_stats())


@admin_bp.route("/system-cleanup/unused-files", methods=["DELETE", "POST"])
@require_capability("storage", "cleanup")
def delete_unused_files():
    data = json_body()

    if data.get("all") is True:
        result = StorageCleanupService.delete_all_unused()
    else:
        result = StorageCleanupService.delete_files(data.get("files"))

    logger.info(f"Storage cleanup by {get_current_user().id}: {result['deletedCount']} file(s)")
    return api_response().success(data=result, message=f"Deleted {result['deletedCount']} file(s)")
