# server/linkku/routes/profile.py

import logging

from flask import Blueprint, current_app

from linkku.services.analytics_service import AnalyticsService
from linkku.services.user_service import UserService
from linkku.utils.request_data import json_body
from linkku.utils.auth import require_capability, get_current_user

profile_bp = Blueprint("profile", __name__)
logger = logging.getLogger(__name__)


def api_response():
    return current_app.api_response


@profile_bp.route("/profile", methods=["GET"])
@require_capability("profile", "read")
def get_profile():
    user = get_current_user()
    data = user.to_dict()
    data["linktree"] = user.linktree.to_dict() if user.linktree else None

    return api_response().success(data={"user": data})


@profile_bp.route("/profile", methods=["PATCH", "PUT"])
@require_capability("profile", "update")
def update_profile():
    data = json_body()

    user = UserService.update_profile(get_current_user(), data)

    return api_response().success(data={"user": user.to_dict()}, message="Profile updated")


@profile_bp.route("/stats", methods=["GET"])
@require_capability("analytics", "read_own")
def get_own_stats():
    return api_response().success(data=AnalyticsService.linktree_stats(get_current_user()))
