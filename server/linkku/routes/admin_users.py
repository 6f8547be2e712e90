# server/linkku/routes/admin_users.py

import logging

from flask import Blueprint, request, current_app

from linkku.services.user_service import UserService
from linkku.utils.request_data import json_body
from linkku.utils.auth import require_capability, get_current_user

admin_users_bp = Blueprint("admin_users", __name__)
logger = logging.getLogger(__name__)


def api_response():
    return current_app.api_response


@admin_users_bp.route("", methods=["GET"])
@require_capability("user", "read")
def list_users():
    page = max(request.args.get("page", 1, type=int) or 1, 1)
    limit = request.args.get("limit", current_app.config.get("DEFAULT_ADMIN_PAGE_SIZE", 10), type=int) or 10
    limit = max(1, min(limit, current_app.config.get("MAX_PAGE_SIZE", 100)))

    result = UserService.list_users(
        get_current_user(),
        page=page,
        per_page=limit,
        search=request.args.get("search"),
    )

    return api_response().success(data=result)


@admin_users_bp.route("", methods=["POST"])
@require_capability("user", "create")
def create_user():
    data = json_body()

    user = UserService.create_user(get_current_user(), data)

    return api_response().success(data={"user": user.to_dict()}, message="User created", status=201)


@admin_users_bp.route("/<user_id>", methods=["GET"])
@require_capability("user", "read")
def get_user(user_id: str):
    user = UserService.get_user(get_current_user(), user_id)

    return api_response().success(data={"user": user.to_dict(include_counts=True)})


@admin_users_bp.route("/<user_id>", methods=["PATCH", "PUT"])
@require_capability("user", "update")
def update_user(user_id: str):
    data = json_body()

    user = UserService.update_user(get_current_user(), user_id, data)

    return api_response().success(data={"user": user.to_dict()}, message="User updated")


@admin_users_bp.route("/<user_id>", methods=["DELETE"])
@require_capability("user", "delete")
def delete_user(user_id: str):
    UserService.delete_user(get_current_user(), user_id)

    return api_response().success(message="User deleted")


@admin_users_bp.route("/<user_id>/linktrees", methods=["GET"])
@require_capability("user", "read")
def get_user_linktrees(user_id: str):
    linktrees = UserService.get_user_linktrees(get_current_user(), user_id)

    return api_response().success(data={"linktrees": linktrees})
