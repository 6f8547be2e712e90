# server/linkku/routes/auth.py

import logging

from flask import Blueprint, current_app
from flask_jwt_extended import create_access_token, get_jwt

from linkku.extensions import limiter
from linkku.services.redis_service import RedisService
from linkku.services.user_service import UserService
from linkku.utils.request_data import json_body
from linkku.utils.auth import require_auth, get_current_user

auth_bp = Blueprint("auth", __name__)
logger = logging.getLogger(__name__)


def api_response():
    return current_app.api_response


def _issue_token(user) -> str:
    return create_access_token(identity=user.id, additional_claims={"role": user.role.value})


@auth_bp.route("/register", methods=["POST"])
@limiter.limit("5 per hour")
def register():
    data = json_body()

    user = UserService.register(data)

    return api_response().success(
        data={"user": user.to_dict(), "access_token": _issue_token(user)},
        message="Registration successful",
        status=201,
    )


@auth_bp.route("/login", methods=["POST"])
@limiter.limit("10 per minute")
def login():
    data = json_body()

    user = UserService.authenticate(data.get("email"), data.get("password"))
    logger.info(f"User logged in: {user.id}")

    return api_response().success(
        data={"user": user.to_dict(), "access_token": _issue_token(user)},
        message="Login successful",
    )


@auth_bp.route("/logout", methods=["POST"])
@require_auth
def logout():
    jti = get_jwt().get("jti")
    if jti:
        RedisService().blacklist_token(jti)

    return api_response().success(message="Logged out")


@auth_bp.route("/me", methods=["GET"])
@require_auth
def me():
    return api_response().success(data={"user": get_current_user().to_dict()})
