# server/linkku/routes/linktree.py

import logging

from flask import Blueprint, request, current_app

from linkku.services.linktree_service import LinktreeService
from linkku.utils.request_data import json_body
from linkku.utils.auth import require_capability, get_current_user

linktree_bp = Blueprint("linktree", __name__)
logger = logging.getLogger(__name__)


def api_response():
    return current_app.api_response


@linktree_bp.route("/linktree", methods=["GET"])
@require_capability("linktree", "read")
def get_own_linktree():
    linktree = LinktreeService.get_for_user(get_current_user())

    return api_response().success(data={
        "linktree": linktree.to_dict(include_links=True) if linktree else None
    })


@linktree_bp.route("/linktree", methods=["POST"])
@require_capability("linktree", "create")
def create_linktree():
    data = json_body()

    linktree = LinktreeService.create(get_current_user(), data)

    return api_response().success(
        data={"linktree": linktree.to_dict(include_links=True)},
        message="Linktree created",
        status=201,
    )


@linktree_bp.route("/linktree", methods=["PATCH", "PUT"])
@require_capability("linktree", "update")
def update_linktree():
    data = json_body()

    linktree = LinktreeService.update(get_current_user(), data)

    return api_response().success(
        data={"linktree": linktree.to_dict(include_links=True)},
        message="Linktree updated",
    )


@linktree_bp.route("/linktree/check-slug", methods=["GET"])
@require_capability("linktree", "read")
def check_slug():
    slug = request.args.get("slug", "")
    own = LinktreeService.get_for_user(get_current_user())

    return api_response().success(data=LinktreeService.check_slug(slug, exclude_id=own.id if own else None))


@linktree_bp.route("/linktrees/<slug>", methods=["GET"])
def get_public_linktree(slug: str):
    return api_response().success(data={"linktree": LinktreeService.get_public(slug)})
