# server/linkku/routes/links.py

import logging

from flask import Blueprint, current_app

from linkku.extensions import limiter
from linkku.services.link_service import LinkService
from linkku.utils.request_data import json_body
from linkku.utils.auth import require_capability, get_current_user

links_bp = Blueprint("links", __name__)
logger = logging.getLogger(__name__)


def api_response():
    return current_app.api_response


@links_bp.route("", methods=["GET"])
@require_capability("link", "read")
def list_links():
    links = LinkService.list_links(get_current_user())

    return api_response().success(data={
        "links": [link.to_dict(include_category=True) for link in links]
    })


@links_bp.route("", methods=["POST"])
@require_capability("link", "create")
@limiter.limit("30 per minute")
def create_link():
    data = json_body()

    link = LinkService.create_link(get_current_user(), data)

    return api_response().success(
        data={"link": link.to_dict(include_category=True)},
        message="Link created",
        status=201,
    )


@links_bp.route("/reorder", methods=["PATCH", "POST"])
@require_capability("link", "reorder")
def reorder_links():
    data = json_body()

    updated = LinkService.reorder_links(get_current_user(), data.get("links"))

    return api_response().success(data={"updated": updated}, message="Links reordered")


@links_bp.route("/<link_id>", methods=["GET"])
@require_capability("link", "read")
def get_link(link_id: str):
    link = LinkService.get_link(get_current_user(), link_id)

    return api_response().success(data={"link": link.to_dict(include_category=True)})


@links_bp.route("/<link_id>", methods=["PATCH", "PUT"])
@require_capability("link", "update")
def update_link(link_id: str):
    data = json_body()

    link = LinkService.update_link(get_current_user(), link_id, data)

    return api_response().success(
        data={"link": link.to_dict(include_category=True)},
        message="Link updated",
    )


@links_bp.route("/<link_id>", methods=["DELETE"])
@require_capability("link", "delete")
def delete_link(link_id: str):
    LinkService.delete_link(get_current_user(), link_id)

    return api_response().success(message="Link deleted")
