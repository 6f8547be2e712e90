# server/linkku/routes/tracking.py

import logging

from flask import Blueprint, request, current_app

from linkku.extensions import limiter
from linkku.services.tracking_service import TrackingService
from linkku.utils.request_data import json_body

tracking_bp = Blueprint("tracking", __name__)
logger = logging.getLogger(__name__)


def api_response():
    return current_app.api_response


@tracking_bp.route("/view", methods=["POST"])
@limiter.limit("120 per minute")
def track_view():
    body = json_body()
    request_data = TrackingService.parse_request(request, body)

    view = TrackingService.record_linktree_view(body.get("slug"), request_data)

    return api_response().success(data={"tracked": True, "viewId": view.id})


@tracking_bp.route("/click", methods=["POST"])
@limiter.limit("120 per minute")
def track_click():
    body = json_body()
    request_data = TrackingService.parse_request(request, body)

    click = TrackingService.record_link_click(body.get("linkId"), request_data)

    return api_response().success(data={"tracked": True, "clickId": click.id})
