# server/linkku/utils/request_data.py

from flask import request

from linkku.errors import ValidationFailed


def json_body() -> dict:
    """The request's JSON object, or {} when no JSON body was sent."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationFailed({"body": "Request body must be a JSON object"})
    return data
