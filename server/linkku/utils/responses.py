# server/linkku/utils/responses.py

from typing import Any, Dict, Optional

from flask import jsonify


class ApiResponse:
    """JSON envelope shared by every blueprint, exposed as current_app.api_response"""

    @staticmethod
    def success(data: Any = None, message: Optional[str] = None, status: int = 200):
        return jsonify({
            "success": True,
            "message": message,
            "data": data,
        }), status

    @staticmethod
    def error(
        message: str,
        status: int = 400,
        code: Optional[str] = None,
        fields: Optional[Dict[str, str]] = None,
    ):
        error = {"message": message, "code": code or "ERROR"}
        if fields:
            error["fields"] = fields

        return jsonify({
            "success": False,
            "error": error,
        }), status
