# server/linkku/errors.py

from typing import Dict, Optional


class ApiError(Exception):
    """Base class for errors that map onto a client-facing status."""

    status_code = 500
    code = "INTERNAL_ERROR"
    default_message = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        if code:
            self.code = code

    def to_dict(self) -> dict:
        return {"message": self.message, "code": self.code}


class AuthenticationRequired(ApiError):
    status_code = 401
    code = "AUTH_REQUIRED"
    default_message = "Authentication required"


class PermissionDenied(ApiError):
    status_code = 403
    code = "PERMISSION_DENIED"
    default_message = "You do not have permission to perform this action"


class ValidationFailed(ApiError):
    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Validation failed"

    def __init__(self, fields: Optional[Dict[str, str]] = None, message: Optional[str] = None):
        self.fields = fields or {}
        if message is None and len(self.fields) == 1:
            message = next(iter(self.fields.values()))
        super().__init__(message)

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.fields:
            data["fields"] = self.fields
        return data


class NotFound(ApiError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "The requested resource was not found"


class Conflict(ApiError):
    status_code = 409
    code = "CONFLICT"
    default_message = "The request conflicts with existing data"
