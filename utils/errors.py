"""
Error taxonomy shared by services and routes.

Services raise ``ApiError`` subclasses; routes turn them into JSON responses with
``error.to_dict()`` and ``error.status_code``. Anything else is an internal error and is
masked by ``internal_error_body`` outside development.
"""
from flask import current_app


class ApiError(Exception):
    status_code = 400
    default_message = "Bad request"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {"message": self.message}


class AuthenticationError(ApiError):
    status_code = 401
    default_message = "Token is not valid"


class AuthorizationError(ApiError):
    status_code = 403
    default_message = "Access denied"


class NotFoundError(ApiError):
    status_code = 404
    default_message = "Not found"


class ValidationError(ApiError):
    status_code = 400
    default_message = "Invalid input"

    def __init__(self, message=None, fields=None):
        super().__init__(message)
        self.fields = list(fields or [])

    def to_dict(self):
        body = super().to_dict()
        if self.fields:
            body["fields"] = self.fields
        return body


class ConflictError(ApiError):
    status_code = 409
    default_message = "Conflict"


class InvalidTransitionError(ConflictError):
    def __init__(self, current, requested):
        super().__init__(f"Cannot change status from '{current}' to '{requested}'")
        self.current = current
        self.requested = requested


def internal_error_body(error=None):
    body = {"message": "Server error"}
    if error is not None and current_app.config.get("ENVIRONMENT") != "production":
        body["error"] = str(error)
    return body


def json_object(data):
    """Request body as a dict: a missing body reads as ``{}``, any other non-object is rejected."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Invalid JSON body")
    return data
