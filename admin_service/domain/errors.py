"""Error taxonomy shared by the gates, workflows and HTTP layer."""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for failures that terminate a request with a known status."""

    status_code: int = 500
    default_message: str = "something went wrong"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    status_code = 400
    default_message = "validation failed"


class DuplicateError(ServiceError):
    status_code = 400
    default_message = "account already exists with this email"


class InvalidOperation(ServiceError):
    status_code = 400
    default_message = "operation not allowed"


class Unauthenticated(ServiceError):
    status_code = 401
    default_message = "authentication required"


class Forbidden(ServiceError):
    status_code = 403
    default_message = "access denied, insufficient permissions"


class NotFound(ServiceError):
    status_code = 404
    default_message = "not found"


class InternalError(ServiceError):
    status_code = 500
    default_message = "internal server error"
