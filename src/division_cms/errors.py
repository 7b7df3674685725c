"""
division_cms.errors

Error taxonomy for the admin surface.

Responsibilities:
- Define the expected failures of the gateway with their HTTP status codes.
- Carry the exact message returned to callers in the `{"error": ...}` body.
"""

from __future__ import annotations

from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_503_SERVICE_UNAVAILABLE,
)


class GatewayError(Exception):
    status_code: int = HTTP_400_BAD_REQUEST
    default_message: str = "Bad request"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingToken(GatewayError):
    status_code = HTTP_401_UNAUTHORIZED
    default_message = "Admin token required"


class InvalidToken(GatewayError):
    # Malformed, expired and forged tokens share one message.
    status_code = HTTP_401_UNAUTHORIZED
    default_message = "Invalid or expired token"


class InactiveOrUnknownAdmin(GatewayError):
    status_code = HTTP_401_UNAUTHORIZED
    default_message = "Admin account not found or inactive"


class AuthorizationDenied(GatewayError):
    status_code = HTTP_403_FORBIDDEN
    default_message = "You can only manage modules for programs in your division"


class ResourceNotFound(GatewayError):
    status_code = HTTP_404_NOT_FOUND
    default_message = "Not found"


class InvalidAction(GatewayError):
    default_message = "Invalid action"


class ServiceUnavailable(GatewayError):
    status_code = HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Service unavailable"


class InvalidPayload(GatewayError):
    default_message = "Malformed request payload"


class StorageFailure(GatewayError):
    """Storage rejected a read or write; the driver message is passed through as-is."""

    default_message = "Storage error"


def storage_error_message(exc: SQLAlchemyError) -> str:
    # Prefer the driver's own text over SQLAlchemy's wrapped description.
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig)
    return str(exc)


# --- Module Notes -----------------------------------------------------------
# Messages here are admin-facing. Unexpected faults never reach this taxonomy; they
# are turned into a generic 500 by `api.middleware.ErrorBoundaryMiddleware`.
