"""Gateway error taxonomy.

Every error carries the HTTP status and the public message rendered as
``{"error": message}`` by the application-level exception handler.
"""

from fastapi import status


class GatewayError(Exception):
    """Base class for errors translated into a JSON error response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(GatewayError):
    """Malformed request from the caller."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request body"


class NotFoundOrExpired(GatewayError):
    """Pair code is unknown, already used, or expired (deliberately undifferentiated)."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Invalid or expired pair code"


class NotFound(GatewayError):
    """A requested record or collection does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class StoreUnavailable(GatewayError):
    """Reading or writing a record collection failed. Never retried here."""

    default_message = "Record store unavailable"


class CodeGenerationError(GatewayError):
    """Every generated pair code collided with an active one."""

    default_message = "Failed to generate unique pair code"


class UpstreamError(GatewayError):
    """A third-party API could not be reached or returned an unusable body."""

    default_message = "Upstream service unavailable"
