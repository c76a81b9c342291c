"""
Error hierarchy for the gateway.

Every error carries the HTTP status it maps to and a caller-facing message.
The global handlers in `gateway.routers.error_handlers` render them as
`{"success": false, "error": message}`.
"""


class GatewayError(Exception):
    """Base exception for all gateway errors."""

    http_status: int = 500

    def __init__(self, message: str, http_status: int | None = None):
        super().__init__(message)
        self.message = message
        if http_status is not None:
            self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to the standard failure envelope."""
        return {"success": False, "error": self.message}


class ValidationError(GatewayError):
    """Malformed identifier, body, filter or sort."""
    http_status = 400


class UnauthorizedError(GatewayError):
    """Missing, malformed or mismatched credentials."""
    http_status = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class NotFoundError(GatewayError):
    """No document matches the identifier."""
    http_status = 404

    def __init__(self, message: str = "Document not found"):
        super().__init__(message)


class StoreError(GatewayError):
    """
    Store connectivity failure or unexpected store exception.

    The underlying detail is logged where it is raised; the caller only ever
    sees a generic message.
    """
    http_status = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
