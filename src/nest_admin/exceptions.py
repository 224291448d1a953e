"""
Admin API exceptions.

Every error that is surfaced to a client derives from ``AdminApiError`` and
is rendered by ``exception_handlers.admin_api_error_handler`` as
``{"error": <message>}`` (plus ``"details"`` when present).
"""


class AdminApiError(Exception):
    """Base exception for errors mapped to an HTTP response."""

    status_code: int = 500

    def __init__(self, message: str, details: str | None = None):
        """
        Args:
            message: User-facing error message
            details: Optional diagnostic text (driver error, provider reply)
        """
        super().__init__(message)
        self.message = message
        self.details = details


class Unauthenticated(AdminApiError):
    """Raised when a protected route is hit without a valid session."""

    status_code = 401

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class Unauthorized(AdminApiError):
    """Raised when a real identity is not on the admin allow-list."""

    status_code = 403

    def __init__(self, email: str):
        super().__init__("Not authorized as admin")
        self.email = email


class NotFound(AdminApiError):
    """Raised when a keyed lookup returns no row."""

    status_code = 404


class ProviderNotConfigured(AdminApiError):
    """Raised when a login route is hit for a provider without credentials."""

    status_code = 404

    def __init__(self, provider: str):
        super().__init__(f"{provider} login is not configured")
        self.provider = provider


class OAuthError(AdminApiError):
    """Raised when the identity provider dance fails (bad state, token or profile)."""

    status_code = 502


class DatabaseUnavailable(AdminApiError):
    """Raised when a logical database cannot be reached or a query fails."""

    status_code = 500

    def __init__(self, database: str, details: str, message: str = "Database unavailable"):
        super().__init__(message, details=details)
        self.database = database
