"""
Base exception classes for the FirstPrinciple backend.

Each module should define its own exceptions that inherit from these bases.
This enables consistent error handling across the application.
"""

from typing import Optional, Any


class FirstPrincipleError(Exception):
    """
    Base exception for all FirstPrinciple errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(FirstPrincipleError):
    """Resource not found."""

    pass


class ValidationError(FirstPrincipleError):
    """Input validation failed."""

    pass


class AuthenticationError(FirstPrincipleError):
    """Authentication failed (invalid or missing credentials)."""

    pass


class AuthorizationError(FirstPrincipleError):
    """Authorization failed (insufficient permissions)."""

    pass


class ExternalServiceError(FirstPrincipleError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service


class TransientNetworkError(ExternalServiceError):
    """
    Retry-safe failure talking to the backend (timeouts, 5xx, rate limits).

    Callers must not redirect or take destructive action on this error.
    """

    def __init__(
        self,
        message: str = "Backend temporarily unavailable",
        service: str = "supabase",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, service, code="TRANSIENT_NETWORK_ERROR", details=details)


class PermissionOrAuthError(AuthorizationError):
    """
    The backend rejected the session (revoked, expired or denied by RLS).

    Always forces sign-out and a redirect to login.
    """

    def __init__(
        self,
        message: str = "Session rejected by the backend",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code="PERMISSION_OR_AUTH_ERROR", details=details)
