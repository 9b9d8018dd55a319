"""
Authentication module exceptions.

These exceptions are raised by the auth module and can be caught by screens
(inline messages) and by API error handlers.
"""

from shared.exceptions import AuthenticationError, ValidationError


class InvalidTokenError(AuthenticationError):
    """Raised when a JWT token is invalid or malformed."""

    def __init__(self, message: str = "Invalid authentication token"):
        super().__init__(message, code="INVALID_TOKEN")


class ExpiredTokenError(AuthenticationError):
    """Raised when a JWT token has expired."""

    def __init__(self, message: str = "Authentication token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class MissingTokenError(AuthenticationError):
    """Raised when no authentication token is provided."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="MISSING_TOKEN")


class NotAuthenticatedError(AuthenticationError):
    """Raised when an operation needs a confirmed session and there is none."""

    def __init__(self, message: str = "A signed-in account with a confirmed email is required"):
        super().__init__(message, code="NOT_AUTHENTICATED")


class EmailNotConfirmedError(AuthenticationError):
    """Raised when a sign-in succeeds for an account whose email is unconfirmed."""

    def __init__(self, email: str = ""):
        super().__init__(
            "Please verify your email before logging in",
            code="EMAIL_NOT_CONFIRMED",
            details={"email": email} if email else None,
        )


class InvalidCredentialsError(AuthenticationError):
    """Raised when email/password sign-in is rejected."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class InvalidOrExpiredCodeError(ValidationError):
    """
    Raised when an auth-callback or recovery code cannot be used.

    Terminal for the deep link that carried it. recovery_action names what
    the screen should offer the user.
    """

    def __init__(
        self,
        message: str = "Invalid or expired link. Please request a new one.",
        recovery_action: str = "request_new_link",
    ):
        super().__init__(
            message,
            code="INVALID_OR_EXPIRED_CODE",
            details={"recovery_action": recovery_action},
        )
        self.recovery_action = recovery_action


class WeakPasswordError(ValidationError):
    """Raised when a new password does not meet the minimum requirements."""

    def __init__(self, min_length: int):
        super().__init__(
            f"Password must be at least {min_length} characters",
            code="WEAK_PASSWORD",
            details={"min_length": min_length},
        )
