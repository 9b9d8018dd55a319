"""
User module exceptions.
"""

from shared.exceptions import NotFoundError, ValidationError


class UserRecordNotFoundError(NotFoundError):
    """
    Raised when no users row exists for an account.

    This is the expected steady state for brand-new accounts and drives
    role selection; it is not surfaced to the user.
    """

    def __init__(self, user_id: str):
        super().__init__(
            f"User record not found: {user_id}",
            code="USER_RECORD_NOT_FOUND",
            details={"user_id": user_id},
        )


class RoleMismatchError(ValidationError):
    """Raised when an onboarding profile does not match the chosen role."""

    def __init__(self, expected: str, received: str):
        super().__init__(
            f"Profile for role '{received}' submitted, user role is '{expected}'",
            code="ROLE_MISMATCH",
            details={"expected": expected, "received": received},
        )
