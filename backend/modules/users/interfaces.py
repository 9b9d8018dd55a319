"""
User module interfaces.

The navigation state machine and the onboarding writers depend on these
protocols, never on the Supabase repositories directly.
"""

from typing import Protocol, Union, runtime_checkable

from .models import UserRecord, StudentProfile, BusinessProfile


@runtime_checkable
class IUserRecordStore(Protocol):
    """
    Interface for the users table.

    All methods raise TransientNetworkError for retry-safe failures and
    PermissionOrAuthError when the backend rejects the session.
    """

    async def get_user_record(self, user_id: str) -> UserRecord:
        """
        Get the user record for an account.

        Args:
            user_id: Supabase user ID (UUID)

        Returns:
            The UserRecord

        Raises:
            UserRecordNotFoundError: If no row exists for the account
        """
        ...

    async def insert_user_record(self, record: UserRecord) -> UserRecord:
        """Insert a new user record."""
        ...

    async def upsert_user_record(self, record: UserRecord) -> UserRecord:
        """Insert or replace the user record keyed by id."""
        ...

    async def mark_profile_completed(self, user_id: str) -> None:
        """Set profile_completed = true for the account."""
        ...


@runtime_checkable
class IProfileStore(Protocol):
    """Interface for the role-specific profile tables."""

    async def save_profile(
        self,
        user_id: str,
        profile: Union[StudentProfile, BusinessProfile],
    ) -> None:
        """
        Insert or update the profile row for a user.

        Saving twice for the same user must not create a second row.
        """
        ...
