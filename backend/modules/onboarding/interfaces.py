"""
Onboarding module interface.

Screens and API routes call these writers; after each one succeeds the
caller hands control back to the resolution state machine, which computes
the next screen from the updated user record.
"""

from typing import Optional, Protocol, Union, runtime_checkable

from modules.auth.models import Session
from modules.users.models import BusinessProfile, StudentProfile, UserRecord, UserRole


@runtime_checkable
class IOnboardingService(Protocol):
    """Interface for registration, role selection and onboarding completion."""

    async def register(self, email: str, password: str, role: UserRole) -> Optional[str]:
        """
        Create an account with its role.

        Args:
            email: Account email
            password: Account password
            role: Role chosen on the sign-up screen

        Returns:
            The new user ID, if the backend returned one

        Raises:
            WeakPasswordError: If the password is too short
        """
        ...

    async def select_role(self, session: Optional[Session], role: UserRole) -> UserRecord:
        """
        Record the user's role with onboarding not yet completed.

        Raises:
            NotAuthenticatedError: If there is no confirmed session
        """
        ...

    async def complete_onboarding(
        self,
        session: Optional[Session],
        profile: Union[StudentProfile, BusinessProfile],
    ) -> UserRecord:
        """
        Save the role profile and mark onboarding completed.

        Raises:
            NotAuthenticatedError: If there is no confirmed session
            UserRecordNotFoundError: If no role has been selected yet
            RoleMismatchError: If the profile is for the other role
        """
        ...
