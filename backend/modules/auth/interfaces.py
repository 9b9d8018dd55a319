"""
Authentication module interface.

The navigation state machine, onboarding writers and password recovery
depend on ISessionStore, not on the Supabase adapter. This enables testing
with fakes and swapping the platform's session persistence.
"""

from typing import Callable, Optional, Protocol, runtime_checkable

from modules.users.models import UserRole
from .models import Session, SessionEvent

SessionListener = Callable[[SessionEvent, Optional[Session]], None]


@runtime_checkable
class ISessionStore(Protocol):
    """
    Interface for the backend's session operations.

    Failures are reported with the shared error taxonomy:
    TransientNetworkError, PermissionOrAuthError, and for code flows
    InvalidOrExpiredCodeError.
    """

    async def get_current_session(self) -> Optional[Session]:
        """
        Get the session the device currently holds.

        Returns:
            Session if signed in, None otherwise
        """
        ...

    def on_session_change(self, listener: SessionListener) -> Callable[[], None]:
        """
        Subscribe to session changes.

        Args:
            listener: Called with the event and the new session (or None)

        Returns:
            A callable that removes the subscription
        """
        ...

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        """
        Sign in with email and password.

        Raises:
            InvalidCredentialsError: If the credentials are rejected
            EmailNotConfirmedError: If the account's email is unconfirmed
        """
        ...

    async def sign_up(
        self,
        email: str,
        password: str,
        role: UserRole,
        redirect_to: str,
    ) -> Optional[str]:
        """
        Create an account, storing the role in user metadata.

        Returns:
            The new user ID, if the backend returned one
        """
        ...

    async def start_oauth(self, provider: str, redirect_to: str) -> str:
        """Start an OAuth sign-in and return the provider URL to open."""
        ...

    async def exchange_auth_code(self, code: str) -> Session:
        """
        Exchange an auth-callback code for a session.

        Raises:
            InvalidOrExpiredCodeError: If the code cannot be used
        """
        ...

    async def set_session(self, access_token: str, refresh_token: str) -> Session:
        """Install a session from tokens delivered by an auth callback."""
        ...

    async def verify_recovery_code(self, code: str) -> Session:
        """
        Verify a password-recovery code, establishing a recovery session.

        Raises:
            InvalidOrExpiredCodeError: If the code cannot be used
        """
        ...

    async def update_password(self, new_password: str) -> None:
        """Change the password of the signed-in account."""
        ...

    async def request_password_reset(self, email: str, redirect_to: str) -> None:
        """Ask the backend to email a password-recovery link."""
        ...

    async def sign_out(self) -> None:
        """Clear the session on the device and the backend."""
        ...
