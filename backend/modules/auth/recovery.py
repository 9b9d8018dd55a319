"""
Password recovery flow.

The forgot-password screen calls request_reset(); the reset-password
screen, opened from the emailed link, calls complete_reset() with the code
the link carried. Leaving recovery mode and routing afterwards is the
caller's job (see AuthContext).
"""

import logging
from typing import Optional

from shared.config import Settings, get_settings

from .interfaces import ISessionStore
from .exceptions import InvalidOrExpiredCodeError, WeakPasswordError

logger = logging.getLogger(__name__)


class PasswordRecoveryService:
    """Requests and completes password resets through the session store."""

    def __init__(self, sessions: ISessionStore, settings: Optional[Settings] = None):
        self._sessions = sessions
        self._settings = settings or get_settings()

    @property
    def reset_redirect_url(self) -> str:
        return f"{self._settings.frontend_url.rstrip('/')}/reset-password"

    async def request_reset(self, email: str) -> None:
        """
        Ask the backend to email a recovery link for the account.

        Raises:
            TransientNetworkError: If the backend could not be reached
        """
        await self._sessions.request_password_reset(email, self.reset_redirect_url)
        logger.info("Password reset requested")

    def validate_password(self, password: str) -> None:
        min_length = self._settings.min_password_length
        if not password or len(password) < min_length:
            raise WeakPasswordError(min_length)

    async def complete_reset(self, code: str, new_password: str) -> None:
        """
        Set a new password using a recovery code.

        The recovery session is signed out afterwards, so the user signs in
        again with the new password.

        Args:
            code: Recovery code from the emailed link
            new_password: The new password

        Raises:
            WeakPasswordError: If the password is too short
            InvalidOrExpiredCodeError: If the code cannot be used
            TransientNetworkError: If the backend could not be reached
        """
        if not code:
            raise InvalidOrExpiredCodeError("Reset link is missing its code")
        self.validate_password(new_password)

        session = await self._sessions.verify_recovery_code(code)
        await self._sessions.update_password(new_password)
        logger.info("Password updated for %s", session.user_id)

        await self._sessions.sign_out()
