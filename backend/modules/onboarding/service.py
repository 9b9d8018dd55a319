"""
Onboarding writers.

Role selection and onboarding completion write the users row that drives
the resolution state machine. profile_completed is set last: a failure
after the profile write leaves the account incomplete, and the next pass
routes it back to onboarding.
"""

import logging
from typing import Optional, Union

from shared.config import Settings, get_settings
from shared.exceptions import PermissionOrAuthError, TransientNetworkError
from modules.auth.exceptions import NotAuthenticatedError, WeakPasswordError
from modules.auth.interfaces import ISessionStore
from modules.auth.models import Session
from modules.users.exceptions import RoleMismatchError, UserRecordNotFoundError
from modules.users.interfaces import IProfileStore, IUserRecordStore
from modules.users.models import BusinessProfile, StudentProfile, UserRecord, UserRole

from .interfaces import IOnboardingService

logger = logging.getLogger(__name__)


def _require_confirmed(session: Optional[Session]) -> Session:
    if session is None or not session.email_confirmed:
        raise NotAuthenticatedError()
    return session


class OnboardingService(IOnboardingService):
    """Writes user records and profiles for new accounts."""

    def __init__(
        self,
        sessions: ISessionStore,
        users: IUserRecordStore,
        profiles: IProfileStore,
        settings: Optional[Settings] = None,
    ):
        self._sessions = sessions
        self._users = users
        self._profiles = profiles
        self._settings = settings or get_settings()

    @property
    def email_redirect_url(self) -> str:
        """Where the verification email sends the user."""
        return f"{self._settings.frontend_url.rstrip('/')}/auth/callback?next=/onboarding"

    async def register(self, email: str, password: str, role: UserRole) -> Optional[str]:
        if not password or len(password) < self._settings.min_password_length:
            raise WeakPasswordError(self._settings.min_password_length)

        user_id = await self._sessions.sign_up(email, password, role, self.email_redirect_url)
        if user_id is None:
            return None

        record = UserRecord(id=user_id, email=email.strip(), role=role, profile_completed=False)
        try:
            await self._users.insert_user_record(record)
        except (TransientNetworkError, PermissionOrAuthError) as e:
            # Recreated from the sign-up metadata on first confirmed sign-in
            logger.warning("Could not create user record for %s: %s", user_id, e.message)

        return user_id

    async def select_role(self, session: Optional[Session], role: UserRole) -> UserRecord:
        session = _require_confirmed(session)

        try:
            existing = await self._users.get_user_record(session.user_id)
        except UserRecordNotFoundError:
            existing = None

        if existing is not None and existing.profile_completed:
            logger.info("Ignoring role change for completed account %s", session.user_id)
            return existing

        record = UserRecord(
            id=session.user_id,
            email=session.email,
            role=role,
            profile_completed=False,
        )
        return await self._users.upsert_user_record(record)

    async def complete_onboarding(
        self,
        session: Optional[Session],
        profile: Union[StudentProfile, BusinessProfile],
    ) -> UserRecord:
        session = _require_confirmed(session)

        record = await self._users.get_user_record(session.user_id)
        if record.role != profile.role:
            raise RoleMismatchError(expected=record.role.value, received=profile.role.value)

        await self._profiles.save_profile(session.user_id, profile)
        await self._users.mark_profile_completed(session.user_id)
        logger.info("Onboarding completed for %s (%s)", session.user_id, record.role.value)

        return record.model_copy(update={"profile_completed": True})
