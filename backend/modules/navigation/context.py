"""
Per-process auth context.

AuthContext bundles the session store, the user stores, the resolution
service and the writers that screens call. A host creates one at app start
and passes it to its screens; nothing session-related lives in module
globals.
"""

from typing import Any, Optional, Union

from shared.config import Settings, get_settings
from shared.database import get_supabase_client
from modules.auth.interfaces import ISessionStore
from modules.auth.models import Session
from modules.auth.recovery import PasswordRecoveryService
from modules.auth.service import SupabaseSessionStore
from modules.onboarding.service import OnboardingService
from modules.users.interfaces import IProfileStore, IUserRecordStore
from modules.users.models import BusinessProfile, StudentProfile, UserRole
from modules.users.repository import ProfileRepository, UserRecordRepository

from .interfaces import INavigator
from .models import Destination, ResolutionOutcome, ResolutionState, Route
from .routes import RouteMap, WEB_ROUTES
from .service import AuthNavigationService

PASSWORD_UPDATED_MESSAGE = "password_updated"


class AuthContext:
    """
    Explicitly owned auth state for one running app.

    Lifecycle: create() at app start, start() to subscribe and run the
    first pass, sign_out() to drop the session and its pending state,
    stop() when the app shuts down.
    """

    def __init__(
        self,
        sessions: ISessionStore,
        users: IUserRecordStore,
        profiles: IProfileStore,
        navigator: INavigator,
        route_map: RouteMap,
        settings: Optional[Settings] = None,
    ):
        self._settings = settings or get_settings()
        self._route_map = route_map
        self.sessions = sessions
        self.users = users
        self.navigation = AuthNavigationService(sessions, users, navigator, route_map)
        self.onboarding = OnboardingService(sessions, users, profiles, self._settings)
        self.recovery = PasswordRecoveryService(sessions, self._settings)

    @classmethod
    def create(
        cls,
        navigator: INavigator,
        route_map: RouteMap,
        client: Any = None,
        storage: Any = None,
    ) -> "AuthContext":
        """
        Build a context over a Supabase client.

        Args:
            navigator: The host's navigation primitive
            route_map: The host's route table
            client: Supabase client; defaults to the cached anon client
            storage: Session persistence for the default client
        """
        client = client or get_supabase_client(storage)
        return cls(
            sessions=SupabaseSessionStore(client),
            users=UserRecordRepository(client),
            profiles=ProfileRepository(client),
            navigator=navigator,
            route_map=route_map,
        )

    # Lifecycle

    async def start(self) -> ResolutionOutcome:
        return await self.navigation.start()

    async def stop(self) -> None:
        await self.navigation.stop()

    # Session

    async def current_session(self) -> Optional[Session]:
        return await self.sessions.get_current_session()

    async def sign_in(self, email: str, password: str) -> ResolutionOutcome:
        """
        Sign in with email and password, then resolve.

        Raises:
            InvalidCredentialsError: If the credentials are rejected
            EmailNotConfirmedError: If the email is unconfirmed
        """
        await self.sessions.sign_in_with_password(email, password)
        return await self.navigation.resolve_and_navigate()

    async def register(self, email: str, password: str, role: UserRole) -> Optional[str]:
        """Create an account; the user confirms their email before signing in."""
        return await self.onboarding.register(email, password, role)

    def oauth_redirect_url(self) -> str:
        if self._route_map.name == WEB_ROUTES.name:
            return f"{self._settings.frontend_url.rstrip('/')}/auth/callback"
        return f"{self._settings.app_scheme}://auth/callback"

    async def start_oauth(self, provider: Optional[str] = None) -> str:
        """Start an OAuth sign-in; returns the URL the host should open."""
        provider = provider or self._settings.oauth_provider
        return await self.sessions.start_oauth(provider, self.oauth_redirect_url())

    async def sign_out(self) -> ResolutionOutcome:
        """
        Sign out and drop pending links and recovery mode.

        Pending state is dropped even when the sign-out call fails; the
        error is raised so the screen can offer a retry.
        """
        try:
            await self.sessions.sign_out()
        finally:
            self.navigation.reset()
        return await self.navigation.resolve_and_navigate()

    # Deep links

    async def on_deep_link(self, url: Optional[str]) -> ResolutionOutcome:
        return await self.navigation.on_deep_link(url)

    # Onboarding

    async def select_role(self, role: UserRole) -> ResolutionOutcome:
        """Record the chosen role and open its onboarding form."""
        record = await self.onboarding.select_role(await self.current_session(), role)
        if record.profile_completed:
            return await self.navigation.resolve_and_navigate()
        destination = Destination(route=Route.ONBOARDING, role=record.role)
        return await self.navigation.navigate_to(ResolutionState.NEEDS_ONBOARDING, destination)

    async def complete_onboarding(
        self,
        profile: Union[StudentProfile, BusinessProfile],
    ) -> ResolutionOutcome:
        """Save the profile, then let resolution open the home screen."""
        await self.onboarding.complete_onboarding(await self.current_session(), profile)
        return await self.navigation.resolve_and_navigate()

    # Password recovery

    async def request_password_reset(self, email: str) -> None:
        await self.recovery.request_reset(email)

    async def complete_password_reset(self, code: str, new_password: str) -> ResolutionOutcome:
        """
        Set a new password from the reset screen and go to login.

        Raises:
            WeakPasswordError: If the password is too short
            InvalidOrExpiredCodeError: If the link cannot be used; the screen
                should offer to request a new one
        """
        await self.recovery.complete_reset(code, new_password)
        destination = Destination(route=Route.LOGIN, params={"message": PASSWORD_UPDATED_MESSAGE})
        return await self.navigation.finish_password_recovery(destination)
