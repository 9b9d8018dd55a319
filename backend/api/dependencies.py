"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires module implementations to
Supabase clients. Web requests carry their own session, so stores are
built per request around a request-scoped client instead of being cached.

Tests replace the container through app.dependency_overrides.
"""

from typing import Mapping, Optional

from supabase import Client

from shared.database import create_request_client, get_supabase_user_client
from shared.errors import ErrorKind, classify_backend_error
from shared.exceptions import PermissionOrAuthError, TransientNetworkError
from modules.auth.interfaces import ISessionStore
from modules.auth.service import SupabaseSessionStore
from modules.navigation.interfaces import INavigator
from modules.navigation.routes import RouteMap, WEB_ROUTES
from modules.navigation.service import AuthNavigationService
from modules.onboarding.service import OnboardingService
from modules.users.interfaces import IProfileStore, IUserRecordStore
from modules.users.repository import ProfileRepository, UserRecordRepository


class ServiceContainer:
    """
    Builds request-scoped services.

    Every method returns a new instance; nothing session-related is cached.
    """

    def client(
        self,
        access_token: Optional[str] = None,
        refresh_token: str = "",
        cookies: Optional[Mapping[str, str]] = None,
    ) -> Client:
        """
        Get a Supabase client for one request.

        With an access token the client acts as that user (RLS applies);
        without one it holds no session until a code is exchanged on it,
        using the PKCE verifier found in the request cookies.
        """
        if not access_token:
            return create_request_client(cookies)
        try:
            return get_supabase_user_client(access_token, refresh_token)
        except RuntimeError:
            raise
        except Exception as e:
            if classify_backend_error(e) == ErrorKind.PERMISSION:
                raise PermissionOrAuthError(str(e)) from e
            raise TransientNetworkError(str(e)) from e

    def session_store(self, client: Client) -> ISessionStore:
        return SupabaseSessionStore(client)

    def user_store(self, client: Client) -> IUserRecordStore:
        return UserRecordRepository(client)

    def profile_store(self, client: Client) -> IProfileStore:
        return ProfileRepository(client)

    def navigation(
        self,
        sessions: ISessionStore,
        users: IUserRecordStore,
        navigator: INavigator,
        route_map: RouteMap = WEB_ROUTES,
    ) -> AuthNavigationService:
        """Get a resolution service for one request."""
        return AuthNavigationService(sessions, users, navigator, route_map)

    def onboarding(self, client: Client) -> OnboardingService:
        return OnboardingService(
            sessions=self.session_store(client),
            users=self.user_store(client),
            profiles=self.profile_store(client),
        )


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """FastAPI dependency for the service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    Primarily used for testing.
    """
    global _container
    _container = None
