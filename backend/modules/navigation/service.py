"""
Auth resolution service.

Runs resolution passes against live collaborators: the session store, the
user record store and a platform navigator. The pure decision lives in
resolver.py; this module gathers its inputs, handles deep link intents and
failures, and applies the decision.

Passes are serialized per instance. Every request takes a generation
number; a pass that acquires the lock after a newer request was made is
superseded and returns without reading or navigating, so the newest
request always runs last with fresh inputs.
"""

import asyncio
import logging
from typing import Optional

from shared.exceptions import (
    FirstPrincipleError,
    PermissionOrAuthError,
    TransientNetworkError,
)
from modules.auth.exceptions import InvalidOrExpiredCodeError, NotAuthenticatedError
from modules.auth.interfaces import ISessionStore
from modules.auth.models import Session, SessionEvent
from modules.deeplinks.decoder import decode
from modules.deeplinks.models import DeepLinkIntent, DeepLinkKind
from modules.users.exceptions import UserRecordNotFoundError
from modules.users.interfaces import IUserRecordStore
from modules.users.models import UserRecord

from .interfaces import IAuthNavigation, INavigator
from .models import (
    Decision,
    Destination,
    Location,
    ResolutionOutcome,
    ResolutionState,
    Route,
)
from .resolver import compute_state, decide
from .routes import RESET_PASSWORD_SCREEN, RouteMap

logger = logging.getLogger(__name__)

INVALID_LINK_ERROR = "invalid_link"


class AuthNavigationService(IAuthNavigation):
    """
    The auth/onboarding state machine bound to one running app.

    There is exactly one instance per app process (see AuthContext).
    """

    def __init__(
        self,
        sessions: ISessionStore,
        users: IUserRecordStore,
        navigator: INavigator,
        route_map: RouteMap,
    ):
        self._sessions = sessions
        self._users = users
        self._navigator = navigator
        self._route_map = route_map

        self._lock = asyncio.Lock()
        self._requested = 0
        self._pending_intent: Optional[DeepLinkIntent] = None

        # Password recovery mode
        self._recovery_active = False
        self._recovery_entering = False
        self._recovery_code: Optional[str] = None

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._unsubscribe = None
        self._tasks: set[asyncio.Task] = set()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(self) -> ResolutionOutcome:
        """Subscribe to session changes and run the app-start pass."""
        self._loop = asyncio.get_running_loop()
        if self._unsubscribe is None:
            self._unsubscribe = self._sessions.on_session_change(self.on_session_change)
        return await self.resolve_and_navigate()

    async def stop(self) -> None:
        """Unsubscribe and wait for scheduled passes to finish."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self.reset()

    def reset(self) -> None:
        """Drop pending intents and recovery mode."""
        self._pending_intent = None
        self.end_password_recovery()

    @property
    def in_password_recovery(self) -> bool:
        return self._recovery_active

    def end_password_recovery(self) -> None:
        """Leave recovery mode (password changed or user left the reset screen)."""
        self._recovery_active = False
        self._recovery_entering = False
        self._recovery_code = None

    def _begin_password_recovery(self, code: Optional[str]) -> None:
        self._recovery_active = True
        self._recovery_entering = True
        self._recovery_code = code

    # -------------------------------------------------------------------------
    # Triggers
    # -------------------------------------------------------------------------

    def on_session_change(self, event: SessionEvent, session: Optional[Session] = None) -> None:
        """
        Session store listener: schedule a pass on the app's event loop.

        May be called from the SDK's thread.
        """
        if self._loop is None:
            logger.warning("Session event %s before start(), ignoring", event.value)
            return
        self._loop.call_soon_threadsafe(self._schedule, event)

    def _schedule(self, event: SessionEvent) -> None:
        if event == SessionEvent.PASSWORD_RECOVERY and not self._recovery_active:
            self._begin_password_recovery(self._recovery_code)
        task = asyncio.ensure_future(self.resolve_and_navigate())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def on_deep_link(self, url: Optional[str]) -> ResolutionOutcome:
        """Decode an incoming URL and resolve with it."""
        intent = decode(url)
        if intent.kind == DeepLinkKind.NONE:
            logger.debug("Deep link carried no auth intent: %s", url)
            return ResolutionOutcome()
        return await self.handle_intent(intent)

    async def handle_intent(self, intent: DeepLinkIntent) -> ResolutionOutcome:
        """Resolve with an already decoded intent (the web callback route)."""
        if intent.kind != DeepLinkKind.NONE:
            self._pending_intent = intent
        return await self.resolve_and_navigate()

    async def resolve_and_navigate(self) -> ResolutionOutcome:
        """Run one serialized resolution pass."""
        self._requested += 1
        generation = self._requested
        async with self._lock:
            if generation != self._requested:
                return ResolutionOutcome(superseded=True)
            return await self._run_pass()

    async def navigate_to(self, state: ResolutionState, destination: Destination) -> ResolutionOutcome:
        """
        Navigate on behalf of a screen action (role chosen, password reset).

        Takes the place of any queued pass, like a new resolution request.
        """
        self._requested += 1
        async with self._lock:
            if self._navigator.current_path() == self._route_map.render(destination):
                return ResolutionOutcome(state=state)
            return await self._apply(Decision(state=state, destination=destination))

    async def finish_password_recovery(self, destination: Destination) -> ResolutionOutcome:
        """End recovery mode and send the user to a destination."""
        self.end_password_recovery()
        return await self.navigate_to(ResolutionState.AUTH_REQUIRED, destination)

    # -------------------------------------------------------------------------
    # Resolution pass
    # -------------------------------------------------------------------------

    async def _run_pass(self) -> ResolutionOutcome:
        location = self._route_map.locate(self._navigator.current_path())
        intent, self._pending_intent = self._pending_intent, None

        if intent is not None and intent.kind == DeepLinkKind.PASSWORD_RESET:
            self._begin_password_recovery(intent.code)

        if self._recovery_active:
            if self._recovery_entering:
                decision = decide(
                    ResolutionState.PASSWORD_RECOVERY, location, code=self._recovery_code
                )
                self._recovery_entering = False
                return await self._apply(decision)
            if location.screen == RESET_PASSWORD_SCREEN:
                return ResolutionOutcome(state=ResolutionState.PASSWORD_RECOVERY)
            logger.debug("Left the reset screen, ending password recovery")
            self.end_password_recovery()

        session: Optional[Session] = None
        if intent is not None and intent.kind == DeepLinkKind.AUTH_CALLBACK:
            try:
                session = await self._complete_callback(intent)
            except InvalidOrExpiredCodeError as e:
                logger.info("Auth callback rejected: %s", e.message)
                return await self._apply(self._invalid_link_decision(), error=e)
            except TransientNetworkError as e:
                logger.warning("Auth callback failed, keeping link for retry: %s", e.message)
                if self._pending_intent is None:
                    self._pending_intent = intent
                return ResolutionOutcome(state=ResolutionState.STAY, error=e)
            except (PermissionOrAuthError, NotAuthenticatedError) as e:
                return await self._force_sign_out(location, e)

        if session is None:
            try:
                session = await self._sessions.get_current_session()
            except TransientNetworkError as e:
                logger.warning("Could not read session, staying put: %s", e.message)
                return ResolutionOutcome(state=ResolutionState.STAY, error=e)
            except PermissionOrAuthError as e:
                return await self._force_sign_out(location, e)

        if session is None:
            return await self._apply(decide(ResolutionState.AUTH_REQUIRED, location))

        if not session.email_confirmed:
            logger.info("Unverified email detected, signing out %s", session.user_id)
            return await self._apply(decide(ResolutionState.FORCE_SIGN_OUT, location))

        try:
            record = await self._load_record(session)
        except TransientNetworkError as e:
            logger.warning("User record lookup failed, staying put: %s", e.message)
            return ResolutionOutcome(state=ResolutionState.STAY, error=e)
        except PermissionOrAuthError as e:
            return await self._force_sign_out(location, e)
        except FirstPrincipleError as e:
            logger.error("Unexpected error resolving %s: %s", session.user_id, e.message)
            return ResolutionOutcome(state=ResolutionState.STAY, error=e)

        state = compute_state(session, record)
        role = record.role if record is not None else None
        return await self._apply(decide(state, location, role=role))

    async def _complete_callback(self, intent: DeepLinkIntent) -> Session:
        if intent.error and not (intent.code or intent.has_tokens):
            raise InvalidOrExpiredCodeError(intent.error)
        if intent.has_tokens:
            return await self._sessions.set_session(intent.access_token, intent.refresh_token)
        return await self._sessions.exchange_auth_code(intent.code)

    async def _load_record(self, session: Session) -> Optional[UserRecord]:
        """Fetch the user record, creating it from the sign-up role if missing."""
        try:
            return await self._users.get_user_record(session.user_id)
        except UserRecordNotFoundError:
            pass

        role = session.role_hint
        if role is None:
            return None

        logger.info("Creating missing user record for %s as %s", session.user_id, role.value)
        record = UserRecord(
            id=session.user_id,
            email=session.email,
            role=role,
            profile_completed=False,
        )
        return await self._users.insert_user_record(record)

    def _invalid_link_decision(self) -> Decision:
        return Decision(
            state=ResolutionState.AUTH_REQUIRED,
            destination=Destination(route=Route.LOGIN, params={"error": INVALID_LINK_ERROR}),
        )

    async def _force_sign_out(self, location: Location, error: FirstPrincipleError) -> ResolutionOutcome:
        logger.info("Session rejected, forcing sign-out: %s", error.message)
        return await self._apply(decide(ResolutionState.FORCE_SIGN_OUT, location), error=error)

    async def _apply(
        self,
        decision: Decision,
        error: Optional[FirstPrincipleError] = None,
    ) -> ResolutionOutcome:
        """Carry out a decision: sign out first, then navigate."""
        signed_out = False
        if decision.sign_out:
            try:
                await self._sessions.sign_out()
                signed_out = True
            except (TransientNetworkError, PermissionOrAuthError) as e:
                # Redirect anyway; the next pass signs out again
                logger.warning("Sign-out failed: %s", e.message)

        navigated_to = None
        if decision.destination is not None:
            navigated_to = self._route_map.render(decision.destination)
            await self._navigator.replace(navigated_to)

        return ResolutionOutcome(
            state=decision.state,
            navigated_to=navigated_to,
            signed_out=signed_out,
            error=error,
        )
