"""
Session store implementation.

Adapts the Supabase auth client to ISessionStore. The SDK client is
synchronous, so every call runs in a worker thread and the UI/event loop
only awaits the result.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

from supabase import Client

from shared.errors import ErrorKind, classify_backend_error
from shared.exceptions import PermissionOrAuthError, TransientNetworkError
from modules.users.models import UserRole

from .interfaces import ISessionStore, SessionListener
from .models import Session, SessionEvent
from .exceptions import (
    EmailNotConfirmedError,
    InvalidCredentialsError,
    InvalidOrExpiredCodeError,
    NotAuthenticatedError,
)

logger = logging.getLogger(__name__)


def _raise_backend_error(exc: Exception, *, code_flow: bool = False) -> None:
    """Re-raise an SDK failure as a taxonomy exception."""
    kind = classify_backend_error(exc)
    if code_flow and kind in (ErrorKind.INVALID_CODE, ErrorKind.NOT_FOUND, ErrorKind.PERMISSION):
        raise InvalidOrExpiredCodeError() from exc
    if kind in (ErrorKind.PERMISSION, ErrorKind.NOT_FOUND):
        raise PermissionOrAuthError(str(exc)) from exc
    if kind == ErrorKind.INVALID_CODE:
        raise InvalidCredentialsError(str(exc)) from exc
    raise TransientNetworkError(str(exc)) from exc


class SupabaseSessionStore(ISessionStore):
    """
    ISessionStore backed by the Supabase auth client.

    One instance wraps the device's client; the session itself is persisted
    by the client's storage primitive.
    """

    def __init__(self, client: Client):
        self._client = client

    async def _call(self, fn: Callable[..., Any], *args: Any, code_flow: bool = False) -> Any:
        try:
            return await asyncio.to_thread(fn, *args)
        except Exception as e:
            _raise_backend_error(e, code_flow=code_flow)

    def _session_from_response(self, response: Any) -> Session:
        session = Session.from_supabase(getattr(response, "session", None))
        if session is None:
            raise NotAuthenticatedError("Backend returned no session")
        return session

    async def get_current_session(self) -> Optional[Session]:
        sdk_session = await self._call(self._client.auth.get_session)
        return Session.from_supabase(sdk_session)

    def on_session_change(self, listener: SessionListener) -> Callable[[], None]:
        def _forward(event: Any, sdk_session: Any) -> None:
            parsed = SessionEvent.parse(event)
            if parsed is None:
                logger.debug("Ignoring unknown auth event %r", event)
                return
            listener(parsed, Session.from_supabase(sdk_session))

        subscription = self._client.auth.on_auth_state_change(_forward)
        return subscription.unsubscribe

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        credentials = {"email": email.strip(), "password": password}
        try:
            response = await asyncio.to_thread(
                self._client.auth.sign_in_with_password, credentials
            )
        except Exception as e:
            message = str(e).lower()
            if "email not confirmed" in message:
                raise EmailNotConfirmedError(email) from e
            if "invalid login credentials" in message:
                raise InvalidCredentialsError() from e
            _raise_backend_error(e)

        session = self._session_from_response(response)
        if not session.email_confirmed:
            logger.info("Unverified email on sign-in, signing out %s", session.user_id)
            await self.sign_out()
            raise EmailNotConfirmedError(email)
        return session

    async def sign_up(
        self,
        email: str,
        password: str,
        role: UserRole,
        redirect_to: str,
    ) -> Optional[str]:
        credentials = {
            "email": email.strip(),
            "password": password,
            "options": {
                "data": {"role": role.value},
                "email_redirect_to": redirect_to,
            },
        }
        response = await self._call(self._client.auth.sign_up, credentials)
        user = getattr(response, "user", None)
        return str(user.id) if user is not None else None

    async def start_oauth(self, provider: str, redirect_to: str) -> str:
        credentials = {
            "provider": provider,
            "options": {
                "redirect_to": redirect_to,
                "query_params": {"access_type": "offline", "prompt": "consent"},
            },
        }
        response = await self._call(self._client.auth.sign_in_with_oauth, credentials)
        return response.url

    async def exchange_auth_code(self, code: str) -> Session:
        response = await self._call(
            self._client.auth.exchange_code_for_session,
            {"auth_code": code},
            code_flow=True,
        )
        return self._session_from_response(response)

    async def set_session(self, access_token: str, refresh_token: str) -> Session:
        response = await self._call(
            self._client.auth.set_session,
            access_token,
            refresh_token,
            code_flow=True,
        )
        return self._session_from_response(response)

    async def verify_recovery_code(self, code: str) -> Session:
        response = await self._call(
            self._client.auth.verify_otp,
            {"token_hash": code, "type": "recovery"},
            code_flow=True,
        )
        return self._session_from_response(response)

    async def update_password(self, new_password: str) -> None:
        await self._call(self._client.auth.update_user, {"password": new_password})

    async def request_password_reset(self, email: str, redirect_to: str) -> None:
        await self._call(
            self._client.auth.reset_password_for_email,
            email.strip(),
            {"redirect_to": redirect_to},
        )

    async def sign_out(self) -> None:
        await self._call(self._client.auth.sign_out)
