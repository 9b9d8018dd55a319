"""
Web auth callback.

Email verification and OAuth links land on /auth/callback with a code.
The code is exchanged on a request-scoped client, the resolution service
picks the next page, and the session is handed to the browser as cookies.
Recovery links are forwarded to the reset-password page untouched.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from shared.config import get_settings
from shared.exceptions import FirstPrincipleError
from modules.auth.models import Session
from modules.deeplinks.decoder import CALLBACK_PATH, intent_from_params
from modules.deeplinks.models import DeepLinkKind
from modules.navigation.adapters import MemoryNavigator
from modules.navigation.models import Destination, LocationGroup, ResolutionState, Route
from modules.navigation.routes import WEB_ROUTES

from ..config import get_settings as get_api_settings
from ..dependencies import ServiceContainer, get_container

logger = logging.getLogger(__name__)

router = APIRouter()

CALLBACK_LOCATION = "/auth/callback"
AUTH_CODE_ERROR_PATH = "/auth/auth-code-error"


def _redirect(path: str) -> RedirectResponse:
    base = get_settings().frontend_url.rstrip("/")
    return RedirectResponse(url=f"{base}{path}", status_code=303)


def _safe_next(next_path: Optional[str]) -> Optional[str]:
    """Accept ?next= only when it is a protected page of this site."""
    if not next_path or not next_path.startswith("/") or next_path.startswith("//"):
        return None
    if WEB_ROUTES.locate(next_path).group != LocationGroup.PROTECTED:
        return None
    return next_path


def _set_session_cookies(response: RedirectResponse, session: Session) -> None:
    settings = get_api_settings()
    for name, value in (
        (settings.access_cookie_name, session.access_token),
        (settings.refresh_cookie_name, session.refresh_token),
    ):
        if value:
            response.set_cookie(
                name,
                value,
                httponly=True,
                secure=settings.secure_cookies,
                samesite="lax",
                path="/",
            )


@router.get("/callback")
async def auth_callback(
    request: Request,
    container: ServiceContainer = Depends(get_container),
) -> RedirectResponse:
    """
    Complete an email verification or OAuth sign-in.

    Any failure sends the browser to the auth-code error page.
    """
    params = dict(request.query_params)
    intent = intent_from_params(CALLBACK_PATH, params)

    if intent.kind == DeepLinkKind.PASSWORD_RESET:
        destination = Destination(route=Route.RESET_PASSWORD, params={"code": intent.code})
        return _redirect(WEB_ROUTES.render(destination))

    if intent.kind != DeepLinkKind.AUTH_CALLBACK:
        logger.info("Auth callback without a code")
        return _redirect(AUTH_CODE_ERROR_PATH)

    try:
        client = container.client(cookies=request.cookies)
        sessions = container.session_store(client)
        navigator = MemoryNavigator(CALLBACK_LOCATION)
        service = container.navigation(sessions, container.user_store(client), navigator)

        outcome = await service.handle_intent(intent)
        if outcome.error is not None or not outcome.navigated:
            return _redirect(AUTH_CODE_ERROR_PATH)

        session = await sessions.get_current_session()
    except (FirstPrincipleError, RuntimeError) as e:
        logger.warning("Auth callback failed: %s", e)
        return _redirect(AUTH_CODE_ERROR_PATH)

    redirect_to = navigator.current_path()
    if outcome.state == ResolutionState.AUTHORIZED:
        redirect_to = _safe_next(params.get("next")) or redirect_to

    response = _redirect(redirect_to)
    if session is not None:
        _set_session_cookies(response, session)
    return response
