"""
Navigation endpoints.

The web middleware asks here where a page load should go. The decision
comes from the same resolution service the apps run, driven by an
in-memory navigator positioned at the requested path.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from shared.exceptions import PermissionOrAuthError, TransientNetworkError
from modules.auth.models import Session
from modules.navigation.adapters import MemoryNavigator
from modules.navigation.models import (
    Destination,
    LocationGroup,
    ResolutionOutcome,
    ResolutionState,
    Route,
)
from modules.navigation.resolver import decide
from modules.navigation.routes import ROUTE_MAPS, RouteMap

from ..dependencies import ServiceContainer, get_container
from ..middleware.auth import get_optional_session
from ..models.navigation import ResolveRequest, ResolveResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def _login_redirect(route_map: RouteMap, path: str) -> str:
    """Login path that returns the user to the page they asked for."""
    page = path.partition("?")[0]
    return route_map.render(Destination(route=Route.LOGIN, params={"redirect": page}))


async def run_resolution(
    container: ServiceContainer,
    session: Optional[Session],
    path: str,
    route_map: RouteMap,
) -> ResolutionOutcome:
    """Run one resolution pass for a request positioned at path."""
    location = route_map.locate(path)
    try:
        client = container.client(
            session.access_token if session else None,
            session.refresh_token if session else "",
        )
    except PermissionOrAuthError as e:
        decision = decide(ResolutionState.FORCE_SIGN_OUT, location)
        navigated_to = route_map.render(decision.destination) if decision.destination else None
        return ResolutionOutcome(state=decision.state, navigated_to=navigated_to, error=e)
    except TransientNetworkError as e:
        logger.warning("Could not reach Supabase, staying put: %s", e.message)
        return ResolutionOutcome(state=ResolutionState.STAY, error=e)

    navigator = MemoryNavigator(path)
    service = container.navigation(
        container.session_store(client),
        container.user_store(client),
        navigator,
        route_map,
    )
    return await service.resolve_and_navigate()


@router.post("/resolve", response_model=ResolveResponse)
async def resolve_navigation(
    request: ResolveRequest,
    session: Optional[Session] = Depends(get_optional_session),
    container: ServiceContainer = Depends(get_container),
) -> ResolveResponse:
    """
    Decide where a page load should go.

    An invalid or expired bearer token counts as signed out.
    """
    route_map = ROUTE_MAPS[request.platform]
    outcome = await run_resolution(container, session, request.path, route_map)

    redirect_to = outcome.navigated_to
    if (
        outcome.state == ResolutionState.AUTH_REQUIRED
        and redirect_to is not None
        and route_map.locate(request.path).group == LocationGroup.PROTECTED
    ):
        redirect_to = _login_redirect(route_map, request.path)

    return ResolveResponse(
        state=outcome.state or ResolutionState.STAY,
        redirect_to=redirect_to,
        sign_out=outcome.state == ResolutionState.FORCE_SIGN_OUT,
    )
