"""
Onboarding endpoints.

Role selection and onboarding completion for the web app. Writes go
through a client authenticated as the caller, so row-level security
applies; the response carries the page resolution picks next.
"""

from fastapi import APIRouter, Depends

from shared.exceptions import FirstPrincipleError
from modules.auth.models import Session
from modules.navigation.models import Destination, ResolutionState, Route
from modules.navigation.routes import WEB_ROUTES
from modules.users.models import BusinessProfile, StudentProfile, UserRecord

from ..dependencies import ServiceContainer, get_container
from ..errors import ERROR_RESPONSES, http_error_for
from ..middleware.auth import get_current_session
from ..models.onboarding import OnboardingResponse, SelectRoleRequest
from .navigation import run_resolution

router = APIRouter()

ONBOARDING_LOCATION = "/onboarding"


async def _respond(
    container: ServiceContainer,
    session: Session,
    record: UserRecord,
    location: str,
) -> OnboardingResponse:
    outcome = await run_resolution(container, session, location, WEB_ROUTES)
    return OnboardingResponse(
        role=record.role,
        profile_completed=record.profile_completed,
        state=outcome.state,
        redirect_to=outcome.navigated_to,
    )


@router.post("/role", response_model=OnboardingResponse, responses=ERROR_RESPONSES)
async def select_role(
    request: SelectRoleRequest,
    session: Session = Depends(get_current_session),
    container: ServiceContainer = Depends(get_container),
) -> OnboardingResponse:
    """
    Record the caller's role.

    Requires a confirmed email. The response redirects to the role's
    onboarding form.
    """
    try:
        service = container.onboarding(container.client(session.access_token, session.refresh_token))
        record = await service.select_role(session, request.role)
    except FirstPrincipleError as e:
        raise http_error_for(e)

    if record.profile_completed:
        return await _respond(container, session, record, ONBOARDING_LOCATION)
    return OnboardingResponse(
        role=record.role,
        profile_completed=False,
        state=ResolutionState.NEEDS_ONBOARDING,
        redirect_to=WEB_ROUTES.render(Destination(route=Route.ONBOARDING, role=record.role)),
    )


@router.post("/student", response_model=OnboardingResponse, responses=ERROR_RESPONSES)
async def complete_student_onboarding(
    profile: StudentProfile,
    session: Session = Depends(get_current_session),
    container: ServiceContainer = Depends(get_container),
) -> OnboardingResponse:
    """Save the student profile and finish onboarding."""
    try:
        service = container.onboarding(container.client(session.access_token, session.refresh_token))
        record = await service.complete_onboarding(session, profile)
    except FirstPrincipleError as e:
        raise http_error_for(e)
    return await _respond(container, session, record, f"{ONBOARDING_LOCATION}/student")


@router.post("/business", response_model=OnboardingResponse, responses=ERROR_RESPONSES)
async def complete_business_onboarding(
    profile: BusinessProfile,
    session: Session = Depends(get_current_session),
    container: ServiceContainer = Depends(get_container),
) -> OnboardingResponse:
    """Save the business profile and finish onboarding."""
    try:
        service = container.onboarding(container.client(session.access_token, session.refresh_token))
        record = await service.complete_onboarding(session, profile)
    except FirstPrincipleError as e:
        raise http_error_for(e)
    return await _respond(container, session, record, f"{ONBOARDING_LOCATION}/business")
