"""
Pure auth/onboarding resolution.

compute_state() turns (session, user record, recovery mode) into a
ResolutionState; decide() turns a state and the current location into a
Decision. Each state owns the set of locations that satisfy it, and a
destination is produced only when the current location is outside that
set. Re-running with the same inputs therefore never navigates twice.

    no session                          -> AUTH_REQUIRED
    session, email unconfirmed          -> FORCE_SIGN_OUT
    confirmed, no user record           -> NEEDS_ROLE_SELECTION
    confirmed, profile_completed false  -> NEEDS_ONBOARDING(role)
    confirmed, profile_completed true   -> AUTHORIZED
    recovery link being handled         -> PASSWORD_RECOVERY
"""

from typing import Callable, Optional

from modules.auth.models import Session
from modules.users.models import UserRecord, UserRole
from .models import (
    Decision,
    Destination,
    Location,
    LocationGroup,
    ResolutionState,
    Route,
)
from .routes import (
    LOGIN_SCREEN,
    ONBOARDING_SCREEN,
    RESET_PASSWORD_SCREEN,
    SELECT_ROLE_SCREEN,
    VERIFY_EMAIL_SCREEN,
)


def compute_state(
    session: Optional[Session],
    record: Optional[UserRecord],
    recovery: bool = False,
) -> ResolutionState:
    """
    Compute the resolution state from the current inputs.

    Args:
        session: Current session, None when signed out
        record: The user's record, None when it does not exist
        recovery: Whether a password-recovery link is being handled

    Returns:
        The ResolutionState
    """
    if recovery:
        return ResolutionState.PASSWORD_RECOVERY
    if session is None:
        return ResolutionState.AUTH_REQUIRED
    if not session.email_confirmed:
        return ResolutionState.FORCE_SIGN_OUT
    if record is None:
        return ResolutionState.NEEDS_ROLE_SELECTION
    if not record.profile_completed:
        return ResolutionState.NEEDS_ONBOARDING
    return ResolutionState.AUTHORIZED


def _signed_out_ok(location: Location, role: Optional[UserRole], code: Optional[str]) -> bool:
    return (
        location.group in (LocationGroup.AUTH, LocationGroup.AUTH_CALLBACK, LocationGroup.PUBLIC)
        or location.screen == VERIFY_EMAIL_SCREEN
    )


def _login_only(location: Location, role: Optional[UserRole], code: Optional[str]) -> bool:
    return location.group == LocationGroup.AUTH and location.screen == LOGIN_SCREEN


def _selecting_role(location: Location, role: Optional[UserRole], code: Optional[str]) -> bool:
    # Any onboarding-family screen: select-role, onboarding/{role}, verify-email
    return location.group in (LocationGroup.ONBOARDING, LocationGroup.PUBLIC)


def _onboarding(location: Location, role: Optional[UserRole], code: Optional[str]) -> bool:
    # The role can still be changed until onboarding completes
    if location.group == LocationGroup.PUBLIC:
        return True
    if location.screen in (SELECT_ROLE_SCREEN, VERIFY_EMAIL_SCREEN):
        return True
    return location.screen == ONBOARDING_SCREEN and location.role == role


def _authorized(location: Location, role: Optional[UserRole], code: Optional[str]) -> bool:
    return location.group in (LocationGroup.PROTECTED, LocationGroup.PUBLIC)


def _resetting(location: Location, role: Optional[UserRole], code: Optional[str]) -> bool:
    if location.screen != RESET_PASSWORD_SCREEN:
        return False
    current = location.params.get("code")
    return code is None or current is None or current == code


def _anywhere(location: Location, role: Optional[UserRole], code: Optional[str]) -> bool:
    return True


_SATISFIED_BY: dict[ResolutionState, Callable[[Location, Optional[UserRole], Optional[str]], bool]] = {
    ResolutionState.AUTH_REQUIRED: _signed_out_ok,
    ResolutionState.FORCE_SIGN_OUT: _login_only,
    ResolutionState.NEEDS_ROLE_SELECTION: _selecting_role,
    ResolutionState.NEEDS_ONBOARDING: _onboarding,
    ResolutionState.AUTHORIZED: _authorized,
    ResolutionState.PASSWORD_RECOVERY: _resetting,
    ResolutionState.STAY: _anywhere,
}


def target_for(
    state: ResolutionState,
    role: Optional[UserRole] = None,
    code: Optional[str] = None,
) -> Optional[Destination]:
    """Canonical destination of a state (None for STAY)."""
    if state in (ResolutionState.AUTH_REQUIRED, ResolutionState.FORCE_SIGN_OUT):
        return Destination(route=Route.LOGIN)
    if state == ResolutionState.NEEDS_ROLE_SELECTION:
        return Destination(route=Route.SELECT_ROLE)
    if state == ResolutionState.NEEDS_ONBOARDING:
        if role is None:
            raise ValueError("NEEDS_ONBOARDING requires a role")
        return Destination(route=Route.ONBOARDING, role=role)
    if state == ResolutionState.AUTHORIZED:
        return Destination(route=Route.HOME)
    if state == ResolutionState.PASSWORD_RECOVERY:
        return Destination(route=Route.RESET_PASSWORD, params={"code": code} if code else {})
    return None


def satisfies(
    state: ResolutionState,
    location: Location,
    role: Optional[UserRole] = None,
    code: Optional[str] = None,
) -> bool:
    """Whether the location is acceptable for the state."""
    return _SATISFIED_BY[state](location, role, code)


def decide(
    state: ResolutionState,
    location: Location,
    role: Optional[UserRole] = None,
    code: Optional[str] = None,
) -> Decision:
    """
    Decide where a state sends the user from the current location.

    Args:
        state: The computed ResolutionState
        location: Where the app currently is
        role: User role (required for NEEDS_ONBOARDING)
        code: Recovery code (for PASSWORD_RECOVERY)

    Returns:
        Decision whose destination is None when no navigation is needed
    """
    destination = None
    if not satisfies(state, location, role, code):
        destination = target_for(state, role, code)
    return Decision(
        state=state,
        destination=destination,
        sign_out=state == ResolutionState.FORCE_SIGN_OUT,
    )


def resolve(
    session: Optional[Session],
    record: Optional[UserRecord],
    location: Location,
    recovery_code: Optional[str] = None,
    recovery: bool = False,
) -> Decision:
    """compute_state() followed by decide()."""
    state = compute_state(session, record, recovery=recovery or recovery_code is not None)
    role = record.role if record is not None else None
    return decide(state, location, role=role, code=recovery_code)
