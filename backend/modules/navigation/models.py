"""
Navigation module data models.

Logical routes and locations are platform-neutral; a RouteMap renders them
to the paths of one platform (see routes.py).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from shared.exceptions import FirstPrincipleError
from modules.users.models import UserRole


class Route(str, Enum):
    """Logical destinations the state machine can send the user to."""

    LOGIN = "login"
    SELECT_ROLE = "select_role"
    ONBOARDING = "onboarding"
    HOME = "home"
    RESET_PASSWORD = "reset_password"
    FORGOT_PASSWORD = "forgot_password"


class LocationGroup(str, Enum):
    """Screen group the app currently occupies."""

    AUTH = "auth"
    PROTECTED = "protected"
    ONBOARDING = "onboarding"
    AUTH_CALLBACK = "auth_callback"
    PUBLIC = "public"
    UNKNOWN = "unknown"


class ResolutionState(str, Enum):
    """Outcome states of one resolution pass."""

    AUTH_REQUIRED = "auth_required"
    FORCE_SIGN_OUT = "force_sign_out"
    NEEDS_ROLE_SELECTION = "needs_role_selection"
    NEEDS_ONBOARDING = "needs_onboarding"
    AUTHORIZED = "authorized"
    PASSWORD_RECOVERY = "password_recovery"
    STAY = "stay"


class Destination(BaseModel):
    """A logical route plus its parameters."""

    route: Route
    role: Optional[UserRole] = None
    params: dict[str, str] = Field(default_factory=dict)

    model_config = {"frozen": True}


class Location(BaseModel):
    """Where the app currently is, derived from the navigation path."""

    group: LocationGroup
    screen: Optional[str] = Field(None, description="Screen name, e.g. 'login'")
    role: Optional[UserRole] = Field(None, description="Role of an onboarding screen")
    params: dict[str, str] = Field(default_factory=dict)

    model_config = {"frozen": True}


class Decision(BaseModel):
    """
    Result of the pure resolver.

    destination is None when the current location already satisfies the
    state. sign_out must be carried out before any navigation.
    """

    state: ResolutionState
    destination: Optional[Destination] = None
    sign_out: bool = False

    model_config = {"frozen": True}


@dataclass(frozen=True)
class ResolutionOutcome:
    """What a resolution pass did."""

    state: Optional[ResolutionState] = None
    navigated_to: Optional[str] = None
    signed_out: bool = False
    superseded: bool = False
    error: Optional[FirstPrincipleError] = None

    @property
    def navigated(self) -> bool:
        return self.navigated_to is not None
