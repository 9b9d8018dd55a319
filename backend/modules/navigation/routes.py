"""
Route tables and location classification.

Mobile paths use expo-router group markers ("/(auth)/login", "/(tabs)");
web paths are flat ("/login", "/dashboard"). classify_location() reads both.
"""

from dataclasses import dataclass, field
from typing import Mapping
from urllib.parse import parse_qsl, urlencode

from modules.users.models import UserRole
from .models import Destination, Location, LocationGroup, Route

# Screen names
LOGIN_SCREEN = "login"
SELECT_ROLE_SCREEN = "select-role"
ONBOARDING_SCREEN = "onboarding"
VERIFY_EMAIL_SCREEN = "verify-email"
RESET_PASSWORD_SCREEN = "reset-password"
CALLBACK_SCREEN = "callback"
HOME_SCREEN = "home"

AUTH_SCREENS = {LOGIN_SCREEN, "signup", "forgot-password", RESET_PASSWORD_SCREEN}
ROLE_AUTH_SCREENS = {"login", "signup"}  # /student/signup, /business/login
PROTECTED_MARKERS = {"(tabs)", "(protected)"}
AUTH_MARKER = "(auth)"


def classify_location(path: str, public_paths: frozenset[str] = frozenset()) -> Location:
    """
    Derive the current Location from a navigation path.

    Args:
        path: Current path, optionally with a query string
        public_paths: Paths reachable by anyone (web landing and legal pages)

    Returns:
        The Location
    """
    path, _, query = (path or "").partition("?")
    params = dict(parse_qsl(query))
    parts = [part for part in path.split("/") if part]
    markers = {part for part in parts if part.startswith("(") and part.endswith(")")}
    segments = [part for part in parts if part not in markers]

    flat = "/" + "/".join(segments)
    if not markers and flat in public_paths:
        return Location(group=LocationGroup.PUBLIC, screen=flat, params=params)

    if not segments:
        if markers & PROTECTED_MARKERS:
            return Location(group=LocationGroup.PROTECTED, screen=HOME_SCREEN, params=params)
        return Location(group=LocationGroup.UNKNOWN, params=params)

    first = segments[0]

    if first == "auth":
        if segments[1:2] == [CALLBACK_SCREEN]:
            return Location(group=LocationGroup.AUTH_CALLBACK, screen=CALLBACK_SCREEN, params=params)
        screen = segments[1] if len(segments) > 1 else first
        return Location(group=LocationGroup.AUTH, screen=screen, params=params)

    if first in (SELECT_ROLE_SCREEN, VERIFY_EMAIL_SCREEN):
        return Location(group=LocationGroup.ONBOARDING, screen=first, params=params)

    if first == ONBOARDING_SCREEN:
        role = UserRole.parse(segments[1]) if len(segments) > 1 else None
        # Web serves role selection at /onboarding
        screen = ONBOARDING_SCREEN if role else SELECT_ROLE_SCREEN
        return Location(group=LocationGroup.ONBOARDING, screen=screen, role=role, params=params)

    if first in AUTH_SCREENS:
        return Location(group=LocationGroup.AUTH, screen=first, params=params)

    if UserRole.parse(first) and segments[1:2] and segments[1] in ROLE_AUTH_SCREENS:
        return Location(group=LocationGroup.AUTH, screen=segments[1], params=params)

    if AUTH_MARKER in markers:
        return Location(group=LocationGroup.AUTH, screen=first, params=params)

    return Location(group=LocationGroup.PROTECTED, screen=first, params=params)


@dataclass(frozen=True)
class RouteMap:
    """Renders logical destinations to one platform's paths."""

    name: str
    paths: Mapping[Route, str]
    public_paths: frozenset[str] = field(default_factory=frozenset)

    def render(self, destination: Destination) -> str:
        """Build the platform path (with query string) for a destination."""
        template = self.paths[destination.route]
        role = destination.role.value if destination.role else ""
        path = template.format(role=role)
        if destination.params:
            path = f"{path}?{urlencode(sorted(destination.params.items()))}"
        return path

    def locate(self, path: str) -> Location:
        """Classify a path of this platform."""
        return classify_location(path, self.public_paths)


MOBILE_ROUTES = RouteMap(
    name="mobile",
    paths={
        Route.LOGIN: "/(auth)/login",
        Route.SELECT_ROLE: "/(auth)/select-role",
        Route.ONBOARDING: "/(auth)/onboarding/{role}",
        Route.HOME: "/(tabs)",
        Route.RESET_PASSWORD: "/(auth)/reset-password",
        Route.FORGOT_PASSWORD: "/(auth)/forgot-password",
    },
)

WEB_ROUTES = RouteMap(
    name="web",
    paths={
        Route.LOGIN: "/login",
        Route.SELECT_ROLE: "/onboarding",
        Route.ONBOARDING: "/onboarding/{role}",
        Route.HOME: "/dashboard",
        Route.RESET_PASSWORD: "/reset-password",
        Route.FORGOT_PASSWORD: "/forgot-password",
    },
    public_paths=frozenset({"/", "/about", "/privacy", "/terms", "/contact"}),
)

ROUTE_MAPS = {MOBILE_ROUTES.name: MOBILE_ROUTES, WEB_ROUTES.name: WEB_ROUTES}
