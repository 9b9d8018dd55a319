"""
Navigation module.

The auth/onboarding resolution state machine shared by every platform.

Public API:
- compute_state, decide, resolve: Pure resolution
- AuthNavigationService: Serialized resolution passes over live stores
- AuthContext: Per-process bundle handed to screens
- INavigator, CallbackNavigator, MemoryNavigator: Platform navigation shims
- RouteMap, MOBILE_ROUTES, WEB_ROUTES: Platform route tables
"""

from .interfaces import IAuthNavigation, INavigator
from .models import (
    Decision,
    Destination,
    Location,
    LocationGroup,
    ResolutionOutcome,
    ResolutionState,
    Route,
)
from .resolver import compute_state, decide, resolve, satisfies, target_for
from .routes import MOBILE_ROUTES, ROUTE_MAPS, WEB_ROUTES, RouteMap, classify_location
from .adapters import CallbackNavigator, MemoryNavigator
from .service import AuthNavigationService
from .context import AuthContext

__all__ = [
    # Interfaces
    "IAuthNavigation",
    "INavigator",
    # Models
    "Decision",
    "Destination",
    "Location",
    "LocationGroup",
    "ResolutionOutcome",
    "ResolutionState",
    "Route",
    # Pure resolution
    "compute_state",
    "decide",
    "resolve",
    "satisfies",
    "target_for",
    # Routes
    "RouteMap",
    "MOBILE_ROUTES",
    "WEB_ROUTES",
    "ROUTE_MAPS",
    "classify_location",
    # Runtime
    "CallbackNavigator",
    "MemoryNavigator",
    "AuthNavigationService",
    "AuthContext",
]
