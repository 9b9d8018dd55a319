"""
Navigation module interfaces.

INavigator is the platform shim: each host (mobile router, web server,
CLI) supplies one, and the shared resolution core drives it.
"""

from typing import Optional, Protocol, runtime_checkable

from .models import ResolutionOutcome


@runtime_checkable
class INavigator(Protocol):
    """Platform navigation primitive."""

    def current_path(self) -> str:
        """
        Get the path the app currently shows.

        Returns:
            Path in the platform's own format, optionally with a query string
        """
        ...

    async def replace(self, path: str) -> None:
        """Replace the current screen with the given path (no back entry)."""
        ...


@runtime_checkable
class IAuthNavigation(Protocol):
    """Entry points the resolution core exposes to screens."""

    async def resolve_and_navigate(self) -> ResolutionOutcome:
        """
        Run one resolution pass and navigate if needed.

        Idempotent: safe to call repeatedly.
        """
        ...

    async def on_deep_link(self, url: Optional[str]) -> ResolutionOutcome:
        """Feed an incoming URL into the next resolution pass."""
        ...
