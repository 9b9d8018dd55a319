"""
Platform navigator adapters.

CallbackNavigator wraps a host router's functions; MemoryNavigator keeps
the path in memory (dry runs, server-side decisions, tests).
"""

import inspect
from typing import Any, Awaitable, Callable, Union

from .interfaces import INavigator


class CallbackNavigator(INavigator):
    """
    Navigator backed by two host callables.

    Example:
        navigator = CallbackNavigator(router.current_path, router.replace)
    """

    def __init__(
        self,
        get_path: Callable[[], str],
        replace: Callable[[str], Union[None, Awaitable[Any]]],
    ):
        self._get_path = get_path
        self._replace = replace

    def current_path(self) -> str:
        return self._get_path()

    async def replace(self, path: str) -> None:
        result = self._replace(path)
        if inspect.isawaitable(result):
            await result


class MemoryNavigator(INavigator):
    """Navigator that records every replace() in memory."""

    def __init__(self, initial_path: str = "/"):
        self._path = initial_path
        self.history: list[str] = []

    def current_path(self) -> str:
        return self._path

    async def replace(self, path: str) -> None:
        self.history.append(path)
        self._path = path

    def visit(self, path: str) -> None:
        """Simulate the user navigating on their own."""
        self._path = path
