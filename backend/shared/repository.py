"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access and the worker-thread bridge used by async callers.
"""

import asyncio
from typing import Any, Callable, TypeVar, Generic
from supabase import Client


T = TypeVar("T")
R = TypeVar("R")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Generic type parameter for model type hints
    - _run() to execute a blocking query without stalling the event loop

    Subclasses should implement domain-specific data access methods
    and handle dict-to-Pydantic model mapping internally.

    Example:
        class UserRecordRepository(BaseRepository[UserRecord]):
            async def get_user_record(self, user_id: str) -> UserRecord:
                result = await self._run(
                    lambda: self._db.table("users").select("*").eq("id", user_id).execute()
                )
                if not result.data:
                    raise UserRecordNotFoundError(user_id)
                return self._map_to_record(result.data[0])
    """

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

    async def _run(self, query: Callable[[], R], *args: Any) -> R:
        """Run a blocking Supabase call in a worker thread."""
        return await asyncio.to_thread(query, *args)
