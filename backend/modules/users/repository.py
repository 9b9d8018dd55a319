"""
User repositories for database access.

Encapsulates all Supabase queries and data mapping for:
- users
- student_profiles
- business_profiles
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, TypeVar, Union

from shared.errors import ErrorKind, classify_backend_error
from shared.exceptions import PermissionOrAuthError, TransientNetworkError
from shared.repository import BaseRepository
from .exceptions import UserRecordNotFoundError
from .models import BusinessProfile, StudentProfile, UserRecord, UserRole

logger = logging.getLogger(__name__)

R = TypeVar("R")

PROFILE_TABLES = {
    UserRole.STUDENT: "student_profiles",
    UserRole.BUSINESS: "business_profiles",
}


class _SupabaseRepository(BaseRepository[R]):
    """Adds backend error translation to BaseRepository."""

    async def _call(self, query: Callable[[], Any], user_id: str) -> Any:
        try:
            return await self._run(query)
        except Exception as e:
            kind = classify_backend_error(e)
            if kind == ErrorKind.NOT_FOUND:
                raise UserRecordNotFoundError(user_id) from e
            if kind == ErrorKind.PERMISSION:
                raise PermissionOrAuthError(str(e), details={"user_id": user_id}) from e
            logger.debug("Supabase query failed for %s: %s", user_id, e)
            raise TransientNetworkError(str(e), details={"user_id": user_id}) from e


class UserRecordRepository(_SupabaseRepository[UserRecord]):
    """
    Repository for the users table.

    Note: This repository does NOT perform authorization checks.
    Row-level security on the backend restricts a user client to its own row.
    """

    async def get_user_record(self, user_id: str) -> UserRecord:
        """Get a user record, raising UserRecordNotFoundError if absent."""
        result = await self._call(
            lambda: self._db.table("users")
            .select("id, email, role, profile_completed")
            .eq("id", user_id)
            .execute(),
            user_id,
        )

        if not result.data:
            raise UserRecordNotFoundError(user_id)

        return self._map_to_record(result.data[0])

    async def insert_user_record(self, record: UserRecord) -> UserRecord:
        """Insert a new user record."""
        data = self._to_row(record)
        result = await self._call(
            lambda: self._db.table("users").insert(data).execute(),
            record.id,
        )
        return self._map_to_record(result.data[0]) if result.data else record

    async def upsert_user_record(self, record: UserRecord) -> UserRecord:
        """Insert or replace the user record keyed by id."""
        data = self._to_row(record)
        result = await self._call(
            lambda: self._db.table("users").upsert(data).execute(),
            record.id,
        )
        return self._map_to_record(result.data[0]) if result.data else record

    async def mark_profile_completed(self, user_id: str) -> None:
        """Set profile_completed = true for the account."""
        data = {
            "profile_completed": True,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        result = await self._call(
            lambda: self._db.table("users").update(data).eq("id", user_id).execute(),
            user_id,
        )
        if result.data is not None and len(result.data) == 0:
            raise UserRecordNotFoundError(user_id)

    # -------------------------------------------------------------------------
    # Mapping helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _to_row(record: UserRecord) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": record.id,
            "role": record.role.value,
            "profile_completed": record.profile_completed,
        }
        if record.email is not None:
            data["email"] = record.email
        return data

    @staticmethod
    def _map_to_record(data: dict[str, Any]) -> UserRecord:
        return UserRecord(
            id=str(data["id"]),
            email=data.get("email"),
            role=UserRole(data["role"]),
            profile_completed=bool(data.get("profile_completed", False)),
        )


class ProfileRepository(_SupabaseRepository[Union[StudentProfile, BusinessProfile]]):
    """Repository for student_profiles and business_profiles."""

    async def save_profile(
        self,
        user_id: str,
        profile: Union[StudentProfile, BusinessProfile],
    ) -> None:
        """Upsert the role-specific profile row keyed on user_id."""
        table = PROFILE_TABLES[profile.role]
        data = {"user_id": user_id, **profile.model_dump(mode="json")}
        await self._call(
            lambda: self._db.table(table).upsert(data, on_conflict="user_id").execute(),
            user_id,
        )
