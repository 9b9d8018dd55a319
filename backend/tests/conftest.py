"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules:
JWT helpers, session/record builders and in-memory fakes for the session,
user record and profile stores.
"""

import pytest
from datetime import datetime, timezone, timedelta
from typing import Any, Callable, Optional, Union
import jwt  # PyJWT

from api.dependencies import reset_container
from modules.auth.models import Session, SessionEvent
from modules.users.exceptions import UserRecordNotFoundError
from modules.users.models import BusinessProfile, StudentProfile, UserRecord, UserRole
from shared.config import get_settings
from shared.database import reset_client_cache


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"


def create_test_token(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    expired: bool = False,
    email_verified: bool = True,
    role: Optional[str] = None,
    secret: str = TEST_JWT_SECRET,
) -> str:
    """
    Create a test JWT token for authentication.

    Args:
        user_id: User ID to include in the token
        email: Email to include in the token
        expired: If True, creates an expired token
        email_verified: Whether the email should be marked as verified
        role: Sign-up role to put in user metadata
        secret: Signing secret

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": user_id,
        "email": email,
        "email_confirmed_at": now.isoformat() if email_verified else None,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
        "user_metadata": {"role": role} if role else {},
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def make_session(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    confirmed: bool = True,
    role: Optional[UserRole] = None,
    access_token: str = "access-token",
) -> Session:
    """Build a Session as the session store would return it."""
    return Session(
        user_id=user_id,
        email=email,
        email_confirmed_at=datetime.now(timezone.utc) if confirmed else None,
        access_token=access_token,
        refresh_token="refresh-token",
        user_metadata={"role": role.value} if role else {},
    )


def make_record(
    user_id: str = "test-user-123",
    role: UserRole = UserRole.STUDENT,
    completed: bool = False,
) -> UserRecord:
    """Build a UserRecord."""
    return UserRecord(
        id=user_id,
        email="test@example.com",
        role=role,
        profile_completed=completed,
    )


def create_mock_student_profile(**overrides: Any) -> StudentProfile:
    """Create a valid student onboarding profile."""
    data = {
        "full_name": "Ada Lovelace",
        "phone": "+15555550100",
        "university_name": "State University",
        "degree_name": "BSc Computer Science",
        "major": "Computer Science",
        "degree_level": "undergraduate",
        "areas_of_interest": ["software"],
        "expertise": ["python"],
    }
    data.update(overrides)
    return StudentProfile(**data)


def create_mock_business_profile(**overrides: Any) -> BusinessProfile:
    """Create a valid business onboarding profile."""
    data = {
        "owner_name": "Grace Hopper",
        "business_name": "Hopper Consulting",
        "industry": "Technology",
        "business_age_years": 3,
        "phone": "+15555550101",
        "address": "1 Main St",
        "business_description": "Software consulting",
        "looking_for": ["Interns"],
    }
    data.update(overrides)
    return BusinessProfile(**data)


class FakeSessionStore:
    """
    In-memory ISessionStore.

    Set errors[method_name] to make that method raise. Every call is
    appended to calls.
    """

    def __init__(self, session: Optional[Session] = None):
        self.session = session
        self.exchange_session: Optional[Session] = None
        self.recovery_session: Optional[Session] = None
        self.sign_up_user_id: Optional[str] = "new-user-123"
        self.errors: dict[str, Exception] = {}
        self.calls: list[str] = []
        self.listeners: list[Callable] = []
        self.sign_ups: list[tuple] = []
        self.reset_requests: list[tuple[str, str]] = []
        self.oauth_requests: list[tuple[str, str]] = []
        self.password: Optional[str] = None

    def _enter(self, name: str) -> None:
        self.calls.append(name)
        if name in self.errors:
            raise self.errors[name]

    def emit(self, event: SessionEvent, session: Optional[Session] = None) -> None:
        for listener in list(self.listeners):
            listener(event, session)

    async def get_current_session(self) -> Optional[Session]:
        self._enter("get_current_session")
        return self.session

    def on_session_change(self, listener: Callable) -> Callable[[], None]:
        self.listeners.append(listener)
        return lambda: self.listeners.remove(listener)

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        self._enter("sign_in_with_password")
        self.session = self.session or make_session(email=email)
        return self.session

    async def sign_up(self, email: str, password: str, role: UserRole, redirect_to: str) -> Optional[str]:
        self._enter("sign_up")
        self.sign_ups.append((email, role, redirect_to))
        return self.sign_up_user_id

    async def start_oauth(self, provider: str, redirect_to: str) -> str:
        self._enter("start_oauth")
        self.oauth_requests.append((provider, redirect_to))
        return f"https://auth.example.com/authorize?provider={provider}"

    async def exchange_auth_code(self, code: str) -> Session:
        self._enter("exchange_auth_code")
        self.session = self.exchange_session or make_session()
        return self.session

    async def set_session(self, access_token: str, refresh_token: str) -> Session:
        self._enter("set_session")
        self.session = self.exchange_session or make_session(access_token=access_token)
        return self.session

    async def verify_recovery_code(self, code: str) -> Session:
        self._enter("verify_recovery_code")
        self.session = self.recovery_session or make_session()
        return self.session

    async def update_password(self, new_password: str) -> None:
        self._enter("update_password")
        self.password = new_password

    async def request_password_reset(self, email: str, redirect_to: str) -> None:
        self._enter("request_password_reset")
        self.reset_requests.append((email, redirect_to))

    async def sign_out(self) -> None:
        self._enter("sign_out")
        self.session = None


class FakeUserStore:
    """In-memory IUserRecordStore with per-method error injection."""

    def __init__(self, *records: UserRecord):
        self.records: dict[str, UserRecord] = {record.id: record for record in records}
        self.errors: dict[str, Exception] = {}
        self.calls: list[str] = []

    def _enter(self, name: str) -> None:
        self.calls.append(name)
        if name in self.errors:
            raise self.errors[name]

    async def get_user_record(self, user_id: str) -> UserRecord:
        self._enter("get_user_record")
        if user_id not in self.records:
            raise UserRecordNotFoundError(user_id)
        return self.records[user_id]

    async def insert_user_record(self, record: UserRecord) -> UserRecord:
        self._enter("insert_user_record")
        self.records[record.id] = record
        return record

    async def upsert_user_record(self, record: UserRecord) -> UserRecord:
        self._enter("upsert_user_record")
        self.records[record.id] = record
        return record

    async def mark_profile_completed(self, user_id: str) -> None:
        self._enter("mark_profile_completed")
        if user_id not in self.records:
            raise UserRecordNotFoundError(user_id)
        self.records[user_id] = self.records[user_id].model_copy(update={"profile_completed": True})


class FakeProfileStore:
    """In-memory IProfileStore."""

    def __init__(self):
        self.profiles: dict[str, Union[StudentProfile, BusinessProfile]] = {}
        self.errors: dict[str, Exception] = {}
        self.calls: list[str] = []

    async def save_profile(self, user_id: str, profile: Union[StudentProfile, BusinessProfile]) -> None:
        self.calls.append("save_profile")
        if "save_profile" in self.errors:
            raise self.errors["save_profile"]
        self.profiles[user_id] = profile


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Give every test fresh settings, clients and container."""
    monkeypatch.setenv("SUPABASE_JWT_SECRET", TEST_JWT_SECRET)
    get_settings.cache_clear()
    reset_client_cache()
    reset_container()
    yield
    get_settings.cache_clear()
    reset_client_cache()
    reset_container()


@pytest.fixture
def test_user_id() -> str:
    """Provide a consistent test user ID."""
    return "test-user-123"


@pytest.fixture
def test_user_email() -> str:
    """Provide a consistent test user email."""
    return "test@example.com"


@pytest.fixture
def auth_token(test_user_id: str, test_user_email: str) -> str:
    """Create a valid auth token for testing."""
    return create_test_token(user_id=test_user_id, email=test_user_email)


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers with a valid token."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def session_store() -> FakeSessionStore:
    return FakeSessionStore()


@pytest.fixture
def user_store() -> FakeUserStore:
    return FakeUserStore()


@pytest.fixture
def profile_store() -> FakeProfileStore:
    return FakeProfileStore()
