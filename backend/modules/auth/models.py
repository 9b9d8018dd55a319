"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field

from modules.users.models import UserRole


class SessionEvent(str, Enum):
    """Auth state change events emitted by the backend."""

    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"
    PASSWORD_RECOVERY = "PASSWORD_RECOVERY"
    MFA_CHALLENGE_VERIFIED = "MFA_CHALLENGE_VERIFIED"

    @classmethod
    def parse(cls, value: object) -> Optional["SessionEvent"]:
        try:
            return cls(str(value))
        except ValueError:
            return None


class JWTPayload(BaseModel):
    """
    Decoded JWT token payload from Supabase.

    This matches the structure of Supabase Auth JWTs.
    """

    sub: str = Field(..., description="Subject (user ID)")
    email: Optional[str] = Field(None, description="User's email")
    email_confirmed_at: Optional[str] = Field(None, description="Email confirmation time")
    exp: int = Field(..., description="Expiration timestamp")
    iat: int = Field(..., description="Issued at timestamp")
    aud: str = Field(default="authenticated", description="Audience")
    role: str = Field(default="authenticated", description="Postgres role")

    # Supabase-specific claims
    app_metadata: dict = Field(default_factory=dict)
    user_metadata: dict = Field(default_factory=dict)

    model_config = {"extra": "ignore"}

    @property
    def email_confirmed(self) -> bool:
        """Whether the claims prove a confirmed email."""
        if self.email_confirmed_at:
            return True
        return bool(self.user_metadata.get("email_verified"))


class Session(BaseModel):
    """
    The authenticated-identity token bundle for one signed-in account.

    An absent session is represented by None, never by an empty Session.
    """

    user_id: str = Field(..., description="User ID (UUID from Supabase)")
    email: Optional[str] = Field(None, description="User's email address")
    email_confirmed_at: Optional[datetime] = Field(None, description="Email confirmation time")
    access_token: str = Field(default="", description="JWT access token")
    refresh_token: str = Field(default="", description="Refresh token")
    expires_at: Optional[int] = Field(None, description="Access token expiry (epoch seconds)")
    user_metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}  # Make immutable for safety

    @property
    def email_confirmed(self) -> bool:
        return self.email_confirmed_at is not None

    @property
    def role_hint(self) -> Optional[UserRole]:
        """Role chosen at sign-up, carried in user metadata."""
        return UserRole.parse(self.user_metadata.get("role"))

    @classmethod
    def from_supabase(cls, session: Any) -> Optional["Session"]:
        """
        Build a Session from the Supabase SDK session object.

        Args:
            session: supabase auth Session (or None)

        Returns:
            Session, or None when the SDK reports no session
        """
        if session is None or getattr(session, "user", None) is None:
            return None
        user = session.user
        return cls(
            user_id=str(user.id),
            email=getattr(user, "email", None),
            email_confirmed_at=getattr(user, "email_confirmed_at", None),
            access_token=getattr(session, "access_token", "") or "",
            refresh_token=getattr(session, "refresh_token", "") or "",
            expires_at=getattr(session, "expires_at", None),
            user_metadata=dict(getattr(user, "user_metadata", None) or {}),
        )

    @classmethod
    def from_claims(cls, token: str, payload: JWTPayload) -> "Session":
        """Build a Session from a verified access token and its claims."""
        confirmed_at: Optional[datetime] = None
        if payload.email_confirmed:
            if payload.email_confirmed_at:
                confirmed_at = datetime.fromisoformat(
                    payload.email_confirmed_at.replace("Z", "+00:00")
                )
            else:
                confirmed_at = datetime.fromtimestamp(payload.iat, tz=timezone.utc)
        return cls(
            user_id=payload.sub,
            email=payload.email,
            email_confirmed_at=confirmed_at,
            access_token=token,
            expires_at=payload.exp,
            user_metadata=payload.user_metadata,
        )
