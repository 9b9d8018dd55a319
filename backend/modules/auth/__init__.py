"""
Authentication module.

Wraps the backend's session operations, validates access tokens and runs
the password recovery flow.

Public API:
- ISessionStore: Interface for session operations
- SupabaseSessionStore: ISessionStore over the Supabase auth client
- PasswordRecoveryService: Forgot/reset password flow
- Session, SessionEvent: Session model and change events
- validate_access_token: JWT -> Session
- Auth exceptions: InvalidOrExpiredCodeError, EmailNotConfirmedError, etc.
"""

from .interfaces import ISessionStore, SessionListener
from .models import JWTPayload, Session, SessionEvent
from .service import SupabaseSessionStore
from .recovery import PasswordRecoveryService
from .tokens import validate_access_token
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    NotAuthenticatedError,
    EmailNotConfirmedError,
    InvalidCredentialsError,
    InvalidOrExpiredCodeError,
    WeakPasswordError,
)

__all__ = [
    # Interface
    "ISessionStore",
    "SessionListener",
    # Implementations
    "SupabaseSessionStore",
    "PasswordRecoveryService",
    "validate_access_token",
    # Models
    "JWTPayload",
    "Session",
    "SessionEvent",
    # Exceptions
    "InvalidTokenError",
    "ExpiredTokenError",
    "MissingTokenError",
    "NotAuthenticatedError",
    "EmailNotConfirmedError",
    "InvalidCredentialsError",
    "InvalidOrExpiredCodeError",
    "WeakPasswordError",
]
