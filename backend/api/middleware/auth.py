"""
JWT Authentication middleware.

Validates Supabase JWT tokens and turns them into a Session.
"""

from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from modules.auth.exceptions import (
    ExpiredTokenError,
    InvalidTokenError,
    MissingTokenError,
)
from modules.auth.models import Session
from modules.auth.tokens import validate_access_token

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


class AuthError(HTTPException):
    """Authentication error with consistent format."""
    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


def decode_token(token: str) -> Session:
    """
    Decode and validate a Supabase JWT token.

    Raises:
        AuthError: If token is missing, invalid or expired
    """
    try:
        return validate_access_token(token)
    except (MissingTokenError, ExpiredTokenError, InvalidTokenError) as e:
        raise AuthError(e.message)


async def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Session:
    """
    Dependency that requires authentication.

    Usage:
        @router.post("/onboarding/role")
        async def select_role(session: Session = Depends(get_current_session)):
            ...
    """
    if credentials is None:
        raise AuthError("Missing authorization header")

    return decode_token(credentials.credentials)


async def get_optional_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Session]:
    """
    Dependency that optionally extracts the session.

    An invalid or expired token counts as signed out.
    """
    if credentials is None:
        return None

    try:
        return decode_token(credentials.credentials)
    except AuthError:
        return None


# Type aliases for cleaner route definitions
RequireAuth = Depends(get_current_session)
OptionalAuth = Depends(get_optional_session)
