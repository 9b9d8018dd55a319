"""
Access token validation.

Validates Supabase JWTs presented to the web API and turns them into a
Session, so server-side resolution sees the same input as the apps do.
"""

import jwt

from shared.config import get_settings

from .models import JWTPayload, Session
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
)


def validate_access_token(token: str) -> Session:
    """
    Validate a JWT token and return the session it represents.

    Args:
        token: JWT access token from Supabase Auth

    Returns:
        Session built from the token's claims

    Raises:
        MissingTokenError: If no token was given
        ExpiredTokenError: If the token has expired
        InvalidTokenError: If the token is malformed or signed with another key
    """
    if not token:
        raise MissingTokenError()

    settings = get_settings()
    if not settings.supabase_jwt_secret:
        raise InvalidTokenError("Server authentication not configured")

    try:
        # Decode and validate the JWT
        payload = jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=["HS256"],
            audience="authenticated",
        )
    except jwt.ExpiredSignatureError:
        raise ExpiredTokenError()
    except jwt.InvalidTokenError as e:
        raise InvalidTokenError(str(e))

    return Session.from_claims(token, JWTPayload(**payload))
