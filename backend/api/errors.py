"""
Module exception to HTTP error mapping.
"""

from fastapi import HTTPException, status

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
    FirstPrincipleError,
    NotFoundError,
    ValidationError,
)

from .models.errors import ErrorResponse

_STATUS_BY_TYPE: list[tuple[type[FirstPrincipleError], int]] = [
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_409_CONFLICT),  # onboarding before role selection
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ExternalServiceError, status.HTTP_503_SERVICE_UNAVAILABLE),
]

# OpenAPI documentation of the mapped statuses, for routes that raise module errors
ERROR_RESPONSES: dict[int | str, dict] = {
    status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse, "description": "Not signed in or email unconfirmed"},
    status.HTTP_403_FORBIDDEN: {"model": ErrorResponse, "description": "Rejected by row-level security"},
    status.HTTP_409_CONFLICT: {"model": ErrorResponse, "description": "No role selected yet"},
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse, "description": "Invalid request for this account"},
    status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse, "description": "Supabase unreachable"},
}


def http_error_for(exc: FirstPrincipleError) -> HTTPException:
    """Build the HTTPException for a module exception."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for exc_type, code in _STATUS_BY_TYPE:
        if isinstance(exc, exc_type):
            status_code = code
            break
    return HTTPException(status_code=status_code, detail=exc.to_dict())
