"""
Classification of raw backend failures.

The Supabase SDK raises a different exception family per sub-client (auth,
PostgREST, transport) and their class names move between releases. Adapters
call classify_backend_error() and raise their own module exceptions from the
resulting ErrorKind, so nothing above the adapters depends on SDK classes.
"""

from enum import Enum
from typing import Any, Optional

import httpx


class ErrorKind(str, Enum):
    """Category of a backend failure."""

    TRANSIENT = "transient"
    INVALID_CODE = "invalid_code"
    NOT_FOUND = "not_found"
    PERMISSION = "permission"


# PostgREST codes
_NOT_FOUND_CODES = {"PGRST116"}
_PERMISSION_CODES = {"42501", "PGRST301", "PGRST302"}

# Auth error codes that mean the link, code or OTP cannot be used again
_INVALID_CODE_CODES = {
    "otp_expired",
    "flow_state_expired",
    "flow_state_not_found",
    "bad_code_verifier",
    "validation_failed",
}
_INVALID_CODE_HINTS = ("expired", "invalid", "code verifier", "already been used")

_TRANSIENT_STATUSES = {408, 425, 429}
_PERMISSION_STATUSES = {401, 403}
_INVALID_CODE_STATUSES = {400, 410, 422}


def _status_of(exc: BaseException) -> Optional[int]:
    """Extract an HTTP status from SDK errors or httpx responses."""
    status: Any = getattr(exc, "status", None)
    if status is None:
        response = getattr(exc, "response", None)
        status = getattr(response, "status_code", None)
    try:
        return int(status) if status is not None else None
    except (TypeError, ValueError):
        return None


def classify_backend_error(exc: BaseException) -> ErrorKind:
    """
    Map an exception raised by the backend SDK onto an ErrorKind.

    Unknown failures are classified as transient so callers stay put
    instead of acting destructively.

    Args:
        exc: Exception raised by a Supabase client call

    Returns:
        The ErrorKind for the failure
    """
    if isinstance(exc, (httpx.TransportError, TimeoutError, ConnectionError)):
        return ErrorKind.TRANSIENT

    code = str(getattr(exc, "code", "") or "")
    if code in _NOT_FOUND_CODES:
        return ErrorKind.NOT_FOUND
    if code in _PERMISSION_CODES:
        return ErrorKind.PERMISSION
    if code in _INVALID_CODE_CODES:
        return ErrorKind.INVALID_CODE

    status = _status_of(exc)
    if status is not None:
        if status in _TRANSIENT_STATUSES or status >= 500:
            return ErrorKind.TRANSIENT
        if status in _PERMISSION_STATUSES:
            return ErrorKind.PERMISSION
        if status == 404:
            return ErrorKind.NOT_FOUND
        if status in _INVALID_CODE_STATUSES:
            return ErrorKind.INVALID_CODE

    message = str(getattr(exc, "message", None) or exc).lower()
    if any(hint in message for hint in _INVALID_CODE_HINTS):
        return ErrorKind.INVALID_CODE

    return ErrorKind.TRANSIENT
