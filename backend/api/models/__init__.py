"""API models package."""

from .errors import ErrorDetail, ErrorResponse
from .navigation import ResolveRequest, ResolveResponse
from .onboarding import SelectRoleRequest, OnboardingResponse

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "ResolveRequest",
    "ResolveResponse",
    "SelectRoleRequest",
    "OnboardingResponse",
]
