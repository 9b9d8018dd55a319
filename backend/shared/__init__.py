"""
Shared infrastructure for the FirstPrinciple backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- errors: Classification of raw backend failures
- log_config: Logging setup for entry points

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import (
    get_supabase_client,
    get_supabase_service_client,
    get_supabase_user_client,
    create_request_client,
    reset_client_cache,
)
from .errors import ErrorKind, classify_backend_error
from .exceptions import (
    FirstPrincipleError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
    TransientNetworkError,
    PermissionOrAuthError,
)

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "get_supabase_service_client",
    "get_supabase_user_client",
    "create_request_client",
    "reset_client_cache",
    "ErrorKind",
    "classify_backend_error",
    "FirstPrincipleError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "ExternalServiceError",
    "TransientNetworkError",
    "PermissionOrAuthError",
]
