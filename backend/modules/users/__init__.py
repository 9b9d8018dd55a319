"""
Users module.

Owns the application-level user record (role + onboarding completion) and
the role-specific profiles written by onboarding.

Public API:
- IUserRecordStore, IProfileStore: Interfaces for user data access
- UserRecordRepository, ProfileRepository: Supabase implementations
- UserRecord, UserRole: The users row
- StudentProfile, BusinessProfile: Onboarding profiles
- UserRecordNotFoundError, RoleMismatchError: Module exceptions
"""

from .interfaces import IUserRecordStore, IProfileStore
from .models import (
    UserRecord,
    UserRole,
    DegreeLevel,
    StudentProfile,
    BusinessProfile,
)
from .exceptions import UserRecordNotFoundError, RoleMismatchError
from .repository import UserRecordRepository, ProfileRepository

__all__ = [
    # Interfaces
    "IUserRecordStore",
    "IProfileStore",
    # Implementations
    "UserRecordRepository",
    "ProfileRepository",
    # Models
    "UserRecord",
    "UserRole",
    "DegreeLevel",
    "StudentProfile",
    "BusinessProfile",
    # Exceptions
    "UserRecordNotFoundError",
    "RoleMismatchError",
]
