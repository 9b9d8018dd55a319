"""
User module data models.

UserRecord is the application-level row that records a user's chosen role
and whether onboarding finished. Profiles hold the role-specific fields
collected by the onboarding screens.
"""

from enum import Enum
from typing import ClassVar, Optional
from pydantic import BaseModel, Field, field_validator


class UserRole(str, Enum):
    """Marketplace side a user belongs to."""

    STUDENT = "student"
    BUSINESS = "business"

    @classmethod
    def parse(cls, value: object) -> Optional["UserRole"]:
        """Return the role for a raw value, or None if it is not a role."""
        try:
            return cls(value)
        except ValueError:
            return None


class DegreeLevel(str, Enum):
    """Degree levels offered in student onboarding."""

    UNDERGRADUATE = "undergraduate"
    MASTERS = "masters"
    DOCTORATE = "doctorate"
    OTHER = "other"


class UserRecord(BaseModel):
    """
    Row of the users table.

    profile_completed is the single source of truth for onboarding
    completion; the presence of profile rows is never consulted.
    """

    id: str = Field(..., description="User ID (UUID from Supabase Auth)")
    email: Optional[str] = Field(None, description="User's email address")
    role: UserRole = Field(..., description="Marketplace role")
    profile_completed: bool = Field(default=False, description="Onboarding finished")

    model_config = {"frozen": True, "extra": "ignore"}


def _require_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


class StudentProfile(BaseModel):
    """Fields collected by student onboarding."""

    role: ClassVar[UserRole] = UserRole.STUDENT

    full_name: str
    phone: Optional[str] = None
    university_name: str
    degree_name: str
    major: str
    degree_level: DegreeLevel = DegreeLevel.UNDERGRADUATE
    bio: Optional[str] = None
    areas_of_interest: list[str] = Field(default_factory=list)
    expertise: list[str] = Field(default_factory=list)
    open_to_paid: bool = True
    open_to_voluntary: bool = True

    @field_validator("full_name", "university_name", "degree_name", "major")
    @classmethod
    def required_text(cls, value: str) -> str:
        return _require_text(value)


class BusinessProfile(BaseModel):
    """Fields collected by business onboarding."""

    role: ClassVar[UserRole] = UserRole.BUSINESS

    owner_name: str
    business_name: str
    industry: str
    business_age_years: Optional[int] = Field(None, ge=0)
    phone: Optional[str] = None
    address: Optional[str] = None
    business_description: Optional[str] = None
    looking_for: list[str] = Field(default_factory=list)

    @field_validator("owner_name", "business_name", "industry")
    @classmethod
    def required_text(cls, value: str) -> str:
        return _require_text(value)
