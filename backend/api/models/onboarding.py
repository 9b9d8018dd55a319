"""
Onboarding API models.
"""

from typing import Optional
from pydantic import BaseModel

from modules.navigation.models import ResolutionState
from modules.users.models import UserRole


class SelectRoleRequest(BaseModel):
    """Role chosen on the select-role screen."""

    role: UserRole


class OnboardingResponse(BaseModel):
    """Result of an onboarding write and where to go next."""

    role: UserRole
    profile_completed: bool
    state: Optional[ResolutionState] = None
    redirect_to: Optional[str] = None
