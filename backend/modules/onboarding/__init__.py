"""
Onboarding module.

Registration, role selection and onboarding completion.

Public API:
- IOnboardingService: Interface for the onboarding writers
- OnboardingService: Implementation over the session and user stores
"""

from .interfaces import IOnboardingService
from .service import OnboardingService

__all__ = [
    "IOnboardingService",
    "OnboardingService",
]
