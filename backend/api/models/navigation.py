"""
Navigation API models.
"""

from typing import Literal, Optional
from pydantic import BaseModel, Field

from modules.navigation.models import ResolutionState


class ResolveRequest(BaseModel):
    """Request to resolve where the current page should send the user."""

    path: str = Field(..., description="Current path, optionally with a query string")
    platform: Literal["web", "mobile"] = Field(default="web", description="Route table to use")


class ResolveResponse(BaseModel):
    """Resolution decision for a page load."""

    state: ResolutionState
    redirect_to: Optional[str] = Field(None, description="Path to redirect to, None to stay")
    sign_out: bool = Field(default=False, description="Client must drop its session")
