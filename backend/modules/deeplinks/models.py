"""
Deep link data models.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class DeepLinkKind(str, Enum):
    """What an incoming link asks the app to do."""

    AUTH_CALLBACK = "auth_callback"
    PASSWORD_RESET = "password_reset"
    NONE = "none"


class DeepLinkIntent(BaseModel):
    """
    A decoded incoming URL.

    Parsed once, consumed by the next resolution pass, then discarded.
    """

    kind: DeepLinkKind = DeepLinkKind.NONE
    code: Optional[str] = Field(None, description="Auth or recovery code")
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    link_type: Optional[str] = Field(None, description="Value of the 'type' parameter")
    error: Optional[str] = Field(None, description="Error reported by the auth server")
    params: dict[str, str] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @property
    def has_tokens(self) -> bool:
        return bool(self.access_token and self.refresh_token)


NO_INTENT = DeepLinkIntent()
