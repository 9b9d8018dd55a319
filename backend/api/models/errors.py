"""
Error response models.

Module errors leave the API as {"detail": {"error", "message", "details"}}
(see api/errors.py); bearer failures carry a plain string detail.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """A module exception, as built by FirstPrincipleError.to_dict()."""

    error: Optional[str] = Field(None, description="Machine-readable error code")
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx raised by the onboarding and auth dependencies."""

    detail: Union[ErrorDetail, str]
