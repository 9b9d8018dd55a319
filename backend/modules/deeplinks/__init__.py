"""
Deep links module.

Public API:
- decode: URL -> DeepLinkIntent
- intent_from_params: path + parameters -> DeepLinkIntent
- DeepLinkIntent, DeepLinkKind: Decoded link models
"""

from .decoder import decode, intent_from_params
from .models import DeepLinkIntent, DeepLinkKind, NO_INTENT

__all__ = [
    "decode",
    "intent_from_params",
    "DeepLinkIntent",
    "DeepLinkKind",
    "NO_INTENT",
]
