"""
FirstPrinciple API package.

Provides the FastAPI application serving the web auth callback, navigation
decisions and onboarding writes.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
