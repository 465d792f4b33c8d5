"""
bbtap API package.

Provides the FastAPI application for the bbtap digital business card service.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
