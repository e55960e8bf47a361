"""
API Interface - FastAPI JSON API over a ranking session.
"""

from .main import app, create_app

__all__ = ["app", "create_app"]
