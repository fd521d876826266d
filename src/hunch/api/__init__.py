"""REST API for Hunch.

Run with: uvicorn hunch.api:app --reload
"""

from .app import app, create_app
from .router import router

__all__ = ["app", "create_app", "router"]
