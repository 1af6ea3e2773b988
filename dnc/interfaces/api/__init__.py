"""HTTP API interface for dnc.

Exports the FastAPI router and app factory.
"""

from dnc.interfaces.api.routes import create_app, router

__all__ = ["router", "create_app"]
