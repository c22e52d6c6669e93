"""
FastAPI dependencies shared by the routers.
"""

from fastapi import Request

from aadhaar_auth.core.context import AppContext


def get_context(request: Request) -> AppContext:
    """Return the application context built at startup."""
    return request.app.state.context
