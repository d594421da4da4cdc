"""FastAPI routers for API endpoints.

This package contains all route handlers organized by resource type.
"""

from toolloop_server.routers import ask, health, tools

__all__ = [
    "ask",
    "health",
    "tools",
]
