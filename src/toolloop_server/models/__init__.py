"""Pydantic models for API request and response schemas.

This package contains all Pydantic models used for validating and
serializing API requests and responses across all endpoints.
"""

from toolloop_server.models.ask import (
    AskRequest,
    AskResponse,
    ToolExecutionInfo,
)
from toolloop_server.models.health import HealthResponse
from toolloop_server.models.tools import ToolListResponse

__all__ = [
    "AskRequest",
    "AskResponse",
    "HealthResponse",
    "ToolExecutionInfo",
    "ToolListResponse",
]
