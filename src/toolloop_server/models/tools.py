"""Pydantic models for the tool catalog endpoint."""

from typing import Any

from pydantic import BaseModel, Field


class ToolListResponse(BaseModel):
    """Response body for GET /api/v1/tools."""

    tools: list[dict[str, Any]] = Field(
        description="Function-calling schemas, in the order they are offered to the model"
    )
    count: int = Field(description="Number of registered tools")
