"""Tool catalog endpoint router."""

from fastapi import APIRouter, Depends

from toolloop_server.dependencies import get_tool_registry
from toolloop_server.models.tools import ToolListResponse
from toolloop_server.tools import ToolRegistry

router = APIRouter(prefix="/api/v1/tools", tags=["tools"])


@router.get("", response_model=ToolListResponse)
async def list_tools(
    registry: ToolRegistry = Depends(get_tool_registry),
) -> ToolListResponse:
    """List the tools offered to the model, as function-calling schemas."""
    return ToolListResponse(tools=registry.schemas(), count=len(registry))
