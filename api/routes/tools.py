"""Tools API routes."""

import logging

from fastapi import APIRouter

from aep import AEPClient, AEPConfig
from tools import build_registry

from ..models.system import ToolInfo, ToolsResponse

logger = logging.getLogger(__name__)

tools_router = APIRouter()


def list_tool_infos() -> list[ToolInfo]:
    # The registry is only inspected, so a placeholder organization is enough
    registry = build_registry(AEPClient(AEPConfig(org_id="tool-listing")))
    return [
        ToolInfo(
            name=tool.name,
            description=tool.description,
            input_schema=tool.get_function_schema(),
            requires_approval=tool.requires_approval,
        )
        for tool in registry.values()
    ]


@tools_router.get("/tools", response_model=ToolsResponse)
async def get_tools() -> ToolsResponse:
    """Get list of available tools."""
    tools = list_tool_infos()
    logger.debug(f"Listing {len(tools)} tools")
    return ToolsResponse(tools=tools, count=len(tools))
