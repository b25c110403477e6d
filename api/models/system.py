"""System-related API models."""

from typing import Any

from common.types import CamelModel


class ToolInfo(CamelModel):
    """Information about an available tool."""

    name: str
    description: str
    input_schema: dict[str, Any]
    requires_approval: bool = False


class ToolsResponse(CamelModel):
    """Tools listing response."""

    tools: list[ToolInfo]
    count: int


class SystemInfo(CamelModel):
    """System information response."""

    service: str
    version: str
    providers: list[str]
    tool_count: int
    auto_mode: bool
