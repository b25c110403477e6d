"""Platform tools the copilot can invoke."""

from .base import ToolArgumentsError, ToolDef
from .registry import build_registry, get_tool_declarations, requires_approval

__all__ = [
    "ToolDef",
    "ToolArgumentsError",
    "build_registry",
    "get_tool_declarations",
    "requires_approval",
]
