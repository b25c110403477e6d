"""API models for the copilot FastAPI server."""

from .chat import ChatRequest, SummarizeRequest, SummarizeResponse
from .common import ErrorResponse
from .system import SystemInfo, ToolInfo, ToolsResponse

__all__ = [
    "ChatRequest",
    "SummarizeRequest",
    "SummarizeResponse",
    "ErrorResponse",
    "SystemInfo",
    "ToolInfo",
    "ToolsResponse",
]
