"""System API routes."""

from fastapi import APIRouter

from client.types import LLMProvider
from config import AGENT_CONFIG, SERVICE_NAME, SERVICE_VERSION

from ..models.system import SystemInfo
from .tools import list_tool_infos

system_router = APIRouter()


@system_router.get("/system/info", response_model=SystemInfo)
async def get_system_info() -> SystemInfo:
    """Get system information."""
    return SystemInfo(
        service=SERVICE_NAME,
        version=SERVICE_VERSION,
        providers=[provider.value for provider in LLMProvider],
        tool_count=len(list_tool_infos()),
        auto_mode=AGENT_CONFIG["auto_mode"],
    )
