"""Chat-related API models."""

from typing import Optional

from pydantic import Field

from aep import AEPConfig
from client.types import LLMMessage, LLMProviderConfig
from common.types import ApprovedAction, CamelModel
from config import AGENT_CONFIG


class ChatRequest(CamelModel):
    """One copilot turn as sent by the frontend."""

    message: str = Field(description="The user's newest message")
    aep_config: AEPConfig = Field(description="Platform credentials for this turn")
    llm_config: LLMProviderConfig = Field(description="LLM provider selection and credentials")
    history: list[LLMMessage] = Field(
        default_factory=list, description="Earlier turns, oldest first"
    )
    auto_mode: bool = Field(
        default=AGENT_CONFIG["auto_mode"], description="Run mutating tools without approval"
    )
    approved_action: Optional[ApprovedAction] = Field(
        default=None, description="A pending action the user approved"
    )


class SummarizeRequest(CamelModel):
    """Ask the model to summarize arbitrary platform data."""

    llm_config: LLMProviderConfig
    text: str


class SummarizeResponse(CamelModel):
    summary: str
