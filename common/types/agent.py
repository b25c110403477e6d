"""Agent-facing types shared by the copilot agent and the HTTP API."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serialized with camelCase keys; accepts either spelling on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PendingAction(CamelModel):
    """A mutating tool call waiting for the user's approval."""

    tool_name: str = Field(..., description="Tool the model selected")
    tool_arguments: dict[str, Any] = Field(default_factory=dict)
    description: str = Field("", description="Preview shown to the user")


class ApprovedAction(CamelModel):
    """A previously pending action the user approved, sent back for execution."""

    tool_name: str
    tool_arguments: dict[str, Any] = Field(default_factory=dict)


class AgentResponse(CamelModel):
    """Result of one copilot turn."""

    content: str = Field(..., description="Text shown to the user")
    tools_used: list[str] = Field(default_factory=list)
    # Raw tool result before redaction; for the caller's UI only
    data: Optional[Any] = None
    requires_approval: Optional[bool] = None
    pending_action: Optional[PendingAction] = None
