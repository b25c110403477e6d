"""Type definitions for the LLM client module.

These are the provider-neutral shapes exchanged between the copilot agent and
the provider clients. Provider-specific wire formats never leave the
individual client modules.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from config import LLM_DEFAULTS


class LLMMessageRole(str, Enum):
    """Message roles in an LLM conversation.

    MODEL is the Gemini spelling of ASSISTANT and is accepted from callers.
    """

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    MODEL = "model"


class LLMProvider(str, Enum):
    """Supported LLM backends."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    AZURE_OPENAI = "azure-openai"
    OLLAMA = "ollama"
    OPENROUTER = "openrouter"
    CUSTOM = "custom"


class LLMMessage(BaseModel):
    """One turn of dialogue."""

    role: LLMMessageRole
    content: str = ""

    @property
    def is_assistant(self) -> bool:
        return self.role in (LLMMessageRole.ASSISTANT, LLMMessageRole.MODEL)


class LLMToolParameters(BaseModel):
    """JSON schema object describing a tool's arguments."""

    type: str = "object"
    properties: dict[str, Any] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)


class LLMToolDeclaration(BaseModel):
    """Tool schema advertised to the model."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    parameters: LLMToolParameters = Field(default_factory=LLMToolParameters)

    def schema_dict(self) -> dict[str, Any]:
        """JSON schema as sent on the wire (empty `required` omitted)."""
        schema: dict[str, Any] = {
            "type": self.parameters.type,
            "properties": self.parameters.properties,
        }
        if self.parameters.required:
            schema["required"] = list(self.parameters.required)
        return schema


class LLMToolCall(BaseModel):
    """A model's request to invoke a tool."""

    name: str
    args: dict[str, Any] = Field(default_factory=dict)


class LLMResponse(BaseModel):
    """Normalized provider response: either text or tool calls, never both."""

    text: Optional[str] = None
    tool_calls: Optional[list[LLMToolCall]] = None

    @property
    def first_tool_call(self) -> Optional[LLMToolCall]:
        return self.tool_calls[0] if self.tool_calls else None


class LLMProviderConfig(BaseModel):
    """Provider selection and credentials supplied by the caller.

    `provider` is kept as a plain string so that an unknown identifier reaches
    dispatch and fails there with UnsupportedProviderError.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    provider: str
    api_key: str = ""
    model: str = ""
    base_url: Optional[str] = None
    azure_deployment: Optional[str] = None
    temperature: float = LLM_DEFAULTS["temperature"]
    max_tokens: int = LLM_DEFAULTS["max_tokens"]
