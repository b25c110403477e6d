"""Anthropic Claude messages client."""

from typing import Annotated, Any, Literal, Optional, Union

import anthropic
from anthropic import AsyncAnthropic
from pydantic import BaseModel, Discriminator, Field, Tag

from .base_provider_client import BaseProviderClient
from .errors import ProviderError
from .types import (
    LLMMessage,
    LLMProviderConfig,
    LLMResponse,
    LLMToolCall,
    LLMToolDeclaration,
)


class _TextBlock(BaseModel):
    type: Literal["text"]
    text: str = ""


class _ToolUseBlock(BaseModel):
    type: Literal["tool_use"]
    name: str
    input: Optional[Any] = None


class _OtherBlock(BaseModel):
    type: str


def _block_kind(block: Any) -> str:
    kind = block.get("type") if isinstance(block, dict) else getattr(block, "type", None)
    return kind if kind in ("text", "tool_use") else "other"


# Dispatch on `type` so a malformed text or tool_use block fails validation
_ContentBlock = Annotated[
    Union[
        Annotated[_TextBlock, Tag("text")],
        Annotated[_ToolUseBlock, Tag("tool_use")],
        Annotated[_OtherBlock, Tag("other")],
    ],
    Discriminator(_block_kind),
]


class _MessagesResponse(BaseModel):
    content: list[_ContentBlock] = Field(default_factory=list)


class AnthropicClient(BaseProviderClient):
    """Anthropic Claude client for message generation."""

    def __init__(self, config: LLMProviderConfig):
        super().__init__(config)
        self._client: Optional[AsyncAnthropic] = None

    @property
    def name(self) -> str:
        return "Anthropic"

    async def initialize(self) -> None:
        """Initialize the Anthropic client."""
        self._client = AsyncAnthropic(api_key=self.config.api_key, max_retries=0)
        self._initialized = True

    def _convert_messages(self, messages: list[LLMMessage]) -> list[dict[str, Any]]:
        """Convert our message format to Anthropic's.

        The system prompt travels as a top-level field, so any system turns in
        the history are replayed as user turns.
        """
        anthropic_messages = []
        for msg in messages:
            if msg.is_assistant:
                role = "assistant"
            else:
                role = "user"
            anthropic_messages.append({"role": role, "content": msg.content})
        return anthropic_messages

    def _convert_tools(self, tools: list[LLMToolDeclaration]) -> list[dict[str, Any]]:
        """Convert tool declarations to Anthropic format."""
        return [
            {"name": tool.name, "description": tool.description, "input_schema": tool.schema_dict()}
            for tool in tools
        ]

    def build_request(
        self,
        messages: list[LLMMessage],
        tools: Optional[list[LLMToolDeclaration]] = None,
        system_prompt: Optional[str] = None,
    ) -> dict[str, Any]:
        request: dict[str, Any] = {
            "model": self.config.model,
            "max_tokens": self.config.max_tokens,
            "messages": self._convert_messages(messages),
        }
        if system_prompt:
            request["system"] = system_prompt
        if tools:
            request["tools"] = self._convert_tools(tools)
        return request

    async def _send(self, request: dict[str, Any]) -> dict[str, Any]:
        if not self._client:
            raise RuntimeError("Anthropic client not initialized")
        try:
            response = await self._client.messages.create(**request)
        except anthropic.APIStatusError as e:
            raise self._status_error(e.status_code, e.body) from e
        except anthropic.APIConnectionError as e:
            raise ProviderError(self.name, f"{self.name} error: {e}") from e
        return response.model_dump(mode="json", exclude_none=True)

    def parse_response(self, payload: dict[str, Any]) -> LLMResponse:
        """Parse an Anthropic message into our format.

        Only the first tool_use block is reported; otherwise the first text
        block is the answer.
        """
        response = self._validate(_MessagesResponse, payload)

        for block in response.content:
            if isinstance(block, _ToolUseBlock):
                return LLMResponse(
                    tool_calls=[LLMToolCall(name=block.name, args=self._decode_arguments(block.input))]
                )

        for block in response.content:
            if isinstance(block, _TextBlock):
                return LLMResponse(text=block.text)

        return LLMResponse(text="")

    async def close(self) -> None:
        """Close the client."""
        if self._client:
            await self._client.close()
            self._client = None
        await super().close()

