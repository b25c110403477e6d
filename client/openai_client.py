"""OpenAI and OpenAI-compatible chat completion clients.

OpenAI, OpenRouter, Azure OpenAI and custom OpenAI-compatible endpoints share
one wire format; the subclasses only differ in transport setup and in which
sampling parameters they send.
"""

from typing import Any, Optional

import openai
from openai import AsyncAzureOpenAI, AsyncOpenAI
from pydantic import BaseModel, Field

from config import LLM_DEFAULTS

from .base_provider_client import BaseProviderClient
from .errors import ProviderError
from .types import (
    LLMMessage,
    LLMMessageRole,
    LLMProviderConfig,
    LLMResponse,
    LLMToolCall,
    LLMToolDeclaration,
)


class _FunctionCall(BaseModel):
    name: str
    arguments: Optional[Any] = None


class _ToolCall(BaseModel):
    function: _FunctionCall


class _ChoiceMessage(BaseModel):
    content: Optional[str] = None
    tool_calls: Optional[list[_ToolCall]] = None


class _Choice(BaseModel):
    message: _ChoiceMessage


class _ChatCompletion(BaseModel):
    choices: list[_Choice] = Field(min_length=1)


class OpenAIClient(BaseProviderClient):
    """OpenAI client for chat completions with function calling."""

    # OpenRouter and custom endpoints are called without a temperature
    send_temperature = True

    def __init__(self, config: LLMProviderConfig):
        super().__init__(config)
        self._client: Optional[AsyncOpenAI] = None

    @property
    def name(self) -> str:
        return "OpenAI"

    def _base_url(self) -> Optional[str]:
        return None

    def _api_key(self) -> str:
        return self.config.api_key

    async def initialize(self) -> None:
        """Initialize the OpenAI client."""
        # Retries are left to the user, who can simply resend the message
        self._client = AsyncOpenAI(
            api_key=self._api_key(), base_url=self._base_url(), max_retries=0
        )
        self._initialized = True

    def _convert_messages(
        self, messages: list[LLMMessage], system_prompt: Optional[str]
    ) -> list[dict[str, Any]]:
        """Convert our message format to OpenAI's flat message list."""
        openai_messages: list[dict[str, Any]] = []
        if system_prompt:
            openai_messages.append({"role": "system", "content": system_prompt})

        for msg in messages:
            role = "assistant" if msg.role == LLMMessageRole.MODEL else msg.role.value
            openai_messages.append({"role": role, "content": msg.content})

        return openai_messages

    def _convert_tools(self, tools: list[LLMToolDeclaration]) -> list[dict[str, Any]]:
        return [
            {
                "type": "function",
                "function": {
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": tool.schema_dict(),
                },
            }
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
            "messages": self._convert_messages(messages, system_prompt),
            "max_tokens": self.config.max_tokens,
        }
        if self.send_temperature:
            request["temperature"] = self.config.temperature
        if tools:
            request["tools"] = self._convert_tools(tools)
        return request

    async def _send(self, request: dict[str, Any]) -> dict[str, Any]:
        if not self._client:
            raise RuntimeError(f"{self.name} client not initialized")
        try:
            response = await self._client.chat.completions.create(**request)
        except openai.APIStatusError as e:
            raise self._status_error(e.status_code, e.body) from e
        except openai.APIConnectionError as e:
            raise ProviderError(self.name, f"{self.name} error: {e}") from e
        return response.model_dump(mode="json", exclude_none=True)

    def parse_response(self, payload: dict[str, Any]) -> LLMResponse:
        """Parse a chat completion payload into our format."""
        completion = self._validate(_ChatCompletion, payload)
        message = completion.choices[0].message

        if message.tool_calls:
            return LLMResponse(
                tool_calls=[
                    LLMToolCall(
                        name=tc.function.name,
                        args=self._decode_arguments(tc.function.arguments),
                    )
                    for tc in message.tool_calls
                ]
            )

        return LLMResponse(text=message.content or "")

    async def close(self) -> None:
        """Close the client."""
        if self._client:
            await self._client.close()
            self._client = None
        await super().close()


class OpenRouterClient(OpenAIClient):
    """OpenRouter, an OpenAI-compatible model router."""

    send_temperature = False

    @property
    def name(self) -> str:
        return "OpenRouter"

    def _base_url(self) -> Optional[str]:
        return str(LLM_DEFAULTS["openrouter_base_url"])


class CustomOpenAIClient(OpenAIClient):
    """Any self-hosted OpenAI-compatible endpoint (`<base_url>/v1`)."""

    send_temperature = False

    @property
    def name(self) -> str:
        return "Custom"

    def _base_url(self) -> Optional[str]:
        if not self.config.base_url:
            raise ValueError("Custom provider requires a base URL")
        return f"{self.config.base_url.rstrip('/')}/v1"

    def _api_key(self) -> str:
        # The SDK insists on a key; keyless local servers ignore it
        return self.config.api_key or "EMPTY"


class AzureOpenAIClient(OpenAIClient):
    """Azure OpenAI deployment."""

    @property
    def name(self) -> str:
        return "Azure OpenAI"

    async def initialize(self) -> None:
        """Initialize the Azure OpenAI client."""
        if not self.config.base_url or not self.config.azure_deployment:
            raise ValueError("Azure OpenAI requires a base URL and a deployment name")
        self._client = AsyncAzureOpenAI(
            api_key=self.config.api_key,
            azure_endpoint=self.config.base_url,
            azure_deployment=self.config.azure_deployment,
            api_version=LLM_DEFAULTS["azure_api_version"],
            max_retries=0,
        )
        self._initialized = True

    def build_request(
        self,
        messages: list[LLMMessage],
        tools: Optional[list[LLMToolDeclaration]] = None,
        system_prompt: Optional[str] = None,
    ) -> dict[str, Any]:
        request = super().build_request(messages, tools, system_prompt)
        # The deployment selects the model on Azure
        request["model"] = self.config.azure_deployment or self.config.model
        return request
