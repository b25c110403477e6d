"""Gemini client implementation using the Google GenAI SDK."""

import logging
from typing import Any, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai.types import HttpOptions
from pydantic import AliasChoices, BaseModel, Field

from config import LLM_DEFAULTS

from .base_provider_client import BaseProviderClient
from .errors import ProviderError
from .types import (
    LLMMessage,
    LLMProviderConfig,
    LLMResponse,
    LLMToolCall,
    LLMToolDeclaration,
)

logger = logging.getLogger(__name__)


class _FunctionCall(BaseModel):
    name: str
    args: Optional[Any] = None


class _Part(BaseModel):
    text: Optional[str] = None
    function_call: Optional[_FunctionCall] = Field(
        default=None, validation_alias=AliasChoices("function_call", "functionCall")
    )


class _Content(BaseModel):
    parts: list[_Part] = Field(default_factory=list)


class _Candidate(BaseModel):
    content: _Content = Field(default_factory=_Content)


class _GenerateContentResponse(BaseModel):
    candidates: list[_Candidate] = Field(min_length=1)


class GeminiClient(BaseProviderClient):
    """Gemini client for content generation with function declarations."""

    def __init__(self, config: LLMProviderConfig):
        super().__init__(config)
        self.client: Optional[genai.Client] = None

    @property
    def name(self) -> str:
        return "Gemini"

    async def initialize(self) -> None:
        """Initialize the Gemini client."""
        if self._initialized:
            return

        # Use v1beta for tools/function calling support
        self.client = genai.Client(
            api_key=self.config.api_key,
            http_options=HttpOptions(api_version=LLM_DEFAULTS["gemini_api_version"]),
        )
        self._initialized = True
        logger.info(f"Initialized Gemini client with model: {self.config.model}")

    def _convert_messages(self, messages: list[LLMMessage]) -> list[dict[str, Any]]:
        """Convert our messages to Gemini contents.

        Gemini only knows `user` and `model`; everything that is not an
        assistant turn is sent as `user`.
        """
        return [
            {"role": "model" if msg.is_assistant else "user", "parts": [{"text": msg.content}]}
            for msg in messages
        ]

    def _convert_tools(self, tools: list[LLMToolDeclaration]) -> list[dict[str, Any]]:
        """Wrap tool declarations in a single Gemini tool entry."""
        return [
            {
                "function_declarations": [
                    {
                        "name": tool.name,
                        "description": tool.description,
                        "parameters_json_schema": tool.schema_dict(),
                    }
                    for tool in tools
                ]
            }
        ]

    def build_request(
        self,
        messages: list[LLMMessage],
        tools: Optional[list[LLMToolDeclaration]] = None,
        system_prompt: Optional[str] = None,
    ) -> dict[str, Any]:
        config: dict[str, Any] = {
            "temperature": self.config.temperature,
            "max_output_tokens": self.config.max_tokens,
        }
        if system_prompt:
            config["system_instruction"] = system_prompt
        if tools:
            config["tools"] = self._convert_tools(tools)

        return {
            "model": self.config.model,
            "contents": self._convert_messages(messages),
            "config": config,
        }

    async def _send(self, request: dict[str, Any]) -> dict[str, Any]:
        if not self.client:
            raise RuntimeError("Gemini client not initialized")
        try:
            response = await self.client.aio.models.generate_content(**request)
        except genai_errors.APIError as e:
            message = e.message or f"{self.name} error: {e.code}"
            raise ProviderError(self.name, message, status_code=e.code) from e
        except httpx.TransportError as e:
            raise ProviderError(self.name, f"{self.name} error: {e}") from e
        return response.model_dump(mode="json", exclude_none=True)

    def parse_response(self, payload: dict[str, Any]) -> LLMResponse:
        """Parse a generateContent payload from the first candidate."""
        response = self._validate(_GenerateContentResponse, payload)
        parts = response.candidates[0].content.parts

        for part in parts:
            if part.function_call:
                return LLMResponse(
                    tool_calls=[
                        LLMToolCall(
                            name=part.function_call.name,
                            args=self._decode_arguments(part.function_call.args),
                        )
                    ]
                )

        return LLMResponse(text="".join(part.text or "" for part in parts))

    async def close(self) -> None:
        """Close the client - no cleanup needed for Gemini."""
        self.client = None
        await super().close()
