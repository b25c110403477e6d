"""Ollama client for locally hosted models.

Ollama is used as a plain chat backend: tool declarations are never sent and
tool calls are never read back.
"""

from typing import Any, Optional

import httpx
from pydantic import BaseModel, Field

from config import HTTP_TIMEOUT_SECONDS, LLM_DEFAULTS

from .base_provider_client import BaseProviderClient
from .errors import ProviderError, ProviderResponseError
from .types import (
    LLMMessage,
    LLMMessageRole,
    LLMProviderConfig,
    LLMResponse,
    LLMToolDeclaration,
)


class _ChatMessage(BaseModel):
    content: Optional[str] = None


class _ChatResponse(BaseModel):
    message: _ChatMessage = Field(default_factory=_ChatMessage)


class OllamaClient(BaseProviderClient):
    """Text-only client for the Ollama `/api/chat` endpoint."""

    supports_tools = False

    def __init__(self, config: LLMProviderConfig, http_client: Optional[httpx.AsyncClient] = None):
        super().__init__(config)
        self._client = http_client
        self._owns_client = http_client is None

    @property
    def name(self) -> str:
        return "Ollama"

    @property
    def chat_url(self) -> str:
        base_url = self.config.base_url or LLM_DEFAULTS["ollama_base_url"]
        return f"{base_url.rstrip('/')}/api/chat"

    async def initialize(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS)
        self._initialized = True

    def build_request(
        self,
        messages: list[LLMMessage],
        tools: Optional[list[LLMToolDeclaration]] = None,
        system_prompt: Optional[str] = None,
    ) -> dict[str, Any]:
        ollama_messages: list[dict[str, Any]] = []
        if system_prompt:
            ollama_messages.append({"role": "system", "content": system_prompt})
        for msg in messages:
            role = "assistant" if msg.role == LLMMessageRole.MODEL else msg.role.value
            ollama_messages.append({"role": role, "content": msg.content})

        return {
            "model": self.config.model,
            "messages": ollama_messages,
            "stream": False,
            "options": {"temperature": self.config.temperature},
        }

    async def _send(self, request: dict[str, Any]) -> dict[str, Any]:
        if not self._client:
            raise RuntimeError("Ollama client not initialized")
        try:
            response = await self._client.post(self.chat_url, json=request)
        except httpx.TransportError as e:
            raise ProviderError(self.name, f"{self.name} error: {e}") from e

        # Ollama errors are reported by status code only
        if response.is_error:
            raise ProviderError(
                self.name, f"{self.name} error: {response.status_code}", response.status_code
            )
        try:
            payload = response.json()
        except ValueError as e:
            raise ProviderResponseError(self.name, "body is not valid JSON") from e
        return payload  # type: ignore[no-any-return]

    def parse_response(self, payload: dict[str, Any]) -> LLMResponse:
        response = self._validate(_ChatResponse, payload)
        return LLMResponse(text=response.message.content or "")

    async def close(self) -> None:
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None
        await super().close()
