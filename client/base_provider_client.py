"""Base provider client interface for LLM providers."""

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from client.errors import ProviderError, ProviderResponseError
from client.types import LLMMessage, LLMProviderConfig, LLMResponse, LLMToolDeclaration

logger = logging.getLogger(__name__)

WireModel = TypeVar("WireModel", bound=BaseModel)


class BaseProviderClient(ABC):
    """Abstract base class for LLM provider clients.

    A call is split into three steps so that the wire translation stays
    symmetric and testable without a network:

    1. build_request(): provider-neutral messages -> provider request body
    2. _send(): exactly one round trip through the provider transport
    3. parse_response(): provider payload -> LLMResponse
    """

    # Text-only backends never receive tool declarations
    supports_tools: bool = True

    def __init__(self, config: LLMProviderConfig):
        """Initialize the provider client.

        Args:
            config: Provider selection, credentials and sampling settings
        """
        self.config = config
        self._initialized = False

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider client name, used in error messages."""
        pass

    @abstractmethod
    async def initialize(self) -> None:
        """Create the underlying transport."""
        pass

    @abstractmethod
    def build_request(
        self,
        messages: list[LLMMessage],
        tools: Optional[list[LLMToolDeclaration]] = None,
        system_prompt: Optional[str] = None,
    ) -> dict[str, Any]:
        """Translate messages and tool declarations into the provider request."""
        pass

    @abstractmethod
    async def _send(self, request: dict[str, Any]) -> dict[str, Any]:
        """Issue one request and return the decoded JSON payload.

        Raises:
            ProviderError: On a non-2xx status or a transport failure
        """
        pass

    @abstractmethod
    def parse_response(self, payload: dict[str, Any]) -> LLMResponse:
        """Normalize a provider payload into text or tool calls.

        Raises:
            ProviderResponseError: If the payload does not have the expected shape
        """
        pass

    async def close(self) -> None:
        """Close any open connections."""
        self._initialized = False

    async def call(
        self,
        messages: list[LLMMessage],
        tools: Optional[list[LLMToolDeclaration]] = None,
        system_prompt: Optional[str] = None,
    ) -> LLMResponse:
        """Run one request/response exchange with the provider."""
        if not self._initialized:
            await self.initialize()

        request = self.build_request(
            messages, tools if self.supports_tools else None, system_prompt
        )
        logger.debug(
            f"{self.name}: sending {len(messages)} messages, "
            f"{len(tools or []) if self.supports_tools else 0} tools"
        )
        payload = await self._send(request)
        return self.parse_response(payload)

    # Shared helpers

    def _validate(self, model: type[WireModel], payload: Any) -> WireModel:
        """Validate a payload against a wire model."""
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise ProviderResponseError(self.name, str(e)) from e

    def _decode_arguments(self, raw: Any) -> dict[str, Any]:
        """Decode tool-call arguments that may arrive as JSON text."""
        if raw is None or raw == "":
            return {}
        if isinstance(raw, Mapping):
            return dict(raw)
        if isinstance(raw, str):
            try:
                decoded = json.loads(raw)
            except json.JSONDecodeError as e:
                raise ProviderResponseError(self.name, f"invalid tool arguments: {e}") from e
            if decoded is None:
                return {}
            if not isinstance(decoded, dict):
                raise ProviderResponseError(self.name, "tool arguments are not a JSON object")
            return decoded
        raise ProviderResponseError(self.name, f"unsupported tool arguments type {type(raw).__name__}")

    def _status_error(self, status_code: Optional[int], body: Any) -> ProviderError:
        """Build a ProviderError, preferring the provider's own message."""
        message = extract_error_message(body) or f"{self.name} error: {status_code}"
        return ProviderError(self.name, message, status_code=status_code)


def extract_error_message(body: Any) -> Optional[str]:
    """Find the provider's error message in a decoded error body.

    Handles `{"error": {"message": ...}}`, `{"error": "..."}` and
    `{"message": ...}` shapes.
    """
    if not isinstance(body, Mapping):
        return None
    error = body.get("error")
    if isinstance(error, Mapping) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str) and error:
        return error
    if body.get("message"):
        return str(body["message"])
    return None
