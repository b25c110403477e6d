"""Client module for LLM provider interactions."""

from .anthropic_client import AnthropicClient
from .base_provider_client import BaseProviderClient
from .errors import LLMClientError, ProviderError, ProviderResponseError, UnsupportedProviderError
from .factory import call_llm, create_client, resolve_provider, summarize_with_llm
from .gemini_client import GeminiClient
from .ollama_client import OllamaClient
from .openai_client import AzureOpenAIClient, CustomOpenAIClient, OpenAIClient, OpenRouterClient
from .types import (
    LLMMessage,
    LLMMessageRole,
    LLMProvider,
    LLMProviderConfig,
    LLMResponse,
    LLMToolCall,
    LLMToolDeclaration,
    LLMToolParameters,
)

__all__ = [
    # Base classes
    "BaseProviderClient",
    # Types
    "LLMMessage",
    "LLMMessageRole",
    "LLMProvider",
    "LLMProviderConfig",
    "LLMResponse",
    "LLMToolCall",
    "LLMToolDeclaration",
    "LLMToolParameters",
    # Errors
    "LLMClientError",
    "ProviderError",
    "ProviderResponseError",
    "UnsupportedProviderError",
    # Unified entry points
    "call_llm",
    "create_client",
    "resolve_provider",
    "summarize_with_llm",
    # Provider implementations
    "AnthropicClient",
    "AzureOpenAIClient",
    "CustomOpenAIClient",
    "GeminiClient",
    "OllamaClient",
    "OpenAIClient",
    "OpenRouterClient",
]
