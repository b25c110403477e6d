"""Provider dispatch and the unified LLM call."""

import logging
from typing import Optional

from opentelemetry import trace

from .anthropic_client import AnthropicClient
from .base_provider_client import BaseProviderClient
from .errors import UnsupportedProviderError
from .gemini_client import GeminiClient
from .ollama_client import OllamaClient
from .openai_client import AzureOpenAIClient, CustomOpenAIClient, OpenAIClient, OpenRouterClient
from .types import (
    LLMMessage,
    LLMMessageRole,
    LLMProvider,
    LLMProviderConfig,
    LLMResponse,
    LLMToolDeclaration,
)

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

SUMMARIZER_PROMPT = "You are a helpful assistant that summarizes AEP platform data."


def resolve_provider(provider: str) -> LLMProvider:
    """Map a provider identifier onto the closed set of supported backends.

    Raises:
        UnsupportedProviderError: If the identifier is not supported
    """
    try:
        return LLMProvider(provider.strip().lower())
    except ValueError:
        raise UnsupportedProviderError(provider) from None


def create_client(config: LLMProviderConfig) -> BaseProviderClient:
    """Create the provider client for a configuration.

    No network activity happens here; transports are created lazily on the
    first call.

    Raises:
        UnsupportedProviderError: If the provider is not supported
    """
    provider = resolve_provider(config.provider)
    logger.debug(f"Creating {provider.value} client for model {config.model!r}")

    if provider == LLMProvider.OPENAI:
        return OpenAIClient(config)
    elif provider == LLMProvider.ANTHROPIC:
        return AnthropicClient(config)
    elif provider == LLMProvider.GEMINI:
        return GeminiClient(config)
    elif provider == LLMProvider.AZURE_OPENAI:
        return AzureOpenAIClient(config)
    elif provider == LLMProvider.OLLAMA:
        return OllamaClient(config)
    elif provider == LLMProvider.OPENROUTER:
        return OpenRouterClient(config)
    elif provider == LLMProvider.CUSTOM:
        return CustomOpenAIClient(config)
    else:
        raise UnsupportedProviderError(config.provider)


async def call_llm(
    config: LLMProviderConfig,
    messages: list[LLMMessage],
    tools: Optional[list[LLMToolDeclaration]] = None,
    system_prompt: Optional[str] = None,
) -> LLMResponse:
    """Send one request to the configured provider and normalize the answer."""
    client = create_client(config)

    with tracer.start_as_current_span("llm.call") as span:
        span.set_attribute("llm.provider", config.provider)
        span.set_attribute("llm.model", config.model)
        span.set_attribute("llm.tool_count", len(tools or []))
        try:
            response = await client.call(messages, tools=tools, system_prompt=system_prompt)
        finally:
            await client.close()
        span.set_attribute("llm.tool_call", bool(response.tool_calls))

    return response


async def summarize_with_llm(config: LLMProviderConfig, text: str) -> str:
    """Ask the model for a concise summary of arbitrary text."""
    response = await call_llm(
        config,
        [
            LLMMessage(
                role=LLMMessageRole.USER,
                content=f"Summarize the following data concisely:\n\n{text}",
            )
        ],
        system_prompt=SUMMARIZER_PROMPT,
    )
    return response.text or text
