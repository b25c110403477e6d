"""Exceptions raised by the LLM client layer."""

from typing import Optional


class LLMClientError(Exception):
    """Base class for LLM client failures."""


class UnsupportedProviderError(LLMClientError):
    """Raised when a provider identifier has no adapter."""

    def __init__(self, provider: str):
        super().__init__(f"Unsupported provider: {provider}")
        self.provider = provider


class ProviderError(LLMClientError):
    """Non-2xx response or transport failure from a provider."""

    def __init__(self, provider: str, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class ProviderResponseError(LLMClientError):
    """A provider response that cannot be normalized."""

    def __init__(self, provider: str, detail: str):
        super().__init__(f"Unexpected {provider} response: {detail}")
        self.provider = provider
        self.detail = detail
