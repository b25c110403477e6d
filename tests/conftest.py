"""Pytest configuration and fixtures for copilot tests."""

import os
from typing import Callable

import httpx
import pytest
from dotenv import load_dotenv

from aep import AEPClient, AEPConfig
from client.types import LLMProviderConfig

# Load environment variables from .env file
load_dotenv()


@pytest.fixture
def aep_config() -> AEPConfig:
    """Credentials using a pre-generated token so no IMS exchange happens."""
    return AEPConfig(
        client_id="test-client-id",
        client_secret="test-client-secret",
        org_id="TESTORG@AdobeOrg",
        sandbox="dev",
        auth_token="test-token",
    )


@pytest.fixture
def llm_config() -> LLMProviderConfig:
    return LLMProviderConfig(provider="openai", api_key="test-openai-key", model="gpt-4o")


@pytest.fixture
def make_aep_client(aep_config: AEPConfig) -> Callable[..., AEPClient]:
    """Build an AEPClient whose HTTP traffic goes to a handler function."""

    def _make(
        handler: Callable[[httpx.Request], httpx.Response], config: AEPConfig = aep_config
    ) -> AEPClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return AEPClient(config, http_client=http_client)

    return _make


@pytest.fixture
def require_openai_key() -> None:
    """Fixture to skip test if OpenAI API key is not available."""
    if not os.getenv("OPENAI_API_KEY"):
        pytest.skip("OpenAI API key not available")
