"""Tests for provider clients (OpenAI family, Anthropic, Gemini, Ollama).

Request building and response parsing are pure, so they are tested
directly; `_send` is exercised with mocked SDK calls or an httpx
MockTransport.
"""

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import anthropic
import httpx
import openai
import pytest
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from client.anthropic_client import AnthropicClient
from client.base_provider_client import extract_error_message
from client.errors import ProviderError, ProviderResponseError
from client.gemini_client import GeminiClient
from client.ollama_client import OllamaClient
from client.openai_client import (
    AzureOpenAIClient,
    CustomOpenAIClient,
    OpenAIClient,
    OpenRouterClient,
)
from client.types import (
    LLMMessage,
    LLMMessageRole,
    LLMProviderConfig,
    LLMToolDeclaration,
    LLMToolParameters,
)


def make_config(provider: str, **kwargs: Any) -> LLMProviderConfig:
    return LLMProviderConfig(provider=provider, api_key="test-key", model="test-model", **kwargs)


@pytest.fixture
def messages() -> list[LLMMessage]:
    return [
        LLMMessage(role=LLMMessageRole.USER, content="List my datasets"),
        LLMMessage(role=LLMMessageRole.MODEL, content="Sure."),
        LLMMessage(role=LLMMessageRole.SYSTEM, content="Be brief."),
    ]


@pytest.fixture
def tools() -> list[LLMToolDeclaration]:
    return [
        LLMToolDeclaration(
            name="list_datasets",
            description="List AEP datasets with optional limit",
            parameters=LLMToolParameters(
                properties={"limit": {"type": "integer", "description": "Max datasets"}}
            ),
        ),
        LLMToolDeclaration(
            name="get_dataset",
            description="Get details of a specific dataset by ID",
            parameters=LLMToolParameters(
                properties={"datasetId": {"type": "string"}}, required=["datasetId"]
            ),
        ),
    ]


@pytest.mark.unit
class TestToolDeclaration:
    def test_schema_omits_empty_required(self, tools: list[LLMToolDeclaration]) -> None:
        assert "required" not in tools[0].schema_dict()
        assert tools[1].schema_dict()["required"] == ["datasetId"]


@pytest.mark.unit
class TestOpenAIClient:
    """OpenAI chat completions wire format."""

    def test_build_request(
        self, messages: list[LLMMessage], tools: list[LLMToolDeclaration]
    ) -> None:
        client = OpenAIClient(make_config("openai"))

        request = client.build_request(messages, tools, system_prompt="SYS")

        assert request["model"] == "test-model"
        assert request["max_tokens"] == 4096
        assert request["temperature"] == 0.7
        assert request["messages"] == [
            {"role": "system", "content": "SYS"},
            {"role": "user", "content": "List my datasets"},
            {"role": "assistant", "content": "Sure."},
            {"role": "system", "content": "Be brief."},
        ]
        assert request["tools"][1] == {
            "type": "function",
            "function": {
                "name": "get_dataset",
                "description": "Get details of a specific dataset by ID",
                "parameters": {
                    "type": "object",
                    "properties": {"datasetId": {"type": "string"}},
                    "required": ["datasetId"],
                },
            },
        }

    def test_build_request_without_tools_or_system(self, messages: list[LLMMessage]) -> None:
        request = OpenAIClient(make_config("openai")).build_request(messages)

        assert "tools" not in request
        assert request["messages"][0]["role"] == "user"

    def test_parse_text(self) -> None:
        client = OpenAIClient(make_config("openai"))
        payload = {"choices": [{"message": {"role": "assistant", "content": "You have 3."}}]}

        response = client.parse_response(payload)

        assert response.text == "You have 3."
        assert response.tool_calls is None

    def test_parse_tool_calls_decodes_arguments(self) -> None:
        client = OpenAIClient(make_config("openai"))
        payload = {
            "choices": [
                {
                    "message": {
                        "content": None,
                        "tool_calls": [
                            {
                                "id": "call_1",
                                "type": "function",
                                "function": {"name": "list_datasets", "arguments": '{"limit": 5}'},
                            },
                            {
                                "id": "call_2",
                                "type": "function",
                                "function": {"name": "health_check", "arguments": ""},
                            },
                        ],
                    }
                }
            ]
        }

        response = client.parse_response(payload)

        assert response.text is None
        assert [(c.name, c.args) for c in response.tool_calls or []] == [
            ("list_datasets", {"limit": 5}),
            ("health_check", {}),
        ]
        assert response.first_tool_call is not None
        assert response.first_tool_call.name == "list_datasets"

    def test_parse_null_content_is_empty_text(self) -> None:
        client = OpenAIClient(make_config("openai"))
        response = client.parse_response({"choices": [{"message": {"content": None}}]})
        assert response.text == ""

    def test_parse_invalid_arguments(self) -> None:
        client = OpenAIClient(make_config("openai"))
        payload = {
            "choices": [
                {"message": {"tool_calls": [{"function": {"name": "x", "arguments": "{oops"}}]}}
            ]
        }

        with pytest.raises(ProviderResponseError, match="invalid tool arguments"):
            client.parse_response(payload)

    def test_parse_non_object_arguments(self) -> None:
        client = OpenAIClient(make_config("openai"))
        payload = {
            "choices": [{"message": {"tool_calls": [{"function": {"name": "x", "arguments": "[1]"}}]}}]
        }

        with pytest.raises(ProviderResponseError, match="not a JSON object"):
            client.parse_response(payload)

    def test_parse_missing_choices(self) -> None:
        client = OpenAIClient(make_config("openai"))

        with pytest.raises(ProviderResponseError, match="Unexpected OpenAI response"):
            client.parse_response({"choices": []})

    @pytest.mark.asyncio
    async def test_call_uses_sdk(self, messages: list[LLMMessage]) -> None:
        client = OpenAIClient(make_config("openai"))
        await client.initialize()

        completion = MagicMock()
        completion.model_dump.return_value = {"choices": [{"message": {"content": "hi"}}]}
        assert client._client is not None
        client._client.chat.completions.create = AsyncMock(return_value=completion)  # type: ignore[method-assign]

        response = await client.call(messages, system_prompt="SYS")

        assert response.text == "hi"
        sent = client._client.chat.completions.create.call_args.kwargs
        assert sent["messages"][0] == {"role": "system", "content": "SYS"}
        await client.close()

    @pytest.mark.asyncio
    async def test_status_error_uses_provider_message(self) -> None:
        client = OpenAIClient(make_config("openai"))
        await client.initialize()
        error = openai.APIStatusError(
            "bad",
            response=httpx.Response(401, request=httpx.Request("POST", "https://api.openai.com")),
            body={"message": "Incorrect API key provided"},
        )
        assert client._client is not None
        client._client.chat.completions.create = AsyncMock(side_effect=error)  # type: ignore[method-assign]

        with pytest.raises(ProviderError) as exc_info:
            await client.call([LLMMessage(role=LLMMessageRole.USER, content="hi")])

        assert str(exc_info.value) == "Incorrect API key provided"
        assert exc_info.value.status_code == 401
        await client.close()


@pytest.mark.unit
class TestOpenAICompatibleClients:
    def test_openrouter_omits_temperature(self, messages: list[LLMMessage]) -> None:
        client = OpenRouterClient(make_config("openrouter"))

        request = client.build_request(messages)

        assert "temperature" not in request
        assert request["max_tokens"] == 4096
        assert client._base_url() == "https://openrouter.ai/api/v1"

    def test_custom_base_url(self, messages: list[LLMMessage]) -> None:
        client = CustomOpenAIClient(
            LLMProviderConfig(provider="custom", model="llama", base_url="http://gpu-box:8000/")
        )

        assert client._base_url() == "http://gpu-box:8000/v1"
        assert client._api_key() == "EMPTY"
        assert "temperature" not in client.build_request(messages)

    def test_custom_requires_base_url(self) -> None:
        client = CustomOpenAIClient(make_config("custom"))

        with pytest.raises(ValueError, match="base URL"):
            client._base_url()

    def test_azure_uses_deployment_as_model(self, messages: list[LLMMessage]) -> None:
        client = AzureOpenAIClient(
            make_config(
                "azure-openai",
                base_url="https://example.openai.azure.com",
                azure_deployment="gpt4-prod",
            )
        )

        request = client.build_request(messages)

        assert request["model"] == "gpt4-prod"
        assert request["temperature"] == 0.7

    @pytest.mark.asyncio
    async def test_azure_requires_endpoint_and_deployment(self) -> None:
        client = AzureOpenAIClient(make_config("azure-openai"))

        with pytest.raises(ValueError, match="deployment"):
            await client.initialize()


@pytest.mark.unit
class TestAnthropicClient:
    """Anthropic messages wire format."""

    def test_build_request(
        self, messages: list[LLMMessage], tools: list[LLMToolDeclaration]
    ) -> None:
        client = AnthropicClient(make_config("anthropic"))

        request = client.build_request(messages, tools, system_prompt="SYS")

        assert request["system"] == "SYS"
        assert request["max_tokens"] == 4096
        assert "temperature" not in request
        assert request["messages"] == [
            {"role": "user", "content": "List my datasets"},
            {"role": "assistant", "content": "Sure."},
            {"role": "user", "content": "Be brief."},
        ]
        assert request["tools"][0] == {
            "name": "list_datasets",
            "description": "List AEP datasets with optional limit",
            "input_schema": {
                "type": "object",
                "properties": {"limit": {"type": "integer", "description": "Max datasets"}},
            },
        }

    def test_parse_first_tool_use(self) -> None:
        client = AnthropicClient(make_config("anthropic"))
        payload = {
            "content": [
                {"type": "text", "text": "Let me check."},
                {"type": "tool_use", "id": "t1", "name": "list_datasets", "input": {"limit": 3}},
                {"type": "tool_use", "id": "t2", "name": "list_batches", "input": {}},
            ]
        }

        response = client.parse_response(payload)

        assert response.text is None
        assert [(c.name, c.args) for c in response.tool_calls or []] == [
            ("list_datasets", {"limit": 3})
        ]

    def test_parse_first_text_block(self) -> None:
        client = AnthropicClient(make_config("anthropic"))
        payload = {
            "content": [
                {"type": "thinking", "thinking": "..."},
                {"type": "text", "text": "First"},
                {"type": "text", "text": "Second"},
            ]
        }

        assert client.parse_response(payload).text == "First"

    def test_parse_empty_content(self) -> None:
        client = AnthropicClient(make_config("anthropic"))
        assert client.parse_response({"content": []}).text == ""

    def test_parse_wrong_shape(self) -> None:
        client = AnthropicClient(make_config("anthropic"))

        with pytest.raises(ProviderResponseError):
            client.parse_response({"content": "not a list"})

    def test_parse_tool_use_without_name(self) -> None:
        client = AnthropicClient(make_config("anthropic"))
        payload = {"content": [{"type": "tool_use", "id": "t1", "input": {"limit": 3}}]}

        with pytest.raises(ProviderResponseError, match="Unexpected Anthropic response"):
            client.parse_response(payload)

    def test_parse_block_without_type(self) -> None:
        client = AnthropicClient(make_config("anthropic"))

        with pytest.raises(ProviderResponseError):
            client.parse_response({"content": [{"text": "hi"}]})

    @pytest.mark.asyncio
    async def test_status_error_uses_provider_message(self) -> None:
        client = AnthropicClient(make_config("anthropic"))
        await client.initialize()
        error = anthropic.APIStatusError(
            "bad",
            response=httpx.Response(
                401, request=httpx.Request("POST", "https://api.anthropic.com/v1/messages")
            ),
            body={
                "type": "error",
                "error": {"type": "authentication_error", "message": "invalid x-api-key"},
            },
        )
        assert client._client is not None
        client._client.messages.create = AsyncMock(side_effect=error)  # type: ignore[method-assign]

        with pytest.raises(ProviderError) as exc_info:
            await client.call([LLMMessage(role=LLMMessageRole.USER, content="hi")])

        assert str(exc_info.value) == "invalid x-api-key"
        assert exc_info.value.status_code == 401
        assert exc_info.value.provider == "Anthropic"
        await client.close()

    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        client = AnthropicClient(make_config("anthropic"))
        await client.initialize()
        error = anthropic.APIConnectionError(
            request=httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        )
        assert client._client is not None
        client._client.messages.create = AsyncMock(side_effect=error)  # type: ignore[method-assign]

        with pytest.raises(ProviderError, match="^Anthropic error: ") as exc_info:
            await client.call([LLMMessage(role=LLMMessageRole.USER, content="hi")])

        assert exc_info.value.status_code is None
        await client.close()


@pytest.mark.unit
class TestGeminiClient:
    """Gemini generateContent wire format."""

    def test_build_request(
        self, messages: list[LLMMessage], tools: list[LLMToolDeclaration]
    ) -> None:
        client = GeminiClient(make_config("gemini"))

        request = client.build_request(messages, tools, system_prompt="SYS")

        assert request["model"] == "test-model"
        assert request["contents"] == [
            {"role": "user", "parts": [{"text": "List my datasets"}]},
            {"role": "model", "parts": [{"text": "Sure."}]},
            {"role": "user", "parts": [{"text": "Be brief."}]},
        ]
        config = request["config"]
        assert config["temperature"] == 0.7
        assert config["max_output_tokens"] == 4096
        assert config["system_instruction"] == "SYS"
        declarations = config["tools"][0]["function_declarations"]
        assert [d["name"] for d in declarations] == ["list_datasets", "get_dataset"]
        assert declarations[1]["parameters_json_schema"]["required"] == ["datasetId"]

    def test_parse_function_call(self) -> None:
        client = GeminiClient(make_config("gemini"))
        payload = {
            "candidates": [
                {
                    "content": {
                        "role": "model",
                        "parts": [{"functionCall": {"name": "get_dataset", "args": {"datasetId": "d1"}}}],
                    }
                }
            ]
        }

        response = client.parse_response(payload)

        assert response.first_tool_call is not None
        assert response.first_tool_call.name == "get_dataset"
        assert response.first_tool_call.args == {"datasetId": "d1"}

    def test_parse_function_call_without_args(self) -> None:
        client = GeminiClient(make_config("gemini"))
        payload = {"candidates": [{"content": {"parts": [{"function_call": {"name": "health_check"}}]}}]}

        response = client.parse_response(payload)

        assert response.first_tool_call is not None
        assert response.first_tool_call.args == {}

    def test_parse_concatenates_text_parts(self) -> None:
        client = GeminiClient(make_config("gemini"))
        payload = {"candidates": [{"content": {"parts": [{"text": "Hello "}, {"text": "there"}]}}]}

        assert client.parse_response(payload).text == "Hello there"

    def test_parse_no_candidates(self) -> None:
        client = GeminiClient(make_config("gemini"))

        with pytest.raises(ProviderResponseError, match="Gemini"):
            client.parse_response({"candidates": []})

    def test_request_config_accepted_by_sdk(
        self, messages: list[LLMMessage], tools: list[LLMToolDeclaration]
    ) -> None:
        request = GeminiClient(make_config("gemini")).build_request(
            messages, tools, system_prompt="SYS"
        )

        config = genai_types.GenerateContentConfig.model_validate(request["config"])

        assert config.tools is not None
        declarations = config.tools[0].function_declarations or []
        assert declarations[1].parameters_json_schema == tools[1].schema_dict()

    @pytest.mark.asyncio
    async def test_api_error_uses_provider_message(self) -> None:
        client = GeminiClient(make_config("gemini"))
        await client.initialize()
        error = genai_errors.ClientError(
            400,
            {"error": {"code": 400, "message": "API key not valid", "status": "INVALID_ARGUMENT"}},
        )
        client.client = MagicMock()
        client.client.aio.models.generate_content = AsyncMock(side_effect=error)

        with pytest.raises(ProviderError) as exc_info:
            await client.call([LLMMessage(role=LLMMessageRole.USER, content="hi")])

        assert str(exc_info.value) == "API key not valid"
        assert exc_info.value.status_code == 400
        assert exc_info.value.provider == "Gemini"

    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        client = GeminiClient(make_config("gemini"))
        await client.initialize()
        client.client = MagicMock()
        client.client.aio.models.generate_content = AsyncMock(
            side_effect=httpx.ConnectError("connection refused")
        )

        with pytest.raises(ProviderError) as exc_info:
            await client.call([LLMMessage(role=LLMMessageRole.USER, content="hi")])

        assert str(exc_info.value) == "Gemini error: connection refused"
        assert exc_info.value.status_code is None


@pytest.mark.unit
class TestOllamaClient:
    """Ollama /api/chat over httpx."""

    def test_build_request_never_sends_tools(
        self, messages: list[LLMMessage], tools: list[LLMToolDeclaration]
    ) -> None:
        client = OllamaClient(make_config("ollama"))

        request = client.build_request(messages, tools, system_prompt="SYS")

        assert request == {
            "model": "test-model",
            "messages": [
                {"role": "system", "content": "SYS"},
                {"role": "user", "content": "List my datasets"},
                {"role": "assistant", "content": "Sure."},
                {"role": "system", "content": "Be brief."},
            ],
            "stream": False,
            "options": {"temperature": 0.7},
        }

    def test_chat_url(self) -> None:
        assert OllamaClient(make_config("ollama")).chat_url == "http://localhost:11434/api/chat"
        custom = OllamaClient(make_config("ollama", base_url="http://gpu:11434/"))
        assert custom.chat_url == "http://gpu:11434/api/chat"

    @pytest.mark.asyncio
    async def test_call(self, tools: list[LLMToolDeclaration]) -> None:
        seen: list[dict[str, Any]] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            return httpx.Response(200, json={"message": {"role": "assistant", "content": "Hi!"}})

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        client = OllamaClient(make_config("ollama"), http_client=http_client)

        response = await client.call(
            [LLMMessage(role=LLMMessageRole.USER, content="hello")], tools=tools
        )

        assert response.text == "Hi!"
        assert response.tool_calls is None
        assert "tools" not in seen[0]
        await http_client.aclose()

    @pytest.mark.asyncio
    async def test_error_status(self) -> None:
        http_client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda r: httpx.Response(500, text="boom"))
        )
        client = OllamaClient(make_config("ollama"), http_client=http_client)

        with pytest.raises(ProviderError, match="Ollama error: 500") as exc_info:
            await client.call([LLMMessage(role=LLMMessageRole.USER, content="hello")])

        assert exc_info.value.status_code == 500
        await http_client.aclose()

    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        client = OllamaClient(make_config("ollama"), http_client=http_client)

        with pytest.raises(ProviderError, match="connection refused"):
            await client.call([LLMMessage(role=LLMMessageRole.USER, content="hello")])
        await http_client.aclose()


@pytest.mark.unit
class TestExtractErrorMessage:
    @pytest.mark.parametrize(
        "body,expected",
        [
            ({"error": {"message": "Invalid key", "type": "auth"}}, "Invalid key"),
            ({"error": "model not found"}, "model not found"),
            ({"message": "quota exceeded"}, "quota exceeded"),
            ({"detail": "other"}, None),
            ("plain text", None),
            (None, None),
        ],
    )
    def test_shapes(self, body: Any, expected: Any) -> None:
        assert extract_error_message(body) == expected
