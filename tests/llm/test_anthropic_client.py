"""Tests for the Anthropic client."""

import json

import httpx
import pytest
import respx

from mecenas.llm.anthropic import AnthropicClient
from mecenas.llm.client import Message, ToolCall, ToolResult
from mecenas.llm.errors import ProviderAuthError, ProviderRateLimitError, ProviderResponseError

MESSAGES_URL = "https://api.anthropic.com/v1/messages"


@pytest.fixture
async def client():
    anthropic = AnthropicClient(api_key="sk-test")
    yield anthropic
    await anthropic.close()


class TestConvertMessages:
    def test_system_is_extracted(self):
        client = AnthropicClient(api_key="k")
        system, messages = client._convert_messages([Message("system", "Jesteś asystentem"), Message("user", "Hej")])
        assert system == "Jesteś asystentem"
        assert messages == [{"role": "user", "content": "Hej"}]

    def test_tool_round(self):
        client = AnthropicClient(api_key="k")
        _, messages = client._convert_messages(
            [
                Message("assistant", "", tool_calls=[ToolCall("tu_1", "list_cases", {"status": "nowa"})]),
                Message(
                    "tool",
                    "",
                    tool_results=[ToolResult("tu_1", "[]")],
                ),
            ]
        )
        assert messages[0] == {
            "role": "assistant",
            "content": [{"type": "tool_use", "id": "tu_1", "name": "list_cases", "input": {"status": "nowa"}}],
        }
        assert messages[1] == {
            "role": "user",
            "content": [{"type": "tool_result", "tool_use_id": "tu_1", "content": "[]"}],
        }

    def test_convert_tools(self):
        client = AnthropicClient(api_key="k")
        tools = client._convert_tools(
            [{"type": "function", "function": {"name": "x", "description": "d", "parameters": {"type": "object"}}}]
        )
        assert tools == [{"name": "x", "description": "d", "input_schema": {"type": "object"}}]


class TestComplete:
    @pytest.mark.asyncio
    @respx.mock
    async def test_text_and_tool_use(self, client):
        route = respx.post(MESSAGES_URL).mock(
            return_value=httpx.Response(
                200,
                json={
                    "content": [
                        {"type": "text", "text": "Sprawdzam."},
                        {"type": "tool_use", "id": "tu_1", "name": "list_cases", "input": {}},
                    ],
                    "stop_reason": "tool_use",
                },
            )
        )

        response = await client.complete(
            [Message("system", "sys"), Message("user", "Pokaż sprawy")],
            tools=[{"type": "function", "function": {"name": "list_cases", "description": "d"}}],
        )

        assert response.content == "Sprawdzam."
        assert response.tool_calls == [ToolCall("tu_1", "list_cases", {})]
        assert response.finish_reason == "tool_calls"

        payload = json.loads(route.calls.last.request.content)
        assert payload["system"] == "sys"
        assert payload["tools"][0]["name"] == "list_cases"
        assert route.calls.last.request.headers["x-api-key"] == "sk-test"

    @pytest.mark.asyncio
    @respx.mock
    async def test_auth_error(self, client):
        respx.post(MESSAGES_URL).mock(return_value=httpx.Response(401, json={"error": {}}))
        with pytest.raises(ProviderAuthError):
            await client.complete([Message("user", "x")])

    @pytest.mark.asyncio
    @respx.mock
    async def test_rate_limit(self, client):
        respx.post(MESSAGES_URL).mock(return_value=httpx.Response(429, json={"error": {}}))
        with pytest.raises(ProviderRateLimitError):
            await client.complete([Message("user", "x")])

    @pytest.mark.asyncio
    @respx.mock
    async def test_malformed_body(self, client):
        respx.post(MESSAGES_URL).mock(return_value=httpx.Response(200, json={"unexpected": True}))
        with pytest.raises(ProviderResponseError):
            await client.complete([Message("user", "x")])
