"""Tests for the tool dispatcher."""

import json

import pytest

from mecenas.tools import ToolDispatcher
from mecenas.tools.base import ToolError
from mecenas.tools.dispatcher import MAX_TOOL_RESULT_CHARS, TRUNCATION_MARKER, truncate_result
from mecenas.tools.registry import ToolRegistry


@pytest.fixture
def custom_dispatcher(store, audit):
    registry = ToolRegistry()

    @registry.tool(name="fails", description="Always raises")
    async def fails(ctx, args):
        raise RuntimeError("database exploded at /var/lib/secret")

    @registry.tool(name="rejects", description="Raises a tool error")
    async def rejects(ctx, args):
        raise ToolError("Sprawa nie znaleziona")

    @registry.tool(name="huge", description="Returns a long string")
    async def huge(ctx, args):
        return "x" * (MAX_TOOL_RESULT_CHARS + 100)

    @registry.tool(name="echo", description="Echoes arguments")
    async def echo(ctx, args):
        return {"args": args, "session": ctx.session.key}

    return ToolDispatcher(registry, store, audit)


class TestToolDispatcher:
    @pytest.mark.asyncio
    async def test_unknown_tool(self, dispatcher, session):
        result = json.loads(await dispatcher.execute("launch_rockets", {}, session))
        assert result == {"error": "Nieznane narzędzie: launch_rockets"}

    @pytest.mark.asyncio
    async def test_tool_error_message_is_returned(self, custom_dispatcher, session):
        result = json.loads(await custom_dispatcher.execute("rejects", {}, session))
        assert result == {"error": "Sprawa nie znaleziona"}

    @pytest.mark.asyncio
    async def test_internal_error_is_generic(self, custom_dispatcher, session):
        result = json.loads(await custom_dispatcher.execute("fails", {}, session))
        assert "Wewnętrzny błąd narzędzia fails" in result["error"]
        assert "/var/lib/secret" not in result["error"]

    @pytest.mark.asyncio
    async def test_result_is_truncated(self, custom_dispatcher, session):
        result = await custom_dispatcher.execute("huge", {}, session)
        assert len(result) == MAX_TOOL_RESULT_CHARS + len(TRUNCATION_MARKER)
        assert result.endswith(TRUNCATION_MARKER)

    @pytest.mark.asyncio
    async def test_non_dict_args_become_empty(self, custom_dispatcher, session):
        result = json.loads(await custom_dispatcher.execute("echo", ["bad"], session))
        assert result == {"args": {}, "session": "test-session-0001"}

    @pytest.mark.asyncio
    async def test_polish_characters_not_escaped(self, dispatcher, session, client_and_case):
        result = await dispatcher.execute("list_cases", {}, session)
        assert "Sąd Rejonowy" in result


def test_truncate_short_text_unchanged():
    assert truncate_result("abc", limit=10) == "abc"


def test_default_registry_names(registry):
    names = registry.known_names()
    for expected in (
        "create_client",
        "list_clients",
        "set_active_case",
        "add_deadline",
        "draft_document",
        "lookup_article",
        "log_time",
        "calculate_court_fee",
        "search_court_decisions",
        "record_ai_consent",
    ):
        assert expected in names
    assert all(schema["type"] == "function" for schema in registry.openai_schemas())


def test_describe_lists_every_tool(custom_dispatcher):
    listing = custom_dispatcher.registry.describe().splitlines()
    assert listing == [
        "- fails: Always raises",
        "- rejects: Raises a tool error",
        "- huge: Returns a long string",
        "- echo: Echoes arguments",
    ]
