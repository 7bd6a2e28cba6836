"""Tests for main/speed model routing."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from mecenas.agent import QueryComplexityRouter


def make_router(speed_present: bool = True, speed_model: str | None = "gemma3:4b") -> QueryComplexityRouter:
    probe = MagicMock()
    probe.is_model_present = AsyncMock(return_value=speed_present)
    return QueryComplexityRouter(probe, main_model="bielik", speed_model=speed_model)


class TestIsSimpleQuery:
    @pytest.mark.parametrize(
        "text",
        [
            "Cześć!",
            "Ile wynosi opłata sądowa od 10000 zł?",
            "Pokaż sprawy",
            "Oblicz odsetki za opóźnienie od kwoty 12 500 zł za okres od 1 stycznia do 30 czerwca 2025 roku, "
            "zgodnie z aktualną stopą referencyjną NBP.",
        ],
    )
    def test_simple(self, text):
        assert QueryComplexityRouter.is_simple_query(text)

    @pytest.mark.parametrize(
        "text",
        [
            "Napisz pozew o zapłatę",
            "Przeanalizuj umowę",
            "Wyjaśnij mi dokładnie różnicę między przedawnieniem a prekluzją",
            "Sporządź wezwanie",
        ],
    )
    def test_complex(self, text):
        assert not QueryComplexityRouter.is_simple_query(text)

    def test_long_message_without_patterns_is_complex(self):
        assert not QueryComplexityRouter.is_simple_query("słowo " * 50)


class TestSelectModel:
    @pytest.mark.asyncio
    async def test_simple_query_uses_speed_model(self):
        router = make_router()
        assert await router.select_model("Ile wynosi opłata sądowa od 10000 zł?") == "gemma3:4b"
        router.probe.is_model_present.assert_awaited_once_with("gemma3:4b")

    @pytest.mark.asyncio
    async def test_missing_speed_model_falls_back(self):
        router = make_router(speed_present=False)
        assert await router.select_model("Cześć") == "bielik"

    @pytest.mark.asyncio
    async def test_complex_query_skips_probe(self):
        router = make_router()
        assert await router.select_model("Napisz pozew o zapłatę") == "bielik"
        router.probe.is_model_present.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_routing_disabled(self):
        router = make_router(speed_model=None)
        assert await router.select_model("Cześć") == "bielik"
