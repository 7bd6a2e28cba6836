"""Tests for the SAOS court decision search tool."""

import json

import httpx
import pytest
import respx

SEARCH_URL = "https://www.saos.org.pl/api/search/judgments"

JUDGMENT = {
    "id": 12345,
    "courtType": "COMMON",
    "courtCases": [{"caseNumber": "I C 100/20"}],
    "judgmentType": "SENTENCE",
    "judgmentDate": "2021-03-04",
    "judges": [{"name": "Anna Sędzia", "function": "PRESIDING_JUDGE"}, {"name": "Piotr Ławnik"}],
    "keywords": ["odszkodowanie"],
    "textContent": "<p>Sąd   zważył,</p> że powództwo jest zasadne.",
    "division": {"name": "I Wydział Cywilny", "court": {"name": "Sąd Rejonowy w Krakowie"}},
}


async def search(dispatcher, session, **args):
    return json.loads(await dispatcher.execute("search_court_decisions", args, session))


class TestSearchCourtDecisions:
    @pytest.mark.asyncio
    @respx.mock
    async def test_maps_results(self, dispatcher, session):
        route = respx.get(SEARCH_URL).mock(
            return_value=httpx.Response(200, json={"items": [JUDGMENT], "info": {"totalResults": 42}})
        )

        result = await search(dispatcher, session, query="odszkodowanie", court_type="COMMON", limit=3)

        params = route.calls.last.request.url.params
        assert params["all"] == "odszkodowanie"
        assert params["pageSize"] == "3"
        assert params["courtType"] == "COMMON"
        assert result["total_results"] == 42
        item = result["results"][0]
        assert item["case_numbers"] == "I C 100/20"
        assert item["court"] == "Sąd Rejonowy w Krakowie"
        assert item["judges"] == ["Anna Sędzia (PRESIDING_JUDGE)", "Piotr Ławnik"]
        assert item["excerpt"] == "Sąd zważył, że powództwo jest zasadne."
        assert item["url"] == "https://www.saos.org.pl/judgments/12345"

    @pytest.mark.asyncio
    @respx.mock
    async def test_no_results(self, dispatcher, session):
        respx.get(SEARCH_URL).mock(return_value=httpx.Response(200, json={"items": []}))
        result = await search(dispatcher, session, query="nic")
        assert result["results"] == []

    @pytest.mark.asyncio
    @respx.mock
    async def test_error_status(self, dispatcher, session):
        respx.get(SEARCH_URL).mock(return_value=httpx.Response(503))
        result = await search(dispatcher, session, query="x")
        assert result == {"error": "SAOS API zwróciło błąd 503. Spróbuj ponownie."}

    @pytest.mark.asyncio
    @respx.mock
    async def test_connection_error(self, dispatcher, session):
        respx.get(SEARCH_URL).mock(side_effect=httpx.ConnectError("offline"))
        result = await search(dispatcher, session, query="x")
        assert "Nie udało się połączyć z SAOS API" in result["error"]

    @pytest.mark.asyncio
    async def test_query_required(self, dispatcher, session):
        result = await search(dispatcher, session, query="  ")
        assert result == {"error": "Zapytanie jest wymagane."}
