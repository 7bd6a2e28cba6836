"""Court decision search over the public SAOS API."""

import logging
import re
from typing import Any

import httpx

from mecenas.tools.base import ToolError, ToolParameter
from mecenas.tools.context import ToolContext
from mecenas.tools.registry import ToolRegistry
from mecenas.tools.validation import opt_number, opt_string, require_string

logger = logging.getLogger(__name__)

COURT_TYPES = ["COMMON", "SUPREME", "ADMINISTRATIVE", "CONSTITUTIONAL_TRIBUNAL", "NATIONAL_APPEAL_CHAMBER"]
DEFAULT_PAGE_SIZE = 5
EXCERPT_CHARS = 500

HTML_TAG = re.compile(r"<[^>]+>")
WHITESPACE = re.compile(r"\s+")


def _excerpt(text_content: str | None) -> str:
    if not text_content:
        return ""
    text = WHITESPACE.sub(" ", HTML_TAG.sub(" ", text_content)).strip()
    if len(text) > EXCERPT_CHARS:
        return text[:EXCERPT_CHARS] + "..."
    return text


def _map_judgment(item: dict[str, Any], base_url: str) -> dict[str, Any]:
    division = item.get("division") or {}
    court = division.get("court") or {}
    judges = [
        f"{j['name']} ({j['function']})" if j.get("function") else j["name"]
        for j in item.get("judges") or []
        if j.get("name")
    ]
    return {
        "id": item.get("id"),
        "case_numbers": ", ".join(c.get("caseNumber", "") for c in item.get("courtCases") or []),
        "court": court.get("name") or item.get("courtType") or "",
        "division": division.get("name") or "",
        "judgment_type": item.get("judgmentType"),
        "judgment_date": item.get("judgmentDate"),
        "judges": judges[:5],
        "keywords": (item.get("keywords") or [])[:10],
        "excerpt": _excerpt(item.get("textContent")),
        "url": f"{base_url}/judgments/{item.get('id')}",
    }


def register(registry: ToolRegistry) -> None:
    """Register the court decision search tool on a registry."""

    @registry.tool(
        name="search_court_decisions",
        description=(
            "Wyszukaj orzeczenia sądowe w bazie SAOS (Sądy, Trybunały, SN — 400K+ orzeczeń). "
            "Podaje sygnaturę, datę, sąd, fragmenty uzasadnienia."
        ),
        parameters=[
            ToolParameter(
                "query",
                "string",
                'Fraza wyszukiwania (np. "odszkodowanie za błąd medyczny", "art. 415 KC")',
                required=True,
            ),
            ToolParameter("court_type", "string", "Typ sądu (opcjonalnie)", enum=COURT_TYPES),
            ToolParameter("date_from", "string", "Data od (YYYY-MM-DD)"),
            ToolParameter("date_to", "string", "Data do (YYYY-MM-DD)"),
            ToolParameter("limit", "number", "Liczba wyników (1-10, domyślnie 5)"),
        ],
    )
    async def search_court_decisions(ctx: ToolContext, args: dict[str, Any]) -> Any:
        query = require_string(args, "query")
        if not query:
            raise ToolError("Zapytanie jest wymagane.")
        limit = opt_number(args, "limit", 1, 10)
        page_size = int(limit) if limit is not None else DEFAULT_PAGE_SIZE

        params: dict[str, str] = {
            "all": query[:500],
            "pageSize": str(page_size),
            "sortingField": "JUDGMENT_DATE",
            "sortingDirection": "DESC",
        }
        for arg_name, param_name in (
            ("court_type", "courtType"),
            ("date_from", "judgmentDateFrom"),
            ("date_to", "judgmentDateTo"),
        ):
            value = opt_string(args, arg_name)
            if value:
                params[param_name] = value

        base_url = ctx.saos.base_url.rstrip("/")
        timeout = ctx.saos.timeout
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.get(
                    f"{base_url}/api/search/judgments",
                    params=params,
                    headers={"Accept": "application/json"},
                )
        except httpx.TimeoutException:
            raise ToolError(
                f"SAOS API nie odpowiedziało w ciągu {timeout:g} sekund. Spróbuj ponownie."
            ) from None
        except httpx.HTTPError as e:
            logger.warning("SAOS API error: %s", e)
            raise ToolError(
                "Nie udało się połączyć z SAOS API. Sprawdź połączenie internetowe."
            ) from None

        if not response.is_success:
            raise ToolError(f"SAOS API zwróciło błąd {response.status_code}. Spróbuj ponownie.")

        try:
            data = response.json()
        except ValueError:
            logger.warning("SAOS API returned malformed JSON")
            raise ToolError(
                "Nie udało się połączyć z SAOS API. Sprawdź połączenie internetowe."
            ) from None

        items = data.get("items") or []
        if not items:
            return {"message": "Nie znaleziono orzeczeń dla podanego zapytania.", "results": []}

        results = [_map_judgment(item, base_url) for item in items]
        return {
            "query": query,
            "total_results": (data.get("info") or {}).get("totalResults", len(results)),
            "count": len(results),
            "results": results,
        }
