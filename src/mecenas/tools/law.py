"""Polish statute lookup tools."""

import re
from typing import Any

from mecenas.store.models import Article
from mecenas.tools.base import ToolError, ToolParameter
from mecenas.tools.context import ToolContext
from mecenas.tools.registry import ToolRegistry
from mecenas.tools.validation import opt_string, require_string

CODE_NAMES = ["KC", "KPC", "KK", "KPK", "KP", "KRO", "KSH", "KPA", "KW"]
ARTICLE_PREFIX = re.compile(r"^art\.?\s*", re.IGNORECASE)
SEARCH_LIMIT = 10


def _location(article: Article) -> str:
    return " > ".join(part for part in (article.chapter, article.section) if part)


def format_article(article: Article) -> str:
    """Readable article text: header, optional location, content."""
    header = f"Art. {article.article_number} {article.code_name}"
    location = _location(article)
    if location:
        header += f" ({location})"
    return f"{header}\n{article.content}"


def register(registry: ToolRegistry) -> None:
    """Register law lookup tools on a registry."""

    @registry.tool(
        name="search_law",
        description="Przeszukaj polskie kodeksy (KC, KPC, KK, KP, KRO)",
        parameters=[
            ToolParameter(
                "query",
                "string",
                'Fraza wyszukiwania (np. "odszkodowanie", "przedawnienie")',
                required=True,
            ),
            ToolParameter(
                "codeName",
                "string",
                "Skrót kodeksu (KC, KPC, KK, KPK, KP, KRO, KSH, KPA, KW)",
                enum=CODE_NAMES,
            ),
        ],
    )
    async def search_law(ctx: ToolContext, args: dict[str, Any]) -> Any:
        query = require_string(args, "query")
        if not query:
            raise ToolError("Zapytanie (query) jest wymagane.")
        code_name = opt_string(args, "codeName")

        articles = ctx.store.search_articles(
            query[:500],
            code_name.upper() if code_name else None,
            SEARCH_LIMIT,
        )
        if not articles:
            return {
                "message": (
                    "Nie znaleziono przepisów pasujących do zapytania. "
                    "Baza wiedzy może wymagać załadowania."
                ),
                "results": [],
            }
        return {
            "count": len(articles),
            "query": query,
            "articles": "\n\n---\n\n".join(format_article(a) for a in articles),
        }

    @registry.tool(
        name="lookup_article",
        description="Wyszukaj konkretny artykuł kodeksu (np. art. 415 KC)",
        parameters=[
            ToolParameter("codeName", "string", "Skrót kodeksu (np. KC, KPC)", required=True),
            ToolParameter("articleNumber", "string", 'Numer artykułu (np. "415", "471")', required=True),
        ],
    )
    async def lookup_article(ctx: ToolContext, args: dict[str, Any]) -> Any:
        raw_code = require_string(args, "codeName")
        if not raw_code:
            raise ToolError("Nazwa kodeksu (codeName) jest wymagana, np. KC, KPC, KK.")
        code_name = raw_code.upper()
        raw_number = args.get("articleNumber")
        if isinstance(raw_number, int | float) and not isinstance(raw_number, bool):
            raw_number = str(raw_number).removesuffix(".0")
        raw_number = require_string({"articleNumber": raw_number}, "articleNumber")
        if not raw_number:
            raise ToolError("Numer artykułu jest wymagany.")
        article_number = ARTICLE_PREFIX.sub("", raw_number).strip()

        article = ctx.store.get_article(code_name, article_number)
        if article is None:
            raise ToolError(
                f"Nie znaleziono art. {article_number} {code_name}. Baza wiedzy może wymagać załadowania."
            )
        result: dict[str, Any] = {"header": f"Art. {article.article_number} {article.code_name}"}
        location = _location(article)
        if location:
            result["location"] = location
        result["content"] = article.content
        return result
