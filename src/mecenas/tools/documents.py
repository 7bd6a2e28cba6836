"""Document drafting and versioning tools.

Every drafted document is stored as a draft (``szkic``) with a provenance
watermark; approved and filed documents are read-only.
"""

from typing import Any

from mecenas.store.models import to_json_dict, utcnow
from mecenas.tools.base import ToolError, ToolParameter
from mecenas.tools.context import ToolContext
from mecenas.tools.registry import ToolRegistry
from mecenas.tools.validation import (
    DOCUMENT_STATUSES,
    DOCUMENT_TYPES,
    LOCKED_DOCUMENT_STATUSES,
    opt_string,
    require_string,
    resolve_case_id,
)

MAX_DOCUMENT_CHARS = 100_000

# Lower-case stems that must appear somewhere in a document of the given type
REQUIRED_SECTIONS: dict[str, list[str]] = {
    "pozew": ["uzasadnienie", "podstawa prawna", "wnosz"],
    "odpowiedz_na_pozew": ["uzasadnienie", "zarzut"],
    "apelacja": ["zarzuc", "uzasadnienie", "zaskar"],
    "wezwanie_do_zaplaty": ["termin", "zaplat"],
    "wniosek": ["wnosz", "uzasadnienie"],
}

FILING_CHECKLIST = [
    "Sprawdz dane stron (imiona, adresy, PESEL/NIP)",
    "Zweryfikuj przywolane artykuly i ich aktualnosc",
    "Sprawdz wlasciwosc sadu (miejscowa i rzeczowa)",
    "Zweryfikuj terminy procesowe",
    "Dolacz wymagane zalaczniki i dowody",
    "Podpisz dokument",
]


def watermark(content: str, session_key: str) -> str:
    """Prefix content with the machine-readable provenance header."""
    stamp = utcnow().isoformat(timespec="milliseconds").replace("+00:00", "Z")
    provenance = f"[MECENAS-AI | {stamp} | sesja: {session_key[:12]}]"
    return f"{provenance}\nPROJEKT — WYMAGA WERYFIKACJI PRAWNIKA\n\n{content}"


def _case_warnings(ctx: ToolContext, case_id: str | None, doc_type: str) -> list[str]:
    if not case_id:
        return []
    legal_case = ctx.store.get_case(case_id)
    if legal_case is None:
        return []

    warnings = []
    if doc_type in ("pozew", "apelacja", "odpowiedz_na_pozew") and not legal_case.value_of_dispute:
        warnings.append("Brak wartosci przedmiotu sporu (WPS) w sprawie — wymagane w pozwie/apelacji.")
    if doc_type in ("apelacja", "odpowiedz_na_pozew") and not legal_case.sygnatura:
        warnings.append("Brak sygnatury akt — wymagane w odpowiedzi i apelacji.")
    if not legal_case.court and doc_type in ("pozew", "apelacja", "odpowiedz_na_pozew", "wniosek"):
        warnings.append("Brak nazwy sadu w sprawie — uzupelnij dane sprawy.")
    return warnings


def _section_warnings(content: str, doc_type: str) -> list[str]:
    lower = content.lower()
    return [
        f'Brak sekcji zawierajacej "{section}" — sprawdz kompletnosc dokumentu.'
        for section in REQUIRED_SECTIONS.get(doc_type, [])
        if section not in lower
    ]


def register(registry: ToolRegistry) -> None:
    """Register document tools on a registry."""

    @registry.tool(
        name="draft_document",
        description="Utwórz projekt pisma procesowego i zapisz w bazie",
        parameters=[
            ToolParameter("caseId", "string", "ID sprawy (opcjonalne)"),
            ToolParameter("type", "string", "Typ dokumentu", required=True, enum=list(DOCUMENT_TYPES)),
            ToolParameter("title", "string", "Tytuł dokumentu", required=True),
            ToolParameter("content", "string", "Treść dokumentu (pełny tekst pisma)", required=True),
        ],
    )
    async def draft_document(ctx: ToolContext, args: dict[str, Any]) -> Any:
        case_id = resolve_case_id(args, ctx.session)
        doc_type = opt_string(args, "type") or "pismo_procesowe"
        if doc_type not in DOCUMENT_TYPES:
            raise ToolError(f"Typ dokumentu musi być: {', '.join(DOCUMENT_TYPES)}")
        title = require_string(args, "title")
        if not title:
            raise ToolError("Tytuł dokumentu jest wymagany.")
        content = require_string(args, "content")
        if not content:
            raise ToolError("Treść dokumentu jest wymagana.")
        if len(content) > MAX_DOCUMENT_CHARS:
            raise ToolError("Treść dokumentu jest zbyt długa (max 100 000 znaków).")

        warnings = _case_warnings(ctx, case_id, doc_type) + _section_warnings(content, doc_type)

        doc = ctx.store.create_document(
            case_id=case_id,
            type=doc_type,
            title=title,
            content=watermark(content, ctx.session.key),
            status="szkic",
            version=1,
        )

        result: dict[str, Any] = {
            "success": True,
            "document": {"id": doc.id, "title": doc.title, "type": doc.type, "status": doc.status},
            "message": "Dokument zapisany jako SZKIC. Wymaga weryfikacji prawnika.",
        }
        if warnings:
            result["warnings"] = warnings
        result["checklist"] = FILING_CHECKLIST
        return result

    @registry.tool(
        name="list_documents",
        description="Listuj dokumenty (z filtrami)",
        parameters=[
            ToolParameter("caseId", "string", "ID sprawy"),
            ToolParameter("status", "string", "Status dokumentu", enum=list(DOCUMENT_STATUSES)),
            ToolParameter("type", "string", "Typ dokumentu"),
        ],
    )
    async def list_documents(ctx: ToolContext, args: dict[str, Any]) -> Any:
        docs = ctx.store.list_documents(
            case_id=resolve_case_id(args, ctx.session),
            status=opt_string(args, "status"),
            type=opt_string(args, "type"),
        )
        return {
            "documents": [
                {"id": d.id, "title": d.title, "type": d.type, "status": d.status, "caseId": d.case_id}
                for d in docs
            ],
            "count": len(docs),
        }

    @registry.tool(
        name="get_document",
        description="Pobierz treść dokumentu",
        parameters=[ToolParameter("id", "string", "ID dokumentu", required=True)],
    )
    async def get_document(ctx: ToolContext, args: dict[str, Any]) -> Any:
        doc_id = require_string(args, "id")
        if not doc_id:
            raise ToolError("ID dokumentu jest wymagane.")
        doc = ctx.store.get_document(doc_id)
        if doc is None:
            raise ToolError("Dokument nie znaleziony")
        return to_json_dict(doc)

    @registry.tool(
        name="update_document",
        description="Edytuj istniejący dokument (tytuł, treść, notatki). Działa głównie na szkicach.",
        parameters=[
            ToolParameter("id", "string", "ID dokumentu", required=True),
            ToolParameter("title", "string", "Nowy tytuł"),
            ToolParameter("content", "string", "Nowa treść dokumentu"),
            ToolParameter("notes", "string", "Notatki/uwagi"),
        ],
    )
    async def update_document(ctx: ToolContext, args: dict[str, Any]) -> Any:
        doc_id = require_string(args, "id")
        if not doc_id:
            raise ToolError("ID dokumentu jest wymagane.")
        existing = ctx.store.get_document(doc_id)
        if existing is None:
            raise ToolError("Dokument nie znaleziony.")
        if existing.status in LOCKED_DOCUMENT_STATUSES:
            raise ToolError(
                f'Nie można edytować dokumentu o statusie "{existing.status}". Utwórz nową wersję.'
            )

        content = args.get("content")
        if isinstance(content, str) and len(content) > MAX_DOCUMENT_CHARS:
            raise ToolError("Treść za długa (maks. 100 000 znaków).")

        updated = ctx.store.update_document(
            doc_id,
            title=opt_string(args, "title"),
            content=opt_string(args, "content", MAX_DOCUMENT_CHARS),
            notes=opt_string(args, "notes"),
        )
        if updated is None:
            raise ToolError("Nie udało się zaktualizować dokumentu.")
        return {
            "success": True,
            "document": {
                "id": updated.id,
                "title": updated.title,
                "status": updated.status,
                "version": updated.version,
            },
        }

    @registry.tool(
        name="delete_document",
        description="Usuń dokument (tylko szkice i dokumenty do sprawdzenia)",
        parameters=[ToolParameter("id", "string", "ID dokumentu", required=True)],
    )
    async def delete_document(ctx: ToolContext, args: dict[str, Any]) -> Any:
        doc_id = require_string(args, "id")
        if not doc_id:
            raise ToolError("ID dokumentu jest wymagane.")
        doc = ctx.store.get_document(doc_id)
        if doc is None:
            raise ToolError("Dokument nie znaleziony.")
        if doc.status in LOCKED_DOCUMENT_STATUSES:
            raise ToolError(f'Nie można usunąć dokumentu o statusie "{doc.status}".')
        ctx.store.delete_document(doc_id)
        return {"success": True, "message": f'Dokument "{doc.title}" usunięty.'}

    @registry.tool(
        name="list_document_versions",
        description="Pokaż historię wersji dokumentu (poprzednie wersje i aktualną)",
        parameters=[ToolParameter("id", "string", "ID dokumentu", required=True)],
    )
    async def list_document_versions(ctx: ToolContext, args: dict[str, Any]) -> Any:
        doc_id = require_string(args, "id")
        if not doc_id:
            raise ToolError("ID dokumentu jest wymagane.")
        versions = ctx.store.get_document_versions(doc_id)
        if not versions:
            raise ToolError("Dokument nie znaleziony.")
        return {
            "count": len(versions),
            "versions": [
                {
                    "id": v.id,
                    "version": v.version,
                    "status": v.status,
                    "title": v.title,
                    "updatedAt": v.updated_at,
                }
                for v in versions
            ],
        }
