"""Legal case tools, including the session's active case."""

from datetime import datetime
from typing import Any

from mecenas.store.models import to_json_dict, utcnow
from mecenas.tools.base import ToolError, ToolParameter
from mecenas.tools.context import ToolContext
from mecenas.tools.registry import ToolRegistry
from mecenas.tools.validation import (
    CASE_STATUSES,
    LAW_AREAS,
    MISSING_CASE_ID,
    opt_number,
    opt_string,
    require_string,
    resolve_case_id,
)

POLISH_DATE = "%d.%m.%Y"
POLISH_DATETIME = "%d.%m.%Y, %H:%M:%S"


def register(registry: ToolRegistry) -> None:
    """Register case tools on a registry."""

    @registry.tool(
        name="create_case",
        description="Utwórz nową sprawę sądową",
        parameters=[
            ToolParameter("clientId", "string", "ID klienta", required=True),
            ToolParameter("title", "string", "Tytuł sprawy", required=True),
            ToolParameter("lawArea", "string", "Dziedzina prawa", required=True, enum=list(LAW_AREAS)),
            ToolParameter("sygnatura", "string", "Sygnatura akt (np. I C 123/26)"),
            ToolParameter("court", "string", "Sąd (np. Sąd Rejonowy w Warszawie)"),
            ToolParameter("description", "string", "Opis sprawy"),
            ToolParameter("opposingParty", "string", "Strona przeciwna"),
            ToolParameter("valueOfDispute", "number", "Wartość przedmiotu sporu (WPS) w PLN"),
        ],
    )
    async def create_case(ctx: ToolContext, args: dict[str, Any]) -> Any:
        client_id = require_string(args, "clientId")
        if not client_id:
            raise ToolError("ID klienta (clientId) jest wymagane.")
        if ctx.store.get_client(client_id) is None:
            raise ToolError("Klient nie znaleziony — najpierw utwórz klienta (create_client).")
        title = require_string(args, "title")
        if not title:
            raise ToolError("Tytuł sprawy jest wymagany.")
        law_area = opt_string(args, "lawArea") or "cywilne"
        if law_area not in LAW_AREAS:
            raise ToolError(f"Dziedzina prawa musi być: {', '.join(LAW_AREAS)}")

        legal_case = ctx.store.create_case(
            client_id=client_id,
            title=title,
            law_area=law_area,
            status="nowa",
            sygnatura=opt_string(args, "sygnatura"),
            court=opt_string(args, "court"),
            description=opt_string(args, "description"),
            opposing_party=opt_string(args, "opposingParty"),
            value_of_dispute=opt_number(args, "valueOfDispute", 0),
        )
        return {"success": True, "case": to_json_dict(legal_case)}

    @registry.tool(
        name="list_cases",
        description="Listuj sprawy (z filtrami)",
        parameters=[
            ToolParameter("clientId", "string", "ID klienta"),
            ToolParameter("status", "string", "Status sprawy", enum=list(CASE_STATUSES)),
            ToolParameter("lawArea", "string", "Dziedzina prawa"),
        ],
    )
    async def list_cases(ctx: ToolContext, args: dict[str, Any]) -> Any:
        cases = ctx.store.list_cases(
            client_id=opt_string(args, "clientId"),
            status=opt_string(args, "status"),
            law_area=opt_string(args, "lawArea"),
        )
        return {"cases": [to_json_dict(c) for c in cases], "count": len(cases)}

    @registry.tool(
        name="get_case",
        description="Pobierz szczegóły sprawy",
        parameters=[ToolParameter("id", "string", "ID sprawy", required=True)],
    )
    async def get_case(ctx: ToolContext, args: dict[str, Any]) -> Any:
        case_id = require_string(args, "id")
        if not case_id:
            raise ToolError("ID sprawy jest wymagane.")
        legal_case = ctx.store.get_case(case_id)
        if legal_case is None:
            raise ToolError("Sprawa nie znaleziona")

        client = ctx.store.get_client(legal_case.client_id)
        deadlines = ctx.store.list_deadlines(case_id=case_id)
        documents = ctx.store.list_documents(case_id=case_id)
        return {
            "case": to_json_dict(legal_case),
            "client": to_json_dict(client) if client else None,
            "deadlines": [to_json_dict(d) for d in deadlines],
            "documents": [
                {"id": d.id, "title": d.title, "type": d.type, "status": d.status} for d in documents
            ],
        }

    @registry.tool(
        name="update_case",
        description="Zaktualizuj sprawę (status, sygnatura, itp.)",
        parameters=[
            ToolParameter("id", "string", "ID sprawy", required=True),
            ToolParameter("status", "string", "Status sprawy", enum=list(CASE_STATUSES)),
            ToolParameter("sygnatura", "string", "Sygnatura akt"),
            ToolParameter("court", "string", "Sąd"),
            ToolParameter("notes", "string", "Notatki"),
            ToolParameter("description", "string", "Opis sprawy"),
            ToolParameter("opposingParty", "string", "Strona przeciwna"),
        ],
    )
    async def update_case(ctx: ToolContext, args: dict[str, Any]) -> Any:
        case_id = require_string(args, "id")
        if not case_id:
            raise ToolError("ID sprawy jest wymagane.")

        status = opt_string(args, "status")
        if status and status not in CASE_STATUSES:
            raise ToolError(f"Status sprawy musi być: {', '.join(CASE_STATUSES)}")

        updated = ctx.store.update_case(
            case_id,
            status=status,
            sygnatura=opt_string(args, "sygnatura"),
            court=opt_string(args, "court"),
            notes=opt_string(args, "notes"),
            description=opt_string(args, "description"),
            opposing_party=opt_string(args, "opposingParty"),
        )
        if updated is None:
            raise ToolError("Sprawa nie znaleziona")
        return {"success": True, "case": to_json_dict(updated)}

    @registry.tool(
        name="search_cases",
        description="Wyszukaj sprawy po frazie (szuka w tytule, opisie, stronie przeciwnej, sygnaturze)",
        parameters=[ToolParameter("query", "string", "Fraza wyszukiwania", required=True)],
    )
    async def search_cases(ctx: ToolContext, args: dict[str, Any]) -> Any:
        query = require_string(args, "query")
        if not query:
            raise ToolError("Fraza wyszukiwania jest wymagana.")
        cases = ctx.store.search_cases(query[:500])
        return {"cases": [to_json_dict(c) for c in cases], "count": len(cases)}

    @registry.tool(
        name="delete_case",
        description="Usuń sprawę i wszystkie powiązane dokumenty, terminy, wpisy czasu",
        parameters=[ToolParameter("id", "string", "ID sprawy", required=True)],
    )
    async def delete_case(ctx: ToolContext, args: dict[str, Any]) -> Any:
        case_id = require_string(args, "id")
        if not case_id:
            raise ToolError("ID sprawy jest wymagane.")
        if not ctx.store.delete_case(case_id):
            raise ToolError("Sprawa nie znaleziona.")
        if ctx.session.active_case_id == case_id:
            ctx.session.metadata.pop("activeCaseId", None)
        return {"success": True, "message": "Sprawa i powiązane dane usunięte."}

    @registry.tool(
        name="add_case_note",
        description="Dodaj notatkę do sprawy (jeśli nie podano caseId, użyje aktywnej sprawy)",
        parameters=[
            ToolParameter("caseId", "string", "ID sprawy (opcjonalne jeśli jest aktywna sprawa)"),
            ToolParameter("note", "string", "Treść notatki", required=True),
        ],
    )
    async def add_case_note(ctx: ToolContext, args: dict[str, Any]) -> Any:
        case_id = resolve_case_id(args, ctx.session)
        if not case_id:
            raise ToolError(MISSING_CASE_ID)
        note = require_string(args, "note")
        if not note:
            raise ToolError("Treść notatki (note) jest wymagana.")
        legal_case = ctx.store.get_case(case_id)
        if legal_case is None:
            raise ToolError("Sprawa nie znaleziona")

        entry = f"[{utcnow().strftime(POLISH_DATETIME)}] {note}"
        notes = f"{legal_case.notes}\n\n{entry}" if legal_case.notes else entry
        ctx.store.update_case(case_id, notes=notes)
        return {"success": True, "message": "Notatka dodana do sprawy"}

    @registry.tool(
        name="set_active_case",
        description=(
            "Ustaw aktywną sprawę — wszystkie kolejne komendy bez podanego caseId "
            "będą dotyczyć tej sprawy"
        ),
        parameters=[
            ToolParameter("caseId", "string", "ID sprawy do ustawienia jako aktywna", required=True),
        ],
    )
    async def set_active_case(ctx: ToolContext, args: dict[str, Any]) -> Any:
        case_id = require_string(args, "caseId")
        if not case_id:
            raise ToolError("ID sprawy jest wymagane.")
        legal_case = ctx.store.get_case(case_id)
        if legal_case is None:
            raise ToolError("Sprawa nie znaleziona")

        ctx.session.metadata["activeCaseId"] = case_id
        client = ctx.store.get_client(legal_case.client_id)
        sygnatura = f" ({legal_case.sygnatura})" if legal_case.sygnatura else ""
        client_name = client.name if client else "nieznany"
        return {
            "success": True,
            "message": f'Aktywna sprawa: "{legal_case.title}"{sygnatura} — klient: {client_name}',
            "case": {
                "id": legal_case.id,
                "title": legal_case.title,
                "sygnatura": legal_case.sygnatura,
                "status": legal_case.status,
            },
        }

    @registry.tool(
        name="clear_active_case",
        description="Wyczyść aktywną sprawę (wyłącz kontekst sprawy)",
    )
    async def clear_active_case(ctx: ToolContext, args: dict[str, Any]) -> Any:
        ctx.session.metadata.pop("activeCaseId", None)
        return {"success": True, "message": "Aktywna sprawa wyczyszczona."}

    @registry.tool(
        name="get_case_timeline",
        description="Chronologiczna oś czasu sprawy: dokumenty, terminy, notatki, wpisy czasu",
        parameters=[
            ToolParameter("caseId", "string", "ID sprawy (opcjonalnie — używa aktywnej sprawy)"),
        ],
    )
    async def get_case_timeline(ctx: ToolContext, args: dict[str, Any]) -> Any:
        case_id = resolve_case_id(args, ctx.session)
        if not case_id:
            raise ToolError(MISSING_CASE_ID)
        legal_case = ctx.store.get_case(case_id)
        if legal_case is None:
            raise ToolError("Sprawa nie znaleziona.")

        events: list[tuple[datetime, str, str]] = [
            (legal_case.created_at, "utworzenie", f"Sprawa utworzona: {legal_case.title}")
        ]
        for doc in ctx.store.list_documents(case_id=case_id):
            events.append((doc.created_at, "dokument", f'{doc.type}: "{doc.title}" ({doc.status})'))
        for deadline in ctx.store.list_deadlines(case_id=case_id):
            kind = "termin_zrealizowany" if deadline.completed else "termin"
            events.append((deadline.date, kind, f"{deadline.type}: {deadline.title}"))
        for entry in ctx.store.list_time_entries(case_id):
            events.append((entry.date, "czas_pracy", f"{entry.duration_minutes} min — {entry.description}"))

        events.sort(key=lambda e: e[0])
        return {
            "case": legal_case.title,
            "sygnatura": legal_case.sygnatura,
            "totalEvents": len(events),
            "timeline": [
                {"date": when.strftime(POLISH_DATE), "type": kind, "description": description}
                for when, kind, description in events
            ],
        }
