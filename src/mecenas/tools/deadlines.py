"""Procedural and statutory deadline tools."""

from typing import Any

from mecenas.store.models import to_json_dict
from mecenas.tools.base import ToolError, ToolParameter
from mecenas.tools.context import ToolContext
from mecenas.tools.registry import ToolRegistry
from mecenas.tools.validation import (
    DEADLINE_TYPES,
    MISSING_CASE_ID,
    opt_number,
    opt_string,
    parse_date,
    require_string,
    resolve_case_id,
)

DEFAULT_REMINDER_DAYS = 3


def register(registry: ToolRegistry) -> None:
    """Register deadline tools on a registry."""

    @registry.tool(
        name="add_deadline",
        description="Dodaj termin procesowy/ustawowy (jeśli nie podano caseId, użyje aktywnej sprawy)",
        parameters=[
            ToolParameter("caseId", "string", "ID sprawy (opcjonalne jeśli jest aktywna sprawa)"),
            ToolParameter("title", "string", "Opis terminu", required=True),
            ToolParameter("date", "string", "Data (YYYY-MM-DD)", required=True),
            ToolParameter("type", "string", "Typ terminu", required=True, enum=list(DEADLINE_TYPES)),
            ToolParameter("reminderDaysBefore", "number", "Dni przed terminem na przypomnienie"),
        ],
    )
    async def add_deadline(ctx: ToolContext, args: dict[str, Any]) -> Any:
        case_id = resolve_case_id(args, ctx.session)
        if not case_id:
            raise ToolError(MISSING_CASE_ID)
        if ctx.store.get_case(case_id) is None:
            raise ToolError("Sprawa nie znaleziona.")
        title = require_string(args, "title")
        if not title:
            raise ToolError("Tytuł terminu jest wymagany.")
        due = parse_date(args, "date")
        if due is None:
            raise ToolError("Data terminu jest wymagana (format ISO, np. 2025-03-15).")
        deadline_type = opt_string(args, "type") or "procesowy"
        if deadline_type not in DEADLINE_TYPES:
            raise ToolError(f"Typ terminu musi być: {', '.join(DEADLINE_TYPES)}")
        reminder_days = opt_number(args, "reminderDaysBefore", 0, 365)

        deadline = ctx.store.create_deadline(
            case_id=case_id,
            title=title,
            date=due,
            type=deadline_type,
            completed=False,
            reminder_days_before=int(reminder_days) if reminder_days is not None else DEFAULT_REMINDER_DAYS,
        )
        return {"success": True, "deadline": to_json_dict(deadline)}

    @registry.tool(
        name="list_deadlines",
        description="Listuj terminy (nadchodzące lub dla sprawy)",
        parameters=[
            ToolParameter("caseId", "string", "ID sprawy"),
            ToolParameter("upcoming", "boolean", "Tylko nadchodzące terminy"),
        ],
    )
    async def list_deadlines(ctx: ToolContext, args: dict[str, Any]) -> Any:
        upcoming = args.get("upcoming")
        deadlines = ctx.store.list_deadlines(
            case_id=resolve_case_id(args, ctx.session),
            upcoming=upcoming if isinstance(upcoming, bool) else None,
        )
        return {"deadlines": [to_json_dict(d) for d in deadlines], "count": len(deadlines)}

    @registry.tool(
        name="update_deadline",
        description="Zaktualizuj termin (tytuł, datę, typ, notatki, dni przypomnienia)",
        parameters=[
            ToolParameter("id", "string", "ID terminu", required=True),
            ToolParameter("title", "string", "Nowy tytuł"),
            ToolParameter("date", "string", "Nowa data (YYYY-MM-DD)"),
            ToolParameter("type", "string", "Typ terminu", enum=list(DEADLINE_TYPES)),
            ToolParameter("notes", "string", "Notatki"),
            ToolParameter("reminderDaysBefore", "number", "Dni przed terminem na przypomnienie"),
        ],
    )
    async def update_deadline(ctx: ToolContext, args: dict[str, Any]) -> Any:
        deadline_id = require_string(args, "id")
        if not deadline_id:
            raise ToolError("ID terminu jest wymagane.")

        updates: dict[str, Any] = {
            "title": opt_string(args, "title"),
            "notes": opt_string(args, "notes"),
        }
        if "date" in args:
            due = parse_date(args, "date")
            if due is None:
                raise ToolError("Nieprawidłowy format daty.")
            updates["date"] = due
        deadline_type = opt_string(args, "type")
        if deadline_type and deadline_type not in DEADLINE_TYPES:
            raise ToolError(f"Typ terminu musi być: {', '.join(DEADLINE_TYPES)}")
        updates["type"] = deadline_type
        reminder_days = opt_number(args, "reminderDaysBefore", 0, 365)
        if reminder_days is not None:
            updates["reminder_days_before"] = int(reminder_days)

        updated = ctx.store.update_deadline(deadline_id, **updates)
        if updated is None:
            raise ToolError("Termin nie znaleziony.")
        return {"success": True, "deadline": to_json_dict(updated)}

    @registry.tool(
        name="complete_deadline",
        description="Oznacz termin jako zrealizowany/wykonany",
        parameters=[ToolParameter("id", "string", "ID terminu", required=True)],
    )
    async def complete_deadline(ctx: ToolContext, args: dict[str, Any]) -> Any:
        deadline_id = require_string(args, "id")
        if not deadline_id:
            raise ToolError("ID terminu jest wymagane.")
        if ctx.store.complete_deadline(deadline_id) is None:
            raise ToolError("Termin nie znaleziony.")
        return {"success": True, "message": "Termin oznaczony jako wykonany."}

    @registry.tool(
        name="delete_deadline",
        description="Usuń termin",
        parameters=[ToolParameter("id", "string", "ID terminu", required=True)],
    )
    async def delete_deadline(ctx: ToolContext, args: dict[str, Any]) -> Any:
        deadline_id = require_string(args, "id")
        if not deadline_id:
            raise ToolError("ID terminu jest wymagane.")
        if not ctx.store.delete_deadline(deadline_id):
            raise ToolError("Termin nie znaleziony.")
        return {"success": True, "message": "Termin usunięty."}
