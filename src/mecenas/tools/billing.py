"""Time tracking and billing tools."""

from typing import Any

from mecenas.store.models import utcnow
from mecenas.tools.base import ToolError, ToolParameter
from mecenas.tools.context import ToolContext
from mecenas.tools.registry import ToolRegistry
from mecenas.tools.validation import (
    MISSING_CASE_ID,
    format_duration,
    opt_number,
    parse_date,
    require_string,
    resolve_case_id,
)

DEFAULT_HOURLY_RATE = 300.0  # PLN/h
POLISH_DATE = "%d.%m.%Y"


def _fmt_rate(rate: float) -> str:
    return f"{rate:g} PLN/h"


def register(registry: ToolRegistry) -> None:
    """Register billing tools on a registry."""

    @registry.tool(
        name="log_time",
        description="Zarejestruj czas pracy nad sprawą (jeśli nie podano caseId, użyje aktywnej sprawy)",
        parameters=[
            ToolParameter("caseId", "string", "ID sprawy (opcjonalne jeśli jest aktywna sprawa)"),
            ToolParameter(
                "description",
                "string",
                'Opis wykonanej pracy (np. "Analiza dokumentacji", "Przygotowanie pisma")',
                required=True,
            ),
            ToolParameter("durationMinutes", "number", "Czas w minutach", required=True),
            ToolParameter("hourlyRate", "number", "Stawka godzinowa PLN (opcjonalne)"),
            ToolParameter("date", "string", "Data (YYYY-MM-DD, domyślnie dzisiaj)"),
        ],
    )
    async def log_time(ctx: ToolContext, args: dict[str, Any]) -> Any:
        case_id = resolve_case_id(args, ctx.session)
        if not case_id:
            raise ToolError(MISSING_CASE_ID)
        if ctx.store.get_case(case_id) is None:
            raise ToolError("Sprawa nie znaleziona")
        duration = opt_number(args, "durationMinutes", 1, 14400)
        if duration is None:
            raise ToolError("Czas (durationMinutes) musi być liczbą od 1 do 14400.")
        description = require_string(args, "description")
        if not description:
            raise ToolError("Opis czynności jest wymagany.")
        if args.get("date"):
            when = parse_date(args, "date")
            if when is None:
                raise ToolError("Nieprawidłowy format daty.")
        else:
            when = utcnow()

        minutes = int(duration)
        entry = ctx.store.create_time_entry(
            case_id=case_id,
            description=description,
            duration_minutes=minutes,
            hourly_rate=opt_number(args, "hourlyRate", 1, 10000),
            date=when,
        )
        duration_text = format_duration(minutes)
        return {
            "success": True,
            "entry": {"id": entry.id, "description": entry.description, "duration": duration_text},
            "message": f'Zarejestrowano {duration_text} pracy: "{entry.description}"',
        }

    @registry.tool(
        name="list_time_entries",
        description="Listuj wpisy czasu pracy dla sprawy (jeśli nie podano caseId, użyje aktywnej sprawy)",
        parameters=[
            ToolParameter("caseId", "string", "ID sprawy (opcjonalne jeśli jest aktywna sprawa)"),
        ],
    )
    async def list_time_entries(ctx: ToolContext, args: dict[str, Any]) -> Any:
        case_id = resolve_case_id(args, ctx.session)
        if not case_id:
            raise ToolError(MISSING_CASE_ID)
        entries = ctx.store.list_time_entries(case_id)
        total_minutes = sum(e.duration_minutes for e in entries)
        return {
            "entries": [
                {
                    "id": e.id,
                    "description": e.description,
                    "durationMinutes": e.duration_minutes,
                    "hourlyRate": e.hourly_rate,
                    "date": e.date.strftime(POLISH_DATE),
                }
                for e in entries
            ],
            "count": len(entries),
            "totalMinutes": total_minutes,
            "totalHours": f"{total_minutes / 60:.1f}h",
        }

    @registry.tool(
        name="generate_billing_summary",
        description="Wygeneruj podsumowanie rozliczeniowe dla sprawy",
        parameters=[
            ToolParameter("caseId", "string", "ID sprawy (opcjonalne jeśli jest aktywna sprawa)"),
            ToolParameter(
                "hourlyRate",
                "number",
                "Domyślna stawka godzinowa PLN (jeśli nie podano przy wpisach)",
            ),
        ],
    )
    async def generate_billing_summary(ctx: ToolContext, args: dict[str, Any]) -> Any:
        case_id = resolve_case_id(args, ctx.session)
        if not case_id:
            raise ToolError(MISSING_CASE_ID)
        legal_case = ctx.store.get_case(case_id)
        if legal_case is None:
            raise ToolError("Sprawa nie znaleziona")
        entries = ctx.store.list_time_entries(case_id)
        if not entries:
            return {"message": "Brak wpisów czasu pracy dla tej sprawy."}

        default_rate = opt_number(args, "hourlyRate", 1, 10000) or DEFAULT_HOURLY_RATE
        client = ctx.store.get_client(legal_case.client_id)

        total_minutes = 0
        total_amount = 0.0
        line_items = []
        for e in entries:
            rate = e.hourly_rate if e.hourly_rate is not None else default_rate
            amount = e.duration_minutes / 60 * rate
            total_minutes += e.duration_minutes
            total_amount += amount
            line_items.append(
                {
                    "date": e.date.strftime(POLISH_DATE),
                    "description": e.description,
                    "duration": f"{e.duration_minutes} min",
                    "rate": _fmt_rate(rate),
                    "amount": f"{amount:.2f} PLN",
                }
            )

        return {
            "summary": {
                "case": legal_case.title,
                "sygnatura": legal_case.sygnatura,
                "client": client.name if client else "nieznany",
                "totalHours": f"{total_minutes / 60:.1f}h",
                "totalMinutes": total_minutes,
                "totalAmount": f"{total_amount:.2f} PLN",
                "defaultHourlyRate": _fmt_rate(default_rate),
            },
            "lineItems": line_items,
        }
