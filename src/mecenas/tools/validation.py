"""Input validation helpers for tool arguments.

Models send loosely typed JSON. These helpers never raise: they return the
cleaned value, or ``None`` when the field is missing or unusable, and the
calling tool decides whether that is an error.
"""

import math
from datetime import UTC, datetime
from typing import Any

from mecenas.store.models import Session

CLIENT_TYPES = ("osoba_fizyczna", "osoba_prawna")
LAW_AREAS = (
    "cywilne",
    "karne",
    "administracyjne",
    "pracy",
    "rodzinne",
    "gospodarcze",
    "podatkowe",
    "egzekucyjne",
    "inne",
)
DEADLINE_TYPES = ("procesowy", "ustawowy", "umowny", "wewnetrzny")
DOCUMENT_TYPES = (
    "pozew",
    "odpowiedz_na_pozew",
    "apelacja",
    "zarzuty",
    "sprzeciw",
    "wezwanie_do_zaplaty",
    "wniosek",
    "pismo_procesowe",
    "umowa",
    "opinia_prawna",
    "notatka",
    "inne",
)
CASE_STATUSES = (
    "nowa",
    "w_toku",
    "oczekuje_na_termin",
    "oczekuje_na_dokument",
    "zawieszona",
    "zamknieta",
    "wygrana",
    "przegrana",
    "ugoda",
)
DOCUMENT_STATUSES = ("szkic", "do_sprawdzenia", "zatwierdzony", "zlozony")
LOCKED_DOCUMENT_STATUSES = ("zatwierdzony", "zlozony")

MISSING_CASE_ID = "Brak ID sprawy. Podaj caseId lub ustaw aktywną sprawę (set_active_case)."


def require_string(args: dict[str, Any], key: str) -> str | None:
    """Return the trimmed string value, or None if missing or blank."""
    value = args.get(key)
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def opt_string(args: dict[str, Any], key: str, max_len: int = 10000) -> str | None:
    """Return the string value cut to ``max_len``, or None if not a string."""
    value = args.get(key)
    if not isinstance(value, str):
        return None
    return value[:max_len]


def opt_number(
    args: dict[str, Any],
    key: str,
    min_value: float = -math.inf,
    max_value: float = math.inf,
) -> float | None:
    """Return a finite number within bounds, or None.

    Numeric strings are accepted since local models often quote numbers.
    Booleans are rejected.
    """
    value = args.get(key)
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number < min_value or number > max_value:
        return None
    return number


def parse_date(args: dict[str, Any], key: str) -> datetime | None:
    """Parse an ISO date or datetime; naive values are taken as UTC."""
    value = args.get(key)
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def resolve_case_id(args: dict[str, Any], session: Session) -> str | None:
    """Explicit ``caseId`` input, else the session's active case."""
    value = args.get("caseId")
    if isinstance(value, str) and value:
        return value
    return session.active_case_id


def format_duration(minutes: int) -> str:
    """Format minutes as ``"Xh Ymin"`` (or ``"Ymin"`` under an hour)."""
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}min" if hours > 0 else f"{mins}min"
