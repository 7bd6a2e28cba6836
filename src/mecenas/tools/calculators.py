"""Legal calculators: court fees, statutory interest and limitation periods.

The calculation functions are pure and take ``now`` explicitly; the tool
wrappers only validate input and format the result.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from mecenas.store.models import utcnow
from mecenas.tools.base import ToolError, ToolParameter
from mecenas.tools.context import ToolContext
from mecenas.tools.registry import ToolRegistry
from mecenas.tools.validation import opt_string, parse_date, require_string

MIN_COURT_FEE = 30
MAX_COURT_FEE = 200_000
SECONDS_PER_DAY = 86_400

COURT_CASE_TYPES = [
    "cywilna",
    "nakazowa",
    "upominawcza",
    "uproszczona",
    "rozwodowa",
    "apelacja",
    "zażalenie",
    "skarga_kasacyjna",
    "rejestrowa_krs",
    "wieczystoksiegowa",
    "spadkowa",
]

# Fixed fees: case type -> (fee, basis)
FIXED_FEES: dict[str, tuple[int, str]] = {
    "rozwodowa": (600, "Art. 26 ust. 1 pkt 1 UKSC — opłata stała 600 zł"),
    "spadkowa": (100, "Art. 49 ust. 1 pkt 1 UKSC — wniosek o stwierdzenie nabycia spadku 100 zł"),
    "rejestrowa_krs": (500, "Art. 52 UKSC — wpis do KRS 500 zł"),
    "wieczystoksiegowa": (200, "Art. 42 ust. 1 UKSC — wpis do księgi wieczystej 200 zł"),
}

# Simplified procedure: (upper WPS bound, fixed fee)
SIMPLIFIED_FEE_TIERS = [
    (500, 30),
    (1500, 100),
    (4000, 200),
    (7500, 400),
    (10000, 500),
    (15000, 750),
    (20000, 1000),
]

# Interest type -> (annual rate %, legal basis)
INTEREST_RATES: dict[str, tuple[float, str]] = {
    "ustawowe": (
        9.25,
        "Art. 359 §2 KC — odsetki ustawowe (stopa referencyjna NBP 5.75% + 3.5pp)",
    ),
    "za_opoznienie": (
        11.25,
        "Art. 481 §2 KC — odsetki ustawowe za opóźnienie (stopa referencyjna NBP 5.75% + 5.5pp)",
    ),
    "handlowe": (
        15.75,
        "Art. 4 ust. 3 ustawy o przeciwdziałaniu nadmiernym opóźnieniom "
        "(stopa referencyjna NBP 5.75% + 10pp)",
    ),
}
DEFAULT_INTEREST_TYPE = "za_opoznienie"


@dataclass(frozen=True)
class LimitationRule:
    years: int
    end_of_year: bool
    basis: str


LIMITATION_RULES: dict[str, LimitationRule] = {
    "ogolne": LimitationRule(6, True, "Art. 118 KC — ogólny termin przedawnienia 6 lat"),
    "gospodarcze": LimitationRule(
        3, True, "Art. 118 KC — roszczenia związane z działalnością gospodarczą 3 lata"
    ),
    "okresowe": LimitationRule(3, True, "Art. 118 KC — świadczenia okresowe 3 lata"),
    "sprzedaz": LimitationRule(2, True, "Art. 554 KC — roszczenia z tytułu sprzedaży 2 lata"),
    "przewoz": LimitationRule(1, False, "Art. 778 KC — roszczenia z umowy przewozu 1 rok"),
    "delikt": LimitationRule(
        3,
        True,
        "Art. 442¹ §1 KC — roszczenie z czynu niedozwolonego 3 lata "
        "(od dnia dowiedzenia się o szkodzie), max 10 lat od zdarzenia",
    ),
    "praca_wynagrodzenie": LimitationRule(
        3, False, "Art. 291 §1 KP — roszczenia ze stosunku pracy 3 lata"
    ),
    "praca_inne": LimitationRule(3, False, "Art. 291 §1 KP — roszczenia ze stosunku pracy 3 lata"),
    "najem": LimitationRule(1, False, "Art. 677 KC — roszczenia z najmu 1 rok od zwrotu rzeczy"),
    "zlecenie": LimitationRule(2, True, "Art. 751 KC — roszczenia z umowy zlecenia 2 lata"),
    "dzielo_wada": LimitationRule(
        2, False, "Art. 646 KC — roszczenia z umowy o dzieło 2 lata od oddania dzieła"
    ),
    "ubezpieczenie": LimitationRule(
        3, True, "Art. 819 §1 KC — roszczenia z umowy ubezpieczenia 3 lata"
    ),
    "bezpodstawne_wzbogacenie": LimitationRule(
        6, True, "Art. 118 KC — bezpodstawne wzbogacenie 6 lat (termin ogólny)"
    ),
}

LIMITATION_WARNING_DAYS = 90


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _proportional_fee(wps: float) -> int:
    return min(MAX_COURT_FEE, max(MIN_COURT_FEE, _round_half_up(wps * 0.05)))


def court_fee(wps: float, case_type: str = "cywilna") -> dict[str, Any]:
    """Compute the civil court fee (ustawa o kosztach sądowych w sprawach cywilnych).

    Args:
        wps: Value of the matter in dispute in PLN (>= 0)
        case_type: One of COURT_CASE_TYPES; unknown types use the proportional fee

    Returns:
        Dict with fee, formatted amounts, legal basis and notes
    """
    notes: list[str] = []

    if case_type in FIXED_FEES:
        fee, basis = FIXED_FEES[case_type]
    elif case_type == "uproszczona":
        for bound, tier_fee in SIMPLIFIED_FEE_TIERS:
            if wps <= bound:
                fee = tier_fee
                basis = "Art. 28 UKSC — opłata stała w postępowaniu uproszczonym"
                break
        else:
            fee = _proportional_fee(wps)
            basis = "Art. 13 ust. 2 UKSC — opłata stosunkowa 5%"
    else:
        fee = _proportional_fee(wps)
        basis = "Art. 13 ust. 2 UKSC — opłata stosunkowa 5% WPS"
        if fee == MIN_COURT_FEE:
            notes.append("Minimalna opłata sądowa: 30 zł")
        if fee == MAX_COURT_FEE:
            notes.append("Maksymalna opłata sądowa: 200 000 zł")

    if case_type == "nakazowa":
        fee = max(MIN_COURT_FEE, _round_half_up(fee * 0.25))
        basis += " + Art. 19 ust. 2 UKSC — 1/4 opłaty w postępowaniu nakazowym"
        notes.append("Jeśli nakaz zapłaty zostanie zaskarżony, pozwany wnosi 3/4 opłaty.")
    elif case_type == "upominawcza":
        basis += " (pełna opłata w postępowaniu upominawczym)"
    elif case_type == "apelacja":
        basis += " (opłata od apelacji = opłata od pozwu)"
    elif case_type == "zażalenie":
        fee = max(MIN_COURT_FEE, _round_half_up(fee * 0.2))
        basis += " + Art. 19 ust. 3 UKSC — 1/5 opłaty od zażalenia"
    elif case_type == "skarga_kasacyjna":
        basis += " (opłata od skargi kasacyjnej = opłata od pozwu)"

    result: dict[str, Any] = {
        "wps": f"{wps:.2f} PLN",
        "case_type": case_type,
        "court_fee": f"{fee:.2f} PLN",
        "court_fee_value": fee,
        "basis": basis,
    }
    if notes:
        result["notes"] = notes
    return result


def statutory_interest(
    principal: float,
    start: datetime,
    end: datetime,
    interest_type: str = DEFAULT_INTEREST_TYPE,
) -> dict[str, Any]:
    """Compute simple statutory interest over whole days at a fixed rate.

    Args:
        principal: Principal amount in PLN (> 0)
        start: Start of the accrual period
        end: End of the accrual period (after ``start``)
        interest_type: ustawowe, za_opoznienie or handlowe; unknown types
            use za_opoznienie

    Returns:
        Dict with rate, period, interest and total
    """
    if interest_type not in INTEREST_RATES:
        interest_type = DEFAULT_INTEREST_TYPE
    annual_rate, basis = INTEREST_RATES[interest_type]

    days = math.floor((end - start).total_seconds() / SECONDS_PER_DAY)
    interest = principal * (annual_rate / 100) * (days / 365)

    return {
        "principal": f"{principal:.2f} PLN",
        "interest_type": interest_type,
        "annual_rate": f"{annual_rate:g}%",
        "period": {
            "from": start.date().isoformat(),
            "to": end.date().isoformat(),
            "days": days,
        },
        "interest": f"{interest:.2f} PLN",
        "total": f"{principal + interest:.2f} PLN",
        "legal_basis": basis,
        "note": (
            "Obliczenie uproszczone (stała stopa). Przy zmianach stóp NBP w okresie naliczania "
            "należy obliczyć odsetki oddzielnie dla każdego podokresu."
        ),
    }


def _add_years(when: datetime, years: int) -> datetime:
    try:
        return when.replace(year=when.year + years)
    except ValueError:
        # 29 February in a non-leap target year rolls over to 1 March
        return when.replace(year=when.year + years, month=3, day=1)


def limitation_period(claim_type: str, start: datetime, now: datetime) -> dict[str, Any]:
    """Compute when a claim becomes time-barred.

    Periods of the ``end_of_year`` kind end on 31 December of the final
    year (art. 118 KC).

    Args:
        claim_type: Key of LIMITATION_RULES
        start: Date the claim became due
        now: Current time

    Returns:
        Dict with limitation date, remaining days and warnings

    Raises:
        ToolError: If the claim type is unknown
    """
    rule = LIMITATION_RULES.get(claim_type)
    if rule is None:
        raise ToolError(
            f"Nieznany typ roszczenia: {claim_type}. Dostępne: {', '.join(LIMITATION_RULES)}"
        )

    limit = _add_years(start, rule.years)
    if rule.end_of_year:
        limit = limit.replace(month=12, day=31)

    expired = limit < now
    days_left = 0 if expired else math.ceil((limit - now).total_seconds() / SECONDS_PER_DAY)

    result: dict[str, Any] = {
        "claim_type": claim_type,
        "start_date": start.date().isoformat(),
        "limitation_years": rule.years,
        "ends_on_dec_31": rule.end_of_year,
        "limitation_date": limit.date().isoformat(),
        "is_expired": expired,
        "days_remaining": days_left,
        "legal_basis": rule.basis,
    }
    if expired:
        result["warnings"] = [
            "ROSZCZENIE PRZEDAWNIONE — dłużnik może podnieść zarzut przedawnienia (art. 117 §2 KC)."
        ]
    elif days_left < LIMITATION_WARNING_DAYS:
        result["warnings"] = [
            f"Roszczenie przedawnia się za {days_left} dni — rozważ przerwanie biegu "
            "przedawnienia (art. 123 KC)."
        ]
    return result


def _number(args: dict[str, Any], key: str) -> float | None:
    value = args.get(key)
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def register(registry: ToolRegistry) -> None:
    """Register calculator tools on a registry."""

    @registry.tool(
        name="calculate_court_fee",
        description=(
            "Oblicz opłatę sądową na podstawie wartości przedmiotu sporu (WPS) lub typu sprawy. "
            "Zgodnie z ustawą o kosztach sądowych w sprawach cywilnych."
        ),
        parameters=[
            ToolParameter("amount", "number", "Wartość przedmiotu sporu (WPS) w PLN", required=True),
            ToolParameter(
                "case_type",
                "string",
                "Typ sprawy (domyślnie: cywilna)",
                enum=COURT_CASE_TYPES,
            ),
        ],
    )
    async def calculate_court_fee(ctx: ToolContext, args: dict[str, Any]) -> Any:
        wps = _number(args, "amount")
        if wps is None or wps < 0:
            raise ToolError("Kwota WPS musi być liczbą >= 0.")
        return court_fee(wps, opt_string(args, "case_type") or "cywilna")

    @registry.tool(
        name="calculate_interest",
        description=(
            "Oblicz odsetki ustawowe za podany okres. Obsługuje: odsetki kapitałowe (art. 359 KC), "
            "za opóźnienie (art. 481 KC), w transakcjach handlowych."
        ),
        parameters=[
            ToolParameter("principal", "number", "Kwota główna (kapitał) w PLN", required=True),
            ToolParameter("start_date", "string", "Data początkowa (YYYY-MM-DD)", required=True),
            ToolParameter("end_date", "string", "Data końcowa (YYYY-MM-DD, domyślnie dzisiaj)"),
            ToolParameter(
                "interest_type",
                "string",
                "Typ odsetek: ustawowe, za_opoznienie (domyślnie), handlowe",
                enum=list(INTEREST_RATES),
            ),
        ],
    )
    async def calculate_interest(ctx: ToolContext, args: dict[str, Any]) -> Any:
        principal = _number(args, "principal")
        if principal is None or principal <= 0:
            raise ToolError("Kwota główna musi być liczbą > 0.")
        start = parse_date(args, "start_date")
        if start is None:
            raise ToolError("Data początkowa jest wymagana (YYYY-MM-DD).")
        end = parse_date(args, "end_date") or utcnow()
        if end <= start:
            raise ToolError("Data końcowa musi być po dacie początkowej.")
        return statutory_interest(
            principal,
            start,
            end,
            opt_string(args, "interest_type") or DEFAULT_INTEREST_TYPE,
        )

    @registry.tool(
        name="calculate_limitation",
        description=(
            "Oblicz termin przedawnienia roszczenia. Uwzględnia art. 118 KC "
            "(koniec roku kalendarzowego), terminy szczególne z ustaw."
        ),
        parameters=[
            ToolParameter(
                "claim_type",
                "string",
                "Typ roszczenia",
                required=True,
                enum=list(LIMITATION_RULES),
            ),
            ToolParameter(
                "start_date", "string", "Data wymagalności roszczenia (YYYY-MM-DD)", required=True
            ),
        ],
    )
    async def calculate_limitation(ctx: ToolContext, args: dict[str, Any]) -> Any:
        claim_type = require_string(args, "claim_type")
        if not claim_type:
            raise ToolError("Typ roszczenia jest wymagany.")
        start = parse_date(args, "start_date")
        if start is None:
            raise ToolError("Data wymagalności roszczenia jest wymagana (YYYY-MM-DD).")
        return limitation_period(claim_type, start, utcnow())
