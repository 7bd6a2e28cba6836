"""Tests for the legal calculators."""

import json
from datetime import UTC, datetime

import pytest

from mecenas.tools.base import ToolError
from mecenas.tools.calculators import court_fee, limitation_period, statutory_interest


class TestCourtFee:
    def test_proportional_fee(self):
        result = court_fee(10000)
        assert result["court_fee_value"] == 500
        assert result["court_fee"] == "500.00 PLN"

    def test_minimum_fee(self):
        result = court_fee(100)
        assert result["court_fee_value"] == 30
        assert "Minimalna opłata sądowa: 30 zł" in result["notes"]

    def test_maximum_fee(self):
        result = court_fee(10_000_000)
        assert result["court_fee_value"] == 200_000

    def test_rounds_half_up(self):
        assert court_fee(1010)["court_fee_value"] == 51  # 50.5

    def test_order_for_payment_is_quarter(self):
        result = court_fee(10000, "nakazowa")
        assert result["court_fee_value"] == 125
        assert "1/4" in result["basis"]

    def test_simplified_tiers(self):
        assert court_fee(400, "uproszczona")["court_fee_value"] == 30
        assert court_fee(7000, "uproszczona")["court_fee_value"] == 400
        assert court_fee(50000, "uproszczona")["court_fee_value"] == 2500

    def test_fixed_fee(self):
        assert court_fee(1_000_000, "rozwodowa")["court_fee_value"] == 600

    def test_complaint_is_fifth(self):
        assert court_fee(10000, "zażalenie")["court_fee_value"] == 100


class TestStatutoryInterest:
    def test_one_year_late_payment(self):
        result = statutory_interest(
            10000,
            datetime(2025, 1, 1, tzinfo=UTC),
            datetime(2026, 1, 1, tzinfo=UTC),
        )
        assert result["period"]["days"] == 365
        assert result["interest"] == "1125.00 PLN"
        assert result["total"] == "11125.00 PLN"

    def test_unknown_type_falls_back(self):
        result = statutory_interest(
            1000,
            datetime(2025, 1, 1, tzinfo=UTC),
            datetime(2025, 2, 1, tzinfo=UTC),
            "nieznane",
        )
        assert result["interest_type"] == "za_opoznienie"


class TestLimitationPeriod:
    def test_end_of_year_rule(self):
        result = limitation_period(
            "ogolne",
            datetime(2020, 5, 10, tzinfo=UTC),
            datetime(2024, 1, 1, tzinfo=UTC),
        )
        assert result["limitation_date"] == "2026-12-31"
        assert result["is_expired"] is False

    def test_expired(self):
        result = limitation_period(
            "przewoz",
            datetime(2020, 5, 10, tzinfo=UTC),
            datetime(2024, 1, 1, tzinfo=UTC),
        )
        assert result["limitation_date"] == "2021-05-10"
        assert result["is_expired"] is True
        assert result["days_remaining"] == 0
        assert "PRZEDAWNIONE" in result["warnings"][0]

    def test_close_to_expiry_warns(self):
        result = limitation_period(
            "sprzedaz",
            datetime(2022, 3, 1, tzinfo=UTC),
            datetime(2024, 12, 1, tzinfo=UTC),
        )
        assert result["days_remaining"] == 30
        assert "30 dni" in result["warnings"][0]

    def test_leap_day_start(self):
        result = limitation_period(
            "przewoz",
            datetime(2024, 2, 29, tzinfo=UTC),
            datetime(2024, 3, 1, tzinfo=UTC),
        )
        assert result["limitation_date"] == "2025-03-01"

    def test_unknown_claim_type(self):
        with pytest.raises(ToolError, match="Nieznany typ roszczenia"):
            limitation_period("kosmiczne", datetime(2020, 1, 1, tzinfo=UTC), datetime(2024, 1, 1, tzinfo=UTC))


class TestCalculatorTools:
    @pytest.mark.asyncio
    async def test_court_fee_tool(self, dispatcher, session):
        result = json.loads(await dispatcher.execute("calculate_court_fee", {"amount": 10000}, session))
        assert result["court_fee_value"] == 500

    @pytest.mark.asyncio
    async def test_court_fee_rejects_negative(self, dispatcher, session):
        result = json.loads(await dispatcher.execute("calculate_court_fee", {"amount": -5}, session))
        assert "error" in result

    @pytest.mark.asyncio
    async def test_interest_requires_ordered_dates(self, dispatcher, session):
        result = json.loads(
            await dispatcher.execute(
                "calculate_interest",
                {"principal": 1000, "start_date": "2025-02-01", "end_date": "2025-01-01"},
                session,
            )
        )
        assert result == {"error": "Data końcowa musi być po dacie początkowej."}
