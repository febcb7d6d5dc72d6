"""
Tests for booking snapshots and stored-booking recomputation.
"""

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from catering_engines.financials import calculate_event_financials
from catering_engines.snapshot import (
    BookingRecord,
    MenuPricingSnapshot,
    PricingSource,
    build_booking_snapshot,
    calculate_booking_financials,
)
from catering_kernel.domain.event import EventType

CAPTURED_AT = datetime(2026, 5, 1, 15, 30, tzinfo=UTC)


@pytest.fixture
def financials(make_input, default_rules):
    # 100.005 subtotal -> 20.001 gratuity; exercises half-up rounding
    return calculate_event_financials(
        make_input(adults=3, subtotal_override=Decimal("100.005"), distance_miles=Decimal("21")),
        default_rules,
    )


class TestBuildBookingSnapshot:
    """Money rounded once, half-up, at capture."""

    def test_rounds_half_up(self, financials):
        snapshot = build_booking_snapshot(financials, CAPTURED_AT)
        assert snapshot.subtotal == Decimal("100.01")
        assert snapshot.gratuity == Decimal("20.00")
        assert snapshot.distance_fee == Decimal("75.00")
        assert snapshot.total == Decimal("195.01")

    def test_rates_captured(self, financials):
        snapshot = build_booking_snapshot(financials, CAPTURED_AT)
        assert snapshot.adult_base_price == Decimal("60.00")
        assert snapshot.child_base_price == Decimal("30.00")
        assert snapshot.gratuity_percent == Decimal("20.00")
        assert snapshot.captured_at == CAPTURED_AT

    def test_unrounded_financials_untouched(self, financials):
        build_booking_snapshot(financials, CAPTURED_AT)
        assert financials.subtotal == Decimal("100.005")

    def test_deposit(self, financials):
        snapshot = build_booking_snapshot(financials, CAPTURED_AT, deposit_percent=Decimal("30"))
        # 30% of the unrounded 195.0060
        assert snapshot.deposit_due == Decimal("58.50")

    def test_no_breakdown_by_default(self, financials):
        snapshot = build_booking_snapshot(financials, CAPTURED_AT)
        assert snapshot.breakdown is None
        assert "breakdown" not in snapshot.to_dict()

    def test_breakdown(self, financials):
        snapshot = build_booking_snapshot(financials, CAPTURED_AT, include_breakdown=True)
        assert [line.role for line in snapshot.breakdown.staff] == ["lead", "assistant"]
        assert snapshot.breakdown.matched_profile_id is None
        for line in snapshot.breakdown.staff:
            assert line.final_pay == line.final_pay.quantize(Decimal("0.01"))

    def test_to_dict(self, financials):
        data = build_booking_snapshot(financials, CAPTURED_AT, include_breakdown=True).to_dict()
        assert data["subtotal"] == "100.01"
        assert data["captured_at"] == "2026-05-01T15:30:00+00:00"
        assert data["breakdown"]["staff"][0]["role"] == "lead"
        assert isinstance(data["breakdown"]["staff"][0]["was_capped"], bool)


class TestCalculateBookingFinancials:
    """Stored bookings recompute against current rules."""

    def test_rules_priced_booking(self, default_rules):
        booking = BookingRecord(
            booking_id="bk-1",
            adults=10,
            children=0,
            event_type=EventType.PRIVATE_DINNER,
            event_date=date(2026, 6, 13),
        )
        result = calculate_booking_financials(booking, default_rules)
        assert result.pricing_source is PricingSource.RULES
        assert result.financials.subtotal == Decimal("600")

    def test_menu_priced_booking(self, default_rules):
        booking = BookingRecord(
            booking_id="bk-2",
            adults=10,
            children=0,
            event_type="buffet",
            event_date="2026-06-13",
            menu_pricing_snapshot=MenuPricingSnapshot(
                subtotal_override=Decimal("900"),
                food_cost_override=Decimal("150"),
            ),
        )
        result = calculate_booking_financials(booking, default_rules)
        assert result.pricing_source is PricingSource.MENU
        assert result.financials.subtotal == Decimal("900")
        assert result.financials.food_cost == Decimal("150")
        assert result.financials.event_date == date(2026, 6, 13)

    def test_empty_menu_snapshot_still_menu_source(self, default_rules):
        booking = BookingRecord(
            booking_id="bk-3",
            adults=10,
            children=0,
            event_type=EventType.PRIVATE_DINNER,
            event_date=date(2026, 6, 13),
            menu_pricing_snapshot=MenuPricingSnapshot(),
        )
        result = calculate_booking_financials(booking, default_rules)
        assert result.pricing_source is PricingSource.MENU
        assert result.financials.subtotal == Decimal("600")

    def test_booking_id_bound_to_logs(self, captured_logs, default_rules):
        booking = BookingRecord(
            booking_id="bk-42",
            adults=10,
            children=0,
            event_type=EventType.PRIVATE_DINNER,
            event_date=date(2026, 6, 13),
        )
        calculate_booking_financials(booking, default_rules)
        logs = captured_logs()
        completed = [r for r in logs if r["message"] == "event_financials_completed"]
        assert completed[0]["booking_id"] == "bk-42"
        trailing = [r for r in logs if r["message"] == "booking_financials_calculated"]
        assert trailing[0]["pricing_source"] == "rules"
