"""
Booking snapshots.

Responsibility:
    Bridge stored bookings and persisted numbers.
    ``calculate_booking_financials`` recomputes a stored booking against
    the current rules, preferring the booking's menu-priced snapshot when
    it has one.  ``build_booking_snapshot`` freezes the point-in-time
    values a booking keeps once confirmed.

Architecture position:
    Engines -- edge of the pure calculation layer.  This is the only place
    money is rounded (2 places, ROUND_HALF_UP), exactly once.

Invariants enforced:
    - ``captured_at`` is passed in; nothing here reads the clock.
    - Rounded values are derived from the unrounded financials, never fed
      back into a computation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from catering_config.schema import MoneyRules
from catering_engines.financials import EventFinancials, calculate_event_financials
from catering_kernel.domain.event import EventInput, EventType, StaffPayOverride
from catering_kernel.domain.values import ZERO, percent_of, round_money
from catering_kernel.logging_config import LogContext, get_logger

logger = get_logger("engines.snapshot")


class PricingSource(str, Enum):
    """Whether a booking's subtotal came from its menu or the rules."""

    RULES = "rules"
    MENU = "menu"


@dataclass(frozen=True)
class MenuPricingSnapshot:
    """Menu-derived amounts captured when the menu was priced."""

    subtotal_override: Decimal | None = None
    food_cost_override: Decimal | None = None


@dataclass(frozen=True)
class BookingRecord:
    """The money-relevant fields of a stored booking."""

    booking_id: str
    adults: int
    children: int
    event_type: EventType
    event_date: date
    distance_miles: Decimal = ZERO
    premium_add_on: Decimal = ZERO
    staffing_profile_id: str | None = None
    staff_pay_overrides: tuple[StaffPayOverride, ...] = ()
    menu_pricing_snapshot: MenuPricingSnapshot | None = None

    def __post_init__(self) -> None:
        # Stored bookings carry ISO date strings
        if isinstance(self.event_date, str):
            object.__setattr__(self, "event_date", date.fromisoformat(self.event_date))
        if not isinstance(self.event_type, EventType):
            object.__setattr__(self, "event_type", EventType(self.event_type))

    @property
    def pricing_source(self) -> PricingSource:
        if self.menu_pricing_snapshot is not None:
            return PricingSource.MENU
        return PricingSource.RULES

    def to_event_input(self) -> EventInput:
        menu = self.menu_pricing_snapshot
        return EventInput(
            adults=self.adults,
            children=self.children,
            event_type=self.event_type,
            event_date=self.event_date,
            distance_miles=self.distance_miles,
            premium_add_on=self.premium_add_on,
            staff_pay_overrides=self.staff_pay_overrides,
            staffing_profile_id=self.staffing_profile_id,
            subtotal_override=menu.subtotal_override if menu else None,
            food_cost_override=menu.food_cost_override if menu else None,
        )


@dataclass(frozen=True)
class BookingFinancials:
    financials: EventFinancials
    pricing_source: PricingSource


def calculate_booking_financials(
    booking: BookingRecord,
    rules: MoneyRules,
) -> BookingFinancials:
    """Financials for a stored booking, tagged with their pricing source."""
    with LogContext.bind(booking_id=booking.booking_id):
        financials = calculate_event_financials(booking.to_event_input(), rules)
        logger.info("booking_financials_calculated", extra={
            "pricing_source": booking.pricing_source.value,
            "total_charged": str(financials.total_charged),
        })
    return BookingFinancials(financials=financials, pricing_source=booking.pricing_source)


@dataclass(frozen=True)
class StaffLineSnapshot:
    role: str
    base_pay: Decimal
    gratuity_share: Decimal
    final_pay: Decimal
    was_capped: bool
    excess_to_profit: Decimal


@dataclass(frozen=True)
class LaborBreakdownSnapshot:
    matched_profile_id: str | None
    staff: tuple[StaffLineSnapshot, ...]
    total_labor_paid: Decimal
    food_cost: Decimal
    total_costs: Decimal
    gross_profit: Decimal


@dataclass(frozen=True)
class BookingFinancialSnapshot:
    """
    Rounded values persisted on a booking.

    Attributes:
        subtotal, gratuity, distance_fee, total: What the client was quoted
        adult_base_price, child_base_price: Per-guest rates at capture time
        gratuity_percent: Gratuity % at capture time
        deposit_due: ``total * deposit_percent / 100``
        captured_at: When the values were captured
        breakdown: Labor and cost detail, when requested
    """

    subtotal: Decimal
    gratuity: Decimal
    distance_fee: Decimal
    total: Decimal
    adult_base_price: Decimal
    child_base_price: Decimal
    gratuity_percent: Decimal
    deposit_due: Decimal
    captured_at: datetime
    breakdown: LaborBreakdownSnapshot | None = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready mapping; amounts as strings, timestamp as ISO 8601."""
        data: dict[str, Any] = {
            "subtotal": str(self.subtotal),
            "gratuity": str(self.gratuity),
            "distance_fee": str(self.distance_fee),
            "total": str(self.total),
            "adult_base_price": str(self.adult_base_price),
            "child_base_price": str(self.child_base_price),
            "gratuity_percent": str(self.gratuity_percent),
            "deposit_due": str(self.deposit_due),
            "captured_at": self.captured_at.isoformat(),
        }
        if self.breakdown is not None:
            b = self.breakdown
            data["breakdown"] = {
                "matched_profile_id": b.matched_profile_id,
                "staff": [
                    {
                        "role": line.role,
                        "base_pay": str(line.base_pay),
                        "gratuity_share": str(line.gratuity_share),
                        "final_pay": str(line.final_pay),
                        "was_capped": line.was_capped,
                        "excess_to_profit": str(line.excess_to_profit),
                    }
                    for line in b.staff
                ],
                "total_labor_paid": str(b.total_labor_paid),
                "food_cost": str(b.food_cost),
                "total_costs": str(b.total_costs),
                "gross_profit": str(b.gross_profit),
            }
        return data


def _breakdown(financials: EventFinancials) -> LaborBreakdownSnapshot:
    return LaborBreakdownSnapshot(
        matched_profile_id=financials.staffing_plan.matched_profile_id,
        staff=tuple(
            StaffLineSnapshot(
                role=c.role.value,
                base_pay=round_money(c.base_pay),
                gratuity_share=round_money(c.gratuity_share),
                final_pay=round_money(c.final_pay),
                was_capped=c.was_capped,
                excess_to_profit=round_money(c.excess_to_profit),
            )
            for c in financials.labor_compensation
        ),
        total_labor_paid=round_money(financials.total_labor_paid),
        food_cost=round_money(financials.food_cost),
        total_costs=round_money(financials.total_costs),
        gross_profit=round_money(financials.gross_profit),
    )


def build_booking_snapshot(
    financials: EventFinancials,
    captured_at: datetime,
    include_breakdown: bool = False,
    deposit_percent: Decimal = ZERO,
) -> BookingFinancialSnapshot:
    """
    Round ``financials`` once for persistence.

    ``deposit_percent`` is normally ``rules.pricing.default_deposit_percent``;
    the deposit is taken from the unrounded total.
    """
    return BookingFinancialSnapshot(
        subtotal=round_money(financials.subtotal),
        gratuity=round_money(financials.gratuity),
        distance_fee=round_money(financials.distance_fee),
        total=round_money(financials.total_charged),
        adult_base_price=round_money(financials.base_price),
        child_base_price=round_money(financials.child_price),
        gratuity_percent=round_money(financials.gratuity_percent),
        deposit_due=round_money(percent_of(financials.total_charged, deposit_percent)),
        captured_at=captured_at,
        breakdown=_breakdown(financials) if include_breakdown else None,
    )
