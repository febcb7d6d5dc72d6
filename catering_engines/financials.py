"""
Event Financials Orchestrator.

Responsibility:
    ``calculate_event_financials`` is the single entry point that turns an
    ``EventInput`` and a ``MoneyRules`` value into a complete, immutable
    ``EventFinancials``: pricing -> staffing -> labor -> costs & profit ->
    safety audit.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Composes the pricing,
    staffing, labor, profit and safety engines; called by the booking
    snapshot builder, the period summary, UI handlers and the CLI.

Invariants enforced:
    - Purity: no clock reads, no globals, no mutation of inputs.  Two calls
      with equal inputs return equal results.
    - No exceptions for business conditions: odd but coercible data is
      clamped, a missing profile id falls back to auto-matching, and limit
      breaches become warnings.
    - No rounding: every amount is an exact Decimal.  Round at the edge
      (see ``catering_engines.snapshot``).

Failure modes:
    - ``ValueError`` only for inputs that cannot be coerced at all, e.g. an
      unknown event type string on ``EventInput``.

Audit relevance:
    Each call emits CATERING_ENGINE_TRACE with a fingerprint of the input
    and the rules, so two quotes can be shown to come from identical data.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from catering_config.schema import MoneyRules
from catering_engines.labor import LaborCompensation, calculate_labor
from catering_engines.pricing import calculate_pricing
from catering_engines.profit import (
    OwnerDistribution,
    calculate_costs,
    calculate_profit,
    total_labor,
)
from catering_engines.safety import audit_safety_limits
from catering_engines.staffing import StaffingPlan, determine_staffing
from catering_engines.tracer import traced_engine
from catering_kernel.domain.event import EventInput, EventType
from catering_kernel.logging_config import get_logger

logger = get_logger("engines.financials")


@dataclass(frozen=True)
class EventFinancials:
    """Complete money picture of one event. Unrounded."""

    # Revenue
    guest_count: int
    adult_count: int
    child_count: int
    event_type: EventType
    event_date: date
    base_price: Decimal
    child_price: Decimal
    premium_add_on: Decimal
    subtotal: Decimal
    gratuity: Decimal
    gratuity_percent: Decimal
    distance_fee: Decimal
    total_charged: Decimal

    # Costs
    food_cost: Decimal
    food_cost_percent: Decimal
    supplies_cost: Decimal
    transportation_cost: Decimal
    total_costs: Decimal

    # Labor
    staffing_plan: StaffingPlan
    labor_compensation: tuple[LaborCompensation, ...]
    total_labor_base: Decimal
    total_labor_with_gratuity: Decimal
    total_labor_paid: Decimal
    total_excess_to_profit: Decimal
    labor_as_percent_of_revenue: Decimal

    # Profit
    gross_profit: Decimal
    retained_amount: Decimal
    retained_percent: Decimal
    distribution_amount: Decimal
    distribution_percent: Decimal
    owner_distributions: tuple[OwnerDistribution, ...]
    owner_a_distribution: Decimal
    owner_b_distribution: Decimal

    warnings: tuple[str, ...] = ()

    @property
    def total_revenue(self) -> Decimal:
        """Subtotal plus gratuity; the distance fee is a pass-through."""
        return self.subtotal + self.gratuity


@traced_engine(
    "event_financials", "1.0",
    fingerprint_fields=("event_input", "rules"),
)
def calculate_event_financials(
    event_input: EventInput,
    rules: MoneyRules,
) -> EventFinancials:
    """
    Compute the financials of one event.

    Pure function - no side effects, no I/O, deterministic output.

    Args:
        event_input: The event being quoted or booked
        rules: Money rules to price it with

    Returns:
        EventFinancials with every amount unrounded.
    """
    logger.info("event_financials_started", extra={
        "event_type": event_input.event_type.value,
        "event_date": event_input.event_date.isoformat(),
        "guest_count": event_input.guest_count,
        "staffing_profile_id": event_input.staffing_profile_id,
        "override_count": len(event_input.staff_pay_overrides),
    })

    pricing = calculate_pricing(
        adults=event_input.adults,
        children=event_input.children,
        event_type=event_input.event_type,
        distance_miles=event_input.distance_miles,
        premium_add_on=event_input.premium_add_on,
        pricing=rules.pricing,
        distance=rules.distance,
        subtotal_override=event_input.subtotal_override,
    )

    plan = determine_staffing(
        pricing.guest_count,
        event_input.event_type,
        rules,
        event_input.staffing_profile_id,
    )
    compensation = calculate_labor(
        plan,
        pricing.subtotal,
        pricing.gratuity,
        event_input.event_type,
        rules.private_labor,
        event_input.staff_pay_overrides,
    )
    labor = total_labor(compensation)

    costs = calculate_costs(
        pricing.subtotal,
        event_input.event_type,
        rules.costs,
        event_input.food_cost_override,
    )
    profit = calculate_profit(
        pricing.subtotal,
        pricing.gratuity,
        costs,
        labor,
        rules.profit_distribution,
    )

    audit = audit_safety_limits(
        subtotal=pricing.subtotal,
        gratuity=pricing.gratuity,
        food_cost=costs.food_cost,
        total_labor_paid=labor.total_labor_paid,
        limits=rules.safety_limits,
    )

    result = EventFinancials(
        guest_count=pricing.guest_count,
        adult_count=pricing.adult_count,
        child_count=pricing.child_count,
        event_type=event_input.event_type,
        event_date=event_input.event_date,
        base_price=pricing.base_price,
        child_price=pricing.child_price,
        premium_add_on=pricing.premium_add_on,
        subtotal=pricing.subtotal,
        gratuity=pricing.gratuity,
        gratuity_percent=pricing.gratuity_percent,
        distance_fee=pricing.distance_fee,
        total_charged=pricing.total_charged,
        food_cost=costs.food_cost,
        food_cost_percent=audit.food_cost_percent,
        supplies_cost=costs.supplies_cost,
        transportation_cost=costs.transportation_cost,
        total_costs=costs.total_costs,
        staffing_plan=plan,
        labor_compensation=compensation,
        total_labor_base=labor.total_labor_base,
        total_labor_with_gratuity=labor.total_labor_with_gratuity,
        total_labor_paid=labor.total_labor_paid,
        total_excess_to_profit=labor.total_excess_to_profit,
        labor_as_percent_of_revenue=audit.labor_as_percent_of_revenue,
        gross_profit=profit.gross_profit,
        retained_amount=profit.retained_amount,
        retained_percent=profit.retained_percent,
        distribution_amount=profit.distribution_amount,
        distribution_percent=profit.distribution_percent,
        owner_distributions=profit.owner_distributions,
        owner_a_distribution=profit.owner_a_distribution,
        owner_b_distribution=profit.owner_b_distribution,
        warnings=audit.warnings,
    )

    logger.info("event_financials_completed", extra={
        "event_type": event_input.event_type.value,
        "subtotal": str(result.subtotal),
        "total_charged": str(result.total_charged),
        "total_labor_paid": str(result.total_labor_paid),
        "gross_profit": str(result.gross_profit),
        "staff_count": plan.total_staff_count,
        "matched_profile_id": plan.matched_profile_id,
        "warning_count": len(result.warnings),
    })
    return result
