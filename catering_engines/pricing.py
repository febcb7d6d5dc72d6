"""
Event Pricing Engine.

Pure functions with deterministic behavior. No I/O.

Computes what the client is charged: per-guest prices for adults and
children, the optional premium add-on, the subtotal (or a menu-priced
override), gratuity and the travel fee.

Usage:
    from catering_engines.pricing import calculate_pricing

    result = calculate_pricing(
        adults=10,
        children=2,
        event_type=EventType.PRIVATE_DINNER,
        distance_miles=Decimal("27"),
        premium_add_on=Decimal("0"),
        pricing=rules.pricing,
        distance=rules.distance,
    )
    result.total_charged  # subtotal + gratuity + distance fee
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_CEILING, Decimal
from typing import Any

from catering_config.schema import DistanceRules, PricingRules
from catering_kernel.domain.event import EventType
from catering_kernel.domain.values import (
    HUNDRED,
    ZERO,
    non_negative,
    optional_non_negative,
    percent_of,
    to_count,
)
from catering_kernel.logging_config import get_logger

logger = get_logger("engines.pricing")


@dataclass(frozen=True)
class PricingResult:
    """Revenue side of an event. Unrounded."""

    adult_count: int
    child_count: int
    base_price: Decimal
    child_price: Decimal
    premium_add_on: Decimal
    computed_subtotal: Decimal
    subtotal: Decimal
    subtotal_overridden: bool
    gratuity_percent: Decimal
    gratuity: Decimal
    distance_fee: Decimal
    total_charged: Decimal

    @property
    def guest_count(self) -> int:
        return self.adult_count + self.child_count


def base_price_for(event_type: EventType, pricing: PricingRules) -> Decimal:
    """Per-adult price for the event type."""
    match event_type:
        case EventType.BUFFET:
            return non_negative(pricing.buffet_base_price)
        case EventType.PRIVATE_DINNER:
            return non_negative(pricing.private_dinner_base_price)


def calculate_distance_fee(distance_miles: Any, distance_rules: DistanceRules) -> Decimal:
    """
    Travel fee for a one-way distance.

    Nothing is charged inside the free radius.  Beyond it the base fee
    applies plus one additional fee per started increment, so 21 miles with
    a 20 mile radius and 5 mile increments bills base + 1 increment.
    A non-positive increment length bills the base fee only.
    """
    miles = non_negative(distance_miles)
    free = non_negative(distance_rules.free_distance_miles)
    if miles <= free:
        return ZERO

    fee = non_negative(distance_rules.base_distance_fee)
    increment = non_negative(distance_rules.increment_miles)
    if increment == ZERO:
        return fee

    increments = ((miles - free) / increment).to_integral_value(rounding=ROUND_CEILING)
    return fee + increments * non_negative(distance_rules.additional_fee_per_increment)


def calculate_pricing(
    *,
    adults: Any,
    children: Any,
    event_type: EventType,
    distance_miles: Any,
    premium_add_on: Any,
    pricing: PricingRules,
    distance: DistanceRules,
    subtotal_override: Any = None,
) -> PricingResult:
    """
    Price one event.

    Pure function - no side effects, no I/O, deterministic output.

    Args:
        adults: Adult guest count (clamped to a non-negative whole number)
        children: Child guest count (clamped likewise)
        event_type: Selects the base price
        distance_miles: One-way travel distance
        premium_add_on: $ per guest, charged for adults and children alike
        pricing: Prices and gratuity %
        distance: Travel fee tiers
        subtotal_override: Menu-priced subtotal; replaces the computed
            subtotal when it is a finite number >= 0

    Returns:
        PricingResult with unrounded amounts.
    """
    adult_count = to_count(adults)
    child_count = to_count(children)
    add_on = non_negative(premium_add_on)
    if add_on > 0 and not (
        pricing.premium_add_on_min <= add_on <= pricing.premium_add_on_max
    ):
        # Advisory only: the quoted add-on is still charged
        logger.info("premium_add_on_outside_range", extra={
            "premium_add_on": str(add_on),
            "range_min": str(pricing.premium_add_on_min),
            "range_max": str(pricing.premium_add_on_max),
        })

    base_price = base_price_for(event_type, pricing)
    discount = non_negative(pricing.child_discount_percent)
    child_price = base_price * (1 - discount / HUNDRED)

    computed_subtotal = (
        adult_count * base_price
        + child_count * child_price
        + (adult_count + child_count) * add_on
    )
    override = optional_non_negative(subtotal_override)
    subtotal = override if override is not None else computed_subtotal

    gratuity_percent = non_negative(pricing.default_gratuity_percent)
    gratuity = percent_of(subtotal, gratuity_percent)
    distance_fee = calculate_distance_fee(distance_miles, distance)

    logger.debug("event_priced", extra={
        "event_type": event_type.value,
        "adults": adult_count,
        "children": child_count,
        "subtotal": str(subtotal),
        "subtotal_overridden": override is not None,
        "distance_fee": str(distance_fee),
    })

    return PricingResult(
        adult_count=adult_count,
        child_count=child_count,
        base_price=base_price,
        child_price=child_price,
        premium_add_on=add_on,
        computed_subtotal=computed_subtotal,
        subtotal=subtotal,
        subtotal_overridden=override is not None,
        gratuity_percent=gratuity_percent,
        gratuity=gratuity,
        distance_fee=distance_fee,
        total_charged=subtotal + gratuity + distance_fee,
    )
