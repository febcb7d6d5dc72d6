"""
Safety-Limit Auditor.

Pure functions with deterministic behavior. No I/O.

Reports labor and food cost as percentages and flags the ones above their
advisory ceilings.  A breach never changes a number and never raises; it
becomes a human-readable warning carried on the financials and a WARNING
log record.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from catering_config.schema import SafetyLimits
from catering_kernel.domain.values import HUNDRED, ZERO, non_negative
from catering_kernel.logging_config import get_logger

logger = get_logger("engines.safety")


@dataclass(frozen=True)
class SafetyAudit:
    labor_as_percent_of_revenue: Decimal
    food_cost_percent: Decimal
    warnings: tuple[str, ...] = ()


def _one_place(value: Decimal) -> Decimal:
    return value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def _ratio_percent(part: Decimal, whole: Decimal) -> Decimal:
    if whole <= ZERO:
        return ZERO
    return part / whole * HUNDRED


def audit_safety_limits(
    *,
    subtotal: Decimal,
    gratuity: Decimal,
    food_cost: Decimal,
    total_labor_paid: Decimal,
    limits: SafetyLimits,
) -> SafetyAudit:
    """
    Compute the ratios and collect a warning per ceiling strictly exceeded.

    Labor is measured against subtotal plus gratuity; food cost against the
    subtotal.  A zero denominator reports 0%.
    """
    labor_percent = _ratio_percent(total_labor_paid, subtotal + gratuity)
    food_percent = _ratio_percent(food_cost, subtotal)

    warnings: list[str] = []
    if limits.warn_when_exceeded:
        max_labor = non_negative(limits.max_total_labor_percent)
        max_food = non_negative(limits.max_food_cost_percent)
        if labor_percent > max_labor:
            warnings.append(
                f"Labor cost ({_one_place(labor_percent)}%) exceeds maximum "
                f"({max_labor}%) of total revenue"
            )
            logger.warning("labor_limit_exceeded", extra={
                "labor_percent": str(labor_percent),
                "max_total_labor_percent": str(max_labor),
            })
        if food_percent > max_food:
            warnings.append(
                f"Food cost ({_one_place(food_percent)}%) exceeds maximum ({max_food}%)"
            )
            logger.warning("food_cost_limit_exceeded", extra={
                "food_cost_percent": str(food_percent),
                "max_food_cost_percent": str(max_food),
            })

    return SafetyAudit(
        labor_as_percent_of_revenue=labor_percent,
        food_cost_percent=food_percent,
        warnings=tuple(warnings),
    )
