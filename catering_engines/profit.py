"""
Cost & Profit Aggregator.

Pure functions with deterministic behavior. No I/O.

Turns revenue, costs and labor into gross profit and splits it between
the business and its owners.

    food_cost       = menu override, else subtotal * food % (event type)
    supplies_cost   = subtotal * supplies %
    gross_profit    = subtotal + gratuity - total_costs - total_labor_paid
    retained_amount = gross_profit * business_retained_percent / 100
    distribution    = gross_profit * owner_distribution_percent / 100
    owner share     = distribution * equity_percent / 100

Gross profit may be negative; the split then distributes a loss.  Retained
and distributed percentages, and owner equities, are applied as written
without checking that they sum to 100.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from catering_config.schema import CostRules, ProfitDistributionRules
from catering_engines.labor import LaborCompensation
from catering_kernel.domain.event import EventType
from catering_kernel.domain.values import (
    ZERO,
    non_negative,
    optional_non_negative,
    percent_of,
)
from catering_kernel.logging_config import get_logger

logger = get_logger("engines.profit")


@dataclass(frozen=True)
class CostBreakdown:
    """Non-labor costs of an event."""

    food_cost: Decimal
    food_cost_overridden: bool
    supplies_cost: Decimal
    transportation_cost: Decimal

    @property
    def total_costs(self) -> Decimal:
        return self.food_cost + self.supplies_cost + self.transportation_cost


@dataclass(frozen=True)
class LaborTotals:
    """Sums over an event's labor compensation."""

    total_labor_base: Decimal
    total_labor_with_gratuity: Decimal
    total_labor_paid: Decimal
    total_excess_to_profit: Decimal


@dataclass(frozen=True)
class OwnerDistribution:
    """One owner's cut of the distribution amount."""

    owner_id: str
    name: str
    equity_percent: Decimal
    amount: Decimal


@dataclass(frozen=True)
class ProfitResult:
    gross_profit: Decimal
    retained_percent: Decimal
    retained_amount: Decimal
    distribution_percent: Decimal
    distribution_amount: Decimal
    owner_distributions: tuple[OwnerDistribution, ...]

    @property
    def owner_a_distribution(self) -> Decimal:
        if len(self.owner_distributions) > 0:
            return self.owner_distributions[0].amount
        return ZERO

    @property
    def owner_b_distribution(self) -> Decimal:
        if len(self.owner_distributions) > 1:
            return self.owner_distributions[1].amount
        return ZERO


def food_cost_percent_for(event_type: EventType, costs: CostRules) -> Decimal:
    match event_type:
        case EventType.BUFFET:
            return non_negative(costs.food_cost_percent_buffet)
        case EventType.PRIVATE_DINNER:
            return non_negative(costs.food_cost_percent_private)


def calculate_costs(
    subtotal: Decimal,
    event_type: EventType,
    costs: CostRules,
    food_cost_override: Any = None,
) -> CostBreakdown:
    """Food, supplies and transportation for one event."""
    override = optional_non_negative(food_cost_override)
    if override is not None:
        food_cost = override
    else:
        food_cost = percent_of(subtotal, food_cost_percent_for(event_type, costs))
    return CostBreakdown(
        food_cost=food_cost,
        food_cost_overridden=override is not None,
        supplies_cost=percent_of(subtotal, costs.supplies_cost_percent),
        transportation_cost=non_negative(costs.transportation_stipend),
    )


def total_labor(compensation: Sequence[LaborCompensation]) -> LaborTotals:
    return LaborTotals(
        total_labor_base=sum((c.base_pay for c in compensation), ZERO),
        total_labor_with_gratuity=sum((c.total_calculated for c in compensation), ZERO),
        total_labor_paid=sum((c.final_pay for c in compensation), ZERO),
        total_excess_to_profit=sum((c.excess_to_profit for c in compensation), ZERO),
    )


def distribute_profit(
    gross_profit: Decimal,
    distribution_rules: ProfitDistributionRules,
) -> ProfitResult:
    """Split ``gross_profit`` between the business and each owner."""
    retained_percent = non_negative(distribution_rules.business_retained_percent)
    distribution_percent = non_negative(distribution_rules.owner_distribution_percent)
    distribution_amount = percent_of(gross_profit, distribution_percent)

    owners = tuple(
        OwnerDistribution(
            owner_id=owner.owner_id,
            name=owner.name,
            equity_percent=non_negative(owner.equity_percent),
            amount=percent_of(distribution_amount, owner.equity_percent),
        )
        for owner in distribution_rules.resolved_owners()
    )
    return ProfitResult(
        gross_profit=gross_profit,
        retained_percent=retained_percent,
        retained_amount=percent_of(gross_profit, retained_percent),
        distribution_percent=distribution_percent,
        distribution_amount=distribution_amount,
        owner_distributions=owners,
    )


def calculate_profit(
    subtotal: Decimal,
    gratuity: Decimal,
    costs: CostBreakdown,
    labor: LaborTotals,
    distribution_rules: ProfitDistributionRules,
) -> ProfitResult:
    gross_profit = subtotal + gratuity - costs.total_costs - labor.total_labor_paid
    if gross_profit < ZERO:
        logger.info("event_gross_loss", extra={
            "gross_profit": str(gross_profit),
            "total_costs": str(costs.total_costs),
            "total_labor_paid": str(labor.total_labor_paid),
        })
    return distribute_profit(gross_profit, distribution_rules)
