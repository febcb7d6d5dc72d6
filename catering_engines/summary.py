"""
Period summary over many events.

Pure functions. Aggregates already-computed ``EventFinancials`` into the
totals a monthly report shows: revenue, costs, labor, profit, owner
distributions and per-event-type counts.  Nothing is rounded.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from catering_config.schema import DistributionFrequency
from catering_engines.financials import EventFinancials
from catering_engines.tracer import traced_engine
from catering_kernel.domain.event import EventType
from catering_kernel.domain.values import HUNDRED, ZERO
from catering_kernel.logging_config import get_logger

logger = get_logger("engines.summary")


@dataclass(frozen=True)
class OwnerTotal:
    owner_id: str
    name: str
    amount: Decimal


@dataclass(frozen=True)
class EventTypeTotal:
    event_type: EventType
    event_count: int
    revenue: Decimal


@dataclass(frozen=True)
class PeriodSummary:
    """
    Totals over a set of events.

    ``total_revenue`` is subtotal plus gratuity; distance fees are
    pass-through and excluded.  ``other_costs`` is supplies plus
    transportation.
    """

    period_label: str
    event_count: int
    total_revenue: Decimal
    total_food_cost: Decimal
    total_labor_cost: Decimal
    total_other_costs: Decimal
    total_gross_profit: Decimal
    total_retained: Decimal
    total_distributed: Decimal
    owner_totals: tuple[OwnerTotal, ...]
    by_event_type: tuple[EventTypeTotal, ...]

    @property
    def profit_margin_percent(self) -> Decimal:
        if self.total_revenue <= ZERO:
            return ZERO
        return self.total_gross_profit / self.total_revenue * HUNDRED


@traced_engine("period_summary", "1.0", fingerprint_fields=("period_label",))
def summarize_events(
    financials: Sequence[EventFinancials],
    period_label: str,
) -> PeriodSummary:
    """Aggregate ``financials``; owners and event types keep first-seen order."""
    owners: dict[str, OwnerTotal] = {}
    types: dict[EventType, EventTypeTotal] = {}

    revenue = food = labor = other = gross = retained = distributed = ZERO
    for f in financials:
        revenue += f.total_revenue
        food += f.food_cost
        labor += f.total_labor_paid
        other += f.supplies_cost + f.transportation_cost
        gross += f.gross_profit
        retained += f.retained_amount
        distributed += f.distribution_amount

        for share in f.owner_distributions:
            prior = owners.get(share.owner_id)
            owners[share.owner_id] = OwnerTotal(
                owner_id=share.owner_id,
                name=prior.name if prior else share.name,
                amount=(prior.amount if prior else ZERO) + share.amount,
            )

        seen = types.get(f.event_type)
        types[f.event_type] = EventTypeTotal(
            event_type=f.event_type,
            event_count=(seen.event_count if seen else 0) + 1,
            revenue=(seen.revenue if seen else ZERO) + f.total_revenue,
        )

    summary = PeriodSummary(
        period_label=period_label,
        event_count=len(financials),
        total_revenue=revenue,
        total_food_cost=food,
        total_labor_cost=labor,
        total_other_costs=other,
        total_gross_profit=gross,
        total_retained=retained,
        total_distributed=distributed,
        owner_totals=tuple(owners.values()),
        by_event_type=tuple(types.values()),
    )
    logger.info("period_summarized", extra={
        "period_label": period_label,
        "event_count": summary.event_count,
        "total_revenue": str(revenue),
        "total_gross_profit": str(gross),
    })
    return summary


def filter_by_month(
    financials: Iterable[EventFinancials],
    year: int,
    month: int,
) -> list[EventFinancials]:
    """Events dated in ``year``-``month``, input order kept."""
    return [
        f for f in financials
        if f.event_date.year == year and f.event_date.month == month
    ]


def distribution_period_label(
    event_date: date,
    frequency: DistributionFrequency,
) -> str:
    """``2026-06``, ``2026-Q2`` or ``2026`` depending on ``frequency``."""
    match frequency:
        case DistributionFrequency.MONTHLY:
            return f"{event_date.year}-{event_date.month:02d}"
        case DistributionFrequency.QUARTERLY:
            return f"{event_date.year}-Q{(event_date.month - 1) // 3 + 1}"
        case DistributionFrequency.ANNUAL:
            return str(event_date.year)
    raise ValueError(f"Unknown distribution frequency: {frequency!r}")


def group_by_distribution_period(
    financials: Iterable[EventFinancials],
    frequency: DistributionFrequency,
) -> dict[str, list[EventFinancials]]:
    """
    Bucket events into owner-distribution periods.

    Periods appear in first-seen order; events keep input order within
    a period.  Pair with ``summarize_events`` to report each payout.
    """
    periods: dict[str, list[EventFinancials]] = {}
    for f in financials:
        periods.setdefault(distribution_period_label(f.event_date, frequency), []).append(f)
    return periods
