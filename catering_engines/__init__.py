"""
Module: catering_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    event-financials engines.  This is the canonical import surface for
    booking screens, reports and the CLI.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import catering_kernel and the catering_config schema types
    (and sibling engine modules).

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      Dates and capture timestamps are passed in by the caller.
    - Decimal-only arithmetic: all money uses ``Decimal``; floats arriving
      from documents are converted through ``str()``.
    - Determinism: identical inputs always produce identical outputs.

Failure modes:
    - Engines do not raise for business conditions; limit breaches become
      warning strings on ``EventFinancials``.

Audit relevance:
    ``calculate_event_financials`` is traced via ``@traced_engine`` (see
    ``catering_engines.tracer``), emitting CATERING_ENGINE_TRACE records.

Usage:
    from catering_engines import calculate_event_financials
    from catering_config import get_money_rules

    financials = calculate_event_financials(event_input, get_money_rules())
"""

from catering_kernel.logging_config import get_logger

logger = get_logger("engines")

from catering_engines.financials import (
    EventFinancials,
    calculate_event_financials,
)
from catering_engines.labor import (
    ConfigSource,
    LaborCompensation,
    RoleConfig,
    apply_cap,
    calculate_labor,
    resolve_role_config,
)
from catering_engines.pricing import (
    PricingResult,
    calculate_distance_fee,
    calculate_pricing,
)
from catering_engines.profit import (
    CostBreakdown,
    LaborTotals,
    OwnerDistribution,
    ProfitResult,
    calculate_costs,
    calculate_profit,
    distribute_profit,
    total_labor,
)
from catering_engines.safety import SafetyAudit, audit_safety_limits
from catering_engines.snapshot import (
    BookingFinancials,
    BookingFinancialSnapshot,
    BookingRecord,
    MenuPricingSnapshot,
    PricingSource,
    build_booking_snapshot,
    calculate_booking_financials,
)
from catering_engines.staffing import (
    StaffingPlan,
    StaffMember,
    build_plan_from_profile,
    determine_staffing,
    find_matching_profile,
)
from catering_engines.summary import (
    PeriodSummary,
    distribution_period_label,
    filter_by_month,
    group_by_distribution_period,
    summarize_events,
)
from catering_engines.tracer import traced_engine

__all__ = [
    # Orchestrator
    "EventFinancials",
    "calculate_event_financials",
    # Pricing
    "PricingResult",
    "calculate_distance_fee",
    "calculate_pricing",
    # Staffing
    "StaffingPlan",
    "StaffMember",
    "build_plan_from_profile",
    "determine_staffing",
    "find_matching_profile",
    # Labor
    "ConfigSource",
    "LaborCompensation",
    "RoleConfig",
    "apply_cap",
    "calculate_labor",
    "resolve_role_config",
    # Costs and profit
    "CostBreakdown",
    "LaborTotals",
    "OwnerDistribution",
    "ProfitResult",
    "calculate_costs",
    "calculate_profit",
    "distribute_profit",
    "total_labor",
    # Safety
    "SafetyAudit",
    "audit_safety_limits",
    # Snapshots
    "BookingFinancials",
    "BookingFinancialSnapshot",
    "BookingRecord",
    "MenuPricingSnapshot",
    "PricingSource",
    "build_booking_snapshot",
    "calculate_booking_financials",
    # Reporting
    "PeriodSummary",
    "distribution_period_label",
    "filter_by_month",
    "group_by_distribution_period",
    "summarize_events",
    # Tracing
    "traced_engine",
]
