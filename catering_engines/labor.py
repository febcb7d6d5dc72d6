"""
Labor Compensation Calculator.

Pure functions with deterministic behavior. No I/O.

Pays each slot of a staffing plan, in plan order:

    base_pay          = subtotal * base_pay_percent / 100
    total_calculated  = base_pay + gratuity_share
    final_pay         = min(total_calculated, cap)   (cap None: uncapped)
    excess_to_profit  = total_calculated - final_pay

Pay terms resolve once per slot: an event-level override for the slot's
role replaces the plan slot's base %, cap and gratuity split entirely.

Gratuity shares:
    - Override present: ``gratuity * override.gratuity_split_percent / 100``
      for every slot of that role.
    - Buffet, no override: gratuity split evenly across all staff.
    - Private dinner, no override: the assistant takes
      ``assistant_gratuity_split_percent``; chefs share
      ``chef_gratuity_split_percent`` evenly.

Shares are not normalized: overrides whose splits add up past 100% pay out
more than the gratuity collected.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from catering_config.schema import PrivateLaborRules
from catering_engines.staffing import StaffingPlan, StaffMember
from catering_kernel.domain.event import (
    EventType,
    OwnerRole,
    StaffPayOverride,
    StaffRole,
)
from catering_kernel.domain.values import (
    ZERO,
    non_negative,
    percent_of,
    positive_or_none,
)
from catering_kernel.logging_config import get_logger

logger = get_logger("engines.labor")


class ConfigSource(str, Enum):
    """Where a slot's pay terms came from."""

    OVERRIDE = "override"
    PLAN = "plan"


@dataclass(frozen=True)
class RoleConfig:
    """Resolved pay terms for one slot.

    ``gratuity_split_percent`` is None when the slot takes its share of
    the event-type gratuity pool.
    """

    base_pay_percent: Decimal
    cap: Decimal | None
    gratuity_split_percent: Decimal | None
    source: ConfigSource


@dataclass(frozen=True)
class LaborCompensation:
    """What one slot is paid, before and after its cap."""

    role: StaffRole
    base_pay: Decimal
    gratuity_share: Decimal
    total_calculated: Decimal
    cap: Decimal | None
    final_pay: Decimal
    was_capped: bool
    excess_to_profit: Decimal
    is_owner: bool = False
    owner_role: OwnerRole | None = None
    source: ConfigSource = ConfigSource.PLAN


def resolve_role_config(
    member: StaffMember,
    override: StaffPayOverride | None,
) -> RoleConfig:
    """Override beats plan; the chosen source supplies every term."""
    if override is not None:
        return RoleConfig(
            base_pay_percent=non_negative(override.base_pay_percent),
            cap=positive_or_none(override.cap),
            gratuity_split_percent=non_negative(override.gratuity_split_percent),
            source=ConfigSource.OVERRIDE,
        )
    return RoleConfig(
        base_pay_percent=non_negative(member.base_pay_percent),
        cap=positive_or_none(member.cap),
        gratuity_split_percent=None,
        source=ConfigSource.PLAN,
    )


def apply_cap(total: Decimal, cap: Decimal | None) -> tuple[Decimal, bool, Decimal]:
    """
    Clamp a payout to its cap.

    Returns ``(final_pay, was_capped, excess)``.  Capping only happens when
    ``total`` is strictly greater than ``cap``.
    """
    if cap is not None and total > cap:
        return cap, True, total - cap
    return total, False, ZERO


def _index_overrides(
    overrides: Sequence[StaffPayOverride],
) -> dict[StaffRole, StaffPayOverride]:
    # First override for a role wins
    by_role: dict[StaffRole, StaffPayOverride] = {}
    for override in overrides:
        by_role.setdefault(override.role, override)
    return by_role


def _pool_share(
    member: StaffMember,
    plan: StaffingPlan,
    gratuity: Decimal,
    event_type: EventType,
    private_labor: PrivateLaborRules,
) -> Decimal:
    match event_type:
        case EventType.BUFFET:
            return gratuity / len(plan.staff)
        case EventType.PRIVATE_DINNER:
            if member.role is StaffRole.ASSISTANT:
                return percent_of(gratuity, private_labor.assistant_gratuity_split_percent)
            chef_count = len(plan.chef_roles)
            if chef_count == 0:
                return ZERO
            return percent_of(gratuity, private_labor.chef_gratuity_split_percent) / chef_count


def calculate_labor(
    plan: StaffingPlan,
    subtotal: Decimal,
    gratuity: Decimal,
    event_type: EventType,
    private_labor: PrivateLaborRules,
    overrides: Sequence[StaffPayOverride] = (),
) -> tuple[LaborCompensation, ...]:
    """
    Compensation for every slot of ``plan``, in plan order.

    Args:
        plan: Staffing plan; its ``staff`` order is preserved
        subtotal: Event subtotal the base % applies to
        gratuity: Total gratuity collected
        event_type: Selects the gratuity pool rule
        private_labor: Private-dinner gratuity split percentages
        overrides: Event-level pay terms keyed by role

    Returns:
        One LaborCompensation per slot.
    """
    by_role = _index_overrides(overrides)
    compensation: list[LaborCompensation] = []

    for member in plan.staff:
        config = resolve_role_config(member, by_role.get(member.role))

        if config.gratuity_split_percent is not None:
            gratuity_share = percent_of(gratuity, config.gratuity_split_percent)
        else:
            gratuity_share = _pool_share(member, plan, gratuity, event_type, private_labor)

        base_pay = percent_of(subtotal, config.base_pay_percent)
        total_calculated = base_pay + gratuity_share
        final_pay, was_capped, excess = apply_cap(total_calculated, config.cap)

        if was_capped:
            logger.info("labor_cap_applied", extra={
                "role": member.role.value,
                "total_calculated": str(total_calculated),
                "cap": str(config.cap),
                "excess_to_profit": str(excess),
                "source": config.source.value,
            })

        compensation.append(LaborCompensation(
            role=member.role,
            base_pay=base_pay,
            gratuity_share=gratuity_share,
            total_calculated=total_calculated,
            cap=config.cap,
            final_pay=final_pay,
            was_capped=was_capped,
            excess_to_profit=excess,
            is_owner=member.is_owner,
            owner_role=member.owner_role,
            source=config.source,
        ))

    return tuple(compensation)
