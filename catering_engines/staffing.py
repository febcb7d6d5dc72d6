"""
Staffing Planner.

Pure functions with deterministic behavior. No I/O.

Decides who works an event and on what pay terms.  A configured staffing
profile is used when one matches; otherwise the guest-count fallback
builds the plan from the per-chef thresholds.

Profile matching:
    1. An explicit profile id that resolves wins, even outside the
       profile's guest range.
    2. Otherwise candidates must match the event type (or "any") and cover
       the guest count.
    3. Exact event type beats "any", then the narrowest guest range wins;
       remaining ties keep configuration order.

Fallback plans:
    - Buffet: one ``buffet`` chef per ``max_guests_per_chef_buffet`` guests
      (rounded up), no assistant.
    - Private dinner: up to the threshold one ``lead``; up to twice the
      threshold one ``overflow``; beyond that a ``lead`` plus
      ``ceil((guests - max) / max) - 1`` ``full`` chefs.  An ``assistant``
      is appended when the rules require one.

Usage:
    from catering_engines.staffing import determine_staffing

    plan = determine_staffing(12, EventType.PRIVATE_DINNER, rules)
    [member.role for member in plan.staff]
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from catering_config.schema import MoneyRules, StaffingProfile
from catering_kernel.domain.event import (
    ANY_EVENT_TYPE,
    ChefRole,
    EventType,
    OwnerRole,
    StaffRole,
)
from catering_kernel.domain.values import non_negative, positive_or_none, to_count
from catering_kernel.logging_config import get_logger

logger = get_logger("engines.staffing")


@dataclass(frozen=True)
class StaffMember:
    """One paid slot. ``cap`` is a $ maximum, None for uncapped."""

    role: StaffRole
    base_pay_percent: Decimal
    cap: Decimal | None = None
    is_owner: bool = False
    owner_role: OwnerRole | None = None


@dataclass(frozen=True)
class StaffingPlan:
    """
    Staff composition for one event.

    ``staff`` order is the order compensation is computed and reported in.
    ``matched_profile_id`` is None for fallback plans.
    """

    chef_roles: tuple[ChefRole, ...]
    assistant_needed: bool
    total_staff_count: int
    staff: tuple[StaffMember, ...]
    matched_profile_id: str | None = None
    matched_profile_name: str | None = None


def find_matching_profile(
    profiles: Sequence[StaffingProfile],
    event_type: EventType,
    guest_count: int,
    staffing_profile_id: str | None = None,
) -> StaffingProfile | None:
    """Best profile for the event, or None when nothing applies."""
    if staffing_profile_id:
        for profile in profiles:
            if profile.id == staffing_profile_id:
                return profile
        logger.info("staffing_profile_not_found", extra={
            "staffing_profile_id": staffing_profile_id,
            "profile_count": len(profiles),
        })

    candidates = [
        p for p in profiles
        if (p.event_type == event_type or p.event_type == ANY_EVENT_TYPE)
        and p.covers(guest_count)
    ]
    if not candidates:
        return None

    # sorted() is stable, so configuration order breaks remaining ties
    candidates = sorted(
        candidates,
        key=lambda p: (0 if p.event_type == event_type else 1, p.guest_range_width),
    )
    return candidates[0]


def staff_member_for(role: StaffRole, rules: MoneyRules) -> StaffMember:
    """A slot carrying the configured base % and cap for ``role``."""
    private = rules.private_labor
    match role:
        case StaffRole.ASSISTANT:
            percent, cap = private.assistant_base_percent, private.assistant_cap
        case StaffRole.BUFFET:
            percent, cap = rules.buffet_labor.chef_base_percent, rules.buffet_labor.chef_cap
        case StaffRole.LEAD:
            percent, cap = private.lead_chef_base_percent, private.lead_chef_cap
        case StaffRole.OVERFLOW:
            percent, cap = private.overflow_chef_base_percent, private.overflow_chef_cap
        case StaffRole.FULL:
            percent, cap = private.full_chef_base_percent, private.full_chef_cap
    return StaffMember(
        role=role,
        base_pay_percent=non_negative(percent),
        cap=positive_or_none(cap),
    )


def _plan(
    roles: Sequence[StaffRole],
    rules: MoneyRules,
    profile: StaffingProfile | None = None,
) -> StaffingPlan:
    staff = tuple(staff_member_for(role, rules) for role in roles)
    return StaffingPlan(
        chef_roles=tuple(role.chef_role for role in roles if role.is_chef),
        assistant_needed=StaffRole.ASSISTANT in roles,
        total_staff_count=len(staff),
        staff=staff,
        matched_profile_id=profile.id if profile else None,
        matched_profile_name=profile.name if profile else None,
    )


def build_plan_from_profile(profile: StaffingProfile, rules: MoneyRules) -> StaffingPlan:
    """One slot per profile role, in profile order."""
    return _plan(profile.roles, rules, profile)


def fallback_roles(
    guest_count: int,
    event_type: EventType,
    rules: MoneyRules,
) -> list[StaffRole]:
    """Roles the guest-count thresholds call for when no profile matches."""
    staffing = rules.staffing
    match event_type:
        case EventType.BUFFET:
            per_chef = max(1, to_count(staffing.max_guests_per_chef_buffet))
            return [StaffRole.BUFFET] * math.ceil(guest_count / per_chef)
        case EventType.PRIVATE_DINNER:
            per_chef = max(1, to_count(staffing.max_guests_per_chef_private))
            if guest_count <= per_chef:
                roles = [StaffRole.LEAD]
            elif guest_count <= 2 * per_chef:
                roles = [StaffRole.OVERFLOW]
            else:
                additional = math.ceil((guest_count - per_chef) / per_chef) - 1
                roles = [StaffRole.LEAD] + [StaffRole.FULL] * additional
            if staffing.assistant_required:
                roles.append(StaffRole.ASSISTANT)
            return roles


def determine_staffing(
    guest_count: int,
    event_type: EventType,
    rules: MoneyRules,
    staffing_profile_id: str | None = None,
) -> StaffingPlan:
    """
    Staffing plan for an event.

    Uses the matching profile when there is one, else the fallback.
    """
    guest_count = to_count(guest_count)
    profile = find_matching_profile(
        rules.staffing.profiles, event_type, guest_count, staffing_profile_id,
    )
    if profile is not None:
        logger.info("staffing_profile_matched", extra={
            "profile_id": profile.id,
            "event_type": event_type.value,
            "guest_count": guest_count,
            "explicit": profile.id == staffing_profile_id,
        })
        return build_plan_from_profile(profile, rules)

    plan = _plan(fallback_roles(guest_count, event_type, rules), rules)
    logger.info("staffing_fallback_applied", extra={
        "event_type": event_type.value,
        "guest_count": guest_count,
        "roles": [m.role.value for m in plan.staff],
    })
    return plan
