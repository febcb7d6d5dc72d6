"""
Event-level domain types shared by the config loader and the engines.

Role and event-type vocabularies are closed enums: adding a role means
every ``match`` over ``StaffRole`` in the engines must be revisited.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from catering_kernel.domain.values import ZERO, to_count, to_decimal


class EventType(str, Enum):
    """Kinds of catered event; each has its own base price and food cost %."""

    PRIVATE_DINNER = "private-dinner"
    BUFFET = "buffet"


# Staffing profiles may apply to every event type.
ANY_EVENT_TYPE = "any"


class ChefRole(str, Enum):
    """Chef slot variants. Each reads its own base-pay % and cap."""

    LEAD = "lead"
    OVERFLOW = "overflow"
    FULL = "full"
    BUFFET = "buffet"


class StaffRole(str, Enum):
    """Any staffable slot: a chef variant or the assistant."""

    LEAD = "lead"
    OVERFLOW = "overflow"
    FULL = "full"
    BUFFET = "buffet"
    ASSISTANT = "assistant"

    @property
    def is_chef(self) -> bool:
        return self is not StaffRole.ASSISTANT

    @property
    def chef_role(self) -> ChefRole:
        """The matching ChefRole. Raises ValueError for the assistant."""
        return ChefRole(self.value)


class OwnerRole(str, Enum):
    """The two equity holders a staff slot may be worked by."""

    OWNER_A = "owner-a"
    OWNER_B = "owner-b"


@dataclass(frozen=True)
class StaffPayOverride:
    """
    Event-level pay terms for one role.

    When present, fully replaces the role's base-pay %, cap and gratuity
    split.  ``gratuity_split_percent`` is the slot's fraction of the total
    gratuity, not a share of a pool divided with other roles.

    Attributes:
        role: Role the override applies to (every slot of that role)
        base_pay_percent: % of subtotal paid as base wage
        gratuity_split_percent: % of total gratuity paid to each such slot
        cap: $ maximum payout per slot, None for no cap
    """

    role: StaffRole
    base_pay_percent: Decimal
    gratuity_split_percent: Decimal
    cap: Decimal | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.role, StaffRole):
            object.__setattr__(self, "role", StaffRole(self.role))
        object.__setattr__(self, "base_pay_percent", to_decimal(self.base_pay_percent))
        object.__setattr__(
            self, "gratuity_split_percent", to_decimal(self.gratuity_split_percent)
        )
        if self.cap is not None:
            object.__setattr__(self, "cap", to_decimal(self.cap, default=None))


@dataclass(frozen=True)
class EventInput:
    """
    Everything the engines need to know about one event.

    Immutable per computation call.  Counts and money are clamped to
    non-negative finite values by the engines, not rejected here.

    Attributes:
        adults: Adult guest count
        children: Child guest count (priced at the child discount)
        event_type: Private dinner or buffet
        event_date: Date of service; carried through for reporting
        distance_miles: One-way travel distance
        premium_add_on: $ per guest premium upgrade
        staff_pay_overrides: Per-role pay terms for this event only
        staffing_profile_id: Explicit staffing profile, beats auto-matching
        subtotal_override: Menu-priced subtotal, used when finite and >= 0
        food_cost_override: Menu-priced food cost, used when finite and >= 0
    """

    adults: int
    children: int
    event_type: EventType
    event_date: date
    distance_miles: Decimal = ZERO
    premium_add_on: Decimal = ZERO
    staff_pay_overrides: tuple[StaffPayOverride, ...] = ()
    staffing_profile_id: str | None = None
    subtotal_override: Decimal | None = None
    food_cost_override: Decimal | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.event_type, EventType):
            object.__setattr__(self, "event_type", EventType(self.event_type))
        if not isinstance(self.staff_pay_overrides, tuple):
            object.__setattr__(
                self, "staff_pay_overrides", tuple(self.staff_pay_overrides or ())
            )

    @property
    def guest_count(self) -> int:
        return to_count(self.adults) + to_count(self.children)
