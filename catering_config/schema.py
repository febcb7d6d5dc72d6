"""
MoneyRules schema.

The canonical data model of the rules configuration.  Rules documents
(YAML files, JSON blobs saved by the settings screen) are parsed into
these frozen types by the loader; the engines only ever see these types.

Every field has a default, so a partial document is always completable.
Percentages are stored as written (e.g. ``Decimal("15")`` for 15%); the
engines read them as ``max(0, value)``.  A cap of ``None`` means the role
is uncapped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from catering_kernel.domain.event import ANY_EVENT_TYPE, EventType, StaffRole
from catering_kernel.exceptions import InvalidStaffingProfileError

# A profile max_guests at this value has no upper bound.
UNBOUNDED_MAX_GUESTS = 9999


# ---------------------------------------------------------------------------
# Staffing profiles
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StaffingProfile:
    """Named, guest-range-scoped staff composition template.

    ``roles`` defines both the composition and the order in which slots
    are paid.
    """

    id: str
    name: str
    event_type: EventType | str  # EventType or ANY_EVENT_TYPE
    min_guests: int = 0
    max_guests: int = UNBOUNDED_MAX_GUESTS
    roles: tuple[StaffRole, ...] = ()

    def __post_init__(self) -> None:
        if not self.id:
            raise InvalidStaffingProfileError(self.id, "id is required")
        if self.event_type != ANY_EVENT_TYPE and not isinstance(self.event_type, EventType):
            try:
                object.__setattr__(self, "event_type", EventType(self.event_type))
            except ValueError:
                raise InvalidStaffingProfileError(
                    self.id, f"unknown event type {self.event_type!r}"
                ) from None
        try:
            roles = tuple(StaffRole(r) for r in self.roles)
        except ValueError as e:
            raise InvalidStaffingProfileError(self.id, str(e)) from None
        object.__setattr__(self, "roles", roles)

    @property
    def guest_range_width(self) -> int:
        return self.max_guests - self.min_guests

    def covers(self, guest_count: int) -> bool:
        return self.min_guests <= guest_count <= self.max_guests


# ---------------------------------------------------------------------------
# Rule groups
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PricingRules:
    """Per-guest prices and the gratuity applied to every event."""

    private_dinner_base_price: Decimal = Decimal("60")
    buffet_base_price: Decimal = Decimal("32")
    premium_add_on_min: Decimal = Decimal("5")
    premium_add_on_max: Decimal = Decimal("20")
    child_discount_percent: Decimal = Decimal("50")
    default_gratuity_percent: Decimal = Decimal("20")
    default_deposit_percent: Decimal = Decimal("30")


@dataclass(frozen=True)
class StaffingRules:
    """Guest-count thresholds for the fallback planner, plus named profiles."""

    max_guests_per_chef_private: int = 15
    max_guests_per_chef_buffet: int = 25
    assistant_required: bool = True
    profiles: tuple[StaffingProfile, ...] = ()


@dataclass(frozen=True)
class PrivateLaborRules:
    """Private-dinner pay: base % of subtotal and $ cap per role, tip split."""

    lead_chef_base_percent: Decimal = Decimal("15")
    lead_chef_cap: Decimal | None = None
    overflow_chef_base_percent: Decimal = Decimal("12")
    overflow_chef_cap: Decimal | None = None
    full_chef_base_percent: Decimal = Decimal("10")
    full_chef_cap: Decimal | None = None
    assistant_base_percent: Decimal = Decimal("8")
    assistant_cap: Decimal | None = None
    chef_gratuity_split_percent: Decimal = Decimal("55")
    assistant_gratuity_split_percent: Decimal = Decimal("45")


@dataclass(frozen=True)
class BuffetLaborRules:
    """Buffet chef pay."""

    chef_base_percent: Decimal = Decimal("12")
    chef_cap: Decimal | None = None


@dataclass(frozen=True)
class CostRules:
    """Cost structure as % of subtotal, plus a flat transportation stipend."""

    food_cost_percent_private: Decimal = Decimal("18")
    food_cost_percent_buffet: Decimal = Decimal("20")
    supplies_cost_percent: Decimal = Decimal("7")
    transportation_stipend: Decimal = Decimal("50")


@dataclass(frozen=True)
class DistanceRules:
    """Travel fee tiers beyond the free radius."""

    free_distance_miles: Decimal = Decimal("20")
    base_distance_fee: Decimal = Decimal("50")
    additional_fee_per_increment: Decimal = Decimal("25")
    increment_miles: Decimal = Decimal("5")


@dataclass(frozen=True)
class OwnerShare:
    """One equity holder in the profit distribution."""

    owner_id: str
    name: str
    equity_percent: Decimal


class DistributionFrequency(str, Enum):
    """How often owner distributions are paid out."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"


@dataclass(frozen=True)
class ProfitDistributionRules:
    """How gross profit is split between the business and its owners.

    The percentages are independent inputs; nothing here requires them
    to sum to 100.
    """

    business_retained_percent: Decimal = Decimal("30")
    owner_distribution_percent: Decimal = Decimal("70")
    owner_a_equity_percent: Decimal = Decimal("40")
    owner_b_equity_percent: Decimal = Decimal("60")
    owners: tuple[OwnerShare, ...] = ()
    distribution_frequency: DistributionFrequency = DistributionFrequency.MONTHLY

    def resolved_owners(self) -> tuple[OwnerShare, ...]:
        """Configured owners, or the two legacy A/B owners when none are."""
        if self.owners:
            return self.owners
        return (
            OwnerShare("owner-a", "Owner A", self.owner_a_equity_percent),
            OwnerShare("owner-b", "Owner B", self.owner_b_equity_percent),
        )


@dataclass(frozen=True)
class SafetyLimits:
    """Advisory ceilings. Exceeding one produces a warning, nothing more."""

    max_total_labor_percent: Decimal = Decimal("30")
    max_food_cost_percent: Decimal = Decimal("30")
    warn_when_exceeded: bool = True


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MoneyRules:
    """The complete rules configuration for one financials computation.

    Treat an instance as a value: the engines read it, never mutate it, and
    never reach for a global copy.
    """

    pricing: PricingRules = field(default_factory=PricingRules)
    staffing: StaffingRules = field(default_factory=StaffingRules)
    private_labor: PrivateLaborRules = field(default_factory=PrivateLaborRules)
    buffet_labor: BuffetLaborRules = field(default_factory=BuffetLaborRules)
    costs: CostRules = field(default_factory=CostRules)
    distance: DistanceRules = field(default_factory=DistanceRules)
    profit_distribution: ProfitDistributionRules = field(
        default_factory=ProfitDistributionRules
    )
    safety_limits: SafetyLimits = field(default_factory=SafetyLimits)


# Group name -> dataclass, in document order.
RULE_GROUPS: dict[str, type] = {
    "pricing": PricingRules,
    "staffing": StaffingRules,
    "private_labor": PrivateLaborRules,
    "buffet_labor": BuffetLaborRules,
    "costs": CostRules,
    "distance": DistanceRules,
    "profit_distribution": ProfitDistributionRules,
    "safety_limits": SafetyLimits,
}
