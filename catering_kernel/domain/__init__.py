"""
Pure domain layer.

Value helpers and event-level types with NO dependencies on:
- Persistence
- Time/clock
- I/O

All domain objects are immutable and deterministic.
"""

from catering_kernel.domain.event import (
    ANY_EVENT_TYPE,
    ChefRole,
    EventInput,
    EventType,
    OwnerRole,
    StaffPayOverride,
    StaffRole,
)
from catering_kernel.domain.values import (
    HUNDRED,
    ZERO,
    is_number,
    non_negative,
    optional_non_negative,
    percent_of,
    positive_or_none,
    round_money,
    to_count,
    to_decimal,
)

__all__ = [
    "ANY_EVENT_TYPE",
    "ChefRole",
    "EventInput",
    "EventType",
    "OwnerRole",
    "StaffPayOverride",
    "StaffRole",
    "HUNDRED",
    "ZERO",
    "is_number",
    "non_negative",
    "optional_non_negative",
    "percent_of",
    "positive_or_none",
    "round_money",
    "to_count",
    "to_decimal",
]
