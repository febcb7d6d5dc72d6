"""
Money rules loader (``catering_config.loader``).

Responsibility
--------------
Parse rules documents -- YAML files or the JSON blobs the settings screen
persists -- into frozen ``catering_config.schema`` instances, merged onto
defaults (or onto an existing ``MoneyRules`` for template overrides).

Architecture position
---------------------
**Config layer**.  Consumed by ``catering_config.get_money_rules`` and by
callers holding an already-decoded document.  No dependency on engines.

Coercion rules
--------------
* Keys may be camelCase or snake_case; legacy names are migrated.
* ``None``, NaN, infinities and non-numeric values are dropped so the
  default (or the base value being merged onto) applies.  Money never
  sees NaN.
* A cap written as ``null`` means "no cap".
* ``staffing.profiles`` / ``profit_distribution.owners`` that are not
  lists read as empty.
* Unknown keys are ignored.

Failure modes
-------------
* Document or group that is not a mapping -> ``InvalidRulesShapeError``.
* Profile entry that is not a mapping, lacks an id or names an unknown
  role -> ``InvalidStaffingProfileError``.
* A profile with ``min_guests > max_guests`` loads (logged at WARNING);
  it never auto-matches but can still be selected by id.
* Malformed YAML -> ``yaml.YAMLError`` propagates.
"""

from __future__ import annotations

import dataclasses
import hashlib
import json
import re
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from catering_kernel.domain.values import is_number, to_count, to_decimal
from catering_kernel.exceptions import (
    InvalidRulesShapeError,
    InvalidStaffingProfileError,
)
from catering_kernel.logging_config import get_logger
from catering_config.schema import (
    RULE_GROUPS,
    UNBOUNDED_MAX_GUESTS,
    MoneyRules,
    OwnerShare,
    StaffingProfile,
)

logger = get_logger("config.loader")

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

# Renamed fields, per group, after snake-casing: old -> current.
LEGACY_FIELD_NAMES: dict[str, dict[str, str]] = {
    "pricing": {
        "primary_base_price": "private_dinner_base_price",
        "secondary_base_price": "buffet_base_price",
    },
    "staffing": {
        "max_guests_per_chef_primary": "max_guests_per_chef_private",
        "max_guests_per_chef_secondary": "max_guests_per_chef_buffet",
    },
    "costs": {
        "primary_food_cost_percent": "food_cost_percent_private",
        "secondary_food_cost_percent": "food_cost_percent_buffet",
    },
}

# Collection fields parsed by dedicated functions, not scalar coercion.
_COLLECTION_FIELDS = {("staffing", "profiles"), ("profit_distribution", "owners")}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def snake_case(key: str) -> str:
    """``leadChefBasePercent`` -> ``lead_chef_base_percent``; snake passes through."""
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def _require_mapping(section: str, value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise InvalidRulesShapeError(section, type(value).__name__)
    return value


def normalize_keys(group: str, raw: dict[str, Any]) -> dict[str, Any]:
    """Snake-case keys and migrate legacy names for one group."""
    legacy = LEGACY_FIELD_NAMES.get(group, {})
    normalized: dict[str, Any] = {}
    for key, value in raw.items():
        name = snake_case(str(key))
        name = legacy.get(name, name)
        # A current-name key wins over its legacy alias
        if name in normalized and snake_case(str(key)) != name:
            continue
        normalized[name] = value
    return normalized


def coerce_field(default: Any, value: Any) -> tuple[bool, Any]:
    """
    Coerce ``value`` to the kind of ``default``.

    Returns ``(accepted, coerced)``; ``accepted`` is False when the value
    is unusable and the default should stand.
    """
    if isinstance(default, bool):
        return (True, value) if isinstance(value, bool) else (False, None)
    if default is None:
        # Optional $ cap: null means uncapped
        if value is None:
            return True, None
        return (True, to_decimal(value)) if _numeric(value) else (False, None)
    if isinstance(default, int):
        return (True, to_count(value)) if _numeric(value) else (False, None)
    if isinstance(default, Decimal):
        return (True, to_decimal(value)) if _numeric(value) else (False, None)
    if isinstance(default, Enum):
        try:
            return True, type(default)(value)
        except ValueError:
            return False, None
    return False, None


def _numeric(value: Any) -> bool:
    if isinstance(value, str):
        return is_number(to_decimal(value, default=Decimal("NaN")))
    return is_number(value)


def parse_staffing_profile(data: Any) -> StaffingProfile:
    """
    Parse a ``StaffingProfile`` from a dict.

    Raises:
        InvalidStaffingProfileError: if the entry cannot form a profile.
    """
    if not isinstance(data, dict):
        raise InvalidStaffingProfileError(None, "profile entry must be a mapping")
    fields = normalize_keys("profile", data)
    profile_id = fields.get("id")
    if not profile_id:
        raise InvalidStaffingProfileError(None, "id is required")
    roles = fields.get("roles") or ()
    if not isinstance(roles, (list, tuple)):
        raise InvalidStaffingProfileError(str(profile_id), "roles must be a list")
    max_guests = fields.get("max_guests")
    profile = StaffingProfile(
        id=str(profile_id),
        name=str(fields.get("name") or profile_id),
        event_type=fields.get("event_type", "any"),
        min_guests=to_count(fields.get("min_guests")),
        max_guests=to_count(max_guests) if _numeric(max_guests) else UNBOUNDED_MAX_GUESTS,
        roles=tuple(roles),
    )
    if profile.min_guests > profile.max_guests:
        logger.warning("staffing_profile_range_inverted", extra={
            "profile_id": profile.id,
            "min_guests": profile.min_guests,
            "max_guests": profile.max_guests,
        })
    return profile


def parse_owner_share(data: dict[str, Any]) -> OwnerShare:
    """Parse an ``OwnerShare``; ``id``/``ownerId`` and ``name`` are accepted."""
    fields = normalize_keys("owner", data)
    owner_id = str(fields.get("owner_id") or fields.get("id") or "")
    return OwnerShare(
        owner_id=owner_id,
        name=str(fields.get("name") or owner_id),
        equity_percent=to_decimal(fields.get("equity_percent")),
    )


def _parse_collection(group: str, name: str, value: Any) -> tuple:
    if not isinstance(value, (list, tuple)):
        logger.warning(
            "rules_collection_not_a_list",
            extra={"group": group, "field": name, "received_type": type(value).__name__},
        )
        return ()
    if name == "profiles":
        return tuple(parse_staffing_profile(item) for item in value)
    return tuple(
        parse_owner_share(item) for item in value if isinstance(item, dict)
    )


def parse_group(group: str, raw: Any, base: Any) -> Any:
    """
    Merge one rules group onto ``base`` (a group dataclass instance).

    Absent group -> ``base`` unchanged.
    """
    if raw is None:
        return base
    fields = normalize_keys(group, _require_mapping(group, raw))

    defaults = type(base)()
    changes: dict[str, Any] = {}
    dropped: list[str] = []
    for f in dataclasses.fields(base):
        if f.name not in fields:
            continue
        value = fields[f.name]
        if (group, f.name) in _COLLECTION_FIELDS:
            if value is not None:
                changes[f.name] = _parse_collection(group, f.name, value)
            continue
        accepted, coerced = coerce_field(getattr(defaults, f.name), value)
        if accepted:
            changes[f.name] = coerced
        else:
            dropped.append(f.name)

    if dropped:
        logger.info(
            "rules_fields_defaulted",
            extra={"group": group, "fields": dropped},
        )
    return dataclasses.replace(base, **changes) if changes else base


def load_money_rules(
    data: dict[str, Any] | None,
    base: MoneyRules | None = None,
) -> MoneyRules:
    """
    Parse a rules document into ``MoneyRules``, merged onto ``base``.

    Preconditions:
        - ``data`` is a mapping of group name -> mapping (or None).
    Postconditions:
        - Every field is finite; unusable values keep the base value.
    Raises:
        InvalidRulesShapeError, InvalidStaffingProfileError.
    """
    base = base or MoneyRules()
    if data is None:
        return base
    document = normalize_keys("root", _require_mapping("<root>", data))

    groups = {
        name: parse_group(name, document.get(name), getattr(base, name))
        for name in RULE_GROUPS
    }
    return MoneyRules(**groups)


def merge_rules_overrides(
    rules: MoneyRules,
    overrides: dict[str, Any] | None,
) -> MoneyRules:
    """Overlay a partial document (e.g. a business template) onto ``rules``.

    Staffing profiles are replaced only when the overlay carries a list.
    """
    if not overrides:
        return rules
    return load_money_rules(overrides, base=rules)


def _plain(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _plain(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    return value


def rules_to_dict(rules: MoneyRules) -> dict[str, Any]:
    """JSON-ready snake_case mapping; round-trips through ``load_money_rules``."""
    return _plain(rules)


def compute_checksum(data: dict[str, Any]) -> str:
    """
    SHA-256 of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def rules_checksum(rules: MoneyRules) -> str:
    """Checksum identifying the exact rules a computation ran against."""
    return compute_checksum(rules_to_dict(rules))
