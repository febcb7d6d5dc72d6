"""
catering_config -- single public entrypoint for money rules.

Responsibility:
    Provides the way to obtain a ``MoneyRules`` value at runtime through
    ``get_money_rules()``.  Engines never read files or globals; callers
    obtain a rules value here (or build one with ``load_money_rules``) and
    pass it in.

Architecture position:
    Configuration -- sits above ``catering_kernel`` and beside
    ``catering_engines``.  Engines import the schema types only.

Invariants enforced:
    - Defaults fill every gap: a missing file section, null field, or NaN
      never reaches the engines.
    - Deterministic: the same document always yields an equal
      ``MoneyRules`` and the same checksum.

Failure modes:
    - ``RulesFileNotFoundError`` -- an explicit path does not exist.
    - ``InvalidRulesShapeError`` -- the document is not a mapping of
      mappings.
    - ``InvalidStaffingProfileError`` -- a profile cannot be used.

Audit relevance:
    Every successful ``get_money_rules()`` call emits a
    ``CATERING_CONFIG_TRACE`` log entry with the source path, checksum and
    profile count, tying persisted booking snapshots back to the rules that
    priced them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from catering_config.loader import (
    compute_checksum,
    load_money_rules,
    load_yaml_file,
    merge_rules_overrides,
    rules_checksum,
    rules_to_dict,
)
from catering_config.schema import (
    UNBOUNDED_MAX_GUESTS,
    BuffetLaborRules,
    CostRules,
    DistanceRules,
    DistributionFrequency,
    MoneyRules,
    OwnerShare,
    PricingRules,
    PrivateLaborRules,
    ProfitDistributionRules,
    SafetyLimits,
    StaffingProfile,
    StaffingRules,
)
from catering_kernel.exceptions import RulesFileNotFoundError
from catering_kernel.logging_config import get_logger

_logger = get_logger("config")

# Rules shipped with the package
DEFAULT_RULES_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_money_rules(
    path: Path | str | None = None,
    overrides: dict[str, Any] | None = None,
) -> MoneyRules:
    """Load the rules to price events with.

    Args:
        path: YAML rules document.  Defaults to the packaged
            ``sets/default.yaml``.
        overrides: Partial document overlaid on the loaded rules, e.g. a
            business template's pricing.

    Returns:
        MoneyRules merged onto defaults.

    Raises:
        RulesFileNotFoundError: If ``path`` does not exist.
        InvalidRulesShapeError: If the document is not a mapping of mappings.
        InvalidStaffingProfileError: If a staffing profile is malformed.
    """
    source = Path(path) if path is not None else DEFAULT_RULES_PATH
    if not source.is_file():
        raise RulesFileNotFoundError(str(source))

    rules = load_money_rules(load_yaml_file(source))
    rules = merge_rules_overrides(rules, overrides)
    checksum = rules_checksum(rules)

    _logger.info(
        "CATERING_CONFIG_TRACE",
        extra={
            "trace_type": "CATERING_CONFIG_TRACE",
            "source": str(source),
            "checksum": checksum,
            "profile_count": len(rules.staffing.profiles),
            "owner_count": len(rules.profit_distribution.resolved_owners()),
            "has_overrides": bool(overrides),
        },
    )
    return rules


__all__ = [
    "DEFAULT_RULES_PATH",
    "UNBOUNDED_MAX_GUESTS",
    "BuffetLaborRules",
    "CostRules",
    "DistanceRules",
    "DistributionFrequency",
    "MoneyRules",
    "OwnerShare",
    "PricingRules",
    "PrivateLaborRules",
    "ProfitDistributionRules",
    "SafetyLimits",
    "StaffingProfile",
    "StaffingRules",
    "compute_checksum",
    "get_money_rules",
    "load_money_rules",
    "merge_rules_overrides",
    "rules_checksum",
    "rules_to_dict",
]
