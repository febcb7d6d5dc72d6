"""
Typed exception hierarchy for the catering financials kernel.

The calculation engines do not raise for business conditions: a missing
staffing profile, zero revenue, or an exceeded safety ceiling degrade to
defaults or warning strings.  The exceptions here belong to the boundary
where a rules document is read, and they cover documents that cannot be
coerced into ``MoneyRules`` at all.

Every class carries a machine-readable ``code`` class attribute and stores
its context as attributes, so callers catch by type and read structured
data instead of parsing messages:

    try:
        rules = get_money_rules(path)
    except InvalidStaffingProfileError as e:
        show_field_error(e.profile_id, e.reason)

Hierarchy:

    CateringKernelError
    |
    +-- ConfigurationError
        +-- RulesFileNotFoundError
        +-- InvalidRulesShapeError
        +-- InvalidStaffingProfileError

Code            | When raised
----------------|---------------------------------------------------------
RULES_NOT_FOUND | Explicit rules path does not exist
INVALID_SHAPE   | Document (or one of its groups) is not a mapping
INVALID_PROFILE | Staffing profile missing id, bad range, or unknown role
"""


class CateringKernelError(Exception):
    """
    Base exception for all catering kernel errors.

    All subclasses must have a ``code`` class attribute.
    """

    code: str = "CATERING_KERNEL_ERROR"


class ConfigurationError(CateringKernelError):
    """Base exception for rules-document errors."""

    code: str = "CONFIGURATION_ERROR"


class RulesFileNotFoundError(ConfigurationError):
    """An explicitly requested rules file does not exist."""

    code: str = "RULES_NOT_FOUND"

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Money rules file not found: {path}")


class InvalidRulesShapeError(ConfigurationError):
    """The rules document, or one of its groups, is not a mapping."""

    code: str = "INVALID_SHAPE"

    def __init__(self, section: str, received_type: str):
        self.section = section
        self.received_type = received_type
        super().__init__(
            f"Money rules section '{section}' must be a mapping, "
            f"got {received_type}"
        )


class InvalidStaffingProfileError(ConfigurationError):
    """A staffing profile cannot be used to build a staffing plan."""

    code: str = "INVALID_PROFILE"

    def __init__(self, profile_id: str | None, reason: str):
        self.profile_id = profile_id
        self.reason = reason
        super().__init__(f"Invalid staffing profile {profile_id!r}: {reason}")
