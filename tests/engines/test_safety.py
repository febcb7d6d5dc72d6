"""
Tests for the safety-limit auditor.
"""

from decimal import Decimal

from catering_config.schema import SafetyLimits
from catering_engines.safety import audit_safety_limits


def _audit(subtotal="1000", gratuity="200", food="180", labor="300", limits=None):
    return audit_safety_limits(
        subtotal=Decimal(subtotal),
        gratuity=Decimal(gratuity),
        food_cost=Decimal(food),
        total_labor_paid=Decimal(labor),
        limits=limits or SafetyLimits(),
    )


class TestSafetyAudit:
    """Ratios always reported; warnings only above the ceilings."""

    def test_within_limits(self):
        audit = _audit()
        assert audit.labor_as_percent_of_revenue == Decimal("25")
        assert audit.food_cost_percent == Decimal("18")
        assert audit.warnings == ()

    def test_food_cost_over_ceiling(self):
        audit = _audit(food="350")
        assert audit.warnings == ("Food cost (35.0%) exceeds maximum (30%)",)
        assert audit.food_cost_percent == Decimal("35")

    def test_labor_over_ceiling(self):
        audit = _audit(labor="400")
        assert audit.warnings == (
            "Labor cost (33.3%) exceeds maximum (30%) of total revenue",
        )

    def test_both_over_ceiling(self):
        audit = _audit(food="400", labor="400")
        assert len(audit.warnings) == 2
        assert audit.warnings[0].startswith("Labor cost")
        assert audit.warnings[1].startswith("Food cost")

    def test_exactly_at_ceiling_no_warning(self):
        assert _audit(food="300", labor="360").warnings == ()

    def test_warnings_disabled(self):
        audit = _audit(food="900", labor="900", limits=SafetyLimits(warn_when_exceeded=False))
        assert audit.warnings == ()
        assert audit.food_cost_percent == Decimal("90")

    def test_zero_revenue(self):
        audit = _audit(subtotal="0", gratuity="0", food="0", labor="0")
        assert audit.labor_as_percent_of_revenue == Decimal("0")
        assert audit.food_cost_percent == Decimal("0")
        assert audit.warnings == ()

    def test_custom_ceiling_in_message(self):
        audit = _audit(food="260", limits=SafetyLimits(max_food_cost_percent=Decimal("25.5")))
        assert audit.warnings == ("Food cost (26.0%) exceeds maximum (25.5%)",)

    def test_warning_logged(self, captured_logs):
        _audit(food="350")
        logs = captured_logs()
        warned = [r for r in logs if r["message"] == "food_cost_limit_exceeded"]
        assert len(warned) == 1
        assert warned[0]["level"] == "WARNING"
