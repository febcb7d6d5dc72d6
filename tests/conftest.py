"""
Pytest fixtures for the catering financials test suite.

Provides:
- Structured logging configured once per session, plus log capture
- MoneyRules built from defaults or from a partial rules document
- EventInput factories with sensible defaults
"""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO

import pytest

from catering_config import load_money_rules
from catering_config.schema import MoneyRules
from catering_kernel.domain.event import EventInput, EventType
from catering_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

EVENT_DATE = date(2026, 6, 13)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture catering_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, default_rules):
            calculate_event_financials(make_input(), default_rules)
            logs = captured_logs()
            assert any(r["message"] == "event_financials_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("catering_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Rules and input factories
# =============================================================================


@pytest.fixture
def default_rules() -> MoneyRules:
    return MoneyRules()


@pytest.fixture
def make_rules():
    """Build MoneyRules from a partial rules document merged onto defaults."""

    def _make(**groups) -> MoneyRules:
        return load_money_rules(groups)

    return _make


@pytest.fixture
def make_input():
    """Build an EventInput; unspecified fields take test defaults."""

    def _make(**overrides) -> EventInput:
        fields = {
            "adults": 10,
            "children": 0,
            "event_type": EventType.PRIVATE_DINNER,
            "event_date": EVENT_DATE,
            "distance_miles": Decimal("0"),
        }
        fields.update(overrides)
        return EventInput(**fields)

    return _make
