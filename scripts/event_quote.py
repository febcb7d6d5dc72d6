#!/usr/bin/env python3
"""
Quote an event from the command line and print the financials as JSON.

Usage:
    python scripts/event_quote.py --adults 10 --event-type private-dinner
    python scripts/event_quote.py --adults 40 --event-type buffet --distance 32
    python scripts/event_quote.py --adults 12 --children 3 \\
        --event-type private-dinner --rules my_rules.yaml --snapshot

Without ``--rules`` the packaged default rules are used.  ``--snapshot``
prints the rounded booking snapshot (with labor breakdown and deposit)
instead of the full unrounded financials.
"""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from datetime import UTC, date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path

import yaml

# Add project root to path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from catering_config import get_money_rules
from catering_engines import build_booking_snapshot, calculate_event_financials
from catering_kernel.domain.event import EventInput, EventType
from catering_kernel.exceptions import CateringKernelError
from catering_kernel.logging_config import configure_logging


def _decimal(text: str) -> Decimal:
    try:
        return Decimal(text)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compute the financials of a catered event.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  python3 scripts/event_quote.py --adults 10 --event-type private-dinner\n"
            "  python3 scripts/event_quote.py --adults 40 --event-type buffet --snapshot\n"
        ),
    )
    parser.add_argument("--adults", type=int, required=True, help="Adult guest count")
    parser.add_argument("--children", type=int, default=0, help="Child guest count")
    parser.add_argument(
        "--event-type", required=True,
        choices=[t.value for t in EventType],
        help="Kind of event",
    )
    parser.add_argument(
        "--date", type=date.fromisoformat, default=None,
        help="Event date, YYYY-MM-DD (default: today)",
    )
    parser.add_argument(
        "--distance", type=_decimal, default=Decimal("0"),
        help="One-way distance in miles",
    )
    parser.add_argument(
        "--add-on", type=_decimal, default=Decimal("0"),
        help="Premium add-on per guest",
    )
    parser.add_argument("--profile", default=None, help="Staffing profile id to force")
    parser.add_argument("--rules", type=Path, default=None, help="Rules YAML file")
    parser.add_argument(
        "--snapshot", action="store_true",
        help="Print the rounded booking snapshot instead of full financials",
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Emit structured engine logs on stderr (default: warnings only)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        configure_logging(level=logging.DEBUG)

    try:
        rules = get_money_rules(args.rules)
    except CateringKernelError as exc:
        print(f"  ERROR [{exc.code}]: {exc}", file=sys.stderr)
        return 1
    except yaml.YAMLError as exc:
        print(f"  ERROR [INVALID_YAML]: {exc}", file=sys.stderr)
        return 1

    event_input = EventInput(
        adults=args.adults,
        children=args.children,
        event_type=EventType(args.event_type),
        event_date=args.date or date.today(),
        distance_miles=args.distance,
        premium_add_on=args.add_on,
        staffing_profile_id=args.profile,
    )
    financials = calculate_event_financials(event_input, rules)

    if args.snapshot:
        snapshot = build_booking_snapshot(
            financials,
            captured_at=datetime.now(UTC),
            include_breakdown=True,
            deposit_percent=rules.pricing.default_deposit_percent,
        )
        output = snapshot.to_dict()
    else:
        output = asdict(financials)

    print(json.dumps(output, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
