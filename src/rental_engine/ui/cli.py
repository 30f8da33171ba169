"""CLI entry point for quoting a rental from the command line."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rental_engine.adapters.io.exports import serialize_breakdown
from rental_engine.adapters.storage.repositories import write_json
from rental_engine.core.config import DEFAULT_PRICING
from rental_engine.core.errors import ValidationError
from rental_engine.core.models import RentalRequest
from rental_engine.core.normalization import parse_add_ons, parse_insurance_tier
from rental_engine.modules.pricing.engine import quote

LOG = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rental price calculator")
    parser.add_argument("--rate", type=float, required=True, help="Vehicle daily rate")
    parser.add_argument("--pickup", type=str, required=True, help="Pickup date (YYYY-MM-DD)")
    parser.add_argument("--return", dest="return_date", type=str, required=True, help="Return date (YYYY-MM-DD)")
    parser.add_argument("--insurance", type=str, default="essential", help="essential, standard or elite")
    parser.add_argument("--add-on", dest="add_ons", action="append", default=[], help="gps_unit, child_seat, second_driver")
    parser.add_argument("--output", type=str, default=None, help="Write the breakdown to this JSON path")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        request = RentalRequest(
            daily_rate=args.rate,
            pickup_date=args.pickup,
            return_date=args.return_date,
            insurance_tier=parse_insurance_tier(args.insurance),
            add_ons=parse_add_ons(args.add_ons),
        )
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    result = quote(request, DEFAULT_PRICING)
    if isinstance(result, ValidationError):
        print(f"error: {result.field}: {result.message}", file=sys.stderr)
        return 2

    payload = serialize_breakdown(result)
    if args.output:
        write_json(Path(args.output), payload)
        LOG.info("Quote written to %s", args.output)
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
