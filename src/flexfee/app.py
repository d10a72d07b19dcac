# src/flexfee/app.py
"""
Application Entry Point - Resolve Fees for a Cart from the Command Line

This module serves as the composition root for the flexfee command. It
wires settings, logging, the rule store and the cart adapters, runs the
fee pipeline and prints the result.

Files that USE this module:
- pyproject.toml (flexfee console script)
- python -m flexfee (module entry point)

Files that this module USES:
- flexfee.shared.logging_conf (setup_logging for logging configuration)
- flexfee.config (settings for defaults)
- flexfee.adapters.shopify (cart conversion and fee line planning)
- flexfee.adapters.formatting.formatter (text and JSON output)
- flexfee.application (FeeService, FileRuleSource, summarize_rules, top_rules)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from flexfee.adapters.formatting.formatter import fees_payload, format_fees
from flexfee.adapters.shopify.cart_adapter import cart_from_mapping, cart_from_shopify
from flexfee.adapters.shopify.fee_lines import plan_fee_lines
from flexfee.application.fee_service import FeeService, FileRuleSource
from flexfee.application.stats import summarize_rules, top_rules
from flexfee.config import settings
from flexfee.domain.errors import DomainError
from flexfee.shared.logging_conf import setup_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INPUT_ERROR = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flexfee", description="Resolve conditional fees for a cart"
    )
    parser.add_argument("cart", nargs="?", help="Path to cart JSON file (omit with --stats)")
    parser.add_argument("--rules", help="Path to fee rules JSON file (default: FLEXFEE_RULES_FILE)")
    parser.add_argument(
        "--shopify",
        action="store_true",
        help="Cart file is a Storefront cart payload; also plan fee lines",
    )
    parser.add_argument("--format", choices=["json", "text"], help="Output format")
    parser.add_argument("--currency", default="", help="Currency code for text output")
    parser.add_argument(
        "--strict", action="store_true", help="Fail on unknown condition types"
    )
    parser.add_argument("--stats", action="store_true", help="Print rule statistics and exit")
    return parser


def _read_json(path: Path):
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Run the flexfee command.

    Returns:
        Process exit code (0 on success, 2 on invalid input)
    """
    args = _build_parser().parse_args(argv)

    setup_logging(
        level=settings.log_level_value,
        log_file=settings.log_file,
        log_dir=settings.log_dir,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
        log_stdout=settings.log_stdout,
    )

    output_format = args.format or settings.output_format
    strict = args.strict or settings.strict_conditions
    rules_path = Path(args.rules) if args.rules else settings.rules_file

    service = FeeService(FileRuleSource(rules_path, strict=strict))
    try:
        rules = service.load_rules()
    except DomainError as e:
        logger.error("Cannot load fee rules: %s", e)
        return EXIT_INPUT_ERROR

    if args.stats:
        stats = summarize_rules(rules).to_json()
        stats["top_rules"] = [
            {"id": rule.id, "title": rule.title, "condition_groups": len(rule.condition_groups)}
            for rule in top_rules(rules)
        ]
        print(json.dumps(stats, indent=2))
        return EXIT_OK

    if not args.cart:
        logger.error("A cart file is required")
        return EXIT_INPUT_ERROR

    try:
        raw_cart = _read_json(Path(args.cart))
        cart = cart_from_shopify(raw_cart) if args.shopify else cart_from_mapping(raw_cart)
    except (OSError, json.JSONDecodeError, DomainError) as e:
        logger.error("Cannot read cart %s: %s", args.cart, e)
        return EXIT_INPUT_ERROR

    fees = service.applicable_fees(cart)

    if output_format == "text":
        print(format_fees(fees, currency=args.currency))
    else:
        line_plan = plan_fee_lines(fees, raw_cart).to_json() if args.shopify else None
        print(json.dumps(fees_payload(fees, line_plan), indent=2))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
