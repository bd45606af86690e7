"""
TrustScore CLI
==============

Command-line interface for trust score lookups.

Commands:
    score   - Compute the trust score of a business unit
    config  - Show the effective configuration

Usage:
    trustscore score --domain example.com
    trustscore score --id 46d6a890000064000500e0c3 --json
    trustscore config
"""

import argparse
import json
import sys
from typing import List, Optional

from ..data.config import get_settings
from ..data.errors import TrustScoreError
from .engine import build_engine
from .logging_config import setup_logging_from_settings


def cmd_score(args) -> int:
    """Compute and print a trust score."""
    try:
        engine = build_engine()
    except (TrustScoreError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    try:
        if args.domain is not None:
            result = engine.get_trust_score(domain=args.domain)
        else:
            result = engine.get_trust_score(business_unit_id=args.id)
    except TrustScoreError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    print(f"Business unit: {result.id}")
    print(f"Domain:        {result.domain}")
    print(f"Trust score:   {result.trust_score}")
    return 0


def cmd_config(args) -> int:
    """Print the effective configuration (API key masked)."""
    settings = get_settings()
    api_key = settings.trustpilot.api_key
    output = {
        "environment": settings.environment,
        "trustpilot": {
            "base_url": settings.trustpilot.base_url,
            "api_key": f"{api_key[:4]}..." if api_key else None,
            "request_timeout": settings.trustpilot.request_timeout,
            "max_response_size": settings.trustpilot.max_response_size,
        },
        "scoring": {
            "review_cap": settings.scoring.review_cap,
            "page_size": settings.scoring.page_size,
            "max_review_age": settings.scoring.max_review_age,
            "max_review_stars": settings.scoring.max_review_stars,
        },
    }
    print(json.dumps(output, indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="trustscore",
        description="Trust score from recent Trustpilot reviews",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # score command
    score_parser = subparsers.add_parser("score", help="Score a business unit")
    lookup = score_parser.add_mutually_exclusive_group(required=True)
    lookup.add_argument(
        "--domain",
        help="Domain or business name to look up",
    )
    lookup.add_argument(
        "--id",
        help="Business unit id to look up",
    )
    score_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )

    # config command
    subparsers.add_parser("config", help="Show effective configuration")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    # Settings are loaded here; invalid values end the run before any command
    try:
        setup_logging_from_settings(args.verbose)
    except ValueError as e:
        print(f"ERROR: Invalid configuration: {e}", file=sys.stderr)
        return 1

    commands = {
        "score": cmd_score,
        "config": cmd_config,
    }
    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
