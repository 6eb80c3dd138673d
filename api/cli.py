#!/usr/bin/env python3
"""CLI for the mirror redirect service.

Usage:
    python -m cli <command>

Commands:
    route <version>  Print the mirror bucket a version is redirected to
    rules            List the loaded rule table in match order
"""

import argparse
import logging
import sys

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def cmd_route(version: str, strict: bool) -> int:
    """Resolve a version against the configured rule table."""
    from core.config import get_settings
    from services.rules_service import load_rules
    from services.version_router import InvalidVersionError, route

    settings = get_settings()
    rules = load_rules(settings)
    try:
        bucket = route(
            version,
            rules,
            settings.resolved_fallback,
            strict=strict or settings.strict_versions,
        )
    except InvalidVersionError as e:
        logger.error(str(e))
        return 1

    print(bucket)
    return 0


def cmd_rules() -> int:
    """Print each rule as 'threshold -> bucket'."""
    from core.config import get_settings
    from services.rules_service import load_rules

    settings = get_settings()
    rules = load_rules(settings)
    if not rules:
        logger.warning("No rules loaded; every version goes to the fallback")

    for rule in rules:
        print(f"{rule.threshold} -> {rule.bucket}")
    print(f"* -> {settings.resolved_fallback}")
    return 0


def main(argv: list[str] | None = None) -> int:
    from services.rules_service import RulesConfigError

    parser = argparse.ArgumentParser(
        description="Mirror redirect CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    route_parser = subparsers.add_parser(
        "route",
        help="Print the mirror bucket a version is redirected to",
    )
    route_parser.add_argument("version", help="Version string, e.g. 2.401.3")
    route_parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject non-numeric version components",
    )
    subparsers.add_parser(
        "rules",
        help="List the loaded rule table in match order",
    )

    args = parser.parse_args(argv)

    try:
        if args.command == "route":
            return cmd_route(args.version, args.strict)
        elif args.command == "rules":
            return cmd_rules()
        else:
            parser.print_help()
            return 1
    except RulesConfigError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
