"""
subtyped CLI — check values against registered refinements.

Commands:
    subtyped list                        — Show registered predicates
    subtyped check <predicate> <json>    — Verify a JSON base value

Exit codes:
    0 — value verified (or listing succeeded)
    1 — value did not verify
    2 — unknown predicate or malformed JSON

The CLI is a caller of the library like any other. It cannot produce a
Verified value except through ``verify``.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional

from .. import default_registry, verify
from ..predicates import AnyPredicate, DependentPredicate, UnknownPredicateError
from ..settings import settings
from ..verified import Outcome, Verified

EXIT_VERIFIED = 0
EXIT_UNVERIFIED = 1
EXIT_USAGE = 2


# =============================================================================
# OUTPUT FORMATTING
# =============================================================================

def format_predicate_row(predicate: AnyPredicate) -> str:
    """Format a single registry entry for display."""
    kind = "dependent" if isinstance(predicate, DependentPredicate) else "simple"
    row = f"{predicate.name:<22} {predicate.domain.value:<9} {kind:<9} {predicate.description}"
    if isinstance(predicate, DependentPredicate):
        stages = " -> ".join(stage.name for stage in predicate.stages)
        row += f"\n{'':<22} stages: {stages}"
    return row.rstrip()


def format_outcome(outcome: Outcome) -> str:
    """Format a verification outcome."""
    if isinstance(outcome, Verified):
        return f"VERIFIED [{outcome.predicate}] {json.dumps(outcome.value)}"
    line = f"UNVERIFIED [{outcome.predicate}] {outcome.reason}"
    if outcome.stage:
        line += f" (stage: {outcome.stage})"
    return line


# =============================================================================
# CLI COMMANDS
# =============================================================================

def cmd_list(args: argparse.Namespace) -> int:
    """Show every registered predicate."""
    print("subtyped — Registered Predicates")
    print("=" * 70)
    for predicate in default_registry:
        print(format_predicate_row(predicate))
    print()
    print(f"Total: {len(default_registry)} predicates")
    return EXIT_VERIFIED


def cmd_check(args: argparse.Namespace) -> int:
    """Verify one JSON value against a named predicate."""
    try:
        value = json.loads(args.value)
    except json.JSONDecodeError as e:
        print(f"ERROR: value is not valid JSON: {e}", file=sys.stderr)
        return EXIT_USAGE

    try:
        outcome = verify(args.predicate, value)
    except UnknownPredicateError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        print("Run 'subtyped list' to see available predicates.", file=sys.stderr)
        return EXIT_USAGE

    print(format_outcome(outcome))
    return EXIT_VERIFIED if outcome else EXIT_UNVERIFIED


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level, logging.WARNING)
    logging.basicConfig(level=level, format=settings.log_format, stream=sys.stderr)


def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="subtyped",
        description="subtyped — runtime-verified refinement values",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every verification outcome",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    list_parser = subparsers.add_parser(
        "list",
        help="Show registered predicates",
    )
    list_parser.set_defaults(func=cmd_list)

    check_parser = subparsers.add_parser(
        "check",
        help="Verify a JSON value against a predicate",
    )
    check_parser.add_argument(
        "predicate",
        help="Registered predicate name",
    )
    check_parser.add_argument(
        "value",
        help="Base value as JSON, e.g. 13, [1, 2], '[\"April\", 30]'",
    )
    check_parser.set_defaults(func=cmd_check)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
