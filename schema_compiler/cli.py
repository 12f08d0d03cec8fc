"""
Command line interface for the schema compiler.

Usage:
    # Validate one or more JSON documents against a schema
    schema-compiler check schema.json data.json other.json

    # Print the JSON Schema derived from the compiled validator
    schema-compiler inspect schema.json

Exit Codes:
    0 - All documents are valid
    1 - At least one document is invalid
    2 - The schema could not be compiled, or a file could not be read
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from schema_compiler.compiler import convert
from schema_compiler.core.config import Settings, settings
from schema_compiler.core.errors import SchemaCompilationError, get_exit_code
from schema_compiler.core.observability import configure_logging

logger = logging.getLogger(__name__)


def load_json(path: str | Path) -> Any:
    """Read and decode one JSON file."""
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _check(args: argparse.Namespace) -> int:
    validator = convert(load_json(args.schema), exclusive_one_of=args.exclusive_one_of)

    exit_code = 0
    for instance_path in args.instances:
        try:
            instance = load_json(instance_path)
        except (OSError, json.JSONDecodeError) as e:
            print(f"ERROR {instance_path}: {e}", file=sys.stderr)
            exit_code = 2
            continue

        result = validator.check(instance)
        if result.ok:
            print(f"OK {instance_path}")
            continue

        exit_code = max(exit_code, 1)
        for violation in result.errors:
            print(f"{instance_path}: {violation.location}: {violation.reason}")

    return exit_code


def _inspect(args: argparse.Namespace) -> int:
    validator = convert(load_json(args.schema), exclusive_one_of=args.exclusive_one_of)
    print(json.dumps(validator.json_schema(), indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schema-compiler",
        description="Compile JSON Schema documents into validators and check JSON files",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help=f"Log level (default: {settings.log_level})",
    )
    parser.add_argument(
        "--structured-logs",
        action="store_true",
        default=None,
        help="Emit JSON log lines",
    )
    parser.add_argument(
        "--exclusive-one-of",
        action="store_true",
        default=None,
        help="Reject values matched by more than one oneOf member",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser("check", help="Validate JSON files against a schema")
    check_parser.add_argument("schema", help="Path to the JSON Schema file")
    check_parser.add_argument("instances", nargs="+", help="Paths to the JSON files to check")
    check_parser.set_defaults(handler=_check)

    inspect_parser = subparsers.add_parser(
        "inspect", help="Print the JSON Schema derived from the compiled validator"
    )
    inspect_parser.add_argument("schema", help="Path to the JSON Schema file")
    inspect_parser.set_defaults(handler=_inspect)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    updates: dict[str, Any] = {}
    if args.log_level:
        updates["log_level"] = args.log_level.upper()
    if args.structured_logs:
        updates["structured_logs"] = True
    try:
        config = Settings(**{**settings.model_dump(), **updates})
    except ValidationError as e:
        print(f"ERROR: invalid option: {e.errors()[0]['msg']}", file=sys.stderr)
        return 2
    configure_logging(config)

    try:
        return args.handler(args)
    except SchemaCompilationError as e:
        print(f"ERROR: {e.message}", file=sys.stderr)
        return get_exit_code(e)
    except (OSError, json.JSONDecodeError) as e:
        print(f"ERROR: cannot read schema: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
