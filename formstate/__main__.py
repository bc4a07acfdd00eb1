"""CLI entry point for checking models and replaying event streams.

Usage:
    python -m formstate check --schema signup.yaml --model draft.yaml
    python -m formstate replay --schema signup.yaml --events session.yaml
    python -m formstate replay --schema signup.yaml --events session.yaml --json
    python -m formstate --env-file .env check --schema signup.yaml --model draft.yaml

Exit codes:
    0  the (final) form state is valid
    1  the (final) form state is invalid
    2  the schema, model or events file could not be loaded
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from formstate.engine.form import FormEngine
from formstate.lib.config_loader import load_events_file, load_model_file, load_schema
from formstate.lib.env import load_env_file
from formstate.lib.errors import FormStateError
from formstate.lib.logging import setup_logging
from formstate.lib.settings import FormStateSettings, get_settings
from formstate.models.results import SchemaResult

logger = logging.getLogger(__name__)

EXIT_VALID = 0
EXIT_INVALID = 1
EXIT_CONFIG_ERROR = 2


def format_result(result: SchemaResult) -> str:
    """Human-readable, one line per field."""
    lines = []
    status = "VALID" if result.is_valid else "INVALID"
    form = result.form
    lines.append(
        f"Form: {status} "
        f"({'dirty' if form.dirty else 'pristine'}, "
        f"{'touched' if form.touched else 'untouched'})"
    )
    if not result.fields:
        lines.append("  (no fields)")
    width = max((len(name) for name in result.fields), default=0)
    for name, field_result in result.fields.items():
        mark = "ok" if field_result.is_valid else "!!"
        line = f"  [{mark}] {name:<{width}}  {field_result.flags}"
        lines.append(line)
        for error in field_result.errors:
            lines.append(f"         - {error}")
    return "\n".join(lines)


def cmd_check(args: argparse.Namespace, settings: FormStateSettings) -> int:
    """Evaluate a model as a freshly mounted form."""
    document = load_schema(args.schema, default_update_on=settings.default_update_on)
    model = load_model_file(args.model) if args.model else {}

    with FormEngine(document.fields, model, name=document.name or "form") as engine:
        result = engine.schema_result
        if args.json:
            print(json.dumps(result.to_dict(), indent=2, default=str))
        else:
            print(format_result(result))
        return EXIT_VALID if result.is_valid else EXIT_INVALID


def cmd_replay(args: argparse.Namespace, settings: FormStateSettings) -> int:
    """Replay recorded events and report the schema result after each one."""
    document = load_schema(args.schema, default_update_on=settings.default_update_on)
    model = load_model_file(args.model) if args.model else {}
    events = load_events_file(args.events)

    steps = []
    with FormEngine(document.fields, model, name=document.name or "form") as engine:
        if not args.json:
            print("== mount")
            print(format_result(engine.schema_result))
        steps.append({"event": None, "schema": engine.schema_result.to_dict()})

        for index, event in enumerate(events, start=1):
            snapshot = engine.handle_event(event)
            steps.append({"event": event.to_dict(), "schema": snapshot.schema.to_dict()})
            if not args.json:
                print(f"== #{index} {event}")
                print(format_result(snapshot.schema))

        final = engine.schema_result
        if args.json:
            print(
                json.dumps(
                    {"steps": steps, "model": dict(engine.model)}, indent=2, default=str
                )
            )
        return EXIT_VALID if final.is_valid else EXIT_INVALID


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="formstate",
        description="Validate form models against a schema file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Check a saved draft against the schema
    python -m formstate check --schema signup.yaml --model draft.yaml

    # Replay a recorded session and watch flags and errors evolve
    python -m formstate replay --schema signup.yaml --events session.yaml
        """,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--json-log",
        action="store_true",
        help="Output logs in JSON format (for log aggregation systems)",
    )
    parser.add_argument(
        "--env-file",
        help="Load environment variables from this file before reading settings and schemas",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", help="Evaluate a model as a freshly mounted form")
    check.add_argument("--schema", required=True, help="Schema YAML file")
    check.add_argument("--model", help="Model YAML/JSON file (default: empty model)")
    check.add_argument("--json", action="store_true", help="Print the result as JSON")
    check.set_defaults(handler=cmd_check)

    replay = subparsers.add_parser("replay", help="Replay a recorded event stream")
    replay.add_argument("--schema", required=True, help="Schema YAML file")
    replay.add_argument("--events", required=True, help="Events YAML/JSON file")
    replay.add_argument("--model", help="Initial model YAML/JSON file")
    replay.add_argument("--json", action="store_true", help="Print every step as JSON")
    replay.set_defaults(handler=cmd_replay)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.env_file:
        if not load_env_file(args.env_file, override=True):
            print(f"Warning: no variables loaded from {args.env_file}", file=sys.stderr)

    settings = get_settings()
    setup_logging(
        verbose=args.verbose,
        json_format=args.json_log or settings.json_logs,
        log_file=settings.log_file,
        level=settings.log_level,
    )

    try:
        return args.handler(args, settings)
    except FormStateError as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR


if __name__ == "__main__":
    sys.exit(main())
