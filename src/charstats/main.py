"""Command-line entry point: inspect an attribute schema and its final values."""

import argparse
import json
import sys
from pathlib import Path

import structlog

from charstats.config import get_settings
from charstats.logging_config import configure_logging
from charstats.stats import StatEngine, StatsError, load_modifiers, load_schema

logger = structlog.get_logger(__name__)


def parse_assignment(text: str) -> tuple[str, float]:
    """
    Parse an ``ID=VALUE`` command-line assignment.

    Args:
        text: The raw argument (e.g., "health=70")

    Returns:
        Tuple of (attribute_id, value)

    Raises:
        argparse.ArgumentTypeError: If the text is not ID=NUMBER
    """
    attribute_id, sep, raw_value = text.partition("=")
    if not sep or not attribute_id.strip():
        raise argparse.ArgumentTypeError(f"expected ID=VALUE, got '{text}'")
    try:
        return attribute_id.strip(), float(raw_value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{raw_value}' is not a number")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the charstats command."""
    parser = argparse.ArgumentParser(
        prog="charstats", description="Compute final attribute values from a YAML schema"
    )
    parser.add_argument(
        "schema",
        nargs="?",
        type=Path,
        help="Attribute schema YAML file (defaults to CHARSTATS_SCHEMA_PATH)",
    )
    parser.add_argument("--modifiers", "-m", type=Path, help="Modifiers YAML file")
    parser.add_argument(
        "--set",
        "-s",
        dest="assignments",
        action="append",
        type=parse_assignment,
        default=[],
        metavar="ID=VALUE",
        help="Override a base value (repeatable)",
    )
    parser.add_argument("--json", action="store_true", help="Print final values as JSON")
    return parser


def format_table(engine: StatEngine) -> str:
    """
    Format every attribute as a plain-text table.

    Args:
        engine: The engine to render

    Returns:
        One line per attribute: label, final value, base value, range
    """
    lines = []
    for definition in engine.schema:
        final = engine.get_final(definition.id)
        base = engine.get_base(definition.id)
        value = f"{final:g}"
        lines.append(
            f"{definition.label:<20} {value:>10}  "
            f"(base {base:g}, range {definition.min_value:g}..{definition.max_value:g}, "
            f"{len(engine.get_modifiers(definition.id))} modifiers)"
        )
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    """
    Run the charstats command.

    Args:
        argv: Command-line arguments (defaults to sys.argv)

    Returns:
        Process exit code
    """
    settings = get_settings()
    configure_logging(settings)

    args = build_parser().parse_args(argv)
    schema_path = args.schema or settings.schema_path
    if schema_path is None:
        print("error: no schema file given and CHARSTATS_SCHEMA_PATH is not set", file=sys.stderr)
        return 2

    try:
        schema = load_schema(schema_path)
        modifiers = load_modifiers(args.modifiers) if args.modifiers else []
        engine = StatEngine(schema, modifiers, name=schema_path.stem)
    except StatsError as e:
        logger.error("schema_load_failed", error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return 1

    for attribute_id, value in args.assignments:
        if not engine.set_base_by_id(attribute_id, value):
            print(f"warning: unknown attribute '{attribute_id}'", file=sys.stderr)

    if args.json:
        print(json.dumps(engine.snapshot(), indent=2))
    else:
        print(format_table(engine))
    return 0


def run() -> None:
    """Synchronous console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
