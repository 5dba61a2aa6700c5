"""Command-line entry point.

Usage::

    scaffoldkit spec.json
    scaffoldkit spec.json --output ./projects --no-install
    python -m scaffoldkit spec.json --json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from .config import Config
from .generator import ScaffoldGenerator
from .models import load_spec
from .progress import console_subscriber
from .utils import console, format_duration, print_error, print_success, print_summary_table, print_warning


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scaffoldkit",
        description="Generate a project from a declarative scaffold spec",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  scaffoldkit spec.json\n"
            "  scaffoldkit spec.json -o ./projects --no-install\n"
            "  scaffoldkit spec.json --config scaffold.json --json\n"
        ),
    )
    parser.add_argument("spec", help="Path to the scaffold spec JSON file")
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Parent directory for the project (overrides projectPath in the spec)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Configuration JSON file (default: SCAFFOLD_* environment variables)",
    )
    parser.add_argument(
        "--no-install",
        action="store_true",
        help="Skip dependency installation",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON instead of a summary table",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Do not print progress events",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None, out: Optional[Console] = None) -> int:
    """CLI entry point for ``scaffoldkit`` and ``python -m scaffoldkit``.

    Returns:
        0 on success, 1 when generation failed, 2 when the spec or the
        configuration could not be loaded.
    """
    args = build_parser().parse_args(argv)
    out = out or console

    try:
        spec = load_spec(args.spec)
        config = Config.load(Path(args.config)) if args.config else Config.from_env()
    except FileNotFoundError as exc:
        print_error(f"Error: file not found: {escape(str(exc.filename))}", out)
        return 2
    except (json.JSONDecodeError, ValidationError, ValueError) as exc:
        print_error(f"Error: invalid input: {escape(str(exc))}", out)
        return 2

    if args.output:
        spec = spec.model_copy(update={"project_path": args.output})
    if args.no_install:
        config = config.model_copy(update={"install_dependencies": False})

    subscriber = None if args.quiet else console_subscriber(out)
    generator = ScaffoldGenerator(config, subscriber, console=out)

    started = time.monotonic()
    result = asyncio.run(generator.generate(spec))
    elapsed = time.monotonic() - started

    if args.json:
        out.print_json(result.to_json())
    else:
        print_summary_table(
            {
                "Project": result.project_path,
                "Entries created": str(result.files_created),
                "Components": ", ".join(result.components_generated) or "-",
                "Warnings": str(len(result.warnings)),
                "Duration": format_duration(elapsed),
            },
            title="Scaffold Result",
            out=out,
        )
        for warning in result.warnings:
            print_warning(f"  {escape(warning.message)}", out)

    if result.success:
        print_success(escape(result.message), out)
        return 0
    print_error(escape(result.message), out)
    return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
