"""Command-line entry point for projgen.

Usage::

    projgen --type frontend --name my-app
    projgen -t fullstack -n my-app --dry-run
    python -m projgen -t backend -n my-api -c projgen.yaml -v
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

import httpx
import yaml
from pydantic import ValidationError as ConfigValidationError

from projgen.config import Config
from projgen.errors import ArgumentError, ProjectGenError
from projgen.models import ProjectType
from projgen.orchestrator import CreationOrchestrator
from projgen.utils import print_error, print_verbose, set_verbose
from projgen.validation import ToolRunner


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="projgen",
        description="Generate a new project based on predefined templates.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  projgen --type frontend --name my-app\n"
            "  projgen -t fullstack -n my-app --dry-run\n"
            "  projgen -t backend -n my-api -c projgen.yaml\n"
        ),
    )
    parser.add_argument(
        "-t", "--type",
        dest="project_type",
        metavar="TYPE",
        help=f"Project type ({', '.join(ProjectType.choices())})",
    )
    parser.add_argument("-n", "--name", help="Project name")
    parser.add_argument(
        "-c", "--config",
        type=Path,
        metavar="FILE",
        help="Custom configuration file (JSON or YAML)",
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        metavar="DIR",
        help="Directory the project is created in (default: current directory)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument(
        "-d", "--dry-run",
        action="store_true",
        help="Show what would be created without making any changes",
    )
    return parser


def validate_arguments(args: argparse.Namespace) -> list[str]:
    """Return every problem with the required arguments."""
    problems: list[str] = []
    if not args.project_type:
        problems.append("Project type is required")
    elif args.project_type not in ProjectType.choices():
        problems.append(
            "Invalid project type. Must be one of the following: "
            + ", ".join(ProjectType.choices())
        )
    if not args.name:
        problems.append("Project name is required")
    return problems


def load_config(args: argparse.Namespace) -> Config:
    """Build the configuration from the optional file, the environment and flags.

    Raises:
        ArgumentError: If the config file is missing or invalid.
    """
    base: Config | None = None
    if args.config is not None:
        print_verbose(f"Using config file: {args.config}")
        try:
            base = Config.load(args.config)
        except FileNotFoundError:
            raise ArgumentError(f"Config file not found: {args.config}") from None
        except OSError as exc:
            raise ArgumentError(f"Cannot read config file {args.config}: {exc}") from exc
        except (ConfigValidationError, ValueError, yaml.YAMLError) as exc:
            raise ArgumentError(f"Invalid config file {args.config}: {exc}") from exc

    try:
        config = Config.from_env(base)
    except ValueError as exc:
        raise ArgumentError(f"Invalid environment configuration: {exc}") from exc

    if args.output is not None:
        config.output_dir = args.output
    return config


def main(
    argv: list[str] | None = None,
    runner: ToolRunner | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """Run the CLI and return the process exit code."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return 0 if exc.code in (0, None) else 1

    set_verbose(args.verbose)

    problems = validate_arguments(args)
    if problems:
        for problem in problems:
            print_error(problem)
        parser.print_usage(sys.stderr)
        return 1

    print_verbose(f"Setting project type: {args.project_type}")
    print_verbose(f"Setting project name: {args.name}")

    try:
        config = load_config(args)
        orchestrator = CreationOrchestrator(config, runner=runner, transport=transport)
        if args.dry_run:
            orchestrator.preview(args.project_type, args.name)
            return 0
        asyncio.run(orchestrator.create(args.project_type, args.name))
    except ProjectGenError as exc:
        print_error(str(exc))
        return 1
    except KeyboardInterrupt:
        print_error("Interrupted")
        return 1

    return 0


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
