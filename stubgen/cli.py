"""CLI entrypoints for stubgen commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List

from .config import ConfigError, load_config
from .logging import configure_logging, get_logger
from .naming import SourcePath
from .planner import Planner, TestPlan, build_selection_options
from .schema import PayloadError, load_parsed_files


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stubgen",
        description="Select Go functions that need generated test stubs.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    plan_parser = subparsers.add_parser(
        "plan",
        help="Print the test plan for parsed source files.",
    )
    _add_verbose_option(plan_parser, suppress_default=True)
    plan_parser.add_argument(
        "input",
        help="JSON payload produced by the source parser.",
    )
    plan_parser.add_argument(
        "--config",
        default=".",
        help="Path to .stubgen.yml or the directory holding it (defaults to current directory).",
    )
    plan_parser.add_argument(
        "--only",
        default=None,
        help="Regular expression; only functions whose name matches are selected.",
    )
    plan_parser.add_argument(
        "--excl",
        default=None,
        help="Regular expression; functions whose name matches are skipped.",
    )
    plan_parser.add_argument(
        "--exported",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Select exported functions only (--no-exported overrides the config).",
    )
    plan_parser.add_argument(
        "--existing",
        nargs="*",
        default=[],
        metavar="NAME",
        help="Test function names that already exist.",
    )
    plan_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of files planned in parallel.",
    )
    plan_parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Output format.",
    )

    path_parser = subparsers.add_parser(
        "test-path",
        help="Print the test file path paired with each source path.",
    )
    _add_verbose_option(path_parser, suppress_default=True)
    path_parser.add_argument("paths", nargs="+", help="Go source file paths.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for stubgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))
    logger = get_logger("cli")

    if args.command == "plan":
        try:
            config = load_config(Path(args.config))
            options = build_selection_options(
                config,
                only=args.only,
                exclude=args.excl,
                exported=args.exported,
                existing_tests=args.existing,
            )
            files = load_parsed_files(Path(args.input))
        except (ConfigError, PayloadError) as exc:
            parser.exit(1, f"stubgen plan failed: {exc}\n")
        workers = args.workers if args.workers is not None else config.workers
        if workers is not None and workers < 1:
            parser.exit(1, f"stubgen plan failed: --workers must be a positive integer, got {workers}\n")
        plans = Planner().plan_many(files, options, workers=workers)
        logger.debug("Produced %d plan(s)", len(plans))
        if args.format == "json":
            print(json.dumps([plan.to_dict() for plan in plans], indent=2))
        else:
            print(_format_plans(plans))
    elif args.command == "test-path":
        for path in args.paths:
            print(SourcePath(path).test_path())
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _format_plans(plans: List[TestPlan]) -> str:
    lines: List[str] = []
    for plan in plans:
        suffix = " (reflect)" if plan.uses_reflection else ""
        lines.append(f"{plan.source_path} -> {plan.test_path}{suffix}")
        if not plan.candidates:
            lines.append("  (no testable functions)")
        for candidate in plan.candidates:
            lines.append(f"  {candidate.test_name}")
    return "\n".join(lines)


if __name__ == "__main__":
    main(sys.argv[1:])
