"""CLI entrypoints for luastubgen commands."""

from __future__ import annotations

import argparse
from pathlib import Path

from .config import ConfigError, GeneratorConfig, load_config
from .logging import configure_logging
from .orchestrator import Orchestrator


def _add_logging_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    default: object = argparse.SUPPRESS if suppress_default else False
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=default,
        help="Only report warnings and errors.",
    )


def _add_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "config",
        nargs="?",
        default=".",
        help="Path to .luastubs.yml or the directory containing it (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="luastubgen",
        description="Generate EmmyLua annotation stubs from type descriptor dumps.",
    )
    _add_logging_options(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Write namespace stub files and the global index.",
    )
    _add_logging_options(generate_parser, suppress_default=True)
    _add_config_argument(generate_parser)
    generate_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output directory (overrides output_dir from the config).",
    )
    generate_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of namespace groups translated in parallel.",
    )
    generate_parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 2 when any type failed to translate.",
    )

    list_parser = subparsers.add_parser(
        "list",
        help="Print the types each assembly would generate.",
    )
    _add_logging_options(list_parser, suppress_default=True)
    _add_config_argument(list_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for luastubgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        quiet=bool(args.quiet),
        log_file=args.log_file,
    )

    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        parser.exit(1, f"Invalid configuration: {exc}\n")

    orchestrator = Orchestrator()

    if args.command == "generate":
        _run_generate(parser, orchestrator, config, args)
    elif args.command == "list":
        for assembly, names in orchestrator.list_types(config).items():
            print(f"{assembly}:")
            for name in names:
                print(f"  {name}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_generate(
    parser: argparse.ArgumentParser,
    orchestrator: Orchestrator,
    config: GeneratorConfig,
    args: argparse.Namespace,
) -> None:
    if args.workers is not None and args.workers < 1:
        parser.exit(1, "--workers must be a positive integer\n")

    try:
        report = orchestrator.run(config, output_dir=args.output, workers=args.workers)
    except OSError as exc:
        parser.exit(1, f"luastubgen generate failed: {exc}\nRun with --verbose for more details.\n")

    print(f"Generated {len(report.files)} files for {report.type_count} types")
    if report.skipped_assemblies:
        skipped = ", ".join(report.skipped_assemblies)
        parser.exit(1, f"Skipped unreadable descriptor dumps: {skipped}\n")
    if report.failures:
        print(f"{len(report.failures)} types failed to translate")
        if args.strict:
            parser.exit(2, "Failing because --strict was given.\n")


__all__ = ["main"]
