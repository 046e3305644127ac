"""Command-line interface.

Usage:
    python -m pslocdata extract MyModule/MyModule.psm1 --locale fr-FR
    python -m pslocdata scan ./workspace --exclude "**/build/**"
    python -m pslocdata refs MyModule/MyModule.psm1

Exit Codes:
    0   Success (including a missing module or a module without calls)
    1   Parse error, or an error-severity diagnostic was collected
    2   Invalid arguments or unusable scan root

Python 3.13+.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from .config import ExtractorConfig
from .constants import DEFAULT_ENCODING, DEFAULT_SEARCH_EXCLUDES
from .diagnostics import DiagnosticFormatter, OutputFormat, ScriptParseError
from .enums import ExtractionStatus
from .extraction import ExtractionResult, LocalizationExtractor
from .locale_utils import get_system_locale
from .references import find_localized_references
from .scanning import scan_modules

__all__ = ["build_parser", "main"]

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for all subcommands."""
    parser = argparse.ArgumentParser(
        prog="pslocdata",
        description=(
            "Statically extract Import-LocalizedData message tables from PowerShell modules."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Bindings for the default locale (en-US) as JSON:
  python -m pslocdata extract MyModule/MyModule.psm1

  # Bindings for French, diagnostics as JSON lines:
  python -m pslocdata extract MyModule/MyModule.psm1 --locale fr-FR --diagnostics json

  # Modules under the current directory that load localized data:
  python -m pslocdata scan .
""",
    )
    parser.add_argument(
        "--log-level",
        choices=_LOG_LEVELS,
        default="WARNING",
        type=str.upper,
        help="Logging level for library messages on stderr (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract_parser = subparsers.add_parser("extract", help="Print {binding: {key: value}} as JSON")
    extract_parser.add_argument("file", type=Path, help="PowerShell module (.psm1)")
    _add_locale_arguments(extract_parser)
    extract_parser.add_argument(
        "--diagnostics",
        choices=[f.value for f in OutputFormat],
        default=OutputFormat.RUST.value,
        help="Diagnostic format on stderr (default: rust)",
    )

    scan_parser = subparsers.add_parser("scan", help="List modules that call Import-LocalizedData")
    scan_parser.add_argument("root", type=Path, help="Directory to scan")
    scan_parser.add_argument(
        "--exclude",
        action="append",
        metavar="GLOB",
        help="Glob of paths to skip; repeatable (default: node_modules, out, dist, .git)",
    )
    scan_parser.add_argument(
        "--all",
        action="store_true",
        help="Also list modules without localization calls",
    )

    refs_parser = subparsers.add_parser("refs", help="List $Binding.Key usages with their values")
    refs_parser.add_argument("file", type=Path, help="PowerShell module (.psm1)")
    _add_locale_arguments(refs_parser)
    return parser


def _add_locale_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--locale", help="Locale directory to read (default: en-US)")
    group.add_argument(
        "--system-locale",
        action="store_true",
        help="Use the locale of the current environment",
    )


def _requested_locale(args: argparse.Namespace) -> str | None:
    if args.system_locale:
        return get_system_locale()
    return args.locale


def _print_json(payload: object) -> None:
    json.dump(payload, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def _report(result: ExtractionResult, formatter: DiagnosticFormatter) -> None:
    if result.diagnostics:
        print(formatter.format_all(result.diagnostics), file=sys.stderr)


def _run_extract(args: argparse.Namespace) -> int:
    formatter = DiagnosticFormatter(output_format=OutputFormat(args.diagnostics))
    extractor = LocalizationExtractor(ExtractorConfig())
    try:
        result = extractor.analyze(args.file, _requested_locale(args))
    except ScriptParseError as exc:
        if exc.diagnostic is not None:
            print(formatter.format(exc.diagnostic), file=sys.stderr)
        else:
            print(f"[ERROR] {exc}", file=sys.stderr)
        return 1

    _report(result, formatter)
    if result.status == ExtractionStatus.NOT_FOUND:
        return 0
    _print_json(result.to_dict())
    return 1 if result.has_errors else 0


def _run_scan(args: argparse.Namespace) -> int:
    exclude = args.exclude if args.exclude is not None else DEFAULT_SEARCH_EXCLUDES
    try:
        modules = scan_modules(
            args.root,
            exclude=exclude,
            encoding=DEFAULT_ENCODING,
            localized_only=not args.all,
        )
    except NotADirectoryError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 2
    if args.all:
        _print_json([asdict(module) for module in modules])
    else:
        _print_json([module.file_path for module in modules])
    return 0


def _run_refs(args: argparse.Namespace) -> int:
    extractor = LocalizationExtractor()
    try:
        result = extractor.analyze(args.file, _requested_locale(args))
    except ScriptParseError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1
    if result.status == ExtractionStatus.NOT_FOUND:
        _report(result, DiagnosticFormatter(output_format=OutputFormat.SIMPLE))
        return 0

    source = Path(result.file_path).read_text(encoding=extractor.config.encoding)
    references = find_localized_references(source, result.bindings)
    _print_json([asdict(reference) for reference in references])
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the command line and return the exit code."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logger.debug("Running %s", args.command)

    match args.command:
        case "extract":
            return _run_extract(args)
        case "scan":
            return _run_scan(args)
        case "refs":
            return _run_refs(args)
        case _:
            msg = f"Unknown command: {args.command}"
            raise ValueError(msg)
