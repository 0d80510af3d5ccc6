"""solidity-analyzer CLI — list version pragmas and imports of Solidity files.

Usage:
    solidity-analyzer analyze <path>...     Analyze .sol files or project directories
    solidity-analyzer targets               Show the platform target and providers
    solidity-analyzer config                Show current configuration

Examples:
    solidity-analyzer analyze ./contracts/
    solidity-analyzer analyze Token.sol --format json -o facts.json
    solidity-analyzer analyze ./contracts --comments scan
"""

from __future__ import annotations

import argparse
import io
import json
import logging
import sys
import time
from pathlib import Path
from typing import TextIO

from solidity_analyzer import __version__
from solidity_analyzer.core.config import get_settings
from solidity_analyzer.core.errors import AnalyzerError, ConfigurationError
from solidity_analyzer.core.logging import setup_logging
from solidity_analyzer.core.types import AnalysisResult, CommentPolicy

logger = logging.getLogger(__name__)


# ── Coloured output helpers ──────────────────────────────────────────────────

_RESET = "\033[0m"
_BOLD = "\033[1m"
_RED = "\033[91m"
_YELLOW = "\033[93m"
_GREEN = "\033[92m"
_CYAN = "\033[96m"
_DIM = "\033[2m"


def _c(text: str, code: str) -> str:
    return f"{code}{text}{_RESET}"


# ── CLI argument parser ─────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="solidity-analyzer",
        description="Extract version pragmas and imports from Solidity sources",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="store_true", help="Print version and exit")
    parser.add_argument("--quiet", "-q", action="store_true", help="Minimal output")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: from settings)",
    )

    sub = parser.add_subparsers(dest="command")

    # ── analyze ──────────────────────────────────────────────────────────────
    analyze_p = sub.add_parser("analyze", help="Analyze Solidity files or directories")
    analyze_p.add_argument("paths", nargs="+", help="Paths to .sol files or project directories")
    analyze_p.add_argument(
        "--format",
        "-f",
        default="table",
        choices=["table", "json"],
        help="Output format (default: table)",
    )
    analyze_p.add_argument("--output", "-o", help="Write output to file instead of stdout")
    analyze_p.add_argument(
        "--comments",
        choices=[p.value for p in CommentPolicy],
        help="Whether commented-out statements are extracted (default: skip)",
    )
    analyze_p.add_argument("--provider-dir", help="Directory holding platform providers")

    # ── targets ──────────────────────────────────────────────────────────────
    targets_p = sub.add_parser("targets", help="Show the platform target and discovered providers")
    targets_p.add_argument("--provider-dir", help="Directory holding platform providers")

    # ── config ───────────────────────────────────────────────────────────────
    sub.add_parser("config", help="Show current configuration")

    return parser


# ── Analyze command ──────────────────────────────────────────────────────────


def collect_sources(paths: list[str], suffix: str, exclude_dirs: list[str]) -> list[Path]:
    """Expand files and directories into the sorted list of source files."""
    files: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if not path.exists():
            raise FileNotFoundError(f"path '{path}' does not exist")
        if path.is_file():
            files.append(path)
            continue
        for candidate in sorted(path.rglob(f"*{suffix}")):
            rel_parts = candidate.relative_to(path).parts
            if any(part in exclude_dirs for part in rel_parts):
                continue
            files.append(candidate)
    return files


def _print_table(
    results: dict[str, AnalysisResult],
    quiet: bool = False,
    file: TextIO | None = None,
    color: bool = True,
) -> None:
    """Pretty-print per-file facts."""
    paint = _c if color else (lambda text, code: text)

    def emit(line: str = "") -> None:
        print(line, file=file)

    for path, result in results.items():
        emit(paint(path, _BOLD))
        if result.is_empty:
            emit(paint("  (no pragmas or imports)", _DIM))
            continue
        for pragma in result.version_pragmas:
            emit(f"  {paint('pragma', _CYAN)}  {pragma}")
        for imported in result.imports:
            emit(f"  {paint('import', _GREEN)}  {imported}")

    if not quiet:
        pragmas = sum(len(r.version_pragmas) for r in results.values())
        imports = sum(len(r.imports) for r in results.values())
        emit()
        emit(paint(f"{len(results)} files · {pragmas} pragmas · {imports} imports", _DIM))


def _run_analyze(args: argparse.Namespace) -> int:
    from solidity_analyzer.analyzer.extractor import Extractor
    from solidity_analyzer.providers.loader import ProviderLoader

    settings = get_settings()

    try:
        files = collect_sources(args.paths, settings.source_suffix, settings.exclude_dirs)
    except FileNotFoundError as exc:
        print(_c(f"Error: {exc}.", _RED), file=sys.stderr)
        return 1
    if not files:
        print(_c(f"Error: no {settings.source_suffix} files found.", _RED), file=sys.stderr)
        return 1

    if args.comments:
        # Comment handling is an option of the built-in extractor only.
        if args.provider_dir:
            print(
                _c("Warning: --provider-dir is ignored with --comments; using the built-in extractor.", _YELLOW),
                file=sys.stderr,
            )
        analyze = Extractor(comment_policy=args.comments).analyze
    else:
        try:
            provider = ProviderLoader(providers_dir=args.provider_dir).load()
        except AnalyzerError as exc:
            print(_c(f"Error: {exc}", _RED), file=sys.stderr)
            return 1
        analyze = provider.analyze

    results: dict[str, AnalysisResult] = {}
    for path in files:
        start = time.monotonic()
        source = path.read_text(encoding="utf-8", errors="replace")
        try:
            results[str(path)] = analyze(source)
        except AnalyzerError as exc:
            print(_c(f"Error: {path}: {exc}", _RED), file=sys.stderr)
            return 1
        logger.debug(
            "Analyzed file",
            extra={"path": str(path), "duration_ms": round((time.monotonic() - start) * 1000, 2)},
        )

    if args.format == "json":
        output = json.dumps({p: r.to_dict() for p, r in results.items()}, indent=2)
    else:
        if not args.output:
            _print_table(results, quiet=args.quiet)
            return 0
        buffer = io.StringIO()
        _print_table(results, quiet=args.quiet, file=buffer, color=False)
        output = buffer.getvalue().rstrip("\n")

    if args.output:
        Path(args.output).write_text(output + "\n", encoding="utf-8")
        if not args.quiet:
            print(f"  Written to {_c(args.output, _CYAN)}", file=sys.stderr)
    else:
        print(output)

    return 0


# ── Targets command ──────────────────────────────────────────────────────────


def _run_targets(args: argparse.Namespace) -> int:
    from solidity_analyzer.providers.loader import ProviderLoader, detect_target

    target = detect_target()
    loader = ProviderLoader(providers_dir=args.provider_dir)
    print(f"\n{_BOLD}Target{_RESET}  {target}")
    print(f"{_BOLD}Providers{_RESET}  {_c(str(loader.providers_dir), _DIM)}")
    manifests = loader.discover()
    if not manifests:
        print(_c("  (none)", _DIM))
    for m in manifests:
        mark = _c("✓", _GREEN) if m.supports(target) else _c("·", _DIM)
        print(f"  {mark} {m.name} {_DIM}v{m.version}  [{', '.join(m.targets)}]{_RESET}")
    print()
    return 0


# ── Config command ───────────────────────────────────────────────────────────


def _run_config() -> int:
    """Print current settings."""
    s = get_settings()
    print(f"\n{_BOLD}Solidity Analyzer Configuration{_RESET}\n")
    for field_name in sorted(type(s).model_fields.keys()):
        val = getattr(s, field_name, "")
        if isinstance(val, CommentPolicy):
            val = val.value
        print(f"  {_DIM}{field_name}:{_RESET}  {val}")
    print()
    return 0


# ── Entrypoint ───────────────────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"solidity-analyzer {__version__}")
        return 0

    try:
        settings = get_settings()
    except ConfigurationError as exc:
        print(_c(f"Error: {exc}", _RED), file=sys.stderr)
        return 1
    setup_logging(settings.app_env, args.log_level or settings.log_level, stream=sys.stderr)

    if not args.command:
        parser.print_help()
        return 0

    if args.command == "config":
        return _run_config()

    if args.command == "targets":
        return _run_targets(args)

    if args.command == "analyze":
        return _run_analyze(args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
