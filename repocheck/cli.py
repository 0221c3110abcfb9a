"""Command-line entry point for the source-tree file checks."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

from .result import ScanResult, Violation, format_summary
from .rules import Rule, load_rules
from .scanner import DEFAULT_CONCURRENCY, DEFAULT_EXTENSION, run_scan

DEFAULT_ROOT = "src"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Scan a source tree for lines that break repository conventions",
    )
    parser.add_argument(
        "--root",
        default=DEFAULT_ROOT,
        help="Directory to scan, relative to the working directory (defaults to src).",
    )
    parser.add_argument(
        "--extension",
        default=DEFAULT_EXTENSION,
        help="Only files whose name ends with this suffix are checked (defaults to .ts).",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=DEFAULT_CONCURRENCY,
        help="Maximum number of files read at the same time.",
    )
    parser.add_argument(
        "--out",
        "--output",
        dest="output_path",
        type=str,
        default=None,
        help="Path to write a JSON report (e.g., artifacts/file-checks.json).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every queued file.",
    )
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def report_violation(violation: Violation) -> None:
    sys.stderr.write(violation.format() + "\n")


def scan(root: Path, extension: str = DEFAULT_EXTENSION, concurrency: int = DEFAULT_CONCURRENCY) -> ScanResult:
    rules: List[Rule] = load_rules()
    return run_scan(
        root,
        rules,
        extension=extension,
        concurrency=concurrency,
        on_violation=report_violation,
    )


def write_output(result: ScanResult, output_path: str | None) -> None:
    print(format_summary(result))

    if output_path:
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(json.dumps(result.to_dict(), indent=2), encoding="utf-8")
        print(f"\nReport written to {output_path}")


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    root = Path.cwd() / args.root
    print(f"starting at: {root}")
    result = scan(root, extension=args.extension, concurrency=args.concurrency)
    write_output(result, args.output_path)
    return result.exit_code()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
