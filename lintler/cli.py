#!/usr/bin/env python3
"""lintler: quick syntax sanity checks for .xml, .json and .csv files.

For every FILE argument:
  Validating: <path>
  Validation: Success | Failure
  ------------------------------

The first problem found in a file goes to stderr. Unsupported extensions are
reported on stderr and skipped. Exit status is 0 regardless of per-file
verdicts (unless --fail-on-error), 1 when no files are given, 2 on a bad
config file or an unwritable report.

Usage:
  lintler data.csv layout.xml payload.json
  lintler --config lintler.yaml --report report.json docs/*.xhtml
  lintler a.csv --fail-on-error b.csv      # options may sit between files
  lintler --strict-markup -- -draft.xml    # paths after -- are never options
"""

from __future__ import annotations

import argparse
import contextlib
import json
import sys
from dataclasses import dataclass
from typing import Optional, TextIO

from lintler.checkers import (
    CHECKERS,
    UNSUPPORTED_EXTENSION,
    CheckError,
    CheckResult,
)
from lintler.config import Config, ConfigError, load_config

SEPARATOR = "-" * 30


# ─── Utility ────────────────────────────────────────────────────────────────

def error(msg, err: Optional[TextIO] = None):
    """Print error to stderr."""
    print(f"ERROR: {msg}", file=err or sys.stderr)


def info(msg, out: Optional[TextIO] = None):
    """Print info to stdout."""
    print(msg, file=out or sys.stdout, flush=True)


def file_extension(path: str) -> str:
    """Text after the last '.', or '' when the path has none."""
    _, sep, tail = path.rpartition(".")
    return tail if sep else ""


# ─── Per-file result ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class FileReport:
    path: str
    kind: Optional[str]
    ok: bool
    error: Optional[CheckError] = None

    @property
    def supported(self) -> bool:
        return self.kind is not None

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "kind": self.kind,
            "ok": self.ok,
            "error": self.error.to_dict() if self.error else None,
        }


def validate_file(path: str, config: Config) -> FileReport:
    """Dispatch one path to its checker by extension."""
    ext = file_extension(path)
    kind = config.kind_for(ext)
    if kind is None:
        return FileReport(
            path=path,
            kind=None,
            ok=False,
            error=CheckError(UNSUPPORTED_EXTENSION, f"Unsupported file type: {ext}"),
        )

    options = {"angle_brackets": config.angle_brackets} if kind == "xml" else {}
    result: CheckResult = CHECKERS[kind](path, **options)
    return FileReport(path=path, kind=kind, ok=result.ok, error=result.error)


def report_file(report: FileReport, out: TextIO, err: TextIO):
    """Print everything a single file contributes to both streams."""
    info(f"Validating: {report.path}", out)
    if report.error is not None:
        print(str(report.error), file=err, flush=True)
    if not report.supported:
        return
    info(f"Validation: {'Success' if report.ok else 'Failure'}", out)
    info(SEPARATOR, out)


# ─── Run ────────────────────────────────────────────────────────────────────

def run(paths: list[str], config: Optional[Config] = None,
        out: Optional[TextIO] = None, err: Optional[TextIO] = None) -> list[FileReport]:
    """Validate paths in order, reporting each before moving to the next."""
    config = config or Config()
    out = out or sys.stdout
    err = err or sys.stderr

    reports = []
    for path in paths:
        report = validate_file(path, config)
        report_file(report, out, err)
        reports.append(report)
    return reports


def summarize(reports: list[FileReport]) -> dict:
    checked = [r for r in reports if r.supported]
    failed = [r for r in checked if not r.ok]
    return {
        "valid": not failed,
        "validated": len(checked),
        "failed": len(failed),
        "skipped": len(reports) - len(checked),
        "files": [r.to_dict() for r in reports],
    }


def write_report(path: str, reports: list[FileReport]):
    with open(path, "w", encoding="utf-8") as f:
        json.dump(summarize(reports), f, ensure_ascii=False, indent=2)
        f.write("\n")


# ─── Main ───────────────────────────────────────────────────────────────────

PROG = "lintler"


def split_argv(argv: list[str]) -> tuple[list[str], list[str]]:
    """Split at the first '--'; everything after it is a file path."""
    if "--" in argv:
        i = argv.index("--")
        return argv[:i], argv[i + 1:]
    return argv, []


def build_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description="Lightweight syntax checks for XML, JSON and CSV files (first error per file).",
        epilog="Use -- before file paths that start with a dash.",
    )
    parser.add_argument("files", nargs="*", default=[], metavar="FILE", help="Files to validate")
    parser.add_argument("--config", help="YAML config (extension aliases, markup options)")
    parser.add_argument("--strict-markup", action="store_true",
                        help="Also flag stray or nested angle brackets in XML lines")
    parser.add_argument("--report", help="Write a JSON run report to this path")
    parser.add_argument("--fail-on-error", action="store_true",
                        help="Exit 2 if any validated file fails")
    return parser


def main(argv: Optional[list[str]] = None,
         out: Optional[TextIO] = None, err: Optional[TextIO] = None) -> int:
    out = out or sys.stdout
    err = err or sys.stderr
    head, tail = split_argv(sys.argv[1:] if argv is None else list(argv))
    parser = build_parser(prog=PROG)
    with contextlib.redirect_stderr(err):
        args = parser.parse_intermixed_args(head)
    files = list(args.files) + tail

    if not files:
        print(f"Usage: {parser.prog} <filename1> [filename2] ...", file=err)
        return 1

    try:
        config = load_config(args.config)
    except ConfigError as e:
        error(e, err)
        return 2
    if args.strict_markup:
        config.angle_brackets = True

    reports = run(files, config, out, err)

    if args.report:
        try:
            write_report(args.report, reports)
        except OSError as e:
            error(f"Could not write report '{args.report}': {e}", err)
            return 2
        info(f"Report written to {args.report}", out)

    if args.fail_on_error and not summarize(reports)["valid"]:
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
