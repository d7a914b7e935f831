"""Rename files so their names start with the date they mention.

  "Protokoll - 15.03.2025.docx"    -> "2025-03-15 Protokoll.docx"
  "Notizen 10. September 2023.docx" -> "2023-09-10 Notizen.docx"

Default is a dry run that only prints what would change; pass --execute to
rename. Directories default to the current directory.

Usage:
  dateprefix [--execute] [--debug] [--quiet | --verbose] [DIR ...]
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from datetime import date
from pathlib import Path

from .config import load_settings
from .rename import ERROR_STATUSES, DirectoryReport, FileOutcome, RunStats, run


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="dateprefix",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    ap.add_argument("directories", nargs="*", help="Directories to process (default: .)")
    ap.add_argument("--execute", action="store_true", help="Actually rename files (default is a dry run)")
    ap.add_argument("--debug", action="store_true", help="Show which pattern matched and what was extracted")
    verbosity = ap.add_mutually_exclusive_group()
    verbosity.add_argument("--quiet", action="store_true", help="Only print errors")
    verbosity.add_argument("--verbose", action="store_true", help="Also print skipped files")
    rng = ap.add_mutually_exclusive_group()
    rng.add_argument(
        "--keep-range",
        dest="range_suffix",
        action="store_const",
        const="keep",
        help='Keep the end day of "yyyy-mm-dd-dd" in the rest of the name',
    )
    rng.add_argument(
        "--drop-range",
        dest="range_suffix",
        action="store_const",
        const="drop",
        help='Drop the end day of "yyyy-mm-dd-dd"',
    )
    ap.add_argument("--config", help="JSON config file (directories, range_suffix, max_year, min_year, skip_suffixes)")
    return ap


def _emit(text: str, *, err: bool = False) -> None:
    # Undecodable bytes in file names arrive as lone surrogates; print them escaped.
    text = text.encode("utf-8", "backslashreplace").decode("utf-8")
    print(text, file=sys.stderr if err else sys.stdout)


class Reporter:
    """Console output for a run; stdout for progress, stderr for errors."""

    def __init__(self, *, execute: bool, quiet: bool = False, verbose: bool = False, debug: bool = False) -> None:
        self.execute = execute
        self.quiet = quiet
        self.verbose = verbose
        self.debug = debug

    def header(self, directories: list[Path]) -> None:
        if self.quiet:
            return
        mode = "EXECUTE (files will be renamed)" if self.execute else "DRY RUN (no changes will be made)"
        _emit(f"Mode: {mode}")
        _emit(f"Processing directories: {', '.join(str(d) for d in directories)}\n")

    def outcome(self, directory: Path, o: FileOutcome) -> None:
        if self.debug and o.match:
            m = o.match
            _emit(f"[DEBUG] File: {o.name}")
            _emit(f"[DEBUG] Matched pattern: {m.label}")
            _emit(f"[DEBUG] Extracted date: {m.iso}")
            _emit(f'[DEBUG] Rest of filename: "{m.remainder}"')

        if o.status in ERROR_STATUSES:
            _emit(o.message, err=True)
        elif o.status == "renamed":
            if not self.quiet:
                verb = "Renaming" if self.execute else "Would rename"
                _emit(f"{verb}: {o.name} -> {o.new_name}")
        elif self.verbose:
            _emit(o.message)

    def directory(self, r: DirectoryReport) -> None:
        if r.error:
            _emit(r.error, err=True)
        if self.quiet:
            return
        _emit(f"\nSummary for {r.directory}:")
        _emit(f"  Files {'renamed' if self.execute else 'to be renamed'}: {r.renamed}")
        _emit(f"  Files skipped: {r.skipped}")
        _emit(f"  Files with errors: {r.errors}\n")

    def totals(self, stats: RunStats) -> None:
        if self.quiet:
            return
        _emit("Total Statistics:")
        _emit(f"  Total files {'renamed' if self.execute else 'to be renamed'}: {stats.renamed}")
        _emit(f"  Total files skipped: {stats.skipped}")
        _emit(f"  Total files with errors: {stats.errors}")


def _run(args: argparse.Namespace) -> RunStats:
    try:
        settings = load_settings(Path(args.config) if args.config else None)
    except ValueError as e:
        raise SystemExit(str(e))

    policy = settings.policy
    if args.range_suffix:
        policy = replace(policy, range_suffix=args.range_suffix)

    dirs = args.directories or list(settings.directories) or ["."]
    directories = [Path(d).expanduser() for d in dirs]

    rep = Reporter(execute=args.execute, quiet=args.quiet, verbose=args.verbose, debug=args.debug)
    rep.header(directories)
    stats = run(
        directories,
        execute=args.execute,
        policy=policy,
        skip_suffixes=settings.skip_suffixes,
        today=date.today(),
        on_outcome=rep.outcome,
        on_report=rep.directory,
    )
    rep.totals(stats)
    return stats


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        _run(args)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
