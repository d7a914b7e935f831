from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from pathlib import Path
from typing import Callable, Iterable, Literal

from .config import DEFAULT_SKIP_SUFFIXES
from .date import (
    DateMatch,
    ExtractPolicy,
    build_canonical_name,
    extract_date,
    has_canonical_prefix,
    is_valid_calendar_date,
)
from .local_paths import sibling_path

FileStatus = Literal["renamed", "skipped", "unrecognized", "invalid", "error"]
ERROR_STATUSES = ("unrecognized", "invalid", "error")


@dataclass(frozen=True)
class FileOutcome:
    """What happened (or would happen, in a dry run) to a single file."""

    name: str
    status: FileStatus
    new_name: str | None = None
    match: DateMatch | None = None
    message: str = ""


@dataclass
class DirectoryReport:
    directory: Path
    outcomes: list[FileOutcome] = field(default_factory=list)
    error: str | None = None  # directory-level failure (missing, unreadable)

    def count(self, *statuses: str) -> int:
        return sum(1 for o in self.outcomes if o.status in statuses)

    @property
    def renamed(self) -> int:
        return self.count("renamed")

    @property
    def skipped(self) -> int:
        return self.count("skipped")

    @property
    def errors(self) -> int:
        return self.count(*ERROR_STATUSES) + (1 if self.error else 0)


@dataclass
class RunStats:
    """Totals for one run over one or more directories."""

    reports: list[DirectoryReport] = field(default_factory=list)

    @property
    def renamed(self) -> int:
        return sum(r.renamed for r in self.reports)

    @property
    def skipped(self) -> int:
        return sum(r.skipped for r in self.reports)

    @property
    def errors(self) -> int:
        return sum(r.errors for r in self.reports)


OutcomeHook = Callable[[Path, FileOutcome], None]


def iter_candidates(directory: Path, skip_suffixes: Iterable[str] = DEFAULT_SKIP_SUFFIXES) -> list[Path]:
    """Regular, non-hidden, non-script files of directory, sorted by name."""
    skip = tuple(s.lower() for s in skip_suffixes)
    out: list[Path] = []
    for p in directory.iterdir():
        if p.name.startswith("."):
            continue
        if skip and p.name.lower().endswith(skip):
            continue
        if not p.is_file():
            continue
        out.append(p)
    out.sort(key=lambda x: x.name)
    return out


def plan_file(name: str, policy: ExtractPolicy | None = None, *, today: date | None = None) -> FileOutcome:
    """Decide what to do with one file name. Touches nothing on disk."""
    policy = policy or ExtractPolicy()
    today = today or date.today()

    if has_canonical_prefix(name):
        return FileOutcome(name=name, status="skipped", message=f"File already in correct format: {name}")

    m = extract_date(name, policy, today=today)
    if not m:
        return FileOutcome(name=name, status="unrecognized", message=f"Could not extract date from: {name}")

    if not is_valid_calendar_date(m.year, m.month, m.day, min_year=policy.min_year, max_year=policy.max_year, today=today):
        return FileOutcome(
            name=name,
            status="invalid",
            match=m,
            message=f"Invalid date extracted from: {name} ({m.iso})",
        )

    new_name = build_canonical_name(m)
    if new_name == name:
        return FileOutcome(name=name, status="skipped", match=m, message=f"File already in correct format: {name}")

    return FileOutcome(name=name, status="renamed", new_name=new_name, match=m, message=f"{name} -> {new_name}")


def _apply_rename(
    directory: Path, path: Path, planned: FileOutcome, *, execute: bool, claimed: set[str]
) -> FileOutcome:
    new_name = planned.new_name or ""
    try:
        target = sibling_path(directory, new_name)
    except ValueError as e:
        return FileOutcome(name=planned.name, status="error", match=planned.match, message=str(e))

    if new_name in claimed or target.exists():
        return FileOutcome(
            name=planned.name,
            status="error",
            new_name=planned.new_name,
            match=planned.match,
            message=f"Target already exists, not renaming {planned.name} -> {planned.new_name}",
        )

    if execute:
        try:
            path.rename(target)
        except OSError as e:
            return FileOutcome(
                name=planned.name,
                status="error",
                new_name=planned.new_name,
                match=planned.match,
                message=f"Error renaming {planned.name}: {e}",
            )
    claimed.add(new_name)
    return planned


def process_directory(
    directory: Path,
    *,
    execute: bool = False,
    policy: ExtractPolicy | None = None,
    skip_suffixes: Iterable[str] = DEFAULT_SKIP_SUFFIXES,
    today: date | None = None,
    on_outcome: OutcomeHook | None = None,
) -> DirectoryReport:
    """Plan (and with execute=True, perform) the renames for one directory.

    Per-file problems end up in the report; nothing here raises for a bad file
    or a missing directory.
    """
    report = DirectoryReport(directory=directory)
    today = today or date.today()

    if not directory.is_dir():
        report.error = f"Directory does not exist: {directory}"
        return report

    try:
        candidates = iter_candidates(directory, skip_suffixes)
    except OSError as e:
        report.error = f"Error processing directory {directory}: {e}"
        return report

    # Target names handed out earlier in this directory, so a dry run reports clashes too.
    claimed: set[str] = set()
    for path in candidates:
        try:
            outcome = plan_file(path.name, policy, today=today)
            if outcome.status == "renamed":
                outcome = _apply_rename(directory, path, outcome, execute=execute, claimed=claimed)
        except OSError as e:
            outcome = FileOutcome(name=path.name, status="error", message=f"Error processing file {path.name}: {e}")

        report.outcomes.append(outcome)
        if on_outcome:
            try:
                on_outcome(directory, outcome)
            except (OSError, UnicodeError) as e:
                # The file was handled; only reporting it failed.
                report.outcomes[-1] = replace(outcome, message=f"{outcome.message} (could not report: {e})")

    return report


def run(
    directories: Iterable[Path],
    *,
    execute: bool = False,
    policy: ExtractPolicy | None = None,
    skip_suffixes: Iterable[str] = DEFAULT_SKIP_SUFFIXES,
    today: date | None = None,
    on_outcome: OutcomeHook | None = None,
    on_report: Callable[[DirectoryReport], None] | None = None,
) -> RunStats:
    stats = RunStats()
    skip = tuple(skip_suffixes)
    for d in directories:
        report = process_directory(
            d,
            execute=execute,
            policy=policy,
            skip_suffixes=skip,
            today=today,
            on_outcome=on_outcome,
        )
        stats.reports.append(report)
        if on_report:
            on_report(report)
    return stats
