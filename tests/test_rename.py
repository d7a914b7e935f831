from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from dateprefix.date import ExtractPolicy
from dateprefix.rename import FileOutcome, _apply_rename, iter_candidates, plan_file, process_directory, run

TODAY = date(2025, 6, 1)


def _touch(d: Path, *names: str) -> None:
    for n in names:
        (d / n).write_text("x", encoding="utf-8")


def _sample_dir(tmp_path: Path) -> Path:
    d = tmp_path / "notes"
    d.mkdir()
    _touch(
        d,
        "Protokoll - 15.03.2025.docx",
        "2023-07-10 Protokoll.docx",
        "Notes Sep.txt",
        "Termin 31.04.2021.txt",
        ".hidden 01.01.2020.txt",
        "rename.py",
    )
    (d / "Ordner 01.01.2020").mkdir()
    return d


def test_iter_candidates_skips_hidden_scripts_and_dirs(tmp_path: Path) -> None:
    d = _sample_dir(tmp_path)
    names = [p.name for p in iter_candidates(d)]
    assert names == [
        "2023-07-10 Protokoll.docx",
        "Notes Sep.txt",
        "Protokoll - 15.03.2025.docx",
        "Termin 31.04.2021.txt",
    ]


def test_plan_file_statuses() -> None:
    assert plan_file("Protokoll - 15.03.2025.docx", today=TODAY).new_name == "2025-03-15 Protokoll.docx"
    assert plan_file("2023-07-10 Protokoll.docx", today=TODAY).status == "skipped"
    assert plan_file("2023-07-10.docx", today=TODAY).status == "skipped"
    assert plan_file("Notes Sep.txt", today=TODAY).status == "unrecognized"

    bad = plan_file("Termin 31.04.2021.txt", today=TODAY)
    assert bad.status == "invalid"
    assert "2021-04-31" in bad.message


def test_plan_file_rejects_future_year_by_default() -> None:
    assert plan_file("Plan 2030-01-01.txt", today=TODAY).status == "invalid"
    ok = plan_file("Plan 2030-01-01.txt", ExtractPolicy(max_year=2100), today=TODAY)
    assert ok.status == "renamed"


def test_dry_run_does_not_touch_files(tmp_path: Path) -> None:
    d = _sample_dir(tmp_path)
    before = sorted(p.name for p in d.iterdir())

    report = process_directory(d, today=TODAY)

    assert sorted(p.name for p in d.iterdir()) == before
    assert report.renamed == 1
    assert report.skipped == 1
    assert report.errors == 2


def test_execute_renames_and_second_run_is_noop(tmp_path: Path) -> None:
    d = _sample_dir(tmp_path)

    report = process_directory(d, execute=True, today=TODAY)
    assert report.renamed == 1
    assert (d / "2025-03-15 Protokoll.docx").exists()
    assert not (d / "Protokoll - 15.03.2025.docx").exists()

    again = process_directory(d, execute=True, today=TODAY)
    assert again.renamed == 0
    assert again.skipped == 2


def test_existing_target_is_not_overwritten(tmp_path: Path) -> None:
    _touch(tmp_path, "2025-03-15 Protokoll.docx", "Protokoll 15.03.2025.docx")
    (tmp_path / "2025-03-15 Protokoll.docx").write_text("keep me", encoding="utf-8")

    report = process_directory(tmp_path, execute=True, today=TODAY)

    statuses = {o.name: o.status for o in report.outcomes}
    assert statuses["Protokoll 15.03.2025.docx"] == "error"
    assert (tmp_path / "2025-03-15 Protokoll.docx").read_text(encoding="utf-8") == "keep me"
    assert (tmp_path / "Protokoll 15.03.2025.docx").exists()


def test_dry_run_reports_clashing_targets(tmp_path: Path) -> None:
    _touch(tmp_path, "Protokoll 15.03.2025.docx", "Protokoll_2025-03-15.docx")

    report = process_directory(tmp_path, today=TODAY)

    assert [o.status for o in report.outcomes] == ["renamed", "error"]


def test_rename_failure_does_not_stop_the_run(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _touch(tmp_path, "A 01.02.2020.txt", "B 02.02.2020.txt")
    real_rename = Path.rename

    def flaky_rename(self: Path, target: Path) -> Path:
        if self.name.startswith("A "):
            raise PermissionError("denied")
        return real_rename(self, target)

    monkeypatch.setattr(Path, "rename", flaky_rename)

    report = process_directory(tmp_path, execute=True, today=TODAY)

    statuses = {o.name: o.status for o in report.outcomes}
    assert statuses == {"A 01.02.2020.txt": "error", "B 02.02.2020.txt": "renamed"}
    assert (tmp_path / "2020-02-02 B.txt").exists()
    assert "denied" in report.outcomes[0].message


def test_missing_directory_is_counted_not_raised(tmp_path: Path) -> None:
    report = process_directory(tmp_path / "nope", today=TODAY)
    assert report.error is not None
    assert report.errors == 1
    assert report.outcomes == []


def test_run_aggregates_directories(tmp_path: Path) -> None:
    d = _sample_dir(tmp_path)
    seen: list[str] = []

    stats = run([d, tmp_path / "missing"], today=TODAY, on_outcome=lambda _d, o: seen.append(o.name))

    assert len(stats.reports) == 2
    assert stats.renamed == 1
    assert stats.skipped == 1
    assert stats.errors == 3
    assert len(seen) == 4


def test_custom_skip_suffixes(tmp_path: Path) -> None:
    _touch(tmp_path, "Notiz 01.02.2020.md", "Notiz 01.02.2020.txt")
    names = [p.name for p in iter_candidates(tmp_path, skip_suffixes=[".md"])]
    assert names == ["Notiz 01.02.2020.txt"]


def test_failing_outcome_hook_does_not_stop_the_run(tmp_path: Path) -> None:
    _touch(tmp_path, "A 01.02.2020.txt", "B 02.02.2020.txt")

    def hook(_d: Path, o: FileOutcome) -> None:
        if o.name.startswith("A "):
            raise UnicodeEncodeError("utf-8", o.name, 0, 1, "surrogates not allowed")

    report = process_directory(tmp_path, execute=True, today=TODAY, on_outcome=hook)

    assert [o.status for o in report.outcomes] == ["renamed", "renamed"]
    assert "could not report" in report.outcomes[0].message
    assert (tmp_path / "2020-02-01 A.txt").exists()
    assert (tmp_path / "2020-02-02 B.txt").exists()


def test_rename_without_target_name_is_an_error(tmp_path: Path) -> None:
    _touch(tmp_path, "x.txt")
    planned = FileOutcome(name="x.txt", status="renamed")

    out = _apply_rename(tmp_path, tmp_path / "x.txt", planned, execute=True, claimed=set())

    assert out.status == "error"
    assert (tmp_path / "x.txt").exists()
