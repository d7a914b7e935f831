from __future__ import annotations

import re
from datetime import date
from typing import Callable

from .normalize import MONTH_PATTERN, clean_remainder, expand_year, month_number, pad2, strip_spans
from .types import DateMatch, ExtractPolicy

Recognizer = Callable[..., "DateMatch | None"]

# Numeric fields must not touch other digits; month names must be whole words.
_MONTH = rf"(?P<month>{MONTH_PATTERN})(?![^\W\d_])"
_YEAR_2_OR_4 = r"(?P<year>\d{4}|\d{2})(?!\d)"

ISO_RE = re.compile(r"(?<!\d)(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})(?!\d)(?P<range>-(?P<end>\d{1,2})(?!\d))?")
ISO_UNDERSCORE_RE = re.compile(r"(?<!\d)(?P<year>\d{4})_(?P<month>\d{2})_(?P<day>\d{2})(?!\d)")
ISO_DOTTED_RE = re.compile(r"(?<!\d)(?P<year>\d{4})\.(?P<month>\d{2})\.(?P<day>\d{2})(?!\d)")

DAY_FIRST_DOTTED_RE = re.compile(r"(?<!\d)(?P<day>\d{1,2})\.(?P<month>\d{1,2})\." + _YEAR_2_OR_4)

# Same separator on both sides: 2024-9-5, 2024_9_5, 2024.9.5
LOOSE_NUMERIC_RE = re.compile(r"(?<!\d)(?P<year>\d{4})(?P<sep>[-_.])(?P<month>\d{1,2})(?P=sep)(?P<day>\d{1,2})(?!\d)")

# 24-September-22-2022, 14-Jan-23, 3-Mai-2021
HYPHENATED_MONTH_RE = re.compile(
    r"(?<!\d)(?P<day>\d{1,2})-" + _MONTH + r"(?:-(?P<short>\d{2})(?!\d))?(?:-(?P<long>\d{4})(?!\d))?",
    re.IGNORECASE,
)

# 5 April 2021, 17 Mai 20, 3-Okt 2019, 17Mai2020
DAY_MONTH_YEAR_RE = re.compile(
    r"(?<!\d)(?P<day>\d{1,2})[\s\-]*" + _MONTH + r"[\s.\-]*" + _YEAR_2_OR_4,
    re.IGNORECASE,
)

MONTH_YEAR_RE = re.compile(r"(?<![^\W\d_])" + _MONTH + r"[\s.\-]+(?P<year>\d{4})(?!\d)", re.IGNORECASE)
_DAY_BEFORE_RE = re.compile(r"(?<!\d)\d{1,2}\.?\s*$")

# 10. September 2023, 17.Mai2020
DAY_DOT_MONTH_YEAR_RE = re.compile(
    r"(?<!\d)(?P<day>\d{1,2})\.\s*" + _MONTH + r"[\s.\-]*" + _YEAR_2_OR_4,
    re.IGNORECASE,
)

# 26.7. 2020, 9.5.
PARTIAL_NUMERIC_RE = re.compile(
    r"(?<!\d)(?P<day>\d{1,2})\.(?P<month>\d{1,2})\.(?:\s+(?P<year>\d{4})(?!\d)|(?!\d))"
)
# 14-Jan, 3. Mai
# A hyphen or digit right after the month means a malformed year follows, e.g. 3-Mai-20200.
PARTIAL_MONTH_NAME_RE = re.compile(r"(?<!\d)(?P<day>\d{1,2})(?:\.\s*|-)" + _MONTH + r"(?!-?\d)", re.IGNORECASE)
BARE_YEAR_RE = re.compile(r"(?<!\d)(?:19|20)\d{2}(?!\d)")


def _build(
    name: str,
    *,
    year: str,
    month: str,
    day: str,
    label: str,
    spans: list[tuple[int, int]],
) -> DateMatch:
    return DateMatch(
        year=year,
        month=pad2(month),
        day=pad2(day),
        remainder=clean_remainder(strip_spans(name, spans)),
        label=label,
    )


def _fixed_width(name: str, regex: re.Pattern[str], label: str) -> DateMatch | None:
    m = regex.search(name)
    if not m:
        return None
    return _build(name, year=m["year"], month=m["month"], day=m["day"], label=label, spans=[m.span()])


def recognize_iso(name: str, *, today: date, policy: ExtractPolicy) -> DateMatch | None:
    """yyyy-mm-dd, optionally followed by the end day of a range (yyyy-mm-dd-dd)."""
    m = ISO_RE.search(name)
    if not m:
        return None
    if m["range"] is None:
        return _build(name, year=m["year"], month=m["month"], day=m["day"], label="iso yyyy-mm-dd", spans=[m.span()])

    # Only the first date of a range is kept.
    end = m.end() if policy.range_suffix == "drop" else m.end("day")
    return _build(
        name,
        year=m["year"],
        month=m["month"],
        day=m["day"],
        label="iso range yyyy-mm-dd-dd",
        spans=[(m.start(), end)],
    )


def recognize_iso_underscore(name: str, *, today: date, policy: ExtractPolicy) -> DateMatch | None:
    return _fixed_width(name, ISO_UNDERSCORE_RE, "underscore yyyy_mm_dd")


def recognize_iso_dotted(name: str, *, today: date, policy: ExtractPolicy) -> DateMatch | None:
    # Must run before the day-first form, which would otherwise see "24.09.29" in "2024.09.29".
    return _fixed_width(name, ISO_DOTTED_RE, "dotted yyyy.mm.dd")


def recognize_day_first_dotted(name: str, *, today: date, policy: ExtractPolicy) -> DateMatch | None:
    """Regional short form d.m.yy / dd.mm.yyyy."""
    m = DAY_FIRST_DOTTED_RE.search(name)
    if not m:
        return None
    return _build(
        name,
        year=expand_year(m["year"], current_year=today.year),
        month=m["month"],
        day=m["day"],
        label="day-first d.m.[yy]yy",
        spans=[m.span()],
    )


def recognize_loose_numeric(name: str, *, today: date, policy: ExtractPolicy) -> DateMatch | None:
    """yyyy-m-d with single-digit month or day."""
    m = LOOSE_NUMERIC_RE.search(name)
    if not m:
        return None
    return _build(name, year=m["year"], month=m["month"], day=m["day"], label="loose yyyy-m-d", spans=[m.span()])


def recognize_hyphenated_month_name(name: str, *, today: date, policy: ExtractPolicy) -> DateMatch | None:
    """d-Monat-yy, d-Monat-yyyy and d-Monat-yy-yyyy (the four-digit year wins)."""
    for m in HYPHENATED_MONTH_RE.finditer(name):
        month = month_number(m["month"])
        if not month:
            continue
        if m["long"]:
            year = m["long"]
        elif m["short"]:
            year = expand_year(m["short"], current_year=today.year)
        else:
            continue
        return _build(name, year=year, month=month, day=m["day"], label="hyphenated d-month-yy-yyyy", spans=[m.span()])
    return None


def recognize_day_month_name_year(name: str, *, today: date, policy: ExtractPolicy) -> DateMatch | None:
    for m in DAY_MONTH_YEAR_RE.finditer(name):
        month = month_number(m["month"])
        if not month:
            continue
        return _build(
            name,
            year=expand_year(m["year"], current_year=today.year),
            month=month,
            day=m["day"],
            label="day month-name year",
            spans=[m.span()],
        )
    return None


def recognize_month_name_year(name: str, *, today: date, policy: ExtractPolicy) -> DateMatch | None:
    """Monat yyyy without a day; the day becomes 01.

    Occurrences right after a day number ("10. September 2023") are left for the
    day-dot recognizer instead of losing the day.
    """
    for m in MONTH_YEAR_RE.finditer(name):
        month = month_number(m["month"])
        if not month:
            continue
        if _DAY_BEFORE_RE.search(name, 0, m.start()):
            continue
        return _build(name, year=m["year"], month=month, day="01", label="month-name yyyy", spans=[m.span()])
    return None


def recognize_day_dot_month_year(name: str, *, today: date, policy: ExtractPolicy) -> DateMatch | None:
    for m in DAY_DOT_MONTH_YEAR_RE.finditer(name):
        month = month_number(m["month"])
        if not month:
            continue
        return _build(
            name,
            year=expand_year(m["year"], current_year=today.year),
            month=month,
            day=m["day"],
            label="day. month-name year",
            spans=[m.span()],
        )
    return None


def _year_elsewhere(name: str, span: tuple[int, int]) -> re.Match[str] | None:
    for y in BARE_YEAR_RE.finditer(name):
        if y.end() <= span[0] or y.start() >= span[1]:
            return y
    return None


def recognize_partial(name: str, *, today: date, policy: ExtractPolicy) -> DateMatch | None:
    """d.m. or d. Monat without a year next to it.

    The year is taken from a bare 19xx/20xx token anywhere else in the name,
    falling back to the current year.
    """
    found: list[tuple[re.Match[str], str]] = []
    m = PARTIAL_NUMERIC_RE.search(name)
    if m:
        found.append((m, m["month"]))
    for mn in PARTIAL_MONTH_NAME_RE.finditer(name):
        month = month_number(mn["month"])
        if month:
            found.append((mn, month))
            break
    if not found:
        return None

    m, month = min(found, key=lambda x: x[0].start())
    spans = [m.span()]
    year = m.groupdict().get("year")
    label = "partial d.m. yyyy"
    if not year:
        y = _year_elsewhere(name, m.span())
        if y:
            year = y.group(0)
            spans.append(y.span())
            label = "partial d.m. with year elsewhere"
        else:
            year = str(today.year)
            label = "partial d.m. (current year)"

    return _build(name, year=year, month=month, day=m["day"], label=label, spans=spans)


# Priority order: least ambiguous first, first success wins.
RECOGNIZERS: tuple[Recognizer, ...] = (
    recognize_iso,
    recognize_iso_underscore,
    recognize_iso_dotted,
    recognize_day_first_dotted,
    recognize_loose_numeric,
    recognize_hyphenated_month_name,
    recognize_day_month_name_year,
    recognize_month_name_year,
    recognize_day_dot_month_year,
    recognize_partial,
)
