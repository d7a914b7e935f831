from __future__ import annotations

import re
from datetime import date

# Fixed vocabulary: German long and short month names.
GERMAN_MONTHS = {
    "januar": 1,
    "februar": 2,
    "märz": 3,
    "april": 4,
    "mai": 5,
    "juni": 6,
    "juli": 7,
    "august": 8,
    "september": 9,
    "oktober": 10,
    "november": 11,
    "dezember": 12,
    "jan": 1,
    "feb": 2,
    "mär": 3,
    "apr": 4,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "sept": 9,
    "okt": 10,
    "nov": 11,
    "dez": 12,
}

# Longest first so "september" is tried before "sept" and "sep".
MONTH_PATTERN = "|".join(re.escape(m) for m in sorted(GERMAN_MONTHS, key=len, reverse=True))

_EXT_ONLY_RE = re.compile(r"^[.\-_\s]*?((?:\.[^\W_]+)+)$")
_LEADING_SEP_RE = re.compile(r"^[.\-_\s]+")
_TRAILING_SEP_RE = re.compile(r"[.\-_\s]+$")
_SPACE_COMMA_RE = re.compile(r"\s+,")
_SPACES_RE = re.compile(r"\s+")
_UNDERSCORES_RE = re.compile(r"_{2,}")
_HYPHENS_RE = re.compile(r"-{2,}")
_SEP_BEFORE_DOT_RE = re.compile(r"[\s\-_]+\.")


def month_number(tok: str) -> str | None:
    """Map a month name token to "01".."12", or None if it is not in the vocabulary."""
    num = GERMAN_MONTHS.get(tok.strip().lower())
    if num is None:
        return None
    return f"{num:02d}"


def expand_year(tok: str, *, current_year: int | None = None) -> str:
    """Expand a two-digit year with a rolling pivot.

    "25" becomes 2025 unless that lies after the current year, in which case it
    becomes 1925. Tokens that are not two digits long are returned unchanged.
    """
    if len(tok) != 2 or not tok.isdigit():
        return tok
    if current_year is None:
        current_year = date.today().year
    full = 2000 + int(tok)
    if full > current_year:
        full = 1900 + int(tok)
    return str(full)


def pad2(tok: str) -> str:
    return tok.zfill(2)


def strip_spans(text: str, spans: list[tuple[int, int]]) -> str:
    """Return text with the given (start, end) spans cut out, keeping order."""
    out: list[str] = []
    pos = 0
    for start, end in sorted(spans):
        if start < pos:
            start = pos
        out.append(text[pos:start])
        pos = max(pos, end)
    out.append(text[pos:])
    return "".join(out)


def clean_remainder(text: str) -> str:
    """Tidy what is left of a file name after the date was cut out.

    A remainder consisting only of an extension keeps its leading dot.
    """
    m = _EXT_ONLY_RE.match(text)
    if m:
        return m.group(1)

    out = _LEADING_SEP_RE.sub("", text)
    out = _TRAILING_SEP_RE.sub("", out)
    out = _SPACE_COMMA_RE.sub(",", out)
    out = _SPACES_RE.sub(" ", out)
    out = _UNDERSCORES_RE.sub("_", out)
    out = _HYPHENS_RE.sub("-", out)
    out = _SEP_BEFORE_DOT_RE.sub(".", out)
    return out


def is_valid_calendar_date(
    year: str | int,
    month: str | int,
    day: str | int,
    *,
    min_year: int = 1900,
    max_year: int | None = None,
    today: date | None = None,
) -> bool:
    """Return True if the triple is a real Gregorian date inside the year bounds.

    max_year=None caps at the current year, so future years are rejected.
    """
    try:
        y = int(year)
        mo = int(month)
        da = int(day)
    except (TypeError, ValueError):
        return False

    if max_year is None:
        max_year = (today or date.today()).year
    if y < min_year or y > max_year:
        return False

    # date() refuses overflow (Feb 30, day 32) instead of rolling over.
    try:
        date(y, mo, da)
    except ValueError:
        return False
    return True
