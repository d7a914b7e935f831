from __future__ import annotations

import re
import unicodedata
from datetime import date

from .recognizers import RECOGNIZERS
from .types import DateMatch, ExtractPolicy

CANONICAL_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2} ")


def extract_date(name: str, policy: ExtractPolicy | None = None, *, today: date | None = None) -> DateMatch | None:
    """Run the recognizers in priority order and return the first match (or None).

    The returned match is not calendar-checked; callers decide what an invalid
    date means for them (see is_valid_calendar_date).
    """
    policy = policy or ExtractPolicy()
    today = today or date.today()

    # macOS hands out decomposed umlauts; the month vocabulary is composed.
    name = unicodedata.normalize("NFC", name)

    for recognizer in RECOGNIZERS:
        m = recognizer(name, today=today, policy=policy)
        if m:
            return m
    return None


def has_canonical_prefix(name: str) -> bool:
    """True for names that already start with "yyyy-mm-dd "."""
    return bool(CANONICAL_PREFIX_RE.match(name))


def build_canonical_name(m: DateMatch) -> str:
    if not m.remainder:
        return m.iso
    # Only an extension left: "2023-07-10.docx" rather than "2023-07-10 .docx"
    if m.remainder.startswith("."):
        return m.iso + m.remainder
    return f"{m.iso} {m.remainder}"
