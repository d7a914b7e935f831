from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

RangeSuffix = Literal["keep", "drop"]


@dataclass(frozen=True)
class DateMatch:
    """A date found inside a file name, plus what is left of the name."""

    year: str  # four digits
    month: str  # 01-12
    day: str  # 01-31
    remainder: str
    label: str  # which recognizer fired (diagnostic only)

    @property
    def iso(self) -> str:
        return f"{self.year}-{self.month}-{self.day}"


@dataclass(frozen=True)
class ExtractPolicy:
    """Controls the few behaviors that are a product decision rather than syntax.

    - range_suffix: what to do with the trailing day of "yyyy-mm-dd-dd".
      "keep" leaves it in the remainder, "drop" removes it.
    - max_year: upper bound for valid years. None means the current year.
    """

    range_suffix: RangeSuffix = "keep"
    min_year: int = 1900
    max_year: int | None = None
