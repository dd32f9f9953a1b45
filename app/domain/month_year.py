"""
MonthYear value type - calendar month without a day component.

Format: 'MM-YYYY'
  - exactly two segments separated by '-'
  - month: exactly 2 digits, 01..12
  - year: exactly 4 digits, >= 2000

Comparison normalizes both sides to the first day of the month, so ordering is
by (year, month).
"""
from dataclasses import dataclass
from datetime import date
from functools import total_ordering

MIN_YEAR = 2000


class MonthYearFormatError(ValueError):
    pass


def _parse_parts(text: str) -> tuple[int, int] | None:
    parts = text.split("-")
    if len(parts) != 2:
        return None
    month, year = parts

    if len(month) != 2 or not month.isascii() or not month.isdigit():
        return None
    m = int(month)
    if m < 1 or m > 12:
        return None

    if len(year) != 4 or not year.isascii() or not year.isdigit():
        return None
    y = int(year)
    if y < MIN_YEAR:
        return None

    return m, y


def validate_month_year(text: str) -> bool:
    """True if text is a well-formed 'MM-YYYY' value."""
    return _parse_parts(text) is not None


@total_ordering
@dataclass(frozen=True, eq=True)
class MonthYear:
    """
    Month + year, always well-formed once constructed.

    Example:
        >>> MonthYear.parse("03-2025")
        MonthYear(month=3, year=2025)
        >>> str(MonthYear(3, 2025))
        '03-2025'
    """
    month: int
    year: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise MonthYearFormatError(f"month out of range: {self.month}")
        if not MIN_YEAR <= self.year <= 9999:
            raise MonthYearFormatError(f"year out of range: {self.year}")

    @classmethod
    def parse(cls, text: str) -> "MonthYear":
        parsed = _parse_parts(text)
        if parsed is None:
            raise MonthYearFormatError(f"invalid month-year '{text}', must be 'MM-YYYY'")
        month, year = parsed
        return cls(month=month, year=year)

    @classmethod
    def parse_optional(cls, text: str | None) -> "MonthYear | None":
        """None or empty string means absent."""
        if not text:
            return None
        return cls.parse(text)

    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def sort_key(self) -> str:
        """'YYYYMM' - lexicographic order equals calendar order."""
        return f"{self.year:04d}{self.month:02d}"

    def __lt__(self, other: "MonthYear") -> bool:
        if not isinstance(other, MonthYear):
            return NotImplemented
        return self.first_day() < other.first_day()

    def __str__(self) -> str:
        return f"{self.month:02d}-{self.year:04d}"
