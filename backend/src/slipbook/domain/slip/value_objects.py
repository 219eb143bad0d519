"""Immutable value objects for the Slip bounded context."""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from types import MappingProxyType


# Upper bound on a plausible slip amount. Phone numbers and biller IDs read as
# bare digit runs land above it.
MAX_SLIP_AMOUNT = Decimal("10000000")

# Buddhist Era = Common Era + 543
BUDDHIST_ERA_OFFSET = 543
BUDDHIST_ERA_THRESHOLD = 2500

# Thai month abbreviations keyed without dots or spaces ("มี.ค." → "มีค")
THAI_MONTH_ABBREVIATIONS: MappingProxyType[str, int] = MappingProxyType({
    "มค": 1,
    "กพ": 2,
    "มีค": 3,
    "เมย": 4,
    "พค": 5,
    "มิย": 6,
    "กค": 7,
    "สค": 8,
    "กย": 9,
    "ตค": 10,
    "พย": 11,
    "ธค": 12,
})

THAI_MONTH_NAMES: MappingProxyType[str, int] = MappingProxyType({
    "มกราคม": 1,
    "กุมภาพันธ์": 2,
    "มีนาคม": 3,
    "เมษายน": 4,
    "พฤษภาคม": 5,
    "มิถุนายน": 6,
    "กรกฎาคม": 7,
    "สิงหาคม": 8,
    "กันยายน": 9,
    "ตุลาคม": 10,
    "พฤศจิกายน": 11,
    "ธันวาคม": 12,
})

ENGLISH_MONTH_ABBREVIATIONS: MappingProxyType[str, int] = MappingProxyType({
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
})

# Month used when a Thai abbreviation is not in the table
UNRESOLVED_MONTH = 1


def to_gregorian_year(year: int) -> int:
    """Convert a Buddhist Era year to CE. Years up to 2500 are already CE."""
    if year > BUDDHIST_ERA_THRESHOLD:
        return year - BUDDHIST_ERA_OFFSET
    return year


def expand_two_digit_year(year: int) -> int:
    """≤30 → CE 20xx (e.g. 26 → 2026); >30 → Thai BE 25xx (e.g. 67 → 2567)."""
    return 2000 + year if year <= 30 else 2500 + year


def lookup_thai_month(token: str) -> int | None:
    """Month number for a Thai month name or abbreviation, tolerant of dot/space noise."""
    if token in THAI_MONTH_NAMES:
        return THAI_MONTH_NAMES[token]
    key = token.replace(".", "").replace(" ", "")
    return THAI_MONTH_ABBREVIATIONS.get(key)


def is_plausible_amount(value: Decimal) -> bool:
    return value.is_finite() and Decimal("0") < value < MAX_SLIP_AMOUNT


@dataclass(frozen=True)
class SlipDate:
    """A calendar date read off a slip, always held in the Gregorian calendar."""
    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        if not 1000 <= self.year <= 9999:
            raise ValueError(f"Slip year must have four digits: {self.year}")
        # Raises ValueError for impossible dates such as 31/02
        date(self.year, self.month, self.day)

    @classmethod
    def from_slip(cls, day: int, month: int, year: int) -> "SlipDate":
        """Build from the numerals printed on the slip (year may be BE)."""
        return cls(year=to_gregorian_year(year), month=month, day=day)

    def isoformat(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    def __str__(self) -> str:
        return self.isoformat()


@dataclass(frozen=True)
class OcrUsage:
    """Monthly OCR scan allowance for one user.

    The window is the calendar month containing ``period_start``; it resets on
    the first day of the following month.
    """
    used: int
    limit: int
    period_start: date

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.used)

    @property
    def is_exhausted(self) -> bool:
        return self.remaining <= 0

    @property
    def reset_date(self) -> date:
        if self.period_start.month == 12:
            return date(self.period_start.year + 1, 1, 1)
        return date(self.period_start.year, self.period_start.month + 1, 1)

    @staticmethod
    def month_start(today: date) -> date:
        return today.replace(day=1)
