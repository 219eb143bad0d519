"""Domain entities for the Slip bounded context."""
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import StrEnum
from typing import Any
from uuid import UUID

from .value_objects import MAX_SLIP_AMOUNT, is_plausible_amount


class TransactionType(StrEnum):
    INCOME = "income"
    EXPENSE = "expense"


class SlipCategory(StrEnum):
    GROCERIES = "Groceries"
    FOOD_AND_DINING = "Food & Dining"
    UTILITIES = "Utilities"
    TRANSPORTATION = "Transportation"
    SHOPPING = "Shopping"


NOTE_SEPARATOR = " | "


def build_note(merchant: str | None, reference: str | None) -> str:
    """Review note: "Payment to: {merchant} | Ref: {reference}", either part optional."""
    parts: list[str] = []
    if merchant:
        parts.append(f"Payment to: {merchant}")
    if reference:
        parts.append(f"Ref: {reference}")
    return NOTE_SEPARATOR.join(parts)


@dataclass(frozen=True)
class ParsedSlip:
    """Structured fields read from one slip's OCR text.

    Every field except ``type`` and ``note`` is optional; partial extraction
    is the normal case.
    """
    amount: Decimal | None = None
    date: str | None = None  # ISO format YYYY-MM-DD, Gregorian year
    merchant: str | None = None
    reference: str | None = None
    type: TransactionType = TransactionType.EXPENSE
    category: str | None = None
    note: str = ""

    def __post_init__(self) -> None:
        if self.amount is not None and not is_plausible_amount(self.amount):
            raise ValueError(f"Slip amount must be in (0, {MAX_SLIP_AMOUNT}): {self.amount}")
        if self.category is not None and self.merchant is None:
            raise ValueError("Slip category requires a merchant")

    def to_dict(self) -> dict[str, Any]:
        """Present fields only, ready to merge into an editable form state."""
        data = asdict(self)
        data["type"] = str(self.type)
        return {k: v for k, v in data.items() if v is not None}


@dataclass
class SlipScan:
    """A recorded OCR scan. One row counts as one unit of monthly quota."""
    id: UUID
    user_id: str
    reference: str | None = None
    image_hash: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class ScanResult:
    slip: ParsedSlip
    duplicate: bool
    remaining_scans: int
    image_hash: str
