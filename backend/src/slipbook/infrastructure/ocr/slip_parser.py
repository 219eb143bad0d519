"""Payment slip parser: raw OCR text → ParsedSlip.

Bilingual (Thai/English) rule-based extraction. Each field is read by an
ordered list of patterns; the first pattern that yields a valid value wins.
Passes run in a fixed order: amount → date → merchant → reference → category,
then the review note is assembled from merchant and reference.

The parser is a pure function of its input. A field that cannot be read is
left as None; no input string makes it raise.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from decimal import Decimal, InvalidOperation
from typing import TypeVar

from slipbook.domain.slip.entities import ParsedSlip, SlipCategory, TransactionType, build_note
from slipbook.domain.slip.value_objects import (
    ENGLISH_MONTH_ABBREVIATIONS,
    THAI_MONTH_NAMES,
    UNRESOLVED_MONTH,
    SlipDate,
    expand_two_digit_year,
    is_plausible_amount,
    lookup_thai_month,
)

_log = logging.getLogger(__name__)
_log.addHandler(logging.NullHandler())

T = TypeVar("T")

# (pattern, extractor): the extractor returns None to reject a match
Rule = tuple[re.Pattern[str], Callable[[re.Match[str], logging.Logger], T | None]]

_THAI_DIGITS = str.maketrans("๐๑๒๓๔๕๖๗๘๙", "0123456789")


def _first_valid(
    rules: Sequence[Rule],
    text: str,
    log: logging.Logger,
    *,
    every_match: bool = False,
) -> tuple[int, T] | None:
    """Run rules in order; return (rule index, value) of the first accepted match.

    With ``every_match`` each pattern's later occurrences are tried before
    moving to the next pattern; otherwise only its first occurrence counts.
    """
    for idx, (pattern, extract) in enumerate(rules):
        if every_match:
            candidates = pattern.finditer(text)
        else:
            m = pattern.search(text)
            candidates = [m] if m else []
        for m in candidates:
            value = extract(m, log)
            if value is not None:
                return idx, value
    return None


# ── Amount ────────────────────────────────────────────────────────────────────
# Keyword-labelled patterns precede the bare "number + currency" ones.
_NUMBER = r"([\d,]+(?:[.,]\d{2})?)"
_GROUPED_OR_DECIMAL = r"(\d{1,3}(?:,\d{3})+(?:\.\d{2})?|\d+\.\d{2})"

_AMOUNT_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"จำนวนเงิน[:\s]+" + _NUMBER),
    re.compile(r"จ[าำ]\s?นวนเง[ิี]น[:\s]+" + _NUMBER),    # OCR vowel confusion
    re.compile(r"\bamount[:\s]+" + _NUMBER, re.I),
    re.compile(r"\btotal[:\s]+" + _NUMBER, re.I),
    re.compile(r"ยอดเงิน[:\s]+" + _NUMBER),
    re.compile(r"ยอดชำระ[:\s]+" + _NUMBER),
    re.compile(r"เง[ิี]น[:\s]+" + _NUMBER),
    re.compile(r"(\d{1,3}(?:,\d{3})+(?:\.\d{2})?)\s*(?:บาท|baht|THB)", re.I),  # 1,600.00 บาท
    re.compile(r"(\d+\.\d{2})\s*(?:บาท|baht|THB)", re.I),                     # 65.00 บาท
    re.compile(r"฿\s*" + _GROUPED_OR_DECIMAL),                                 # ฿1,600.00
]

# Standalone two-decimal number not embedded in a longer digit run
_FALLBACK_AMOUNT_RE = re.compile(r"(?<![\d,.])(\d{1,3}(?:,\d{3})+\.\d{2}|\d{1,6}\.\d{2})(?!\d)")


def normalize_amount(raw: str) -> Decimal | None:
    """Turn a captured numeral into a Decimal.

    - both ',' and '.' present → ',' is a thousands separator
    - only ',' present → thousands separator if 4+ digits, else a decimal comma
    Returns None when the result is not a number.
    """
    raw = raw.strip()
    if "," in raw and "." in raw:
        normalized = raw.replace(",", "")
    elif "," in raw:
        digits = raw.replace(",", "")
        normalized = digits if len(digits) >= 4 else raw.replace(",", ".", 1)
    else:
        normalized = raw
    try:
        return Decimal(normalized)
    except InvalidOperation:
        return None


def _amount_from_match(m: re.Match[str], log: logging.Logger) -> Decimal | None:
    value = normalize_amount(m.group(1))
    if value is None or not is_plausible_amount(value):
        log.debug("Rejected amount candidate %r", m.group(0))
        return None
    return value


_AMOUNT_RULES: list[Rule] = [(p, _amount_from_match) for p in _AMOUNT_PATTERNS]
_FALLBACK_AMOUNT_RULES: list[Rule] = [(_FALLBACK_AMOUNT_RE, _amount_from_match)]


def extract_amount(text: str, logger: logging.Logger | None = None) -> Decimal | None:
    log = logger or _log
    found = _first_valid(_AMOUNT_RULES, text, log)
    if found is not None:
        idx, amount = found
        log.debug("Amount %s from pattern #%d", amount, idx)
        return amount

    # The label itself may have been lost by the OCR engine
    found = _first_valid(_FALLBACK_AMOUNT_RULES, text, log, every_match=True)
    if found is not None:
        log.debug("Amount %s from fallback scan", found[1])
        return found[1]
    return None


# ── Date ──────────────────────────────────────────────────────────────────────
_NUMERIC_DATE_RE = re.compile(r"(?<!\d)(\d{1,2})\s*[./]\s*(\d{1,2})\s*[./]\s*(\d{4})(?!\d)")

# Full month names first so "มีนาคม" is not read as an abbreviation
_THAI_MONTH_TOKEN = (
    "|".join(sorted(THAI_MONTH_NAMES, key=len, reverse=True))
    + r"|เ?[ก-ฮ][ิี]?\s?\.\s?[ก-ฮ]\s?\.?"
)
_THAI_DATE_RE = re.compile(
    rf"(?<!\d)(\d{{1,2}})\s*({_THAI_MONTH_TOKEN})\s*(\d{{4}}|\d{{2}})(?!\d)"
)
_ENGLISH_DATE_RE = re.compile(
    r"(?<!\d)(\d{1,2})\s*(" + "|".join(ENGLISH_MONTH_ABBREVIATIONS) + r")[a-z]*\.?,?\s*(\d{4}|\d{2})(?!\d)",
    re.I | re.ASCII,
)


def _year_from_token(token: str) -> int:
    year = int(token)
    return expand_two_digit_year(year) if len(token) == 2 else year


def _slip_date(day: int, month: int, year: int, log: logging.Logger) -> str | None:
    try:
        return SlipDate.from_slip(day, month, year).isoformat()
    except ValueError:
        log.debug("Skipped impossible date %d/%d/%d", day, month, year)
        return None


def _numeric_date(m: re.Match[str], log: logging.Logger) -> str | None:
    day, month, year = m.groups()
    return _slip_date(int(day), int(month), int(year), log)


def _thai_date(m: re.Match[str], log: logging.Logger) -> str | None:
    day, month_token, year = m.groups()
    month = lookup_thai_month(month_token)
    if month is None:
        # TODO: report an unresolved month to the caller instead of assuming January
        log.warning("Unrecognised Thai month %r, assuming January", month_token)
        month = UNRESOLVED_MONTH
    return _slip_date(int(day), month, _year_from_token(year), log)


def _english_date(m: re.Match[str], log: logging.Logger) -> str | None:
    day, month_token, year = m.groups()
    month = ENGLISH_MONTH_ABBREVIATIONS.get(month_token.lower())
    if month is None:
        return None
    return _slip_date(int(day), month, _year_from_token(year), log)


_DATE_RULES: list[Rule] = [
    (_NUMERIC_DATE_RE, _numeric_date),   # 15/03/2567, 15.03.2024
    (_THAI_DATE_RE, _thai_date),         # 15 มี.ค. 2567, 15 มีนาคม 67
    (_ENGLISH_DATE_RE, _english_date),   # 15 Mar 2024
]


def extract_date(text: str, logger: logging.Logger | None = None) -> str | None:
    """First valid date as ISO YYYY-MM-DD (Gregorian), or None."""
    log = logger or _log
    found = _first_valid(_DATE_RULES, text, log, every_match=True)
    return found[1] if found else None


# ── Merchant / reference ──────────────────────────────────────────────────────
_MERCHANT_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"ไปยัง[:\s]+([^\n]+)"),
    re.compile(r"\bto\b[:\s]+([^\n]+)", re.I),
    re.compile(r"ผู้รับ[:\s]+([^\n]+)"),
    re.compile(r"\brecipient\b[:\s]+([^\n]+)", re.I),
    re.compile(r"ชื่อร้าน[:\s]+([^\n]+)"),
    re.compile(r"\bmerchant\b[:\s]+([^\n]+)", re.I),
]

_REFERENCE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"รหัสอ้างอิง[:\s]+([A-Za-z0-9]+)"),
    re.compile(r"\breference(?:\s*no\.?)?[:\s]+([A-Za-z0-9]+)", re.I),
    re.compile(r"\bref\.?(?:\s*no\.?)?[:\s]+([A-Za-z0-9]+)", re.I),
    re.compile(r"เลขที่อ้างอิง[:\s]+([A-Za-z0-9]+)"),
    re.compile(r"เลขที่รายการ[:\s]+([A-Za-z0-9]+)"),
    re.compile(r"\btransaction\s*id[:\s]+([A-Za-z0-9]+)", re.I),
]


def _stripped_capture(m: re.Match[str], log: logging.Logger) -> str | None:
    return m.group(1).strip() or None


_MERCHANT_RULES: list[Rule] = [(p, _stripped_capture) for p in _MERCHANT_PATTERNS]
_REFERENCE_RULES: list[Rule] = [(p, _stripped_capture) for p in _REFERENCE_PATTERNS]


def extract_merchant(text: str, logger: logging.Logger | None = None) -> str | None:
    found = _first_valid(_MERCHANT_RULES, text, logger or _log)
    return found[1] if found else None


def extract_reference(text: str, logger: logging.Logger | None = None) -> str | None:
    found = _first_valid(_REFERENCE_RULES, text, logger or _log)
    return found[1] if found else None


# ── Category ──────────────────────────────────────────────────────────────────
# Checked in order against the lower-cased merchant, first match wins
_CATEGORY_PATTERNS: list[tuple[re.Pattern[str], SlipCategory]] = [
    (re.compile(r"7-?eleven|7-11|เซเว่น|lotus|โลตัส|big\s*c|บิ๊กซี|\btops\b|makro|แม็คโคร"),
     SlipCategory.GROCERIES),
    (re.compile(r"minor|restaurant|ร้านอาหาร|cafe|café|coffee|กาแฟ|food"),
     SlipCategory.FOOD_AND_DINING),
    (re.compile(r"dtac|ดีแทค|\bais\b|เอไอเอส|true|ทรู|การไฟฟ้า|การประปา|electricity|water\s*works"),
     SlipCategory.UTILITIES),
    (re.compile(r"\bbts\b|\bmrt\b|grab|bolt|taxi|แท็กซี่"),
     SlipCategory.TRANSPORTATION),
]
DEFAULT_CATEGORY = SlipCategory.SHOPPING


def infer_category(merchant: str | None) -> str | None:
    """Coarse spending category from merchant keywords. None without a merchant."""
    if not merchant:
        return None
    lowered = merchant.lower()
    for pattern, category in _CATEGORY_PATTERNS:
        if pattern.search(lowered):
            return str(category)
    return str(DEFAULT_CATEGORY)


# ── Entry point ───────────────────────────────────────────────────────────────

def parse_slip_text(text: str, logger: logging.Logger | None = None) -> ParsedSlip:
    """Extract amount, date, merchant, reference, category and note from slip text."""
    log = logger or _log
    normalized = (text or "").translate(_THAI_DIGITS).replace("\r\n", "\n")

    amount = extract_amount(normalized, log)
    slip_date = extract_date(normalized, log)
    merchant = extract_merchant(normalized, log)
    reference = extract_reference(normalized, log)
    category = infer_category(merchant)

    return ParsedSlip(
        amount=amount,
        date=slip_date,
        merchant=merchant,
        reference=reference,
        type=TransactionType.EXPENSE,
        category=category,
        note=build_note(merchant, reference),
    )
