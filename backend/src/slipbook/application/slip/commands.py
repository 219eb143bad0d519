"""Slip use-case commands: parse OCR text, scan an uploaded slip image."""
from __future__ import annotations

import asyncio
import logging
from datetime import date
from uuid import uuid4

from slipbook.application.slip.queries import get_ocr_usage
from slipbook.domain.slip.entities import ParsedSlip, ScanResult, SlipScan
from slipbook.domain.slip.repositories import ISlipScanRepository, ITextExtractor
from slipbook.domain.slip.value_objects import OcrUsage
from slipbook.infrastructure.ocr.processor import hash_image
from slipbook.infrastructure.ocr.slip_parser import parse_slip_text

logger = logging.getLogger(__name__)


class SlipError(Exception):
    pass


class QuotaExceededError(SlipError):
    def __init__(self, usage: OcrUsage) -> None:
        self.usage = usage
        super().__init__(f"Monthly limit reached. Resets on {usage.reset_date.isoformat()}")


class UnsupportedImageError(SlipError):
    pass


def parse_slip(text: str) -> ParsedSlip:
    """Parse already-recognised slip text. Performs no OCR and uses no quota."""
    return parse_slip_text(text, logger=logger)


async def scan_slip(
    *,
    user_id: str,
    image_bytes: bytes,
    scan_repo: ISlipScanRepository,
    extract_text: ITextExtractor,
    today: date | None = None,
    limit: int | None = None,
) -> ScanResult:
    """Check quota, recognise the image, parse it, flag a repeated reference, record the scan.

    Quota is checked before OCR and again just before the scan is recorded, so
    a scan that finished while this one was being recognised is accounted for.
    The count and the insert are not one transaction: two requests that both
    reach the second check before either saves can still each take the last
    slot.
    """
    if not image_bytes:
        raise UnsupportedImageError("Empty image upload")

    usage = await get_ocr_usage(user_id, scan_repo, today=today, limit=limit)
    if usage.is_exhausted:
        raise QuotaExceededError(usage)

    image_hash = hash_image(image_bytes)
    # OCR is CPU bound; keep it off the event loop
    loop = asyncio.get_running_loop()
    text = await loop.run_in_executor(None, extract_text, image_bytes)
    slip = parse_slip_text(text, logger=logger)

    usage = await get_ocr_usage(user_id, scan_repo, today=today, limit=limit)
    if usage.is_exhausted:
        logger.info("Quota for user %s used up while scan was in progress", user_id)
        raise QuotaExceededError(usage)

    duplicate = False
    if slip.reference:
        duplicate = await scan_repo.has_reference(user_id, slip.reference)
        if duplicate:
            logger.info("Slip reference %s already scanned by user %s", slip.reference, user_id)

    await scan_repo.save(SlipScan(
        id=uuid4(),
        user_id=user_id,
        reference=slip.reference,
        image_hash=image_hash,
    ))

    return ScanResult(
        slip=slip,
        duplicate=duplicate,
        remaining_scans=usage.remaining - 1,
        image_hash=image_hash,
    )
