"""Slip use-case queries."""
from datetime import date, datetime, timezone

from slipbook.config import get_settings
from slipbook.domain.slip.repositories import ISlipScanRepository
from slipbook.domain.slip.value_objects import OcrUsage


async def get_ocr_usage(
    user_id: str,
    repo: ISlipScanRepository,
    *,
    today: date | None = None,
    limit: int | None = None,
) -> OcrUsage:
    """Scans recorded for the user in the current calendar month (UTC)."""
    today = today or datetime.now(timezone.utc).date()
    limit = get_settings().ocr_monthly_limit if limit is None else limit
    period_start = OcrUsage.month_start(today)
    since = datetime(period_start.year, period_start.month, 1, tzinfo=timezone.utc)
    used = await repo.count_since(user_id, since)
    return OcrUsage(used=used, limit=limit, period_start=period_start)
