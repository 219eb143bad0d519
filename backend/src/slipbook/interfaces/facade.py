"""SlipbookFacade: the single entry point to the application layer.

All routers go through this facade instead of calling application functions directly.
"""
from __future__ import annotations

from slipbook.application.slip import commands as slip_commands
from slipbook.application.slip import queries as slip_queries
from slipbook.domain.slip.entities import ParsedSlip, ScanResult
from slipbook.domain.slip.repositories import ISlipScanRepository, ITextExtractor
from slipbook.domain.slip.value_objects import OcrUsage


class SlipbookFacade:
    """Aggregates the slip use cases. Injected via FastAPI dependency."""

    def __init__(self, scan_repo: ISlipScanRepository, text_extractor: ITextExtractor) -> None:
        self._scan_repo = scan_repo
        self._text_extractor = text_extractor

    def parse_text(self, text: str) -> ParsedSlip:
        return slip_commands.parse_slip(text)

    async def scan(self, user_id: str, image_bytes: bytes) -> ScanResult:
        return await slip_commands.scan_slip(
            user_id=user_id,
            image_bytes=image_bytes,
            scan_repo=self._scan_repo,
            extract_text=self._text_extractor,
        )

    async def get_usage(self, user_id: str) -> OcrUsage:
        return await slip_queries.get_ocr_usage(user_id, self._scan_repo)
