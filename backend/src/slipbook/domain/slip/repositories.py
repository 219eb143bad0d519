"""Repository interfaces for the Slip bounded context."""
from datetime import datetime
from typing import Protocol

from .entities import SlipScan


class ISlipScanRepository(Protocol):
    async def count_since(self, user_id: str, since: datetime) -> int: ...

    async def has_reference(self, user_id: str, reference: str) -> bool: ...

    async def save(self, scan: SlipScan) -> SlipScan: ...


class ITextExtractor(Protocol):
    """Image → raw recognised text. Returns "" when nothing can be read."""

    def __call__(self, image_bytes: bytes) -> str: ...
