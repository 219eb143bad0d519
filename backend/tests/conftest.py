import os

# Settings are read once; set them before anything imports slipbook.config
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("OCR_MONTHLY_LIMIT", "3")

import pytest  # noqa: E402

from slipbook.domain.slip.entities import SlipScan  # noqa: E402


class InMemorySlipScanRepository:
    def __init__(self) -> None:
        self.scans: list[SlipScan] = []

    async def count_since(self, user_id, since):
        return sum(1 for s in self.scans if s.user_id == user_id and s.created_at >= since)

    async def has_reference(self, user_id, reference):
        return any(s.user_id == user_id and s.reference == reference for s in self.scans)

    async def save(self, scan):
        self.scans.append(scan)
        return scan


class StaticTextExtractor:
    """Stands in for the OCR engine: every image reads as the same text."""

    def __init__(self, text: str = "") -> None:
        self.text = text
        self.calls = 0

    def __call__(self, image_bytes: bytes) -> str:
        self.calls += 1
        return self.text


@pytest.fixture
def scan_repo():
    return InMemorySlipScanRepository()


@pytest.fixture
def extractor():
    return StaticTextExtractor(
        "จำนวนเงิน: 1,250.50 บาท\nไปยัง: 7-Eleven\nรหัสอ้างอิง: ABC123"
    )
