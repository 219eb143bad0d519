"""Pydantic v2 schemas for slip endpoints."""
from datetime import date
from decimal import Decimal

from pydantic import BaseModel


class ParseSlipRequest(BaseModel):
    text: str


class ParsedSlipResponse(BaseModel):
    amount: Decimal | None
    date: str | None
    merchant: str | None
    reference: str | None
    type: str
    category: str | None
    note: str

    model_config = {"from_attributes": True}


class ScanSlipResponse(BaseModel):
    slip: ParsedSlipResponse
    duplicate: bool
    remaining_scans: int
    image_hash: str


class OcrUsageResponse(BaseModel):
    used: int
    limit: int
    remaining: int
    reset_date: date
