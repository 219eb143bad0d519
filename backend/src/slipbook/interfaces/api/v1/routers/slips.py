"""Slip router: parse recognised text, scan an uploaded image, report OCR usage."""
from fastapi import APIRouter, HTTPException, UploadFile, status

from slipbook.application.slip.commands import QuotaExceededError, UnsupportedImageError
from slipbook.config import get_settings
from slipbook.domain.slip.entities import ParsedSlip
from slipbook.interfaces.api.v1.schemas.slip import (
    OcrUsageResponse,
    ParsedSlipResponse,
    ParseSlipRequest,
    ScanSlipResponse,
)
from slipbook.interfaces.dependencies import CurrentUserId, Facade

router = APIRouter(prefix="/slips", tags=["slips"])

_ALLOWED_CONTENT_TYPES = frozenset({"image/jpeg", "image/png", "image/webp", "image/bmp"})


@router.post("/parse", response_model=ParsedSlipResponse)
async def parse_text(body: ParseSlipRequest, facade: Facade):
    return _slip_response(facade.parse_text(body.text))


@router.post("/scan", response_model=ScanSlipResponse)
async def scan_image(file: UploadFile, facade: Facade, current_user_id: CurrentUserId):
    if file.content_type not in _ALLOWED_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail="Only JPEG, PNG, WebP or BMP images are accepted",
        )

    max_bytes = get_settings().max_upload_bytes
    image_bytes = await file.read()
    if len(image_bytes) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large (max {max_bytes // (1024 * 1024)} MB)",
        )

    try:
        result = await facade.scan(current_user_id, image_bytes)
    except QuotaExceededError as exc:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={"message": str(exc), "reset_date": exc.usage.reset_date.isoformat()},
        )
    except UnsupportedImageError as exc:
        raise HTTPException(status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, detail=str(exc))

    return ScanSlipResponse(
        slip=_slip_response(result.slip),
        duplicate=result.duplicate,
        remaining_scans=result.remaining_scans,
        image_hash=result.image_hash,
    )


@router.get("/usage", response_model=OcrUsageResponse)
async def get_usage(facade: Facade, current_user_id: CurrentUserId):
    usage = await facade.get_usage(current_user_id)
    return OcrUsageResponse(
        used=usage.used,
        limit=usage.limit,
        remaining=usage.remaining,
        reset_date=usage.reset_date,
    )


def _slip_response(slip: ParsedSlip) -> ParsedSlipResponse:
    return ParsedSlipResponse(
        amount=slip.amount,
        date=slip.date,
        merchant=slip.merchant,
        reference=slip.reference,
        type=str(slip.type),
        category=slip.category,
        note=slip.note,
    )
