"""OCR processor: slip image → EasyOCR → raw text for the slip parser."""
from __future__ import annotations

import hashlib
import io
import logging

from PIL import Image, UnidentifiedImageError

from slipbook.config import get_settings

# easyocr is heavy and optional at import time; the reader is built on first use
try:
    import easyocr as _easyocr_module  # noqa: F401
    _EASYOCR_AVAILABLE = True
except ImportError:
    _EASYOCR_AVAILABLE = False

logger = logging.getLogger(__name__)

_reader = None


def _get_reader():
    global _reader
    if not _EASYOCR_AVAILABLE:
        raise RuntimeError("easyocr is not installed. Install it with: pip install easyocr")
    if _reader is None:
        import easyocr
        settings = get_settings()
        _reader = easyocr.Reader(settings.ocr_languages, gpu=settings.ocr_gpu)
    return _reader


def hash_image(content: bytes) -> str:
    """SHA-256 hex digest of image bytes."""
    return hashlib.sha256(content).hexdigest()


def load_image(image_bytes: bytes) -> Image.Image:
    """Decode image bytes to an RGB PIL image. Raises UnidentifiedImageError."""
    image = Image.open(io.BytesIO(image_bytes))
    return image.convert("RGB")


def ocr_image(image: Image.Image) -> list[str]:
    """Run EasyOCR on a PIL image. Returns recognised lines, top to bottom."""
    reader = _get_reader()
    img_bytes = io.BytesIO()
    image.save(img_bytes, format="PNG")
    return reader.readtext(img_bytes.getvalue(), detail=0, paragraph=False)


def extract_text(image_bytes: bytes) -> str:
    """Full pipeline: image bytes → newline-joined text.

    An unreadable image or a missing OCR engine yields "" so the parser
    treats it as a slip with nothing on it.
    """
    try:
        image = load_image(image_bytes)
    except (UnidentifiedImageError, OSError) as exc:
        logger.warning("Could not decode slip image: %s", exc)
        return ""
    try:
        lines = ocr_image(image)
    except RuntimeError as exc:
        logger.warning("OCR unavailable: %s", exc)
        return ""
    return "\n".join(line.strip() for line in lines if line and line.strip())
