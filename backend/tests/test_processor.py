import io

import pytest
from PIL import Image

from slipbook.infrastructure.ocr import processor


@pytest.fixture
def png_bytes():
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), "white").save(buf, format="PNG")
    return buf.getvalue()


def test_hash_image():
    assert processor.hash_image(b"abc") == (
        "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
    )


def test_undecodable_bytes_give_empty_text():
    assert processor.extract_text(b"definitely not an image") == ""


def test_recognised_lines_are_joined(monkeypatch, png_bytes):
    monkeypatch.setattr(
        processor, "ocr_image", lambda image: ["  จำนวนเงิน 50.00 บาท ", "", "ไปยัง: Lotus"]
    )
    assert processor.extract_text(png_bytes) == "จำนวนเงิน 50.00 บาท\nไปยัง: Lotus"


def test_missing_engine_gives_empty_text(monkeypatch, png_bytes):
    monkeypatch.setattr(processor, "_EASYOCR_AVAILABLE", False)
    monkeypatch.setattr(processor, "_reader", None)
    assert processor.extract_text(png_bytes) == ""
