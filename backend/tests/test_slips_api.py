from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from slipbook.infrastructure.auth.jwt import create_access_token
from slipbook.interfaces.dependencies import get_facade
from slipbook.interfaces.facade import SlipbookFacade
from slipbook.main import app


@pytest.fixture
def client(scan_repo, extractor):
    app.dependency_overrides[get_facade] = lambda: SlipbookFacade(scan_repo, extractor)
    # No context manager: the lifespan would try to reach the database
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {create_access_token('user_abc')}"}


def _upload(content_type="image/png"):
    return {"file": ("slip.png", b"\x89PNG fake", content_type)}


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json()["status"] == "ok"


def test_parse_text(client):
    res = client.post("/api/v1/slips/parse", json={"text": "Amount: 500.00\nTo: Starbucks Cafe"})
    assert res.status_code == 200
    body = res.json()
    assert Decimal(str(body["amount"])) == Decimal("500.00")
    assert body["merchant"] == "Starbucks Cafe"
    assert body["category"] == "Food & Dining"
    assert body["reference"] is None
    assert body["date"] is None
    assert body["type"] == "expense"
    assert body["note"] == "Payment to: Starbucks Cafe"


def test_parse_empty_text(client):
    res = client.post("/api/v1/slips/parse", json={"text": ""})
    assert res.status_code == 200
    assert res.json() == {
        "amount": None,
        "date": None,
        "merchant": None,
        "reference": None,
        "type": "expense",
        "category": None,
        "note": "",
    }


def test_scan_requires_auth(client):
    res = client.post("/api/v1/slips/scan", files=_upload())
    assert res.status_code == 401


def test_scan_rejects_bad_token(client):
    res = client.post("/api/v1/slips/scan", files=_upload(), headers={"Authorization": "Bearer nope"})
    assert res.status_code == 401


def test_scan_rejects_non_image(client, auth_headers):
    res = client.post("/api/v1/slips/scan", files=_upload("application/pdf"), headers=auth_headers)
    assert res.status_code == 415


def test_scan_rejects_empty_image(client, auth_headers, scan_repo):
    files = {"file": ("slip.png", b"", "image/png")}
    res = client.post("/api/v1/slips/scan", files=files, headers=auth_headers)
    assert res.status_code == 415
    assert scan_repo.scans == []


def test_scan_image(client, auth_headers, scan_repo):
    res = client.post("/api/v1/slips/scan", files=_upload(), headers=auth_headers)
    assert res.status_code == 200
    body = res.json()
    assert body["slip"]["merchant"] == "7-Eleven"
    assert body["slip"]["reference"] == "ABC123"
    assert body["duplicate"] is False
    assert body["remaining_scans"] == 2
    assert scan_repo.scans[0].user_id == "user_abc"

    again = client.post("/api/v1/slips/scan", files=_upload(), headers=auth_headers).json()
    assert again["duplicate"] is True
    assert again["remaining_scans"] == 1


def test_scan_quota_exhausted(client, auth_headers):
    for _ in range(3):
        assert client.post("/api/v1/slips/scan", files=_upload(), headers=auth_headers).status_code == 200
    res = client.post("/api/v1/slips/scan", files=_upload(), headers=auth_headers)
    assert res.status_code == 429
    assert "reset_date" in res.json()["detail"]


def test_usage(client, auth_headers):
    client.post("/api/v1/slips/scan", files=_upload(), headers=auth_headers)
    res = client.get("/api/v1/slips/usage", headers=auth_headers)
    assert res.status_code == 200
    body = res.json()
    assert body["used"] == 1
    assert body["limit"] == 3
    assert body["remaining"] == 2
