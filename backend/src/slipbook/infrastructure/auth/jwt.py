"""Verification of bearer tokens issued by the hosted auth provider (python-jose)."""
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from slipbook.config import get_settings


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and validate a JWT access token. Raises JWTError on failure."""
    settings = get_settings()
    options = {"verify_aud": settings.jwt_audience is not None}
    return jwt.decode(
        token,
        settings.secret_key,
        algorithms=[settings.jwt_algorithm],
        audience=settings.jwt_audience,
        options=options,
    )


def get_user_id_from_token(token: str) -> str:
    """Extract the provider's user id (``sub``) from a valid token or raise JWTError."""
    payload = decode_access_token(token)
    sub = payload.get("sub")
    if not sub:
        raise JWTError("Token has no subject")
    return str(sub)


def create_access_token(user_id: str, expires_in: timedelta = timedelta(minutes=60)) -> str:
    """Sign a token the way the provider does. For local development and tests."""
    settings = get_settings()
    payload: dict[str, Any] = {
        "sub": user_id,
        "iat": _utcnow(),
        "exp": _utcnow() + expires_in,
    }
    if settings.jwt_audience is not None:
        payload["aud"] = settings.jwt_audience
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)
