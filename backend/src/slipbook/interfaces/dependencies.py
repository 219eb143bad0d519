"""FastAPI dependency injection: DB session, current user, and SlipbookFacade."""
from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from slipbook.infrastructure.auth.jwt import get_user_id_from_token
from slipbook.infrastructure.database.connection import get_db_session
from slipbook.interfaces.facade import SlipbookFacade

# ── Session ───────────────────────────────────────────────────────────────────

_bearer = HTTPBearer(auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with get_db_session() as session:
        yield session


def _build_facade(session: AsyncSession) -> SlipbookFacade:
    from slipbook.infrastructure.database.repositories.slip import SlipScanRepository
    from slipbook.infrastructure.ocr.processor import extract_text

    return SlipbookFacade(
        scan_repo=SlipScanRepository(session),
        text_extractor=extract_text,
    )


async def get_facade(session: Annotated[AsyncSession, Depends(get_db)]) -> SlipbookFacade:
    return _build_facade(session)


# ── Auth ──────────────────────────────────────────────────────────────────────

_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Could not validate credentials",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)],
) -> str:
    if credentials is None:
        raise _CREDENTIALS_EXCEPTION
    try:
        return get_user_id_from_token(credentials.credentials)
    except JWTError:
        raise _CREDENTIALS_EXCEPTION


# Type aliases for cleaner signatures
DbSession = Annotated[AsyncSession, Depends(get_db)]
Facade = Annotated[SlipbookFacade, Depends(get_facade)]
CurrentUserId = Annotated[str, Depends(get_current_user_id)]
