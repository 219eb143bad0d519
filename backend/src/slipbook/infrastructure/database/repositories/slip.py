"""Concrete SQLAlchemy repository for recorded slip scans."""
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from slipbook.domain.slip.entities import SlipScan
from slipbook.infrastructure.database.models.slip import SlipScanModel


class SlipScanRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._s = session

    async def count_since(self, user_id: str, since: datetime) -> int:
        stmt = select(func.count()).select_from(SlipScanModel).where(
            SlipScanModel.user_id == user_id,
            SlipScanModel.created_at >= since,
        )
        return (await self._s.execute(stmt)).scalar_one()

    async def has_reference(self, user_id: str, reference: str) -> bool:
        stmt = select(SlipScanModel.id).where(
            SlipScanModel.user_id == user_id,
            SlipScanModel.reference == reference,
        ).limit(1)
        return (await self._s.execute(stmt)).scalar_one_or_none() is not None

    async def save(self, scan: SlipScan) -> SlipScan:
        self._s.add(SlipScanModel(
            id=scan.id,
            user_id=scan.user_id,
            reference=scan.reference,
            image_hash=scan.image_hash,
            created_at=scan.created_at,
        ))
        await self._s.flush()
        return scan
