"""SQLAlchemy ORM models for recorded slip scans."""
from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, Index, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from slipbook.infrastructure.database.connection import Base


class SlipScanModel(Base):
    __tablename__ = "slip_scans"
    __table_args__ = (
        Index("ix_slip_scans_user_created", "user_id", "created_at"),
        Index("ix_slip_scans_user_reference", "user_id", "reference"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)  # auth provider subject
    reference: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_hash: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
