from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.dialects.postgresql import JSONB, UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class EventModel(Base):
    __tablename__ = 'events'

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default='active', nullable=False)
    opening_sales: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    max_capacity: Mapped[Optional[int]] = mapped_column(Integer)
    sales_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    current_ticket_product_id: Mapped[Optional[UUID]] = mapped_column(PG_UUID(as_uuid=True))
    meta: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
