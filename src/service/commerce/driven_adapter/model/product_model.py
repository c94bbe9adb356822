from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class ProductModel(Base):
    __tablename__ = 'products'

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default='')
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    max_quantity: Mapped[Optional[int]] = mapped_column(Integer)
    event_id: Mapped[Optional[UUID]] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('events.id'), index=True
    )
    admission_tier: Mapped[Optional[str]] = mapped_column(String(20))
    promo: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    target_product_id: Mapped[Optional[UUID]] = mapped_column(PG_UUID(as_uuid=True))
    status: Mapped[str] = mapped_column(String(20), nullable=False, default='active')
    meta: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
