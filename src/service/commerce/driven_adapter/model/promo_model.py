from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Numeric, String
from sqlalchemy.dialects.postgresql import JSONB, UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class PromoModel(Base):
    __tablename__ = 'promos'
    __table_args__ = (
        CheckConstraint(
            'num_nonnulls(price, percent_discount, flat_discount) <= 1',
            name='promos_single_pricing_rule',
        ),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default='active')
    product_id: Mapped[Optional[UUID]] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('products.id')
    )
    price: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2))
    percent_discount: Mapped[Optional[Decimal]] = mapped_column(Numeric(5, 2))
    flat_discount: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2))
    product_quantity: Mapped[Optional[int]] = mapped_column(Integer)
    max_uses: Mapped[Optional[int]] = mapped_column(Integer)
    recipient_name: Mapped[Optional[str]] = mapped_column(String(255))
    created_by: Mapped[Optional[str]] = mapped_column(String(255))
    meta: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
