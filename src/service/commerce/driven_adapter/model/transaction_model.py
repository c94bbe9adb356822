from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, Numeric, String, text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class TransactionModel(Base):
    __tablename__ = 'transactions'
    __table_args__ = (
        # At most one sale per order and at most one refund-or-void per sale
        Index(
            'uq_transactions_one_sale_per_order',
            'order_id',
            unique=True,
            postgresql_where=text("type = 'sale'"),
        ),
        Index(
            'uq_transactions_one_reversal_per_sale',
            'parent_transaction_id',
            unique=True,
            postgresql_where=text('parent_transaction_id IS NOT NULL'),
        ),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    order_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('orders.id'), nullable=False, index=True
    )
    processor: Mapped[str] = mapped_column(String(50), nullable=False)
    processor_transaction_id: Mapped[str] = mapped_column(String(255), nullable=False)
    processor_created_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    type: Mapped[str] = mapped_column(String(10), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    parent_transaction_id: Mapped[Optional[UUID]] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('transactions.id')
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
