from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.service.commerce.domain.enum.payment_enum import TransactionType
from src.service.commerce.domain.money import to_money


@attrs.define(frozen=True)
class Transaction:
    id: UUID
    order_id: UUID
    processor: str
    processor_transaction_id: str
    type: TransactionType
    amount: Decimal = attrs.field(converter=to_money)
    processor_created_at: Optional[datetime] = None
    parent_transaction_id: Optional[UUID] = None
    created_at: Optional[datetime] = None

    @classmethod
    def sale(
        cls,
        *,
        order_id: UUID,
        processor: str,
        processor_transaction_id: str,
        processor_created_at: Optional[datetime],
        amount: Decimal,
    ) -> 'Transaction':
        return cls(
            id=uuid7(),
            order_id=order_id,
            processor=processor,
            processor_transaction_id=processor_transaction_id,
            processor_created_at=processor_created_at,
            type=TransactionType.SALE,
            amount=amount,
            created_at=datetime.now(timezone.utc),
        )

    def reversal(
        self,
        *,
        type: TransactionType,
        processor_transaction_id: str,
        processor_created_at: Optional[datetime],
    ) -> 'Transaction':
        """Refund or void of this sale, for the full sale amount."""
        if self.type != TransactionType.SALE:
            raise ValueError('Only sale transactions can be reversed')
        if type == TransactionType.SALE:
            raise ValueError('A reversal must be a refund or a void')
        return Transaction(
            id=uuid7(),
            order_id=self.order_id,
            processor=self.processor,
            processor_transaction_id=processor_transaction_id,
            processor_created_at=processor_created_at,
            type=type,
            amount=self.amount,
            parent_transaction_id=self.id,
            created_at=datetime.now(timezone.utc),
        )
