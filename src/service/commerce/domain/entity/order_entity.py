from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

import attrs

from src.platform.exception.exceptions import NotPermittedError, RefundNotAllowedError
from src.service.commerce.domain.enum.order_status import OrderStatus
from src.service.commerce.domain.money import ZERO, to_money


@attrs.define(frozen=True)
class OrderItem:
    """Immutable record of what was bought; never rewritten by refunds or transfers."""

    order_id: UUID
    product_id: UUID
    quantity: int


@attrs.define
class Order:
    id: UUID
    customer_id: UUID
    amount: Decimal = attrs.field(converter=to_money)
    status: OrderStatus = OrderStatus.COMPLETE
    promo_id: Optional[UUID] = None
    parent_order_id: Optional[UUID] = None
    items: List[OrderItem] = attrs.field(factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create_paid(
        cls,
        *,
        id: UUID,
        customer_id: UUID,
        amount: Decimal,
        items: List[OrderItem],
        promo_id: Optional[UUID] = None,
    ) -> 'Order':
        now = datetime.now(timezone.utc)
        return cls(
            id=id,
            customer_id=customer_id,
            amount=amount,
            status=OrderStatus.COMPLETE,
            promo_id=promo_id,
            items=items,
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def create_transfer_child(cls, *, id: UUID, parent: 'Order', customer_id: UUID) -> 'Order':
        now = datetime.now(timezone.utc)
        return cls(
            id=id,
            customer_id=customer_id,
            amount=ZERO,
            status=OrderStatus.COMPLETE,
            parent_order_id=parent.id,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_transfer_child(self) -> bool:
        return self.parent_order_id is not None

    def ensure_refundable(self) -> None:
        if self.status != OrderStatus.COMPLETE:
            raise RefundNotAllowedError(
                'Order is not refundable',
                context={'order_id': str(self.id), 'status': self.status.value},
            )

    def ensure_transferable(self) -> None:
        if self.status == OrderStatus.CANCELED:
            raise NotPermittedError(
                'Cannot transfer this order',
                context={'order_id': str(self.id), 'status': self.status.value},
            )

    def cancel(self) -> 'Order':
        self.ensure_refundable()
        return attrs.evolve(
            self, status=OrderStatus.CANCELED, updated_at=datetime.now(timezone.utc)
        )

    def mark_transferred(self) -> 'Order':
        self.ensure_transferable()
        return attrs.evolve(
            self, status=OrderStatus.TRANSFERRED, updated_at=datetime.now(timezone.utc)
        )
