from typing import List, Optional

import attrs

from src.service.commerce.domain.entity.customer_entity import Customer
from src.service.commerce.domain.entity.order_entity import Order
from src.service.commerce.domain.entity.transaction_entity import Transaction


@attrs.define(frozen=True)
class OrderResult:
    order: Order
    transaction: Transaction
    customer: Customer
    persisted: bool = True  # False only when the local write failed after a successful charge


@attrs.define(frozen=True)
class RefundResult:
    order: Order
    transaction: Transaction


@attrs.define(frozen=True)
class TransferResult:
    transferee: Customer
    order: Order
    guest_count: int = 0
    parent_order: Optional[Order] = None


@attrs.define(frozen=True)
class OrderDetail:
    order: Order
    transactions: List[Transaction] = attrs.field(factory=list)
