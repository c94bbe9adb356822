"""
Order Command Repository Interface

Writes for orders, their items and their transaction chain.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.service.commerce.domain.entity.order_entity import Order
from src.service.commerce.domain.entity.transaction_entity import Transaction
from src.service.commerce.domain.enum.order_status import OrderStatus


class IOrderCommandRepo(ABC):
    @abstractmethod
    async def create_paid_order(self, *, order: Order, transaction: Transaction) -> bool:
        """
        Insert order, order items and the sale transaction

        Idempotent on order.id: writing the same order twice is a no-op.

        Returns:
            True if the rows were inserted, False if the order already existed
        """
        pass

    @abstractmethod
    async def create_transfer_child(self, *, order: Order) -> Order:
        pass

    @abstractmethod
    async def get_by_id(self, *, order_id: UUID) -> Optional[Order]:
        """Get order with its items, or None"""
        pass

    @abstractmethod
    async def get_sale_transaction(self, *, order_id: UUID) -> Optional[Transaction]:
        pass

    @abstractmethod
    async def add_transaction(self, *, transaction: Transaction) -> Transaction:
        pass

    @abstractmethod
    async def update_status(self, *, order_id: UUID, status: OrderStatus) -> Optional[Order]:
        pass
