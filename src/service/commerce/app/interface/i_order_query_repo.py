from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.service.commerce.domain.entity.order_entity import Order
from src.service.commerce.domain.entity.transaction_entity import Transaction
from src.service.commerce.domain.enum.order_status import OrderStatus


class IOrderQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, order_id: UUID) -> Optional[Order]:
        pass

    @abstractmethod
    async def list_orders(
        self,
        *,
        customer_id: Optional[UUID] = None,
        status: Optional[OrderStatus] = None,
        limit: int = 100,
    ) -> List[Order]:
        """Newest first"""
        pass

    @abstractmethod
    async def list_transactions(self, *, order_id: UUID) -> List[Transaction]:
        pass
