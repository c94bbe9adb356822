from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.service.commerce.domain.entity.product_entity import Product


class IInventoryCommandRepo(ABC):
    @abstractmethod
    async def get_product(self, *, product_id: UUID) -> Optional[Product]:
        pass

    @abstractmethod
    async def get_total_sold(self, *, product_id: UUID) -> int:
        """Sum of order item quantities ever sold for the product."""
        pass

    @abstractmethod
    async def archive_product(self, *, product_id: UUID) -> None:
        pass

    @abstractmethod
    async def activate_product(self, *, product_id: UUID) -> None:
        pass

    @abstractmethod
    async def set_event_current_ticket(self, *, event_id: UUID, product_id: UUID) -> None:
        pass
