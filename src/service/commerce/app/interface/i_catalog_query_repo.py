"""
Catalog Query Repository Interface

Read-only lookups of products and promos used while pricing a cart.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.service.commerce.domain.entity.product_entity import Product
from src.service.commerce.domain.entity.promo_entity import Promo


class ICatalogQueryRepo(ABC):
    @abstractmethod
    async def get_products(self, *, product_ids: List[UUID]) -> List[Product]:
        """
        Get products by id regardless of status

        Inactive and archived products are returned too, so the caller can tell
        "no longer sold" apart from "never existed".
        """
        pass

    @abstractmethod
    async def get_promo(self, *, promo_id: UUID) -> Optional[Promo]:
        pass

    @abstractmethod
    async def count_promo_uses(self, *, promo_id: UUID) -> int:
        """Number of non-canceled orders placed with the promo."""
        pass
