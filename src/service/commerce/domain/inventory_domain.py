from typing import Optional
from uuid import UUID

import attrs

from src.service.commerce.domain.entity.product_entity import Product


@attrs.define(frozen=True)
class RollOverPlan:
    """Archive a sold-out product and, if configured, promote its successor."""

    sold_out_product_id: UUID
    event_id: Optional[UUID]
    successor_product_id: Optional[UUID]


class InventoryRollOver:
    @staticmethod
    def evaluate(*, product: Product, total_sold: int) -> Optional[RollOverPlan]:
        if product.max_quantity is None or not product.is_active:
            return None
        if total_sold < product.max_quantity:
            return None
        return RollOverPlan(
            sold_out_product_id=product.id,
            event_id=product.event_id,
            successor_product_id=product.next_tier_product_id,
        )
