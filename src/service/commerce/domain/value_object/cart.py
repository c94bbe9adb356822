from decimal import Decimal
from typing import List
from uuid import UUID

import attrs

from src.service.commerce.domain.entity.product_entity import Product


@attrs.define(frozen=True)
class CartLine:
    product_id: UUID
    quantity: int


@attrs.define(frozen=True)
class PricedLine:
    product: Product
    quantity: int
    unit_price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@attrs.define(frozen=True)
class PricedCart:
    subtotal: Decimal
    lines: List[PricedLine]

    @property
    def product_ids(self) -> List[UUID]:
        return [line.product.id for line in self.lines]
