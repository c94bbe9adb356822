from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

import attrs

from src.service.commerce.domain.enum.catalog_enum import ProductStatus, ProductType
from src.service.commerce.domain.enum.guest_enum import AdmissionTier
from src.service.commerce.domain.money import to_money


@attrs.define
class Product:
    id: UUID
    type: ProductType
    name: str
    price: Decimal = attrs.field(converter=to_money)
    event_id: Optional[UUID] = None
    admission_tier: Optional[AdmissionTier] = None
    max_quantity: Optional[int] = None  # None = unlimited
    promo: bool = False  # only purchasable through a promo bound to it
    target_product_id: Optional[UUID] = None
    status: ProductStatus = ProductStatus.ACTIVE
    description: str = ''
    meta: dict[str, Any] = attrs.field(factory=dict)

    @property
    def is_active(self) -> bool:
        return self.status == ProductStatus.ACTIVE

    @property
    def next_tier_product_id(self) -> Optional[UUID]:
        value = self.meta.get('nextTierProductId')
        return UUID(str(value)) if value else None
