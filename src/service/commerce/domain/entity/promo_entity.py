from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

import attrs

from src.service.commerce.domain.enum.catalog_enum import PromoStatus, PromoType
from src.service.commerce.domain.money import to_money


def _optional_money(value: Any) -> Optional[Decimal]:
    return None if value is None else to_money(value)


def _optional_decimal(value: Any) -> Optional[Decimal]:
    return None if value is None else Decimal(str(value))


@attrs.define
class Promo:
    """
    A price override (`price`) or a discount (`percent_discount` / `flat_discount`),
    bound to one product.

    single-use: claimed once, caps the quantity of the bound product (product_quantity)
    coupon: reusable up to max_uses orders
    """

    id: UUID
    type: PromoType
    product_id: Optional[UUID] = None
    status: PromoStatus = PromoStatus.ACTIVE
    price: Optional[Decimal] = attrs.field(default=None, converter=_optional_money)
    percent_discount: Optional[Decimal] = attrs.field(default=None, converter=_optional_decimal)
    flat_discount: Optional[Decimal] = attrs.field(default=None, converter=_optional_money)
    product_quantity: Optional[int] = None
    max_uses: Optional[int] = None
    recipient_name: Optional[str] = None
    created_by: Optional[str] = None
    meta: dict[str, Any] = attrs.field(factory=dict)

    @property
    def is_active(self) -> bool:
        return self.status == PromoStatus.ACTIVE

    @property
    def is_single_use(self) -> bool:
        return self.type == PromoType.SINGLE_USE
