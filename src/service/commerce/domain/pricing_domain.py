"""
Pricing Domain

Pure cart pricing: no database, no processor. The caller loads products and the
promo (with its current use count) and hands them in.

Precedence for the line a promo is bound to:
1. single-use promo with a price → that price replaces the unit price
2. coupon → percent discount, else flat discount, on the product price
3. the zero-subtotal rule is applied last, so a promo price of 0 is still rejected
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional, Sequence
from uuid import UUID

from src.platform.exception.exceptions import InvalidError, ItemsUnavailableError
from src.platform.logging.loguru_io import Logger
from src.service.commerce.domain.entity.product_entity import Product
from src.service.commerce.domain.entity.promo_entity import Promo
from src.service.commerce.domain.enum.catalog_enum import PromoType
from src.service.commerce.domain.money import CENT, ZERO, to_money
from src.service.commerce.domain.value_object.cart import CartLine, PricedCart, PricedLine


class PricingEngine:
    @staticmethod
    def discounted_unit_price(*, promo: Promo, price: Decimal) -> Decimal:
        if promo.type == PromoType.SINGLE_USE:
            return promo.price if promo.price is not None else price

        if promo.percent_discount is not None:
            factor = (Decimal(100) - promo.percent_discount) / Decimal(100)
            return max(ZERO, (price * factor).quantize(CENT, rounding=ROUND_HALF_UP))
        if promo.flat_discount is not None:
            return max(ZERO, to_money(price - promo.flat_discount))
        if promo.price is not None:
            return promo.price
        return price

    @staticmethod
    def _validate_promo(*, promo: Promo, promo_uses: int, cart: Sequence[CartLine]) -> None:
        if not promo.is_active:
            raise InvalidError('Invalid promo code', context={'promo_id': str(promo.id)})

        if promo.type == PromoType.COUPON and promo.max_uses is not None:
            if promo_uses >= promo.max_uses:
                raise InvalidError(
                    'Promo code has reached its usage limit', context={'promo_id': str(promo.id)}
                )

        if promo.product_id is not None and not any(
            line.product_id == promo.product_id for line in cart
        ):
            raise InvalidError(
                'Promo code does not apply to items in cart', context={'promo_id': str(promo.id)}
            )

    @classmethod
    @Logger.io
    def price_cart(
        cls,
        *,
        cart: Sequence[CartLine],
        products: List[Product],
        promo: Optional[Promo] = None,
        promo_uses: int = 0,
    ) -> PricedCart:
        if not cart:
            raise InvalidError('Cart is empty')

        for line in cart:
            if not isinstance(line.quantity, int) or line.quantity < 1:
                raise InvalidError(
                    'Invalid quantity in cart', context={'product_id': str(line.product_id)}
                )

        if promo is not None:
            cls._validate_promo(promo=promo, promo_uses=promo_uses, cart=cart)

        products_by_id: Dict[UUID, Product] = {product.id: product for product in products}
        priced_lines: List[PricedLine] = []

        for line in cart:
            product = products_by_id.get(line.product_id)
            if product is None or not product.is_active:
                raise ItemsUnavailableError(
                    'Empty/Invalid items in cart', context={'product_id': str(line.product_id)}
                )

            promo_applies = promo is not None and promo.product_id == product.id
            if product.promo and not promo_applies:
                raise ItemsUnavailableError(
                    'Empty/Invalid items in cart', context={'product_id': str(product.id)}
                )

            unit_price = product.price
            if promo is not None and promo_applies:
                if (
                    promo.type == PromoType.SINGLE_USE
                    and promo.product_quantity is not None
                    and line.quantity > promo.product_quantity
                ):
                    raise InvalidError(
                        f'Promo code allows at most {promo.product_quantity} of this item',
                        context={'promo_id': str(promo.id), 'product_id': str(product.id)},
                    )
                unit_price = cls.discounted_unit_price(promo=promo, price=product.price)

            priced_lines.append(
                PricedLine(product=product, quantity=line.quantity, unit_price=unit_price)
            )

        subtotal = to_money(sum((line.line_total for line in priced_lines), ZERO))
        if subtotal <= ZERO:
            raise InvalidError('Order total must be greater than zero')

        return PricedCart(subtotal=subtotal, lines=priced_lines)
