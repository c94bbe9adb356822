from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.commerce.app.interface.i_catalog_query_repo import ICatalogQueryRepo
from src.service.commerce.domain.entity.product_entity import Product
from src.service.commerce.domain.entity.promo_entity import Promo
from src.service.commerce.domain.enum.catalog_enum import PromoStatus, PromoType
from src.service.commerce.domain.enum.order_status import OrderStatus
from src.service.commerce.driven_adapter.model.order_model import OrderModel
from src.service.commerce.driven_adapter.model.product_model import ProductModel
from src.service.commerce.driven_adapter.model.promo_model import PromoModel
from src.service.commerce.driven_adapter.repo._mapper import product_to_entity


class CatalogQueryRepoImpl(ICatalogQueryRepo):
    def __init__(self, *, session: AsyncSession):
        self.session = session

    @staticmethod
    def _to_promo(db_promo: PromoModel) -> Promo:
        return Promo(
            id=db_promo.id,
            type=PromoType(db_promo.type),
            product_id=db_promo.product_id,
            status=PromoStatus(db_promo.status),
            price=db_promo.price,
            percent_discount=db_promo.percent_discount,
            flat_discount=db_promo.flat_discount,
            product_quantity=db_promo.product_quantity,
            max_uses=db_promo.max_uses,
            recipient_name=db_promo.recipient_name,
            created_by=db_promo.created_by,
            meta=db_promo.meta or {},
        )

    @Logger.io
    async def get_products(self, *, product_ids: List[UUID]) -> List[Product]:
        if not product_ids:
            return []
        result = await self.session.execute(
            select(ProductModel).where(ProductModel.id.in_(product_ids))
        )
        return [product_to_entity(db_product) for db_product in result.scalars().all()]

    @Logger.io
    async def get_promo(self, *, promo_id: UUID) -> Optional[Promo]:
        db_promo = await self.session.get(PromoModel, promo_id)
        return self._to_promo(db_promo) if db_promo else None

    @Logger.io
    async def count_promo_uses(self, *, promo_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count(OrderModel.id)).where(
                OrderModel.promo_id == promo_id,
                OrderModel.status != OrderStatus.CANCELED.value,
            )
        )
        return int(result.scalar_one())
