from typing import Optional
from uuid import UUID

from sqlalchemy import func, select, update as sql_update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.commerce.app.interface.i_inventory_command_repo import IInventoryCommandRepo
from src.service.commerce.domain.entity.product_entity import Product
from src.service.commerce.domain.enum.catalog_enum import ProductStatus
from src.service.commerce.driven_adapter.model.event_model import EventModel
from src.service.commerce.driven_adapter.model.order_model import OrderItemModel
from src.service.commerce.driven_adapter.model.product_model import ProductModel
from src.service.commerce.driven_adapter.repo._mapper import product_to_entity


class InventoryCommandRepoImpl(IInventoryCommandRepo):
    def __init__(self, *, session: AsyncSession):
        self.session = session

    @Logger.io
    async def get_product(self, *, product_id: UUID) -> Optional[Product]:
        result = await self.session.execute(
            select(ProductModel).where(ProductModel.id == product_id).with_for_update()
        )
        db_product = result.scalar_one_or_none()
        return product_to_entity(db_product) if db_product else None

    @Logger.io
    async def get_total_sold(self, *, product_id: UUID) -> int:
        result = await self.session.execute(
            select(func.coalesce(func.sum(OrderItemModel.quantity), 0)).where(
                OrderItemModel.product_id == product_id
            )
        )
        return int(result.scalar_one())

    async def _set_status(self, *, product_id: UUID, status: ProductStatus) -> None:
        await self.session.execute(
            sql_update(ProductModel).where(ProductModel.id == product_id).values(status=status.value)
        )

    @Logger.io
    async def archive_product(self, *, product_id: UUID) -> None:
        await self._set_status(product_id=product_id, status=ProductStatus.ARCHIVED)

    @Logger.io
    async def activate_product(self, *, product_id: UUID) -> None:
        await self._set_status(product_id=product_id, status=ProductStatus.ACTIVE)

    @Logger.io
    async def set_event_current_ticket(self, *, event_id: UUID, product_id: UUID) -> None:
        await self.session.execute(
            sql_update(EventModel)
            .where(EventModel.id == event_id)
            .values(current_ticket_product_id=product_id)
        )
