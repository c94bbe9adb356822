from typing import List, Optional, Self
from uuid import UUID

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_read_unit_of_work
from src.platform.logging.loguru_io import Logger
from src.service.commerce.domain.entity.order_entity import Order
from src.service.commerce.domain.enum.order_status import OrderStatus


class ListOrdersUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork):
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_read_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def list_orders(
        self,
        *,
        customer_id: Optional[UUID] = None,
        status: Optional[OrderStatus] = None,
        limit: int = 100,
    ) -> List[Order]:
        async with self.uow:
            return await self.uow.order_query_repo.list_orders(
                customer_id=customer_id, status=status, limit=limit
            )
