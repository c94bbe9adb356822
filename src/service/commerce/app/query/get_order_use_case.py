from typing import Self
from uuid import UUID

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_read_unit_of_work
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.commerce.app.dto.order_result import OrderDetail


class GetOrderUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork):
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_read_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def get_order(self, *, order_id: UUID) -> OrderDetail:
        async with self.uow:
            order = await self.uow.order_query_repo.get_by_id(order_id=order_id)
            if not order:
                raise NotFoundError('Order not found', context={'order_id': str(order_id)})

            transactions = await self.uow.order_query_repo.list_transactions(order_id=order_id)

        return OrderDetail(order=order, transactions=transactions)
