from typing import List, Self
from uuid import UUID

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_read_unit_of_work
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.commerce.app.dto.ticket_view import TicketView


class GetOrderTicketsUseCase:
    """Scannable tickets of one order (archived guests excluded)."""

    def __init__(self, *, uow: AbstractUnitOfWork):
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_read_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(self, *, order_id: UUID) -> List[TicketView]:
        async with self.uow:
            order = await self.uow.order_query_repo.get_by_id(order_id=order_id)
            if not order:
                raise NotFoundError('Order not found', context={'order_id': str(order_id)})

            return await self.uow.guest_query_repo.list_order_tickets(order_id=order_id)
