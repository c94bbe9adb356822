from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, get_read_unit_of_work
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.commerce.app.dto.ticket_view import TicketView
from src.service.commerce.app.interface.i_order_token_service import IOrderTokenService


class GetCustomerTicketsUseCase:
    """
    Ticket page behind the link in the receipt e-mail.

    The token names one order; the page lists the tickets of every order of
    that order's customer, for events that are still active.
    """

    def __init__(self, *, uow: AbstractUnitOfWork, order_token_service: IOrderTokenService):
        self.uow = uow
        self.order_token_service = order_token_service

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(get_read_unit_of_work),
        order_token_service: IOrderTokenService = Depends(Provide[Container.order_token_service]),
    ) -> Self:
        return cls(uow=uow, order_token_service=order_token_service)

    @Logger.io
    async def execute(self, *, order_token: str) -> List[TicketView]:
        order_id = self.order_token_service.verify(token=order_token)

        async with self.uow:
            order = await self.uow.order_query_repo.get_by_id(order_id=order_id)
            if not order:
                raise NotFoundError('Order not found', context={'order_id': str(order_id)})

            return await self.uow.guest_query_repo.list_customer_active_tickets(
                customer_id=order.customer_id
            )
