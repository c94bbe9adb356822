from typing import Self

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_read_unit_of_work
from src.platform.exception.exceptions import TicketNotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.commerce.app.dto.ticket_view import TicketView


class InspectTicketUseCase:
    """Look a ticket up at the door without checking the guest in."""

    def __init__(self, *, uow: AbstractUnitOfWork):
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_read_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(self, *, ticket_credential: str) -> TicketView:
        async with self.uow:
            ticket = await self.uow.guest_query_repo.get_ticket_by_seed(
                ticket_seed=ticket_credential
            )
        if ticket is None:
            raise TicketNotFoundError()
        return ticket
