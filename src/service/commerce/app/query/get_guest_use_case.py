from typing import Self
from uuid import UUID

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_read_unit_of_work
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.commerce.domain.entity.guest_entity import Guest


class GetGuestUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork):
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_read_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def get_guest(self, *, guest_id: UUID) -> Guest:
        async with self.uow:
            guest = await self.uow.guest_command_repo.get_by_id(guest_id=guest_id)

        if not guest:
            raise NotFoundError('Guest not found', context={'guest_id': str(guest_id)})
        return guest
