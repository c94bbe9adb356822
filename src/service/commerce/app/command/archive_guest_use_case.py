from typing import Optional, Self
from uuid import UUID

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import NotFoundError, NotPermittedError
from src.platform.logging.loguru_io import Logger
from src.service.commerce.domain.entity.guest_entity import Guest


class ArchiveGuestUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(self, *, guest_id: UUID, updated_by: Optional[str] = None) -> Guest:
        async with self.uow:
            guest = await self.uow.guest_command_repo.get_by_id(guest_id=guest_id)
            if guest is None:
                raise NotFoundError('Guest not found', context={'guest_id': str(guest_id)})

            # Raises NOT_PERMITTED for checked-in or archived guests
            guest.archive(updated_by=updated_by)

            archived = await self.uow.guest_command_repo.archive_atomically(
                guest_id=guest_id, updated_by=updated_by
            )
            if archived is None:
                # Checked in (or archived) between the read and the write
                raise NotPermittedError(
                    'Cannot archive guest', context={'guest_id': str(guest_id)}
                )

            await self.uow.commit()

        Logger.base.info(f'🗃️ [GUEST] Archived guest {guest_id}')
        return archived
