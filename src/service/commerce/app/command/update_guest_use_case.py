from typing import Optional, Self
from uuid import UUID

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.commerce.domain.entity.guest_entity import Guest
from src.service.commerce.domain.enum.guest_enum import AdmissionTier
from src.service.commerce.domain.value_object.guest_update import (
    ChangeAdmissionTier,
    GuestUpdate,
    RenameGuest,
    ReplaceGuestMeta,
)


class UpdateGuestUseCase:
    """Apply one typed update to a guest. Status never changes here."""

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(
        self, *, guest_id: UUID, update: GuestUpdate, updated_by: Optional[str] = None
    ) -> Guest:
        async with self.uow:
            guest = await self.uow.guest_command_repo.get_by_id(guest_id=guest_id)
            if guest is None:
                raise NotFoundError('Guest not found', context={'guest_id': str(guest_id)})

            if isinstance(update, RenameGuest):
                changed = guest.rename(
                    first_name=update.first_name,
                    last_name=update.last_name,
                    updated_by=updated_by,
                )
            elif isinstance(update, ChangeAdmissionTier):
                minimum_tier = await self.uow.guest_command_repo.get_minimum_admission_tier(
                    guest_id=guest_id
                )
                changed = guest.change_admission_tier(
                    admission_tier=update.admission_tier,
                    minimum_tier=minimum_tier or AdmissionTier.GENERAL,
                    updated_by=updated_by,
                )
            elif isinstance(update, ReplaceGuestMeta):
                changed = guest.replace_meta(meta=update.meta, updated_by=updated_by)
            else:
                raise TypeError(f'Unsupported guest update: {type(update).__name__}')

            stored = await self.uow.guest_command_repo.update(guest=changed)
            await self.uow.commit()

        Logger.base.info(f'✏️ [GUEST] {type(update).__name__} applied to guest {guest_id}')
        return stored
