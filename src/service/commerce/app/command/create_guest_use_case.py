from typing import Any, Optional, Self
from uuid import UUID

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.logging.loguru_io import Logger
from src.service.commerce.domain.entity.guest_entity import Guest
from src.service.commerce.domain.enum.guest_enum import AdmissionTier, CreatedReason


class CreateGuestUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(
        self,
        *,
        first_name: Optional[str],
        last_name: Optional[str],
        event_id: Optional[UUID],
        admission_tier: Optional[AdmissionTier],
        created_reason: Optional[CreatedReason],
        order_id: Optional[UUID] = None,
        created_by: Optional[str] = None,
        meta: Optional[dict[str, Any]] = None,
    ) -> Guest:
        guest = Guest.create(
            first_name=first_name,
            last_name=last_name,
            event_id=event_id,
            admission_tier=admission_tier,
            created_reason=created_reason,
            order_id=order_id,
            created_by=created_by,
            meta=meta,
        )

        async with self.uow:
            [created] = await self.uow.guest_command_repo.create_many(guests=[guest])
            await self.uow.commit()

        Logger.base.info(
            f'🎫 [GUEST] Created {created.created_reason.value} guest {created.id} '
            f'({created.admission_tier.value}) for event {created.event_id}'
        )
        return created
