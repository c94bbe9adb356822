from typing import List, Optional, Self
from uuid import UUID

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_read_unit_of_work
from src.platform.logging.loguru_io import Logger
from src.service.commerce.domain.entity.guest_entity import Guest
from src.service.commerce.domain.enum.guest_enum import AdmissionTier, CreatedReason, GuestStatus


class ListGuestsUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork):
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_read_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def list_guests(
        self,
        *,
        event_id: Optional[UUID] = None,
        order_id: Optional[UUID] = None,
        admission_tier: Optional[AdmissionTier] = None,
        created_reason: Optional[CreatedReason] = None,
        status: Optional[GuestStatus] = None,
        limit: int = 500,
    ) -> List[Guest]:
        async with self.uow:
            return await self.uow.guest_query_repo.list_guests(
                event_id=event_id,
                order_id=order_id,
                admission_tier=admission_tier,
                created_reason=created_reason,
                status=status,
                limit=limit,
            )
