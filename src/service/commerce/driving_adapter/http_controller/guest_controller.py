from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.commerce.app.command.archive_guest_use_case import ArchiveGuestUseCase
from src.service.commerce.app.command.create_guest_use_case import CreateGuestUseCase
from src.service.commerce.app.command.update_guest_use_case import UpdateGuestUseCase
from src.service.commerce.app.query.get_guest_use_case import GetGuestUseCase
from src.service.commerce.app.query.list_guests_use_case import ListGuestsUseCase
from src.service.commerce.domain.enum.guest_enum import AdmissionTier, CreatedReason, GuestStatus
from src.service.commerce.driving_adapter.http_controller._response import guest_response
from src.service.commerce.driving_adapter.http_controller.auth.operator_auth import (
    Operator,
    require_admin,
)
from src.service.commerce.driving_adapter.http_controller.schema.guest_schema import (
    GuestCreateRequest,
    GuestResponse,
    GuestUpdateRequest,
)


router = APIRouter()


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_guest(
    request: GuestCreateRequest,
    operator: Operator = Depends(require_admin),
    use_case: CreateGuestUseCase = Depends(CreateGuestUseCase.depends),
) -> GuestResponse:
    guest = await use_case.execute(
        first_name=request.first_name,
        last_name=request.last_name,
        event_id=request.event_id,
        admission_tier=request.admission_tier,
        created_reason=request.created_reason,
        order_id=request.order_id,
        created_by=operator.id,
        meta=request.meta,
    )
    return guest_response(guest)


@router.get('', response_model=List[GuestResponse])
@Logger.io
async def list_guests(
    event_id: Optional[UUID] = None,
    order_id: Optional[UUID] = None,
    admission_tier: Optional[AdmissionTier] = None,
    created_reason: Optional[CreatedReason] = None,
    guest_status: Optional[GuestStatus] = None,
    limit: int = 500,
    operator: Operator = Depends(require_admin),
    use_case: ListGuestsUseCase = Depends(ListGuestsUseCase.depends),
) -> List[GuestResponse]:
    guests = await use_case.list_guests(
        event_id=event_id,
        order_id=order_id,
        admission_tier=admission_tier,
        created_reason=created_reason,
        status=guest_status,
        limit=min(max(limit, 1), 5000),
    )
    return [guest_response(guest) for guest in guests]


@router.get('/{guest_id}')
@Logger.io
async def get_guest(
    guest_id: UUID,
    operator: Operator = Depends(require_admin),
    use_case: GetGuestUseCase = Depends(GetGuestUseCase.depends),
) -> GuestResponse:
    return guest_response(await use_case.get_guest(guest_id=guest_id))


@router.patch('/{guest_id}')
@Logger.io
async def update_guest(
    guest_id: UUID,
    request: GuestUpdateRequest = Body(...),
    operator: Operator = Depends(require_admin),
    use_case: UpdateGuestUseCase = Depends(UpdateGuestUseCase.depends),
) -> GuestResponse:
    guest = await use_case.execute(
        guest_id=guest_id, update=request.to_command(), updated_by=operator.id
    )
    return guest_response(guest)


@router.delete('/{guest_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def archive_guest(
    guest_id: UUID,
    operator: Operator = Depends(require_admin),
    use_case: ArchiveGuestUseCase = Depends(ArchiveGuestUseCase.depends),
) -> None:
    await use_case.execute(guest_id=guest_id, updated_by=operator.id)
