from typing import List

from fastapi import APIRouter, Depends, Query, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.commerce.app.command.check_in_with_ticket_use_case import (
    CheckInWithTicketUseCase,
)
from src.service.commerce.app.query.get_customer_tickets_use_case import (
    GetCustomerTicketsUseCase,
)
from src.service.commerce.app.query.inspect_ticket_use_case import InspectTicketUseCase
from src.service.commerce.driving_adapter.http_controller._response import (
    guest_response,
    ticket_response,
)
from src.service.commerce.driving_adapter.http_controller.auth.operator_auth import (
    Operator,
    require_door_staff,
)
from src.service.commerce.driving_adapter.http_controller.schema.guest_schema import GuestResponse
from src.service.commerce.driving_adapter.http_controller.schema.ticket_schema import (
    TicketCredentialRequest,
    TicketResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('/check-ins', status_code=status.HTTP_201_CREATED)
@Logger.io
async def check_in(
    request: TicketCredentialRequest,
    operator: Operator = Depends(require_door_staff),
    use_case: CheckInWithTicketUseCase = Depends(CheckInWithTicketUseCase.depends),
) -> GuestResponse:
    with tracer.start_as_current_span('controller.check_in') as span:
        span.set_attribute('operator.id', operator.id)
        guest = await use_case.execute(
            ticket_credential=request.ticket_credential, scanned_by=operator.id
        )
        return guest_response(guest)


@router.post('/inspect-ticket')
@Logger.io
async def inspect_ticket(
    request: TicketCredentialRequest,
    operator: Operator = Depends(require_door_staff),
    use_case: InspectTicketUseCase = Depends(InspectTicketUseCase.depends),
) -> TicketResponse:
    return ticket_response(await use_case.execute(ticket_credential=request.ticket_credential))


@router.get('/my-tickets', response_model=List[TicketResponse])
@Logger.io
async def get_my_tickets(
    t: str = Query(..., description='Order token from the receipt e-mail'),
    use_case: GetCustomerTicketsUseCase = Depends(GetCustomerTicketsUseCase.depends),
) -> List[TicketResponse]:
    tickets = await use_case.execute(order_token=t)
    return [ticket_response(ticket) for ticket in tickets]
