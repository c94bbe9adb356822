from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from src.service.commerce.domain.enum.catalog_enum import EventStatus
from src.service.commerce.driving_adapter.http_controller.schema.guest_schema import GuestResponse


class TicketCredentialRequest(BaseModel):
    ticket_credential: str

    class Config:
        json_schema_extra = {'example': {'ticket_credential': '9f86d081884c7d659a2feaa0'}}


class EventSummaryResponse(BaseModel):
    id: UUID
    name: str
    date: datetime
    status: EventStatus


class TicketResponse(BaseModel):
    guest: GuestResponse
    event: EventSummaryResponse
    qr_payload: str


class FollowUpRetryRequest(BaseModel):
    order_id: Optional[UUID] = None


class FollowUpRunResponse(BaseModel):
    done: int
    failed: int
    skipped: int
