from datetime import datetime
from typing import Annotated, Any, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, Field

from src.service.commerce.domain.enum.guest_enum import AdmissionTier, CreatedReason, GuestStatus
from src.service.commerce.domain.value_object.guest_update import (
    ChangeAdmissionTier,
    GuestUpdate,
    RenameGuest,
    ReplaceGuestMeta,
)


class GuestCreateRequest(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    event_id: Optional[UUID] = None
    admission_tier: Optional[AdmissionTier] = None
    created_reason: Optional[CreatedReason] = None
    order_id: Optional[UUID] = None
    meta: dict[str, Any] = Field(default_factory=dict)

    class Config:
        json_schema_extra = {
            'example': {
                'first_name': 'Ada',
                'last_name': 'Lovelace',
                'event_id': '01936d8f-5e73-7c4e-a9c5-123456789abc',
                'admission_tier': 'vip',
                'created_reason': 'comp',
                'meta': {'comment': 'Band guest list'},
            }
        }


class RenameGuestRequest(BaseModel):
    type: Literal['rename']
    first_name: str
    last_name: str

    def to_command(self) -> GuestUpdate:
        return RenameGuest(first_name=self.first_name, last_name=self.last_name)


class ChangeAdmissionTierRequest(BaseModel):
    type: Literal['change_admission_tier']
    admission_tier: AdmissionTier

    def to_command(self) -> GuestUpdate:
        return ChangeAdmissionTier(admission_tier=self.admission_tier)


class ReplaceGuestMetaRequest(BaseModel):
    type: Literal['replace_meta']
    meta: dict[str, Any]

    def to_command(self) -> GuestUpdate:
        return ReplaceGuestMeta(meta=self.meta)


GuestUpdateRequest = Annotated[
    Union[RenameGuestRequest, ChangeAdmissionTierRequest, ReplaceGuestMetaRequest],
    Field(discriminator='type'),
]


class GuestResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'id': '01936d8f-5e73-7c4e-a9c5-123456789abc',
                'first_name': 'Ada',
                'last_name': 'Lovelace Guest 1',
                'admission_tier': 'general',
                'status': 'active',
                'created_reason': 'purchase',
                'order_id': '01936d8f-4b21-7a10-8c3e-0f1e2d3c4b5a',
                'event_id': '01936d8f-5e73-7c4e-a9c5-000000000001',
            }
        },
    }

    id: UUID
    first_name: str
    last_name: str
    admission_tier: AdmissionTier
    status: GuestStatus
    created_reason: CreatedReason
    event_id: UUID
    order_id: Optional[UUID] = None
    check_in_time: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    meta: dict[str, Any] = {}
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
