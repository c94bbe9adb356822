from datetime import datetime, timezone
import secrets
from typing import Any, List, Optional, Tuple
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import InvalidError, NotPermittedError
from src.service.commerce.domain.enum.guest_enum import AdmissionTier, CreatedReason, GuestStatus


TICKET_SEED_BYTES = 12


def new_ticket_seed() -> str:
    return secrets.token_hex(TICKET_SEED_BYTES)


def guest_names_for_units(*, first_name: str, last_name: str, units: int) -> List[Tuple[str, str]]:
    """
    One name per ticket unit: the buyer holds the first ticket, the rest are
    "<last name> Guest 1", "<last name> Guest 2", ...
    """
    return [
        (first_name, last_name if unit == 0 else f'{last_name} Guest {unit}')
        for unit in range(units)
    ]


@attrs.define
class Guest:
    id: UUID
    first_name: str
    last_name: str
    admission_tier: AdmissionTier
    event_id: UUID
    created_reason: CreatedReason
    ticket_seed: str
    order_id: Optional[UUID] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    status: GuestStatus = GuestStatus.ACTIVE
    check_in_time: Optional[datetime] = None
    meta: dict[str, Any] = attrs.field(factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        first_name: Optional[str],
        last_name: Optional[str],
        event_id: Optional[UUID],
        admission_tier: Optional[AdmissionTier],
        created_reason: Optional[CreatedReason],
        order_id: Optional[UUID] = None,
        created_by: Optional[str] = None,
        meta: Optional[dict[str, Any]] = None,
    ) -> 'Guest':
        first_name = (first_name or '').strip()
        last_name = (last_name or '').strip()
        if (
            not first_name
            or not last_name
            or not event_id
            or not admission_tier
            or not created_reason
            or (order_id is None and created_reason == CreatedReason.PURCHASE)
        ):
            raise InvalidError('Missing guest data')

        now = datetime.now(timezone.utc)
        return cls(
            id=uuid7(),
            first_name=first_name,
            last_name=last_name,
            admission_tier=AdmissionTier(admission_tier),
            event_id=event_id,
            created_reason=CreatedReason(created_reason),
            ticket_seed=new_ticket_seed(),
            order_id=order_id,
            created_by=created_by,
            meta=dict(meta or {}),
            created_at=now,
            updated_at=now,
        )

    def transfer_copy(
        self, *, order_id: UUID, first_name: str, last_name: str, created_by: Optional[str]
    ) -> 'Guest':
        """Fresh guest (new ticket seed) for the transferee, same event and tier."""
        return Guest.create(
            first_name=first_name,
            last_name=last_name,
            event_id=self.event_id,
            admission_tier=self.admission_tier,
            created_reason=CreatedReason.TRANSFER,
            order_id=order_id,
            created_by=created_by,
            meta={'transferredFromGuestId': str(self.id)},
        )

    @property
    def is_active(self) -> bool:
        return self.status == GuestStatus.ACTIVE

    def _ensure_mutable(self) -> None:
        if self.status == GuestStatus.ARCHIVED:
            raise NotPermittedError(
                'Cannot update archived guest', context={'guest': self.to_snapshot()}
            )

    def rename(self, *, first_name: str, last_name: str, updated_by: Optional[str]) -> 'Guest':
        self._ensure_mutable()
        first_name, last_name = first_name.strip(), last_name.strip()
        if not first_name or not last_name:
            raise InvalidError('Guest name cannot be empty')
        return attrs.evolve(
            self,
            first_name=first_name,
            last_name=last_name,
            updated_by=updated_by,
            updated_at=datetime.now(timezone.utc),
        )

    def change_admission_tier(
        self,
        *,
        admission_tier: AdmissionTier,
        minimum_tier: AdmissionTier,
        updated_by: Optional[str],
    ) -> 'Guest':
        self._ensure_mutable()
        if admission_tier.rank < minimum_tier.rank:
            raise InvalidError(
                f'Cannot downgrade {minimum_tier.value} guest to {admission_tier.value} admission',
                context={'guest': self.to_snapshot(), 'minimum_tier': minimum_tier.value},
            )
        return attrs.evolve(
            self,
            admission_tier=admission_tier,
            updated_by=updated_by,
            updated_at=datetime.now(timezone.utc),
        )

    def replace_meta(self, *, meta: dict[str, Any], updated_by: Optional[str]) -> 'Guest':
        self._ensure_mutable()
        return attrs.evolve(
            self, meta=dict(meta), updated_by=updated_by, updated_at=datetime.now(timezone.utc)
        )

    def archive(self, *, updated_by: Optional[str]) -> 'Guest':
        if self.status != GuestStatus.ACTIVE:
            raise NotPermittedError(
                f'Cannot archive {self.status.value} guest', context={'guest': self.to_snapshot()}
            )
        return attrs.evolve(
            self,
            status=GuestStatus.ARCHIVED,
            updated_by=updated_by,
            updated_at=datetime.now(timezone.utc),
        )

    def to_snapshot(self) -> dict[str, Any]:
        return {
            'id': str(self.id),
            'first_name': self.first_name,
            'last_name': self.last_name,
            'admission_tier': self.admission_tier.value,
            'status': self.status.value,
            'check_in_time': self.check_in_time.isoformat() if self.check_in_time else None,
            'order_id': str(self.order_id) if self.order_id else None,
            'event_id': str(self.event_id),
        }
