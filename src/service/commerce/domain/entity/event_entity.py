from datetime import datetime, timedelta
from typing import Any, Optional
from uuid import UUID

import attrs

from src.service.commerce.domain.enum.catalog_enum import EventStatus


@attrs.define
class Event:
    id: UUID
    name: str
    date: datetime
    status: EventStatus = EventStatus.ACTIVE
    opening_sales: Optional[datetime] = None
    max_capacity: Optional[int] = None
    sales_enabled: bool = True
    current_ticket_product_id: Optional[UUID] = None
    meta: dict[str, Any] = attrs.field(factory=dict)

    @property
    def is_active(self) -> bool:
        return self.status == EventStatus.ACTIVE

    def check_in_opens_at(self, *, grace_period: timedelta) -> datetime:
        return self.date - grace_period

    def to_snapshot(self) -> dict[str, Any]:
        return {
            'id': str(self.id),
            'name': self.name,
            'date': self.date.isoformat(),
            'status': self.status.value,
        }
