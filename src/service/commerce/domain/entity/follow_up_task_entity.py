from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.service.commerce.domain.enum.payment_enum import FollowUpTaskKind, FollowUpTaskStatus


@attrs.define
class FollowUpTask:
    """Outbox row: work owed to a persisted order, executed after the response."""

    id: UUID
    order_id: UUID
    kind: FollowUpTaskKind
    payload: dict[str, Any] = attrs.field(factory=dict)
    status: FollowUpTaskStatus = FollowUpTaskStatus.PENDING
    attempts: int = 0
    last_error: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create(
        cls, *, order_id: UUID, kind: FollowUpTaskKind, payload: dict[str, Any]
    ) -> 'FollowUpTask':
        now = datetime.now(timezone.utc)
        return cls(
            id=uuid7(),
            order_id=order_id,
            kind=kind,
            payload=payload,
            created_at=now,
            updated_at=now,
        )

    def mark_done(self) -> 'FollowUpTask':
        return attrs.evolve(
            self,
            status=FollowUpTaskStatus.DONE,
            attempts=self.attempts + 1,
            last_error=None,
            updated_at=datetime.now(timezone.utc),
        )

    def mark_failed(self, *, error: str) -> 'FollowUpTask':
        return attrs.evolve(
            self,
            status=FollowUpTaskStatus.FAILED,
            attempts=self.attempts + 1,
            last_error=error[:1000],
            updated_at=datetime.now(timezone.utc),
        )
