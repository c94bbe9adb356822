from typing import Any

import attrs

from src.service.commerce.domain.entity.event_entity import Event
from src.service.commerce.domain.entity.guest_entity import Guest


@attrs.define(frozen=True)
class TicketView:
    """A guest together with the event its ticket admits to."""

    guest: Guest
    event: Event

    @property
    def qr_payload(self) -> str:
        return self.guest.ticket_seed

    def to_context(self) -> dict[str, Any]:
        return {'guest': self.guest.to_snapshot(), 'event': self.event.to_snapshot()}
