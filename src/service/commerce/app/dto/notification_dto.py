from decimal import Decimal
from typing import List
from uuid import UUID

import attrs


@attrs.define(frozen=True)
class Receipt:
    first_name: str
    last_name: str
    email: str
    confirmation_id: str
    order_id: UUID
    order_token: str
    amount: Decimal


@attrs.define(frozen=True)
class TransferConfirmation:
    transferee_first_name: str
    transferee_last_name: str
    email: str
    order_id: UUID
    parent_order_id: UUID
    order_token: str
    guest_count: int


@attrs.define(frozen=True)
class Subscriber:
    list_id: str
    email: str
    first_name: str
    last_name: str
    tags: List[str] = attrs.field(factory=list)
