from datetime import datetime
from typing import Optional

import attrs

from src.service.commerce.domain.enum.payment_enum import SettlementStatus


@attrs.define(frozen=True)
class SaleResult:
    success: bool
    transaction_id: Optional[str] = None
    created_at: Optional[datetime] = None
    message: str = ''


@attrs.define(frozen=True)
class ProcessorTransaction:
    transaction_id: str
    status: SettlementStatus


@attrs.define(frozen=True)
class ReversalResult:
    success: bool
    transaction_id: Optional[str] = None
    created_at: Optional[datetime] = None
    message: str = ''
