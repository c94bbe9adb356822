"""Commerce Domain Enums"""

from src.service.commerce.domain.enum.catalog_enum import (
    EventStatus,
    ProductStatus,
    ProductType,
    PromoStatus,
    PromoType,
)
from src.service.commerce.domain.enum.guest_enum import AdmissionTier, CreatedReason, GuestStatus
from src.service.commerce.domain.enum.order_status import OrderStatus
from src.service.commerce.domain.enum.payment_enum import (
    FollowUpTaskKind,
    FollowUpTaskStatus,
    SettlementStatus,
    TransactionType,
)

__all__ = [
    'AdmissionTier',
    'CreatedReason',
    'EventStatus',
    'FollowUpTaskKind',
    'FollowUpTaskStatus',
    'GuestStatus',
    'OrderStatus',
    'ProductStatus',
    'ProductType',
    'PromoStatus',
    'PromoType',
    'SettlementStatus',
    'TransactionType',
]
