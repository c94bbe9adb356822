from enum import StrEnum


class TransactionType(StrEnum):
    SALE = 'sale'
    REFUND = 'refund'
    VOID = 'void'


class SettlementStatus(StrEnum):
    """Processor lifecycle stage of a charge, normalized across processors."""

    AUTHORIZED = 'authorized'
    SETTLING = 'settling'
    SETTLED = 'settled'
    VOIDED = 'voided'
    FAILED = 'failed'
    UNKNOWN = 'unknown'


class FollowUpTaskKind(StrEnum):
    CREATE_PURCHASE_GUESTS = 'create_purchase_guests'
    ROLL_OVER_INVENTORY = 'roll_over_inventory'


class FollowUpTaskStatus(StrEnum):
    PENDING = 'pending'
    DONE = 'done'
    FAILED = 'failed'
