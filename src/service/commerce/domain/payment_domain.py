from src.service.commerce.domain.enum.payment_enum import SettlementStatus, TransactionType


# Funds have moved (or are moving) at the processor: only a refund can reverse them
REFUNDABLE_STATUSES = frozenset({SettlementStatus.SETTLED, SettlementStatus.SETTLING})


def choose_reversal(settlement_status: SettlementStatus) -> TransactionType:
    """Refund settled/settling charges, void everything else. Never both."""
    if settlement_status in REFUNDABLE_STATUSES:
        return TransactionType.REFUND
    return TransactionType.VOID
