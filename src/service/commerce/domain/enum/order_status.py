from enum import StrEnum


class OrderStatus(StrEnum):
    COMPLETE = 'complete'
    CANCELED = 'canceled'
    # Non-exclusive marker: some (not necessarily all) guests were moved to a child order
    TRANSFERRED = 'transferred'
