"""
Wire Modules Configuration

Modules whose `Provide[...]` markers need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.commerce.app.command import (
    create_order_use_case,
    process_follow_up_tasks_use_case,
    refund_order_use_case,
    send_order_notifications_use_case,
    send_transfer_notifications_use_case,
)
from src.service.commerce.app.query import (
    create_order_token_use_case,
    get_customer_tickets_use_case,
)


WIRE_MODULES: list[ModuleType] = [
    create_order_use_case,
    refund_order_use_case,
    process_follow_up_tasks_use_case,
    send_order_notifications_use_case,
    send_transfer_notifications_use_case,
    create_order_token_use_case,
    get_customer_tickets_use_case,
]
