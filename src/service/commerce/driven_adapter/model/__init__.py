"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.commerce.driven_adapter.model.customer_model import CustomerModel
from src.service.commerce.driven_adapter.model.event_model import EventModel
from src.service.commerce.driven_adapter.model.follow_up_task_model import FollowUpTaskModel
from src.service.commerce.driven_adapter.model.guest_model import GuestModel
from src.service.commerce.driven_adapter.model.order_model import OrderItemModel, OrderModel
from src.service.commerce.driven_adapter.model.product_model import ProductModel
from src.service.commerce.driven_adapter.model.promo_model import PromoModel
from src.service.commerce.driven_adapter.model.transaction_model import TransactionModel

__all__ = [
    'CustomerModel',
    'EventModel',
    'FollowUpTaskModel',
    'GuestModel',
    'OrderItemModel',
    'OrderModel',
    'ProductModel',
    'PromoModel',
    'TransactionModel',
]
