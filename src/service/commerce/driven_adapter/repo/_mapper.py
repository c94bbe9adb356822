"""Model → entity mapping shared by the command and query repositories"""

from src.service.commerce.domain.entity.customer_entity import Customer
from src.service.commerce.domain.entity.event_entity import Event
from src.service.commerce.domain.entity.guest_entity import Guest
from src.service.commerce.domain.entity.order_entity import Order, OrderItem
from src.service.commerce.domain.entity.product_entity import Product
from src.service.commerce.domain.entity.transaction_entity import Transaction
from src.service.commerce.domain.enum.catalog_enum import EventStatus, ProductStatus, ProductType
from src.service.commerce.domain.enum.guest_enum import AdmissionTier, CreatedReason, GuestStatus
from src.service.commerce.domain.enum.order_status import OrderStatus
from src.service.commerce.domain.enum.payment_enum import TransactionType
from src.service.commerce.driven_adapter.model.customer_model import CustomerModel
from src.service.commerce.driven_adapter.model.event_model import EventModel
from src.service.commerce.driven_adapter.model.guest_model import GuestModel
from src.service.commerce.driven_adapter.model.order_model import OrderItemModel, OrderModel
from src.service.commerce.driven_adapter.model.product_model import ProductModel
from src.service.commerce.driven_adapter.model.transaction_model import TransactionModel


def customer_to_entity(db_customer: CustomerModel) -> Customer:
    return Customer(
        id=db_customer.id,
        first_name=db_customer.first_name,
        last_name=db_customer.last_name,
        email=db_customer.email,
        created_at=db_customer.created_at,
        updated_at=db_customer.updated_at,
        meta=db_customer.meta or {},
    )


def product_to_entity(db_product: ProductModel) -> Product:
    return Product(
        id=db_product.id,
        type=ProductType(db_product.type),
        name=db_product.name,
        price=db_product.price,
        event_id=db_product.event_id,
        admission_tier=AdmissionTier(db_product.admission_tier)
        if db_product.admission_tier
        else None,
        max_quantity=db_product.max_quantity,
        promo=db_product.promo,
        target_product_id=db_product.target_product_id,
        status=ProductStatus(db_product.status),
        description=db_product.description or '',
        meta=db_product.meta or {},
    )


def event_to_entity(db_event: EventModel) -> Event:
    return Event(
        id=db_event.id,
        name=db_event.name,
        date=db_event.date,
        status=EventStatus(db_event.status),
        opening_sales=db_event.opening_sales,
        max_capacity=db_event.max_capacity,
        sales_enabled=db_event.sales_enabled,
        current_ticket_product_id=db_event.current_ticket_product_id,
        meta=db_event.meta or {},
    )


def order_to_entity(db_order: OrderModel, items: list[OrderItemModel]) -> Order:
    return Order(
        id=db_order.id,
        customer_id=db_order.customer_id,
        amount=db_order.amount,
        status=OrderStatus(db_order.status),
        promo_id=db_order.promo_id,
        parent_order_id=db_order.parent_order_id,
        items=[
            OrderItem(order_id=item.order_id, product_id=item.product_id, quantity=item.quantity)
            for item in items
        ],
        created_at=db_order.created_at,
        updated_at=db_order.updated_at,
    )


def transaction_to_entity(db_transaction: TransactionModel) -> Transaction:
    return Transaction(
        id=db_transaction.id,
        order_id=db_transaction.order_id,
        processor=db_transaction.processor,
        processor_transaction_id=db_transaction.processor_transaction_id,
        processor_created_at=db_transaction.processor_created_at,
        type=TransactionType(db_transaction.type),
        amount=db_transaction.amount,
        parent_transaction_id=db_transaction.parent_transaction_id,
        created_at=db_transaction.created_at,
    )


def guest_to_entity(db_guest: GuestModel) -> Guest:
    return Guest(
        id=db_guest.id,
        first_name=db_guest.first_name,
        last_name=db_guest.last_name,
        admission_tier=AdmissionTier(db_guest.admission_tier),
        event_id=db_guest.event_id,
        created_reason=CreatedReason(db_guest.created_reason),
        ticket_seed=db_guest.ticket_seed,
        order_id=db_guest.order_id,
        created_by=db_guest.created_by,
        updated_by=db_guest.updated_by,
        status=GuestStatus(db_guest.status),
        check_in_time=db_guest.check_in_time,
        meta=db_guest.meta or {},
        created_at=db_guest.created_at,
        updated_at=db_guest.updated_at,
    )
