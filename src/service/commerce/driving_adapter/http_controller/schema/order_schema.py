from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from src.service.commerce.domain.enum.order_status import OrderStatus
from src.service.commerce.domain.enum.payment_enum import TransactionType


class CartLineRequest(BaseModel):
    product_id: UUID
    quantity: int


class CustomerRequest(BaseModel):
    # Optional so that missing fields surface as "Invalid payment parameters"
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None


class OrderCreateRequest(BaseModel):
    payment_credential: Optional[str] = None
    cart: List[CartLineRequest] = []
    customer: Optional[CustomerRequest] = None
    promo_id: Optional[UUID] = None
    marketing_opt_in: bool = False

    class Config:
        json_schema_extra = {
            'example': {
                'payment_credential': 'pm_card_visa',
                'cart': [{'product_id': '01936d8f-5e73-7c4e-a9c5-123456789abc', 'quantity': 2}],
                'customer': {'first_name': 'Ada', 'last_name': 'Lovelace', 'email': 'ada@example.com'},
                'promo_id': None,
                'marketing_opt_in': False,
            }
        }


class OrderCreateResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'confirmation_id': 'pi_3PqL2x2eZvKYlo2C1x9s7a5B',
                'order_id': '01936d8f-5e73-7c4e-a9c5-123456789abc',  # UUID7
                'token': 'eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...',
            }
        },
    }

    confirmation_id: str
    order_id: UUID
    token: str


class OrderItemResponse(BaseModel):
    product_id: UUID
    quantity: int


class TransactionResponse(BaseModel):
    id: UUID
    processor: str
    processor_transaction_id: str
    type: TransactionType
    amount: Decimal
    parent_transaction_id: Optional[UUID] = None
    created_at: Optional[datetime] = None


class OrderResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'id': '01936d8f-5e73-7c4e-a9c5-123456789abc',
                'customer_id': '01936d8f-4b21-7a10-8c3e-0f1e2d3c4b5a',
                'amount': '100.00',
                'status': 'complete',
                'promo_id': None,
                'parent_order_id': None,
                'items': [{'product_id': '01936d8f-5e73-7c4e-a9c5-000000000001', 'quantity': 2}],
                'created_at': '2025-01-10T10:30:00Z',
            }
        },
    }

    id: UUID
    customer_id: UUID
    amount: Decimal
    status: OrderStatus
    promo_id: Optional[UUID] = None
    parent_order_id: Optional[UUID] = None
    items: List[OrderItemResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderDetailResponse(OrderResponse):
    transactions: List[TransactionResponse] = []


class TransferRequest(BaseModel):
    transferee: Optional[CustomerRequest] = None
    guest_ids: List[UUID] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            'example': {
                'transferee': {
                    'first_name': 'Grace',
                    'last_name': 'Hopper',
                    'email': 'grace@example.com',
                },
                'guest_ids': ['01936d8f-5e73-7c4e-a9c5-123456789abc'],
            }
        }


class TransferResponse(BaseModel):
    order_id: UUID
    parent_order_id: UUID
    transferee_email: str
    guest_count: int


class OrderTokenResponse(BaseModel):
    token: str
