"""init_db_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Schema:
- customers: buyers and transferees, unique by e-mail
- events / products / promos: catalog (written by the admin tooling)
- orders / order_items: paid orders and transfer children
- transactions: processor sale / refund / void records
- guests: one row per admission, ticket_seed is the QR credential
- follow_up_tasks: guest fan-out and inventory roll-over outbox
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            'created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False
        ),
        sa.Column(
            'updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False
        ),
    ]


def upgrade() -> None:
    """Create all tables with final schema."""

    # ========== Catalog ==========

    op.create_table(
        'customers',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=255), nullable=False),
        sa.Column('last_name', sa.String(length=255), nullable=False),
        sa.Column('meta', JSONB, nullable=False, server_default=sa.text("'{}'::jsonb")),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_customers_email'), 'customers', ['email'], unique=True)

    op.create_table(
        'events',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('opening_sales', sa.DateTime(timezone=True), nullable=True),
        sa.Column('max_capacity', sa.Integer(), nullable=True),
        sa.Column('sales_enabled', sa.Boolean(), nullable=False),
        sa.Column('current_ticket_product_id', UUID(as_uuid=True), nullable=True),
        sa.Column('meta', JSONB, nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'products',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('max_quantity', sa.Integer(), nullable=True),
        sa.Column('event_id', UUID(as_uuid=True), nullable=True),
        sa.Column('admission_tier', sa.String(length=20), nullable=True),
        sa.Column('promo', sa.Boolean(), nullable=False),
        sa.Column('target_product_id', UUID(as_uuid=True), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('meta', JSONB, nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.ForeignKeyConstraint(['event_id'], ['events.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_products_event_id'), 'products', ['event_id'], unique=False)

    op.create_table(
        'promos',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('product_id', UUID(as_uuid=True), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=True),
        sa.Column('percent_discount', sa.Numeric(5, 2), nullable=True),
        sa.Column('flat_discount', sa.Numeric(10, 2), nullable=True),
        sa.Column('product_quantity', sa.Integer(), nullable=True),
        sa.Column('max_uses', sa.Integer(), nullable=True),
        sa.Column('recipient_name', sa.String(length=255), nullable=True),
        sa.Column('created_by', sa.String(length=255), nullable=True),
        sa.Column('meta', JSONB, nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.CheckConstraint(
            'num_nonnulls(price, percent_discount, flat_discount) <= 1',
            name='promos_single_pricing_rule',
        ),
        sa.ForeignKeyConstraint(['product_id'], ['products.id']),
        sa.PrimaryKeyConstraint('id'),
    )

    # ========== Orders ==========

    op.create_table(
        'orders',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('customer_id', UUID(as_uuid=True), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('promo_id', UUID(as_uuid=True), nullable=True),
        sa.Column('parent_order_id', UUID(as_uuid=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id']),
        sa.ForeignKeyConstraint(['promo_id'], ['promos.id']),
        sa.ForeignKeyConstraint(['parent_order_id'], ['orders.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_orders_customer_id'), 'orders', ['customer_id'], unique=False)
    op.create_index(op.f('ix_orders_promo_id'), 'orders', ['promo_id'], unique=False)
    op.create_index(
        op.f('ix_orders_parent_order_id'), 'orders', ['parent_order_id'], unique=False
    )

    op.create_table(
        'order_items',
        sa.Column('order_id', UUID(as_uuid=True), nullable=False),
        sa.Column('product_id', UUID(as_uuid=True), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id']),
        sa.ForeignKeyConstraint(['product_id'], ['products.id']),
        sa.PrimaryKeyConstraint('order_id', 'product_id'),
    )
    op.create_index(
        op.f('ix_order_items_product_id'), 'order_items', ['product_id'], unique=False
    )

    op.create_table(
        'transactions',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('order_id', UUID(as_uuid=True), nullable=False),
        sa.Column('processor', sa.String(length=50), nullable=False),
        sa.Column('processor_transaction_id', sa.String(length=255), nullable=False),
        sa.Column('processor_created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('type', sa.String(length=10), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('parent_transaction_id', UUID(as_uuid=True), nullable=True),
        sa.Column(
            'created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False
        ),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id']),
        sa.ForeignKeyConstraint(['parent_transaction_id'], ['transactions.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_transactions_order_id'), 'transactions', ['order_id'], unique=False)
    op.create_index(
        'uq_transactions_one_sale_per_order',
        'transactions',
        ['order_id'],
        unique=True,
        postgresql_where=sa.text("type = 'sale'"),
    )
    op.create_index(
        'uq_transactions_one_reversal_per_sale',
        'transactions',
        ['parent_transaction_id'],
        unique=True,
        postgresql_where=sa.text('parent_transaction_id IS NOT NULL'),
    )

    # ========== Guests ==========

    op.create_table(
        'guests',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('first_name', sa.String(length=255), nullable=False),
        sa.Column('last_name', sa.String(length=255), nullable=False),
        sa.Column('admission_tier', sa.String(length=20), nullable=False),
        sa.Column('order_id', UUID(as_uuid=True), nullable=True),
        sa.Column('event_id', UUID(as_uuid=True), nullable=False),
        sa.Column('created_by', sa.String(length=255), nullable=True),
        sa.Column('updated_by', sa.String(length=255), nullable=True),
        sa.Column('created_reason', sa.String(length=20), nullable=False),
        sa.Column('ticket_seed', sa.String(length=64), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('check_in_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('meta', JSONB, nullable=False, server_default=sa.text("'{}'::jsonb")),
        *_timestamps(),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id']),
        sa.ForeignKeyConstraint(['event_id'], ['events.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('ticket_seed'),
    )
    op.create_index(op.f('ix_guests_order_id'), 'guests', ['order_id'], unique=False)
    op.create_index(op.f('ix_guests_event_id'), 'guests', ['event_id'], unique=False)
    op.create_index(op.f('ix_guests_status'), 'guests', ['status'], unique=False)

    # ========== Outbox ==========

    op.create_table(
        'follow_up_tasks',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('order_id', UUID(as_uuid=True), nullable=False),
        sa.Column('kind', sa.String(length=40), nullable=False),
        sa.Column('payload', JSONB, nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('attempts', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('last_error', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        op.f('ix_follow_up_tasks_order_id'), 'follow_up_tasks', ['order_id'], unique=False
    )
    op.create_index(
        op.f('ix_follow_up_tasks_status'), 'follow_up_tasks', ['status'], unique=False
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('follow_up_tasks')
    op.drop_table('guests')
    op.drop_table('transactions')
    op.drop_table('order_items')
    op.drop_table('orders')
    op.drop_table('promos')
    op.drop_table('products')
    op.drop_table('events')
    op.drop_table('customers')
