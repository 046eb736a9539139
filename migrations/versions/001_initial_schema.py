"""Initial schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

STATUS_LIST = (
    "'DRAFT', 'SUBMITTED', 'RECEIVED', 'INSPECTED', 'REPAIRING', "
    "'READY', 'SHIPPED', 'COMPLETED', 'CANCELLED', 'ON_HOLD'"
)


def upgrade() -> None:
    """Create initial database schema"""

    # Заказы
    op.create_table(
        'orders',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('salutation', sa.String(length=10), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('street', sa.String(length=200), nullable=False),
        sa.Column('house_number', sa.String(length=20), nullable=True),
        sa.Column('zip', sa.String(length=10), nullable=False),
        sa.Column('city', sa.String(length=100), nullable=False),
        sa.Column('country', sa.String(length=2), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('delivery_same', sa.Boolean(), nullable=False),
        sa.Column('delivery_salutation', sa.String(length=10), nullable=True),
        sa.Column('delivery_first_name', sa.String(length=100), nullable=True),
        sa.Column('delivery_last_name', sa.String(length=100), nullable=True),
        sa.Column('delivery_street', sa.String(length=200), nullable=True),
        sa.Column('delivery_house_number', sa.String(length=20), nullable=True),
        sa.Column('delivery_zip', sa.String(length=10), nullable=True),
        sa.Column('delivery_city', sa.String(length=100), nullable=True),
        sa.Column('delivery_country', sa.String(length=2), nullable=True),
        sa.Column('station_notes', sa.Text(), nullable=True),
        sa.Column('gdpr_accepted', sa.Boolean(), nullable=False),
        sa.Column('agb_accepted', sa.Boolean(), nullable=False),
        sa.Column('newsletter', sa.Boolean(), nullable=False),
        sa.Column('total_price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('pricing_ruleset', sa.String(length=50), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(f'status IN ({STATUS_LIST})', name='chk_orders_status'),
        sa.CheckConstraint('total_price >= 0', name='chk_orders_total_price'),
    )
    op.create_index('idx_orders_status', 'orders', ['status'], unique=False)
    op.create_index('idx_orders_email', 'orders', ['email'], unique=False)
    op.create_index('idx_orders_status_created', 'orders', ['status', 'created_at'], unique=False)

    # Позиции заказа
    op.create_table(
        'order_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_id', sa.Integer(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Numeric(precision=4, scale=1), nullable=False),
        sa.Column('manufacturer', sa.String(length=100), nullable=False),
        sa.Column('model', sa.String(length=200), nullable=False),
        sa.Column('color', sa.String(length=100), nullable=True),
        sa.Column('size', sa.String(length=10), nullable=False),
        sa.Column('sole', sa.String(length=50), nullable=True),
        sa.Column('edge_rubber', sa.String(length=20), nullable=True),
        sa.Column('closure', sa.Boolean(), nullable=False),
        sa.Column('disinfection', sa.Boolean(), nullable=False),
        sa.Column('trust_professionals', sa.Boolean(), nullable=False),
        sa.Column('additional_work', sa.Text(), nullable=True),
        sa.Column('internal_notes', sa.Text(), nullable=True),
        sa.Column('calculated_price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
        sa.CheckConstraint('quantity > 0 AND quantity <= 10', name='chk_order_items_quantity'),
        sa.CheckConstraint(
            "edge_rubber IS NULL OR edge_rubber IN ('YES', 'NO', 'DISCRETION')",
            name='chk_order_items_edge_rubber',
        ),
        sa.CheckConstraint('calculated_price >= 0', name='chk_order_items_price'),
    )
    op.create_index('idx_order_items_order', 'order_items', ['order_id', 'position'], unique=False)

    # История статусов
    op.create_table(
        'order_status_changes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_id', sa.Integer(), nullable=False),
        sa.Column('from_status', sa.String(length=20), nullable=True),
        sa.Column('to_status', sa.String(length=20), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('tracking_carrier', sa.String(length=50), nullable=True),
        sa.Column('tracking_number', sa.String(length=100), nullable=True),
        sa.Column('changed_by', sa.String(length=255), nullable=False),
        sa.Column('changed_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
        sa.CheckConstraint(
            "tracking_number IS NULL OR to_status = 'SHIPPED'",
            name='chk_status_changes_tracking',
        ),
    )
    op.create_index(
        'idx_status_changes_order', 'order_status_changes', ['order_id', 'changed_at'], unique=False
    )

    # История изменения полей
    op.create_table(
        'order_history',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_id', sa.Integer(), nullable=False),
        sa.Column('field', sa.String(length=100), nullable=False),
        sa.Column('old_value', sa.Text(), nullable=True),
        sa.Column('new_value', sa.Text(), nullable=True),
        sa.Column('changed_by', sa.String(length=255), nullable=False),
        sa.Column('changed_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
    )
    op.create_index('idx_order_history_order', 'order_history', ['order_id', 'changed_at'], unique=False)


def downgrade() -> None:
    """Drop all tables"""
    op.drop_index('idx_order_history_order', table_name='order_history')
    op.drop_table('order_history')
    op.drop_index('idx_status_changes_order', table_name='order_status_changes')
    op.drop_table('order_status_changes')
    op.drop_index('idx_order_items_order', table_name='order_items')
    op.drop_table('order_items')
    op.drop_index('idx_orders_status_created', table_name='orders')
    op.drop_index('idx_orders_email', table_name='orders')
    op.drop_index('idx_orders_status', table_name='orders')
    op.drop_table('orders')
