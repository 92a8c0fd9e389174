"""create_marketplace_tables

Revision ID: 3f6c1a9d2b47
Revises:
Create Date: 2026-10-16 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f6c1a9d2b47'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

product_status = sa.Enum(
    'DRAFT', 'PENDING', 'APPROVED', 'REJECTED', 'ACTIVE', 'INACTIVE',
    name='marketplace_product_status_enum',
)
sourcing = sa.Enum('IN_HOUSE', 'OUTSOURCED', name='marketplace_sourcing_enum')
order_status = sa.Enum(
    'pending', 'processing', 'shipped', 'delivered', 'cancelled',
    name='marketplace_order_status_enum',
)
payment_status = sa.Enum(
    'pending', 'paid', 'failed', 'refunded', name='marketplace_payment_status_enum'
)
admin_role = sa.Enum(
    'super_admin', 'admin', 'moderator', 'support', name='marketplace_admin_role_enum'
)
admin_status = sa.Enum('active', 'inactive', name='marketplace_admin_status_enum')
notification_type = sa.Enum(
    'PRODUCT_APPROVED', 'PRODUCT_REJECTED', 'PRODUCT_CHANGES_REQUESTED',
    'ORDER_STATUS', 'ORDER_REFUNDED', 'VENDOR_VERIFICATION',
    name='marketplace_notification_type_enum',
)
audit_entity = sa.Enum(
    'product', 'order', 'admin_user', 'vendor', 'category',
    name='marketplace_audit_entity_enum',
)


def upgrade() -> None:
    """Upgrade schema - Add marketplace tables."""

    op.create_table(
        'marketplace_categories',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('slug', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('commission_rate', sa.Numeric(5, 2), server_default='10.00', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            'commission_rate >= 0 AND commission_rate <= 100',
            name='ck_category_commission_rate_range',
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug'),
    )

    op.create_table(
        'marketplace_vendor_profiles',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('business_name', sa.String(length=255), nullable=False),
        sa.Column('contact_name', sa.String(length=255), nullable=True),
        sa.Column('business_type', sa.String(length=100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('website', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('is_verified', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('verified_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_marketplace_vendor_profiles_user_id',
        'marketplace_vendor_profiles',
        ['user_id'],
        unique=True,
    )

    op.create_table(
        'marketplace_products',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('vendor_id', sa.Uuid(), nullable=False),
        sa.Column('category_id', sa.Uuid(), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('sku', sa.String(length=100), nullable=False),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('compare_price', sa.Numeric(12, 2), nullable=True),
        sa.Column('stock', sa.Integer(), server_default='0', nullable=False),
        sa.Column('sourcing', sourcing, nullable=False),
        sa.Column('status', product_status, server_default='PENDING', nullable=False),
        sa.Column('review_note', sa.Text(), nullable=True),
        sa.Column('reviewed_by', sa.String(length=255), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('price >= 0', name='ck_product_price_non_negative'),
        sa.CheckConstraint('stock >= 0', name='ck_product_stock_non_negative'),
        sa.ForeignKeyConstraint(
            ['vendor_id'], ['marketplace_vendor_profiles.id'], ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['category_id'], ['marketplace_categories.id'], ondelete='SET NULL'
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('sku'),
    )
    op.create_index(
        'ix_marketplace_products_vendor_id', 'marketplace_products', ['vendor_id']
    )
    op.create_index('ix_marketplace_products_status', 'marketplace_products', ['status'])
    op.create_index(
        'ix_marketplace_products_vendor_status',
        'marketplace_products',
        ['vendor_id', 'status'],
    )

    op.create_table(
        'marketplace_orders',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('order_number', sa.String(length=40), nullable=False),
        sa.Column('customer_id', sa.String(length=255), nullable=False),
        sa.Column('customer_name', sa.String(length=255), nullable=False),
        sa.Column('customer_email', sa.String(length=255), nullable=False),
        sa.Column('vendor_id', sa.Uuid(), nullable=False),
        sa.Column('total_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('status', order_status, server_default='pending', nullable=False),
        sa.Column('payment_status', payment_status, server_default='pending', nullable=False),
        sa.Column('shipping_address', sa.JSON(), nullable=True),
        sa.Column('tracking_number', sa.String(length=100), nullable=True),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        sa.Column('cancellation_reason', sa.Text(), nullable=True),
        sa.Column('shipped_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('delivered_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('refunded_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('total_amount >= 0', name='ck_order_total_non_negative'),
        sa.ForeignKeyConstraint(
            ['vendor_id'], ['marketplace_vendor_profiles.id'], ondelete='RESTRICT'
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_marketplace_orders_order_number',
        'marketplace_orders',
        ['order_number'],
        unique=True,
    )
    op.create_index('ix_marketplace_orders_customer_id', 'marketplace_orders', ['customer_id'])
    op.create_index('ix_marketplace_orders_vendor_id', 'marketplace_orders', ['vendor_id'])
    op.create_index('ix_marketplace_orders_status', 'marketplace_orders', ['status'])

    op.create_table(
        'marketplace_order_items',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('order_id', sa.Uuid(), nullable=False),
        sa.Column('product_id', sa.Uuid(), nullable=True),
        sa.Column('product_name', sa.String(length=255), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('line_total', sa.Numeric(12, 2), nullable=False),
        sa.CheckConstraint('quantity > 0', name='ck_order_item_quantity_positive'),
        sa.ForeignKeyConstraint(
            ['order_id'], ['marketplace_orders.id'], ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['product_id'], ['marketplace_products.id'], ondelete='SET NULL'
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_marketplace_order_items_order_id', 'marketplace_order_items', ['order_id']
    )

    op.create_table(
        'marketplace_admin_users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('code', sa.String(length=20), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('role', admin_role, nullable=False),
        sa.Column('status', admin_status, server_default='active', nullable=False),
        sa.Column('permissions', sa.JSON(), nullable=False),
        sa.Column('department', sa.String(length=100), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('location', sa.String(length=100), nullable=True),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code'),
        sa.UniqueConstraint('email'),
    )

    op.create_table(
        'marketplace_notifications',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('type', notification_type, nullable=False),
        sa.Column('is_read', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_marketplace_notifications_user_id', 'marketplace_notifications', ['user_id']
    )

    op.create_table(
        'marketplace_audit_logs',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('entity_type', audit_entity, nullable=False),
        sa.Column('entity_id', sa.Uuid(), nullable=False),
        sa.Column('action', sa.String(length=50), nullable=False),
        sa.Column('old_value', sa.JSON(), nullable=True),
        sa.Column('new_value', sa.JSON(), nullable=True),
        sa.Column('performed_by', sa.String(length=255), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_marketplace_audit_entity',
        'marketplace_audit_logs',
        ['entity_type', 'entity_id'],
    )


def downgrade() -> None:
    """Downgrade schema - Remove marketplace tables."""
    op.drop_index('ix_marketplace_audit_entity', table_name='marketplace_audit_logs')
    op.drop_table('marketplace_audit_logs')
    op.drop_index(
        'ix_marketplace_notifications_user_id', table_name='marketplace_notifications'
    )
    op.drop_table('marketplace_notifications')
    op.drop_table('marketplace_admin_users')
    op.drop_index(
        'ix_marketplace_order_items_order_id', table_name='marketplace_order_items'
    )
    op.drop_table('marketplace_order_items')
    op.drop_index('ix_marketplace_orders_status', table_name='marketplace_orders')
    op.drop_index('ix_marketplace_orders_vendor_id', table_name='marketplace_orders')
    op.drop_index('ix_marketplace_orders_customer_id', table_name='marketplace_orders')
    op.drop_index('ix_marketplace_orders_order_number', table_name='marketplace_orders')
    op.drop_table('marketplace_orders')
    op.drop_index(
        'ix_marketplace_products_vendor_status', table_name='marketplace_products'
    )
    op.drop_index('ix_marketplace_products_status', table_name='marketplace_products')
    op.drop_index('ix_marketplace_products_vendor_id', table_name='marketplace_products')
    op.drop_table('marketplace_products')
    op.drop_index(
        'ix_marketplace_vendor_profiles_user_id',
        table_name='marketplace_vendor_profiles',
    )
    op.drop_table('marketplace_vendor_profiles')
    op.drop_table('marketplace_categories')

    bind = op.get_bind()
    for enum_type in (
        audit_entity,
        notification_type,
        admin_status,
        admin_role,
        payment_status,
        order_status,
        product_status,
        sourcing,
    ):
        enum_type.drop(bind, checkfirst=True)
