"""Initial storefront schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create catalog, cart, checkout, order and content tables"""

    # Profiles and notifications
    op.create_table('profiles',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('display_name', sa.String(), nullable=True),
        sa.Column('avatar_url', sa.String(), nullable=True),
        sa.Column('role', sa.String(), server_default='member', nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_profiles_email', 'profiles', ['email'], unique=True)
    op.create_index('ix_profiles_role', 'profiles', ['role'])

    op.create_table('notifications',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('receiver_id', sa.Uuid(), nullable=True),
        sa.Column('target_role', sa.String(), nullable=True),
        sa.Column('sender_id', sa.Uuid(), nullable=True),
        sa.Column('link', sa.String(), nullable=True),
        sa.Column('is_read', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['receiver_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['sender_id'], ['profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_notifications_receiver_id', 'notifications', ['receiver_id'])
    op.create_index('ix_notifications_created_at', 'notifications', ['created_at'])

    op.create_table('notification_reads',
        sa.Column('notification_id', sa.Uuid(), nullable=False),
        sa.Column('profile_id', sa.Uuid(), nullable=False),
        sa.Column('read_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['notification_id'], ['notifications.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('notification_id', 'profile_id'),
    )
    op.create_index('ix_notification_reads_profile_id', 'notification_reads', ['profile_id'])

    # Catalog
    op.create_table('categories',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('parent_id', sa.Uuid(), nullable=True),
        sa.Column('position', sa.Integer(), server_default='0', nullable=False),
        sa.Column('sort_order', sa.Integer(), server_default='0', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['parent_id'], ['categories.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_categories_slug', 'categories', ['slug'], unique=True)
    op.create_index('ix_categories_parent_id', 'categories', ['parent_id'])

    op.create_table('collections',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('position', sa.Integer(), server_default='0', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_collections_slug', 'collections', ['slug'], unique=True)

    op.create_table('tags',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tags_slug', 'tags', ['slug'], unique=True)

    op.create_table('products',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price_cents', sa.Integer(), server_default='0', nullable=False),
        sa.Column('compare_at_price_cents', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(), server_default='draft', nullable=False),
        sa.Column('featured', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('material', sa.String(), nullable=True),
        sa.Column('made_in', sa.String(), nullable=True),
        sa.Column('care_instructions', sa.Text(), nullable=True),
        sa.Column('seo_title', sa.String(), nullable=True),
        sa.Column('seo_description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_products_slug', 'products', ['slug'], unique=True)
    op.create_index('ix_products_status', 'products', ['status'])
    op.create_index('ix_products_created_at', 'products', ['created_at'])

    op.create_table('product_images',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('product_id', sa.Uuid(), nullable=False),
        sa.Column('bucket_name', sa.String(), nullable=False),
        sa.Column('object_path', sa.String(), nullable=False),
        sa.Column('alt_text', sa.String(), nullable=True),
        sa.Column('position', sa.Integer(), server_default='0', nullable=False),
        sa.Column('sort_order', sa.Integer(), server_default='0', nullable=False),
        sa.Column('is_primary', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('width', sa.Integer(), nullable=True),
        sa.Column('height', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_product_images_product_id', 'product_images', ['product_id'])

    op.create_table('product_variants',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('product_id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('sku', sa.String(), nullable=True),
        sa.Column('price_cents', sa.Integer(), server_default='0', nullable=False),
        sa.Column('compare_at_price_cents', sa.Integer(), nullable=True),
        sa.Column('stock_quantity', sa.Integer(), server_default='0', nullable=False),
        sa.Column('track_inventory', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('allow_backorder', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('low_stock_threshold', sa.Integer(), server_default='5', nullable=False),
        sa.Column('weight_grams', sa.Integer(), nullable=True),
        sa.Column('options', sa.JSON(), nullable=False),
        sa.Column('position', sa.Integer(), server_default='0', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('sku'),
    )
    op.create_index('ix_product_variants_product_id', 'product_variants', ['product_id'])

    op.create_table('inventory_movements',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('variant_id', sa.Uuid(), nullable=False),
        sa.Column('movement_type', sa.String(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('stock_before', sa.Integer(), nullable=False),
        sa.Column('stock_after', sa.Integer(), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('reference', sa.String(), nullable=True),
        sa.Column('created_by', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['variant_id'], ['product_variants.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['created_by'], ['profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_inventory_movements_variant_id', 'inventory_movements', ['variant_id'])
    op.create_index('ix_inventory_movements_created_at', 'inventory_movements', ['created_at'])

    for table, column, target in (
        ('product_categories', 'category_id', 'categories'),
        ('product_collections', 'collection_id', 'collections'),
        ('product_tags', 'tag_id', 'tags'),
    ):
        op.create_table(table,
            sa.Column('product_id', sa.Uuid(), nullable=False),
            sa.Column(column, sa.Uuid(), nullable=False),
            sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint([column], [f'{target}.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('product_id', column),
        )

    # Carts
    op.create_table('carts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('profile_id', sa.Uuid(), nullable=True),
        sa.Column('session_id', sa.String(), nullable=True),
        sa.Column('status', sa.String(), server_default='active', nullable=False),
        sa.Column('share_token', sa.String(), nullable=True),
        sa.Column('is_shared', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('share_name', sa.String(), nullable=True),
        sa.Column('share_message', sa.Text(), nullable=True),
        sa.Column('share_expires_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('converted_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_carts_profile_id', 'carts', ['profile_id'])
    op.create_index('ix_carts_session_id', 'carts', ['session_id'])
    op.create_index('ix_carts_status', 'carts', ['status'])
    op.create_index('ix_carts_share_token', 'carts', ['share_token'], unique=True)

    op.create_table('cart_items',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('cart_id', sa.Uuid(), nullable=False),
        sa.Column('variant_id', sa.Uuid(), nullable=False),
        sa.Column('quantity', sa.Integer(), server_default='1', nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['cart_id'], ['carts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['variant_id'], ['product_variants.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_cart_items_cart_id', 'cart_items', ['cart_id'])

    op.create_table('saved_carts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('profile_id', sa.Uuid(), nullable=True),
        sa.Column('session_id', sa.String(), nullable=True),
        sa.Column('trigger', sa.String(), nullable=False),
        sa.Column('label', sa.String(), nullable=True),
        sa.Column('source_share_token', sa.String(), nullable=True),
        sa.Column('source_share_name', sa.String(), nullable=True),
        sa.Column('source_cart_id', sa.Uuid(), nullable=True),
        sa.Column('items', sa.JSON(), nullable=False),
        sa.Column('item_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('subtotal_cents', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['source_cart_id'], ['carts.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_saved_carts_profile_id', 'saved_carts', ['profile_id'])
    op.create_index('ix_saved_carts_session_id', 'saved_carts', ['session_id'])
    op.create_index('ix_saved_carts_created_at', 'saved_carts', ['created_at'])

    # Checkout configuration
    op.create_table('tax_rates',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('state', sa.String(length=2), nullable=False),
        sa.Column('rate', sa.Numeric(6, 5), server_default='0', nullable=False),
        sa.Column('type', sa.String(), server_default='state', nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('applies_to_shipping', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tax_rates_state', 'tax_rates', ['state'])

    op.create_table('promo_codes',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('code', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('discount_type', sa.String(), nullable=False),
        sa.Column('discount_value', sa.Integer(), server_default='0', nullable=False),
        sa.Column('min_subtotal_cents', sa.Integer(), nullable=True),
        sa.Column('max_discount_cents', sa.Integer(), nullable=True),
        sa.Column('starts_at', sa.DateTime(), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
        sa.Column('usage_limit', sa.Integer(), nullable=True),
        sa.Column('usage_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('per_customer_limit', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_promo_codes_code', 'promo_codes', ['code'], unique=True)

    op.create_table('shipping_rates',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('carrier', sa.String(), server_default='USPS', nullable=True),
        sa.Column('price_cents', sa.Integer(), server_default='0', nullable=False),
        sa.Column('min_subtotal_cents', sa.Integer(), nullable=True),
        sa.Column('max_subtotal_cents', sa.Integer(), nullable=True),
        sa.Column('min_delivery_days', sa.Integer(), nullable=True),
        sa.Column('max_delivery_days', sa.Integer(), nullable=True),
        sa.Column('position', sa.Integer(), server_default='0', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('shipping_boxes',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('length_in', sa.Numeric(6, 2), nullable=False),
        sa.Column('width_in', sa.Numeric(6, 2), nullable=False),
        sa.Column('height_in', sa.Numeric(6, 2), nullable=False),
        sa.Column('weight_oz', sa.Numeric(6, 2), nullable=True),
        sa.Column('is_default', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    # Orders
    op.create_table('orders',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('order_number', sa.String(), nullable=False),
        sa.Column('profile_id', sa.Uuid(), nullable=True),
        sa.Column('guest_key', sa.String(), nullable=True),
        sa.Column('cart_id', sa.Uuid(), nullable=True),
        sa.Column('source', sa.String(), server_default='web', nullable=False),
        sa.Column('pos_staff_id', sa.Uuid(), nullable=True),
        sa.Column('status', sa.String(), server_default='pending', nullable=False),
        sa.Column('payment_status', sa.String(), server_default='pending', nullable=False),
        sa.Column('checkout_step', sa.String(), nullable=True),
        sa.Column('subtotal_cents', sa.Integer(), nullable=True),
        sa.Column('discount_cents', sa.Integer(), nullable=True),
        sa.Column('shipping_cents', sa.Integer(), nullable=True),
        sa.Column('tax_cents', sa.Integer(), nullable=True),
        sa.Column('total_cents', sa.Integer(), server_default='0', nullable=False),
        sa.Column('currency', sa.String(), server_default='USD', nullable=False),
        sa.Column('promo_code', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('customer_first_name', sa.String(), nullable=True),
        sa.Column('customer_last_name', sa.String(), nullable=True),
        sa.Column('shipping_address', sa.JSON(), nullable=True),
        sa.Column('billing_address', sa.JSON(), nullable=True),
        sa.Column('customer_notes', sa.Text(), nullable=True),
        sa.Column('internal_notes', sa.Text(), nullable=True),
        sa.Column('customer_ip', sa.String(), nullable=True),
        sa.Column('user_agent', sa.String(), nullable=True),
        sa.Column('shipping_rate_id', sa.String(), nullable=True),
        sa.Column('shipping_method_name', sa.String(), nullable=True),
        sa.Column('tracking_number', sa.String(), nullable=True),
        sa.Column('tracking_url', sa.String(), nullable=True),
        sa.Column('label_pdf_path', sa.String(), nullable=True),
        sa.Column('label_postage_cents', sa.Integer(), nullable=True),
        sa.Column('stripe_payment_intent_id', sa.String(), nullable=True),
        sa.Column('stripe_client_secret', sa.String(), nullable=True),
        sa.Column('stripe_charge_id', sa.String(), nullable=True),
        sa.Column('payment_method_id', sa.String(), nullable=True),
        sa.Column('payment_method_type', sa.String(), nullable=True),
        sa.Column('card_brand', sa.String(), nullable=True),
        sa.Column('card_last4', sa.String(), nullable=True),
        sa.Column('card_exp_month', sa.Integer(), nullable=True),
        sa.Column('card_exp_year', sa.Integer(), nullable=True),
        sa.Column('payment_error_code', sa.String(), nullable=True),
        sa.Column('payment_error_message', sa.Text(), nullable=True),
        sa.Column('requires_action', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('risk_score', sa.Integer(), nullable=True),
        sa.Column('risk_level', sa.String(), nullable=True),
        sa.Column('billing_details', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('payment_succeeded_at', sa.DateTime(), nullable=True),
        sa.Column('payment_failed_at', sa.DateTime(), nullable=True),
        sa.Column('fulfilled_at', sa.DateTime(), nullable=True),
        sa.Column('refunded_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['pos_staff_id'], ['profiles.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['cart_id'], ['carts.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_orders_order_number', 'orders', ['order_number'], unique=True)
    op.create_index('ix_orders_profile_id', 'orders', ['profile_id'])
    op.create_index('ix_orders_guest_key', 'orders', ['guest_key'])
    op.create_index('ix_orders_status', 'orders', ['status'])
    op.create_index('ix_orders_payment_status', 'orders', ['payment_status'])
    op.create_index('ix_orders_email', 'orders', ['email'])
    op.create_index('ix_orders_created_at', 'orders', ['created_at'])
    op.create_index('ix_orders_stripe_payment_intent_id', 'orders', ['stripe_payment_intent_id'], unique=True)

    op.create_table('order_items',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('order_id', sa.Uuid(), nullable=False),
        sa.Column('product_id', sa.Uuid(), nullable=True),
        sa.Column('variant_id', sa.Uuid(), nullable=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('variant_title', sa.String(), nullable=True),
        sa.Column('sku', sa.String(), nullable=True),
        sa.Column('quantity', sa.Integer(), server_default='1', nullable=False),
        sa.Column('price_cents', sa.Integer(), server_default='0', nullable=False),
        sa.Column('product_snapshot', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['variant_id'], ['product_variants.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_order_items_order_id', 'order_items', ['order_id'])

    op.create_table('fulfillments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('order_id', sa.Uuid(), nullable=False),
        sa.Column('status', sa.String(), server_default='fulfilled', nullable=False),
        sa.Column('tracking_number', sa.String(), nullable=True),
        sa.Column('tracking_url', sa.String(), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('fulfilled_by', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['fulfilled_by'], ['profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_fulfillments_order_id', 'fulfillments', ['order_id'])

    # Content
    op.create_table('landing_sections',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('config', sa.JSON(), nullable=True),
        sa.Column('position', sa.Integer(), server_default='0', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('hero_slides',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(), nullable=True),
        sa.Column('subtitle', sa.String(), nullable=True),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('image_path', sa.String(), nullable=True),
        sa.Column('cta_label', sa.String(), nullable=True),
        sa.Column('cta_href', sa.String(), nullable=True),
        sa.Column('position', sa.Integer(), server_default='0', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('static_pages',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('seo_title', sa.String(), nullable=True),
        sa.Column('seo_description', sa.Text(), nullable=True),
        sa.Column('is_published', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_static_pages_slug', 'static_pages', ['slug'], unique=True)


def downgrade() -> None:
    """Drop all tables"""
    for table in (
        'static_pages', 'hero_slides', 'landing_sections', 'fulfillments', 'order_items', 'orders',
        'shipping_boxes', 'shipping_rates', 'promo_codes', 'tax_rates',
        'saved_carts', 'cart_items', 'carts', 'product_tags', 'product_collections', 'product_categories',
        'inventory_movements', 'product_variants', 'product_images', 'products', 'tags', 'collections', 'categories',
        'notification_reads', 'notifications', 'profiles',
    ):
        op.drop_table(table)
