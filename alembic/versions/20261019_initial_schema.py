"""initial schema

Revision ID: 20261019_initial
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '20261019_initial'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def table_exists(table_name):
    """Tables may already exist when the app's startup create_all ran first"""
    bind = op.get_bind()
    return table_name in inspect(bind).get_table_names()


def upgrade():
    if not table_exists('orders'):
        op.create_table(
            'orders',
            sa.Column('id', sa.String(), primary_key=True),
            sa.Column('user_email', sa.String(), nullable=False),
            sa.Column('user_name', sa.String(), nullable=False),
            sa.Column('user_id', sa.String(), nullable=False),
            sa.Column('food_name', sa.String(), nullable=False),
            sa.Column('category', sa.String(), nullable=False),
            sa.Column('type', sa.String(20), nullable=False),
            sa.Column('quantity', sa.Integer(), nullable=False),
            sa.Column('price', sa.Float(), nullable=False),
            sa.Column('selected_size', sa.String(20), nullable=True),
            sa.Column('image', sa.String(), nullable=False),
            sa.Column('table_number', sa.Integer(), nullable=False),
            sa.Column('is_in_restaurant', sa.Boolean(), nullable=False),
            sa.Column('chair_indices', sa.JSON(), nullable=False),
            sa.Column('contact_number', sa.String(), nullable=False),
            sa.Column('delivery_address', sa.String(), nullable=False),
            sa.Column('delivery_latitude', sa.Float(), nullable=True),
            sa.Column('delivery_longitude', sa.Float(), nullable=True),
            sa.Column('status', sa.String(20), nullable=False),
            sa.Column('payment_status', sa.String(20), nullable=False),
            sa.Column('payment_method', sa.String(20), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
        )
        op.create_index('ix_orders_user_email', 'orders', ['user_email'])
        op.create_index('ix_orders_status', 'orders', ['status'])
        op.create_index('ix_orders_created_at', 'orders', ['created_at'])

    if not table_exists('foods'):
        op.create_table(
            'foods',
            sa.Column('id', sa.String(), primary_key=True),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('category', sa.String(), nullable=False),
            sa.Column('type', sa.String(20), nullable=False),
            sa.Column('price', sa.Float(), nullable=False),
            sa.Column('image', sa.String(), nullable=True),
            sa.Column('available', sa.Boolean(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
        )
        op.create_index('ix_foods_category', 'foods', ['category'])
        op.create_index('ix_foods_type', 'foods', ['type'])
        op.create_index('ix_foods_available', 'foods', ['available'])
        op.create_index('ix_foods_created_at', 'foods', ['created_at'])

    if not table_exists('offers'):
        op.create_table(
            'offers',
            sa.Column('id', sa.String(), primary_key=True),
            sa.Column('title', sa.String(), nullable=False),
            sa.Column('description', sa.Text(), nullable=False),
            sa.Column('image', sa.String(), nullable=True),
            sa.Column('active', sa.Boolean(), nullable=False),
            sa.Column('valid_from', sa.DateTime(), nullable=True),
            sa.Column('valid_until', sa.DateTime(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
        )
        op.create_index('ix_offers_active', 'offers', ['active'])
        op.create_index('ix_offers_valid_until', 'offers', ['valid_until'])

    if not table_exists('admins'):
        op.create_table(
            'admins',
            sa.Column('id', sa.String(), primary_key=True),
            sa.Column('email', sa.String(), nullable=False, unique=True),
            sa.Column('is_super_admin', sa.Boolean(), nullable=False),
            sa.Column('created_by', sa.String(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
        )

    if not table_exists('carts'):
        op.create_table(
            'carts',
            sa.Column('id', sa.String(), primary_key=True),
            sa.Column('user_email', sa.String(), nullable=False, unique=True),
            sa.Column('user_id', sa.String(), nullable=False),
            sa.Column('user_name', sa.String(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
        )

    if not table_exists('cart_items'):
        op.create_table(
            'cart_items',
            sa.Column('id', sa.String(), primary_key=True),
            sa.Column('cart_id', sa.String(), sa.ForeignKey('carts.id', ondelete='CASCADE'), nullable=False),
            sa.Column('position', sa.Integer(), nullable=False),
            sa.Column('food_id', sa.String(), nullable=False),
            sa.Column('food_name', sa.String(), nullable=False),
            sa.Column('category', sa.String(), nullable=False),
            sa.Column('type', sa.String(20), nullable=False),
            sa.Column('quantity', sa.Integer(), nullable=False),
            sa.Column('price', sa.Float(), nullable=False),
            sa.Column('image', sa.String(), nullable=False),
        )
        op.create_index('ix_cart_items_cart_id', 'cart_items', ['cart_id'])

    if not table_exists('push_subscriptions'):
        op.create_table(
            'push_subscriptions',
            sa.Column('id', sa.String(), primary_key=True),
            sa.Column('user_email', sa.String(), nullable=False),
            sa.Column('platform', sa.String(), nullable=False),
            sa.Column('subscription', sa.JSON(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.UniqueConstraint('user_email', 'platform', name='uq_push_subscriptions_email_platform'),
        )
        op.create_index('ix_push_subscriptions_user_email', 'push_subscriptions', ['user_email'])


def downgrade():
    op.drop_table('push_subscriptions')
    op.drop_table('cart_items')
    op.drop_table('carts')
    op.drop_table('admins')
    op.drop_table('offers')
    op.drop_table('foods')
    op.drop_table('orders')
