"""create products and cart_items tables

Revision ID: 0001_catalog_and_cart
Revises: 
Create Date: 2026-10-19 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

revision = '0001_catalog_and_cart'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('image_url', sa.String(length=255), nullable=True),
        sa.CheckConstraint('price >= 0', name='ck_products_price_nonneg'),
    )
    op.create_index('ix_products_id', 'products', ['id'])

    op.create_table(
        'cart_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('product_id', name='uq_cart_items_product'),
        sa.CheckConstraint('quantity > 0', name='ck_cart_items_quantity_pos'),
    )
    op.create_index('ix_cart_items_id', 'cart_items', ['id'])
    op.create_index('ix_cart_items_created', 'cart_items', ['created_at'])


def downgrade():
    op.drop_table('cart_items')
    op.drop_table('products')
