"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates the shop schema from scratch:
- product / product_image: catalog
- sales_outlet / product_stock: per-outlet stock by (product, size)
- order / order_item: orders and their lines
- user / session_token: accounts and bearer sessions
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # ============================================================================
    # Catalog
    # ============================================================================
    op.create_table(
        'product',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Integer(), nullable=False, server_default='0'),  # minor units
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name', name='uq_product_name'),
        sa.CheckConstraint('price >= 0', name='ck_product_price_non_negative'),
        sqlite_autoincrement=True
    )

    op.create_table(
        'product_image',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('image_path', sa.String(length=512), nullable=False),
        sa.ForeignKeyConstraint(['product_id'], ['product.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_product_image_product_id', 'product_image', ['product_id'])

    op.create_table(
        'sales_outlet',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('address', sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('address', name='uq_sales_outlet_address'),
        sqlite_autoincrement=True
    )

    # ============================================================================
    # product_stock: one row per (outlet, product, size)
    # ============================================================================
    # Zero is a valid amount; the CHECK is the last guard against overdraw.
    op.create_table(
        'product_stock',
        sa.Column('sales_outlet_id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('size', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False, server_default='0'),
        sa.ForeignKeyConstraint(['sales_outlet_id'], ['sales_outlet.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_id'], ['product.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('sales_outlet_id', 'product_id', 'size'),
        sa.CheckConstraint('amount >= 0', name='ck_product_stock_amount_non_negative'),
    )
    op.create_index('ix_product_stock_product', 'product_stock', ['product_id'])

    # ============================================================================
    # Users and sessions
    # ============================================================================
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('surname', sa.String(length=100), nullable=False, server_default=''),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=32), nullable=False, server_default='user'),
        sa.Column('phone', sa.String(length=32), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email', name='uq_user_email'),
        sqlite_autoincrement=True
    )

    op.create_table(
        'session_token',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('token_hash', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_used_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('user_agent', sa.String(length=255), nullable=True),
        sa.Column('ip_address', sa.String(length=64), nullable=True),
        sa.Column('is_revoked', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('revoked_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('revoked_reason', sa.String(length=255), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_session_token_user_id', 'session_token', ['user_id'])
    op.create_index('ix_session_token_token_hash', 'session_token', ['token_hash'], unique=True)

    # ============================================================================
    # Orders
    # ============================================================================
    op.create_table(
        'order',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('sales_outlet_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('status_name', sa.String(length=64), nullable=False, server_default='ordered'),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.ForeignKeyConstraint(['sales_outlet_id'], ['sales_outlet.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_order_user', 'order', ['user_id'])
    op.create_index('ix_order_sales_outlet', 'order', ['sales_outlet_id'])

    op.create_table(
        'order_item',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('size', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['order_id'], ['order.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_id'], ['product.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('amount > 0', name='ck_order_item_amount_positive'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_order_item_order', 'order_item', ['order_id'])
    op.create_index('ix_order_item_product_id', 'order_item', ['product_id'])


def downgrade():
    """Drop all tables (destructive operation)."""
    op.drop_table('order_item')
    op.drop_table('order')
    op.drop_table('session_token')
    op.drop_table('user')
    op.drop_table('product_stock')
    op.drop_table('sales_outlet')
    op.drop_table('product_image')
    op.drop_table('product')
