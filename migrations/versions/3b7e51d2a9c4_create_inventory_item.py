"""Create inventory_item table

Revision ID: 3b7e51d2a9c4
Revises:
Create Date: 2026-10-18 09:12:40.118204

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3b7e51d2a9c4'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'inventory_item',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('sku', sa.String(length=100), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('vendor', sa.String(length=255), nullable=True),
        sa.Column('quantity', sa.Float(), nullable=True),
        sa.Column('unit_price', sa.Float(), nullable=True),
        sa.Column('total_cost', sa.Float(), nullable=True),
        sa.Column('restaurant_id', sa.String(length=64), nullable=True),
        sa.Column('purchased_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('inventory_item', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_inventory_item_name'), ['name'], unique=False)
        batch_op.create_index(batch_op.f('ix_inventory_item_category'), ['category'], unique=False)
        batch_op.create_index(batch_op.f('ix_inventory_item_restaurant_id'), ['restaurant_id'], unique=False)


def downgrade():
    with op.batch_alter_table('inventory_item', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_inventory_item_restaurant_id'))
        batch_op.drop_index(batch_op.f('ix_inventory_item_category'))
        batch_op.drop_index(batch_op.f('ix_inventory_item_name'))

    op.drop_table('inventory_item')
