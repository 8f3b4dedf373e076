"""Initial staff, orders and kitchen roster tables

Revision ID: 0001_initial_orders_and_kitchen
Revises:
Create Date: 2025-09-02 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial_orders_and_kitchen'
down_revision = None
branch_labels = None
depends_on = None

ORDER_STATUS = ('waiting', 'completed')
ITEM_KIND = ('dish', 'drink')
ITEM_STATE = ('pending', 'assigned', 'preparing', 'ready')


def upgrade():
    op.create_table('roles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )
    op.create_index('ix_roles_id', 'roles', ['id'])

    op.create_table('staff_members',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('role_id', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['role_id'], ['roles.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username'),
        sa.UniqueConstraint('email'),
    )
    op.create_index('ix_staff_members_id', 'staff_members', ['id'])
    op.create_index('ix_staff_members_role_id', 'staff_members', ['role_id'])
    op.create_index('ix_staff_members_created_at', 'staff_members', ['created_at'])

    op.create_table('orders',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('code', sa.String(length=16), nullable=True),
        sa.Column('table_no', sa.Integer(), nullable=False),
        sa.Column('waiter_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.Enum(*ORDER_STATUS, name='order_status'), nullable=False),
        sa.Column('finished_at', sa.DateTime(), nullable=True),
        sa.Column('duration_sec', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['waiter_id'], ['staff_members.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_orders_id', 'orders', ['id'])
    op.create_index('ix_orders_code', 'orders', ['code'])
    op.create_index('ix_orders_table_no', 'orders', ['table_no'])
    op.create_index('ix_orders_waiter_id', 'orders', ['waiter_id'])
    op.create_index('ix_orders_status', 'orders', ['status'])
    op.create_index('ix_orders_created_at', 'orders', ['created_at'])

    op.create_table('order_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('kind', sa.Enum(*ITEM_KIND, name='order_item_kind'), nullable=False),
        sa.Column('state', sa.Enum(*ITEM_STATE, name='order_item_state'), nullable=False),
        sa.Column('cook_id', sa.Integer(), nullable=True),
        sa.Column('assigned_at', sa.DateTime(), nullable=True),
        sa.Column('finished_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id']),
        sa.ForeignKeyConstraint(['cook_id'], ['staff_members.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_order_items_id', 'order_items', ['id'])
    op.create_index('ix_order_items_order_id', 'order_items', ['order_id'])
    op.create_index('ix_order_items_created_at', 'order_items', ['created_at'])
    op.create_index('idx_order_item_pool', 'order_items', ['state', 'cook_id', 'kind', 'created_at'])
    op.create_index('idx_order_item_cook_state', 'order_items', ['cook_id', 'state'])

    op.create_table('kitchen_cooks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('cook_id', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('last_seen_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['cook_id'], ['staff_members.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('cook_id'),
    )
    op.create_index('ix_kitchen_cooks_id', 'kitchen_cooks', ['id'])
    op.create_index('ix_kitchen_cooks_is_active', 'kitchen_cooks', ['is_active'])
    op.create_index('ix_kitchen_cooks_created_at', 'kitchen_cooks', ['created_at'])


def downgrade():
    op.drop_table('kitchen_cooks')
    op.drop_table('order_items')
    op.drop_table('orders')
    op.drop_table('staff_members')
    op.drop_table('roles')
    sa.Enum(name='order_item_state').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='order_item_kind').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='order_status').drop(op.get_bind(), checkfirst=True)
