"""create_roomierules_schema

Revision ID: 3f1c9a2b7d10
Revises:
Create Date: 2026-10-18 10:12:41.518203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a2b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create the RoomieRules schema.

    Creates:
    - users (house_id FK added last, users and houses reference each other)
    - houses with unique house_code
    - bills, bill_payments, house_rules with cascading FKs to their owner
    """
    # 1. users without the house FK
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('role', sa.String(length=8), nullable=False),
        sa.Column('house_id', sa.Integer(), nullable=True),
        sa.Column('bank_account', sa.String(length=50), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_house_id', 'users', ['house_id'])
    op.create_index('ix_users_created_at', 'users', ['created_at'])

    # 2. houses
    op.create_table(
        'houses',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('house_code', sa.String(length=10), nullable=False),
        sa.Column('host_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['host_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_houses_house_code', 'houses', ['house_code'], unique=True)
    op.create_index('ix_houses_created_at', 'houses', ['created_at'])

    # 3. close the users -> houses cycle
    with op.batch_alter_table('users') as batch_op:
        batch_op.create_foreign_key('fk_users_house_id', 'houses', ['house_id'], ['id'])

    # 4. bills
    op.create_table(
        'bills',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('type', sa.String(length=7), nullable=False),
        sa.Column('house_id', sa.Integer(), nullable=False),
        sa.Column('created_by', sa.Integer(), nullable=False),
        sa.Column('split_amount', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=6), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['house_id'], ['houses.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['created_by'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_bills_house_id', 'bills', ['house_id'])
    op.create_index('ix_bills_created_at', 'bills', ['created_at'])
    op.create_index('ix_bills_house_created', 'bills', ['house_id', 'created_at'])

    # 5. bill_payments
    op.create_table(
        'bill_payments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('bill_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('amount_owed', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('receipt_url', sa.String(length=500), nullable=True),
        sa.Column('status', sa.String(length=7), nullable=False),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['bill_id'], ['bills.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_bill_payments_bill_id', 'bill_payments', ['bill_id'])
    op.create_index('ix_bill_payments_user_id', 'bill_payments', ['user_id'])
    op.create_index('ix_bill_payments_created_at', 'bill_payments', ['created_at'])

    # 6. house_rules
    op.create_table(
        'house_rules',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('house_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['house_id'], ['houses.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['created_by'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_house_rules_house_id', 'house_rules', ['house_id'])
    op.create_index('ix_house_rules_created_at', 'house_rules', ['created_at'])


def downgrade() -> None:
    """Drop all RoomieRules tables."""
    op.drop_table('house_rules')
    op.drop_table('bill_payments')
    op.drop_table('bills')
    with op.batch_alter_table('users') as batch_op:
        batch_op.drop_constraint('fk_users_house_id', type_='foreignkey')
    op.drop_table('houses')
    op.drop_table('users')
