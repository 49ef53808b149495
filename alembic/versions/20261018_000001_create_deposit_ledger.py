"""Create deposit ledger tables

Revision ID: 20261018_000001
Revises: 
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261018_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Ledger of balance movements; tx_hash is the crediting idempotency key
    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('amount', sa.DECIMAL(36, 18), nullable=False),
        sa.Column('type', sa.String(20), nullable=False, server_default='deposit'),
        sa.Column('status', sa.String(20), nullable=False, server_default='completed'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('tx_hash', sa.String(66), nullable=True),
        sa.Column('block_number', sa.BigInteger(), nullable=True),
        sa.Column('from_address', sa.String(42), nullable=True),
        sa.Column('amount_raw', sa.String(100), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('amount >= 0', name='check_transaction_amount_non_negative'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_transactions_user_id', 'transactions', ['user_id'])
    op.create_index('ix_transactions_tx_hash', 'transactions', ['tx_hash'], unique=True)
    op.create_index('idx_transactions_user_type', 'transactions', ['user_id', 'type'])

    # Per-user balances
    op.create_table(
        'user_balances',
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('balance', sa.DECIMAL(36, 18), nullable=False, server_default='0'),
        sa.Column('total_deposited', sa.DECIMAL(36, 18), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('balance >= 0', name='check_user_balance_non_negative'),
        sa.CheckConstraint('total_deposited >= 0', name='check_user_total_deposited_non_negative'),
        sa.PrimaryKeyConstraint('user_id')
    )


def downgrade() -> None:
    op.drop_table('user_balances')

    op.drop_index('idx_transactions_user_type', 'transactions')
    op.drop_index('ix_transactions_tx_hash', 'transactions')
    op.drop_index('ix_transactions_user_id', 'transactions')
    op.drop_table('transactions')
