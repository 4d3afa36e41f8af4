"""initial schema

Revision ID: 001
Revises: 
Create Date: 2026-10-19 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create trainer_accounts table
    op.create_table(
        'trainer_accounts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('trainer_id', sa.String(length=100), nullable=False),
        sa.Column('ledger_version', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_payout_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_trainer_accounts_id'), 'trainer_accounts', ['id'], unique=False)
    op.create_index(op.f('ix_trainer_accounts_trainer_id'), 'trainer_accounts', ['trainer_id'], unique=True)

    # Create transactions table
    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('trainer_id', sa.String(length=100), nullable=False),
        sa.Column('student_id', sa.String(length=100), nullable=False),
        sa.Column('order_id', sa.String(length=100), nullable=False),
        sa.Column('plan_name', sa.String(length=100), nullable=False),
        sa.Column('amount', sa.Numeric(precision=20, scale=2), nullable=False),
        sa.Column('commission', sa.Numeric(precision=20, scale=2), nullable=False),
        sa.Column('trainer_share', sa.Numeric(precision=20, scale=2), nullable=False),
        sa.Column('timestamp', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['trainer_id'], ['trainer_accounts.trainer_id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_transactions_id'), 'transactions', ['id'], unique=False)
    op.create_index(op.f('ix_transactions_order_id'), 'transactions', ['order_id'], unique=True)
    op.create_index('idx_transaction_trainer', 'transactions', ['trainer_id'], unique=False)
    op.create_index('idx_transaction_created', 'transactions', ['created_at'], unique=False)

    # Create withdrawal_requests table
    op.create_table(
        'withdrawal_requests',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('trainer_id', sa.String(length=100), nullable=False),
        sa.Column('amount', sa.Numeric(precision=20, scale=2), nullable=False),
        sa.Column('upi_id', sa.String(length=100), nullable=False),
        sa.Column('bank_details', sa.JSON(), nullable=True),
        sa.Column('reason', sa.String(length=500), nullable=True),
        sa.Column('status', sa.Enum('PENDING', 'APPROVED', 'REJECTED', 'COMPLETED', name='withdrawalstatus'), nullable=False, server_default='PENDING'),
        sa.Column('request_date', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('decision_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['trainer_id'], ['trainer_accounts.trainer_id']),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('amount > 0', name='ck_withdrawal_amount_positive')
    )
    op.create_index(op.f('ix_withdrawal_requests_id'), 'withdrawal_requests', ['id'], unique=False)
    op.create_index('idx_withdrawal_trainer_status', 'withdrawal_requests', ['trainer_id', 'status'], unique=False)
    op.create_index('idx_withdrawal_request_date', 'withdrawal_requests', ['request_date'], unique=False)

    # Create wallet_transactions table
    op.create_table(
        'wallet_transactions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('trainer_id', sa.String(length=100), nullable=False),
        sa.Column('entry_type', sa.Enum('CREDIT', 'DEBIT', name='entrytype'), nullable=False),
        sa.Column('status', sa.Enum('PENDING', 'SUCCESSFUL', 'FAILED', name='entrystatus'), nullable=False, server_default='SUCCESSFUL'),
        sa.Column('amount', sa.Numeric(precision=20, scale=2), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=True),
        sa.Column('related_withdrawal_id', sa.Integer(), nullable=True),
        sa.Column('related_transaction_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['trainer_id'], ['trainer_accounts.trainer_id']),
        sa.ForeignKeyConstraint(['related_withdrawal_id'], ['withdrawal_requests.id']),
        sa.ForeignKeyConstraint(['related_transaction_id'], ['transactions.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('related_withdrawal_id', name='uq_wallet_tx_withdrawal'),
        sa.UniqueConstraint('related_transaction_id', name='uq_wallet_tx_transaction'),
        sa.CheckConstraint('amount > 0', name='ck_wallet_tx_amount_positive')
    )
    op.create_index(op.f('ix_wallet_transactions_id'), 'wallet_transactions', ['id'], unique=False)
    op.create_index('idx_wallet_tx_trainer_created', 'wallet_transactions', ['trainer_id', 'created_at'], unique=False)


def downgrade() -> None:
    # Drop tables in reverse order
    op.drop_index('idx_wallet_tx_trainer_created', table_name='wallet_transactions')
    op.drop_index(op.f('ix_wallet_transactions_id'), table_name='wallet_transactions')
    op.drop_table('wallet_transactions')

    op.drop_index('idx_withdrawal_request_date', table_name='withdrawal_requests')
    op.drop_index('idx_withdrawal_trainer_status', table_name='withdrawal_requests')
    op.drop_index(op.f('ix_withdrawal_requests_id'), table_name='withdrawal_requests')
    op.drop_table('withdrawal_requests')

    op.drop_index('idx_transaction_created', table_name='transactions')
    op.drop_index('idx_transaction_trainer', table_name='transactions')
    op.drop_index(op.f('ix_transactions_order_id'), table_name='transactions')
    op.drop_index(op.f('ix_transactions_id'), table_name='transactions')
    op.drop_table('transactions')

    op.drop_index(op.f('ix_trainer_accounts_trainer_id'), table_name='trainer_accounts')
    op.drop_index(op.f('ix_trainer_accounts_id'), table_name='trainer_accounts')
    op.drop_table('trainer_accounts')

    sa.Enum(name='entrystatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='entrytype').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='withdrawalstatus').drop(op.get_bind(), checkfirst=True)
