"""Wallet Transaction Model - Append-only trainer ledger"""
from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Enum, Index, CheckConstraint
import enum
from trainer_ledger.database import Base, utcnow


class EntryType(str, enum.Enum):
    """Ledger Entry Types"""
    CREDIT = "CREDIT"   # Trainer share of a sale
    DEBIT = "DEBIT"     # Completed withdrawal or admin payout


class EntryStatus(str, enum.Enum):
    """Ledger Entry Status"""
    PENDING = "PENDING"
    SUCCESSFUL = "SUCCESSFUL"
    FAILED = "FAILED"


class WalletTransaction(Base):
    """Wallet Transaction Model

    Entries are written once and never updated or deleted.
    Balance = SUM(successful credits) - SUM(successful debits)
    A withdrawal request can be linked to at most one debit, and a sale to
    at most one credit.
    """
    __tablename__ = "wallet_transactions"

    id = Column(Integer, primary_key=True, index=True)
    trainer_id = Column(String(100), ForeignKey("trainer_accounts.trainer_id"), nullable=False)

    entry_type = Column(Enum(EntryType), nullable=False)
    status = Column(Enum(EntryStatus), default=EntryStatus.SUCCESSFUL, nullable=False)
    amount = Column(Numeric(precision=20, scale=2), nullable=False)
    description = Column(String(500))

    related_withdrawal_id = Column(Integer, ForeignKey("withdrawal_requests.id"), unique=True)
    related_transaction_id = Column(Integer, ForeignKey("transactions.id"), unique=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        Index('idx_wallet_tx_trainer_created', 'trainer_id', 'created_at'),
        CheckConstraint('amount > 0', name='ck_wallet_tx_amount_positive'),
    )

    def __repr__(self):
        return f"<WalletTransaction(id={self.id}, trainer_id='{self.trainer_id}', type={self.entry_type}, amount={self.amount})>"
