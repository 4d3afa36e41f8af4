"""Withdrawal Request Model"""
from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Enum, Index, JSON, CheckConstraint
import enum
from trainer_ledger.database import Base, utcnow


class WithdrawalStatus(str, enum.Enum):
    """Withdrawal lifecycle: PENDING -> APPROVED -> COMPLETED, PENDING -> REJECTED"""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    COMPLETED = "COMPLETED"


# Requests in these states reserve part of the trainer's balance
OPEN_STATUSES = (WithdrawalStatus.PENDING, WithdrawalStatus.APPROVED)


class WithdrawalRequest(Base):
    """Withdrawal Request Model

    A reservation against the trainer's balance until it is rejected or
    completed. Rows are never deleted.
    """
    __tablename__ = "withdrawal_requests"

    id = Column(Integer, primary_key=True, index=True)
    trainer_id = Column(String(100), ForeignKey("trainer_accounts.trainer_id"), nullable=False)

    amount = Column(Numeric(precision=20, scale=2), nullable=False)
    upi_id = Column(String(100), nullable=False)
    bank_details = Column(JSON)
    reason = Column(String(500))

    status = Column(Enum(WithdrawalStatus), default=WithdrawalStatus.PENDING, nullable=False)

    request_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    decision_date = Column(DateTime(timezone=True))
    completed_at = Column(DateTime(timezone=True))

    __table_args__ = (
        Index('idx_withdrawal_trainer_status', 'trainer_id', 'status'),
        Index('idx_withdrawal_request_date', 'request_date'),
        CheckConstraint('amount > 0', name='ck_withdrawal_amount_positive'),
    )

    def __repr__(self):
        return f"<WithdrawalRequest(id={self.id}, trainer_id='{self.trainer_id}', amount={self.amount}, status={self.status})>"
