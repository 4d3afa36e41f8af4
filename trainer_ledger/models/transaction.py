"""Transaction Model - Completed sales reported by the payment gateway"""
from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Index
from trainer_ledger.database import Base, utcnow


class Transaction(Base):
    """Transaction Model

    Immutable record of a completed subscription payment and its split.
    commission + trainer_share == amount for every row.
    timestamp is kept exactly as delivered by the payment collaborator.
    """
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    trainer_id = Column(String(100), ForeignKey("trainer_accounts.trainer_id"), nullable=False)
    student_id = Column(String(100), nullable=False)
    order_id = Column(String(100), unique=True, nullable=False, index=True)
    plan_name = Column(String(100), nullable=False)

    amount = Column(Numeric(precision=20, scale=2), nullable=False)
    commission = Column(Numeric(precision=20, scale=2), nullable=False)
    trainer_share = Column(Numeric(precision=20, scale=2), nullable=False)

    timestamp = Column(String(64), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        Index('idx_transaction_trainer', 'trainer_id'),
        Index('idx_transaction_created', 'created_at'),
    )

    def __repr__(self):
        return f"<Transaction(id={self.id}, order_id='{self.order_id}', amount={self.amount})>"
