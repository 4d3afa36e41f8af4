"""Trainer Account Model - Anchor row for per-trainer serialization"""
from sqlalchemy import Column, Integer, String, DateTime
from trainer_ledger.database import Base, utcnow


class TrainerAccount(Base):
    """Trainer Account Model

    One row per trainer that has ever been credited.
    Holds no balance: the balance is always derived from wallet_transactions.
    The row is locked FOR UPDATE by every state-changing operation and
    ledger_version is bumped on each ledger write.
    """
    __tablename__ = "trainer_accounts"

    id = Column(Integer, primary_key=True, index=True)
    trainer_id = Column(String(100), unique=True, nullable=False, index=True)
    ledger_version = Column(Integer, default=0, nullable=False)
    last_payout_date = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f"<TrainerAccount(id={self.id}, trainer_id='{self.trainer_id}', version={self.ledger_version})>"
