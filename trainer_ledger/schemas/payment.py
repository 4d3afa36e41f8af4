"""Payment Schemas - Inbound completed-payment events"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from decimal import Decimal
from datetime import datetime
from typing import Optional

from trainer_ledger.schemas.common import validate_money


class PaymentCompletedEvent(BaseModel):
    """Completed payment reported by the payment gateway"""
    trainer_id: str = Field(..., min_length=1, max_length=100, description="Trainer receiving the earnings")
    student_id: str = Field(..., min_length=1, max_length=100, description="Paying student")
    amount: Decimal = Field(..., gt=0, description="Amount paid by the student (INR)")
    plan_name: str = Field(..., min_length=1, max_length=100, description="Subscription plan, e.g. Premium")
    order_id: str = Field(..., min_length=1, max_length=100, description="Gateway order id, unique per payment")
    timestamp: Optional[str] = Field(None, min_length=1, max_length=64, description="ISO-8601 payment time")

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v):
        return validate_money(v)


class TransactionResponse(BaseModel):
    """Recorded sale with its commission split"""
    id: int
    trainer_id: str
    student_id: str
    order_id: str
    plan_name: str
    amount: Decimal
    commission: Decimal
    trainer_share: Decimal
    timestamp: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TransactionListResponse(BaseModel):
    transactions: list[TransactionResponse]
    total_count: int
    page: int
    page_size: int
