"""Revenue and Payout Schemas"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from decimal import Decimal
from datetime import datetime
from typing import Optional, List

from trainer_ledger.schemas.common import validate_money


class MonthlyRevenueResponse(BaseModel):
    month: str
    revenue: Decimal
    commission: Decimal
    trainer_earnings: Decimal

    model_config = ConfigDict(from_attributes=True)


class RevenueSummaryResponse(BaseModel):
    total_revenue: Decimal
    total_commission: Decimal
    total_trainer_earnings: Decimal
    pending_payouts: Decimal
    current_month_revenue: Decimal
    monthly_revenue: List[MonthlyRevenueResponse]
    excluded_records: int

    model_config = ConfigDict(from_attributes=True)


class TrainerPayoutResponse(BaseModel):
    trainer_id: str
    total_earnings: Decimal
    total_withdrawn: Decimal
    reserved: Decimal
    pending_amount: Decimal
    last_payout_date: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)


class MarkPaidRequest(BaseModel):
    """Admin confirmation that `amount` was paid out to the trainer"""
    amount: Decimal = Field(..., gt=0, description="Amount shown to the admin when confirming")

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v):
        return validate_money(v)


class PayoutReceiptResponse(BaseModel):
    trainer_id: str
    amount: Decimal
    entry_id: int
    remaining_pending: Decimal
    paid_at: datetime

    model_config = ConfigDict(from_attributes=True)
