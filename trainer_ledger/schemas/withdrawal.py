"""Withdrawal Schemas"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from decimal import Decimal
from datetime import datetime
from typing import Optional

from trainer_ledger.models.withdrawal_request import WithdrawalStatus
from trainer_ledger.schemas.common import validate_money


class BankDetails(BaseModel):
    account_holder_name: str = Field(..., max_length=100)
    account_number: str = Field(..., min_length=6, max_length=20, pattern=r"^\d+$")
    ifsc_code: str = Field(..., pattern=r"^[A-Z]{4}0[A-Z0-9]{6}$")
    bank_name: Optional[str] = Field(None, max_length=100)


class WithdrawalSubmitRequest(BaseModel):
    """Trainer request to withdraw part of the available balance"""
    amount: Decimal = Field(..., gt=0, description="Amount to withdraw (INR)")
    upi_id: str = Field(..., min_length=5, max_length=100, pattern=r"^[\w.\-]+@[a-zA-Z]+$", description="Payout UPI id, e.g. name@okbank")
    bank_details: Optional[BankDetails] = None
    reason: Optional[str] = Field(None, max_length=500)

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v):
        return validate_money(v)


class WithdrawalStatusUpdate(BaseModel):
    """Admin decision on a withdrawal request"""
    status: WithdrawalStatus


class WithdrawalResponse(BaseModel):
    id: int
    trainer_id: str
    amount: Decimal
    upi_id: str
    bank_details: Optional[dict]
    reason: Optional[str]
    status: WithdrawalStatus
    request_date: datetime
    decision_date: Optional[datetime]
    completed_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)
