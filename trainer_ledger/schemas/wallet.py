"""Wallet Schemas - Trainer wallet and ledger views"""
from pydantic import BaseModel, ConfigDict
from decimal import Decimal
from datetime import datetime
from typing import Optional, List

from trainer_ledger.models.wallet_transaction import EntryType, EntryStatus


class WalletResponse(BaseModel):
    """Trainer wallet derived from the ledger"""
    trainer_id: str
    balance: Decimal
    total_earnings: Decimal
    total_withdrawn: Decimal
    reserved: Decimal
    available_balance: Decimal
    last_payout_date: Optional[datetime]
    currency: str

    model_config = ConfigDict(from_attributes=True)


class WalletTransactionResponse(BaseModel):
    """Response schema for a ledger entry"""
    id: int
    trainer_id: str
    entry_type: EntryType
    status: EntryStatus
    amount: Decimal
    description: Optional[str]
    related_withdrawal_id: Optional[int]
    related_transaction_id: Optional[int]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WalletTransactionHistoryResponse(BaseModel):
    """Paginated ledger history, most recent first"""
    transactions: List[WalletTransactionResponse]
    total_count: int
    page: int
    page_size: int
