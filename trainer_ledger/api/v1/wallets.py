from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from trainer_ledger.config import settings
from trainer_ledger.database import get_db
from trainer_ledger.schemas.wallet import (
    WalletResponse,
    WalletTransactionResponse,
    WalletTransactionHistoryResponse,
)
from trainer_ledger.schemas.withdrawal import WithdrawalSubmitRequest, WithdrawalResponse
from trainer_ledger.services.ledger_service import LedgerService
from trainer_ledger.services.withdrawal_service import WithdrawalService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trainers", tags=["Trainer Wallets"])


@router.get("/{trainer_id}/wallet", response_model=WalletResponse)
async def get_wallet(
    trainer_id: str,
    db: AsyncSession = Depends(get_db)
):
    """
    Get the trainer's wallet, derived from the ledger on every call

    Example:
    ```
    GET /api/v1/trainers/trainer_42/wallet
    ```
    """
    service = LedgerService(db)
    wallet = await service.get_wallet(trainer_id)

    return WalletResponse(
        trainer_id=wallet.trainer_id,
        balance=wallet.balance,
        total_earnings=wallet.total_earnings,
        total_withdrawn=wallet.total_withdrawn,
        reserved=wallet.reserved,
        available_balance=wallet.available_balance,
        last_payout_date=wallet.last_payout_date,
        currency=settings.CURRENCY,
    )


@router.get("/{trainer_id}/transactions", response_model=WalletTransactionHistoryResponse)
async def list_transactions(
    trainer_id: str,
    limit: int = 50,
    offset: int = 0,
    db: AsyncSession = Depends(get_db)
):
    """
    Ledger history for a trainer, most recent first

    Example:
    ```
    GET /api/v1/trainers/trainer_42/transactions?limit=20&offset=40
    ```
    """
    service = LedgerService(db)
    page_size = min(max(limit, 1), settings.MAX_PAGE_SIZE)
    entries, total = await service.list_transactions(trainer_id, limit=page_size, offset=offset)

    return WalletTransactionHistoryResponse(
        transactions=[WalletTransactionResponse.model_validate(e) for e in entries],
        total_count=total,
        page=max(offset, 0) // page_size + 1,
        page_size=page_size,
    )


@router.post("/{trainer_id}/withdrawals", response_model=WithdrawalResponse, status_code=status.HTTP_201_CREATED)
async def submit_withdrawal(
    trainer_id: str,
    request: WithdrawalSubmitRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Submit a withdrawal request

    The amount must be at least the minimum withdrawal (500 INR) and at most
    the available balance (balance minus open requests).

    Example:
    ```
    POST /api/v1/trainers/trainer_42/withdrawals
    Body: {"amount": 1500, "upi_id": "ravi@okaxis", "reason": "Monthly payout"}
    ```
    """
    service = WithdrawalService(db)
    withdrawal = await service.submit(
        trainer_id=trainer_id,
        amount=request.amount,
        upi_id=request.upi_id,
        bank_details=request.bank_details.model_dump() if request.bank_details else None,
        reason=request.reason,
    )
    return WithdrawalResponse.model_validate(withdrawal)


@router.get("/{trainer_id}/withdrawals", response_model=List[WithdrawalResponse])
async def list_trainer_withdrawals(
    trainer_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Withdrawal history of one trainer, newest first"""
    service = WithdrawalService(db)
    requests = await service.list_requests(trainer_id=trainer_id)
    return [WithdrawalResponse.model_validate(r) for r in requests]
