from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import logging

from trainer_ledger.config import settings
from trainer_ledger.database import get_db
from trainer_ledger.schemas.payment import TransactionResponse, TransactionListResponse
from trainer_ledger.schemas.revenue import (
    RevenueSummaryResponse,
    TrainerPayoutResponse,
    MarkPaidRequest,
    PayoutReceiptResponse,
)
from trainer_ledger.services.payout_service import PayoutService
from trainer_ledger.services.revenue_service import RevenueService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Revenue"])


@router.get("/revenue/summary", response_model=RevenueSummaryResponse)
async def get_revenue_summary(db: AsyncSession = Depends(get_db)):
    """
    Platform revenue totals and the monthly trend

    Sales with an unparsable timestamp count toward the totals but are left
    out of the monthly figures (see excluded_records).
    """
    service = RevenueService(db)
    summary = await service.get_summary()
    return RevenueSummaryResponse.model_validate(summary)


@router.get("/revenue/transactions", response_model=TransactionListResponse)
async def list_sales(
    limit: int = 50,
    offset: int = 0,
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db)
):
    """
    Recorded sales with their commission split, newest first

    Example:
    ```
    GET /api/v1/revenue/transactions?search=premium&limit=20
    ```
    """
    service = RevenueService(db)
    page_size = min(max(limit, 1), settings.MAX_PAGE_SIZE)
    sales, total = await service.list_sales(limit=page_size, offset=offset, search=search)

    return TransactionListResponse(
        transactions=[TransactionResponse.model_validate(t) for t in sales],
        total_count=total,
        page=max(offset, 0) // page_size + 1,
        page_size=page_size,
    )


@router.get("/payouts", response_model=List[TrainerPayoutResponse])
async def list_payouts(db: AsyncSession = Depends(get_db)):
    """Pending payout per trainer for the admin payout table"""
    service = PayoutService(db)
    return [TrainerPayoutResponse.model_validate(p) for p in await service.list_payouts()]


@router.post("/payouts/{trainer_id}/mark-paid", response_model=PayoutReceiptResponse)
async def mark_payout_paid(
    trainer_id: str,
    request: MarkPaidRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Mark a trainer's accrued earnings as paid

    The pending amount is recomputed before writing; if it no longer covers
    the requested amount the call fails with 409 StalePayoutAmount.

    Example:
    ```
    POST /api/v1/payouts/trainer_42/mark-paid
    Body: {"amount": 7999}
    ```
    """
    service = PayoutService(db)
    receipt = await service.mark_paid(trainer_id, request.amount)
    return PayoutReceiptResponse.model_validate(receipt)
