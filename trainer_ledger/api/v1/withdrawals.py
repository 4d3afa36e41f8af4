from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import logging

from trainer_ledger.database import get_db
from trainer_ledger.models.withdrawal_request import WithdrawalStatus
from trainer_ledger.schemas.withdrawal import WithdrawalResponse, WithdrawalStatusUpdate
from trainer_ledger.services.withdrawal_service import WithdrawalService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/withdrawals", tags=["Withdrawals"])


@router.get("", response_model=List[WithdrawalResponse])
async def list_withdrawals(
    status: Optional[WithdrawalStatus] = None,
    db: AsyncSession = Depends(get_db)
):
    """
    All withdrawal requests for the admin review table

    Example:
    ```
    GET /api/v1/withdrawals?status=PENDING
    ```
    """
    service = WithdrawalService(db)
    requests = await service.list_requests(status=status)
    return [WithdrawalResponse.model_validate(r) for r in requests]


@router.get("/{request_id}", response_model=WithdrawalResponse)
async def get_withdrawal(
    request_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = WithdrawalService(db)
    return WithdrawalResponse.model_validate(await service.get_request(request_id))


@router.patch("/{request_id}", response_model=WithdrawalResponse)
async def update_withdrawal_status(
    request_id: int,
    update: WithdrawalStatusUpdate,
    db: AsyncSession = Depends(get_db)
):
    """
    Move a withdrawal request through its lifecycle

    PENDING -> APPROVED or REJECTED, APPROVED -> COMPLETED.
    Completing debits the trainer's ledger once; completing again returns
    409 AlreadyCompleted.

    Example:
    ```
    PATCH /api/v1/withdrawals/17
    Body: {"status": "APPROVED"}
    ```
    """
    service = WithdrawalService(db)
    withdrawal = await service.update_status(request_id, update.status)
    return WithdrawalResponse.model_validate(withdrawal)
