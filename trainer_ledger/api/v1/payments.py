from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from trainer_ledger.database import get_db
from trainer_ledger.schemas.payment import PaymentCompletedEvent, TransactionResponse
from trainer_ledger.services.ledger_service import LedgerService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post("/completed", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
async def payment_completed(
    event: PaymentCompletedEvent,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """
    Record a completed payment from the payment gateway

    Splits the amount 20/80 between platform and trainer and credits the
    trainer's share to their ledger. Replaying the same order_id is safe:
    the original transaction is returned with status 200.

    Example:
    ```
    POST /api/v1/payments/completed
    Body: {
        "trainer_id": "trainer_42",
        "student_id": "student_7",
        "amount": 9999,
        "plan_name": "Premium",
        "order_id": "ORD-20261019-0001",
        "timestamp": "2026-10-19T09:30:00+05:30"
    }
    ```
    """
    service = LedgerService(db)
    transaction, created = await service.record_payment(
        trainer_id=event.trainer_id,
        student_id=event.student_id,
        amount=event.amount,
        plan_name=event.plan_name,
        order_id=event.order_id,
        timestamp=event.timestamp,
    )
    if not created:
        response.status_code = status.HTTP_200_OK

    return TransactionResponse.model_validate(transaction)
