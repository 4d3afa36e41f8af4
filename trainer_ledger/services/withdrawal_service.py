"""Withdrawal Service - Trainer withdrawal request state machine"""
from typing import List, Optional
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from trainer_ledger.models import WithdrawalRequest
from trainer_ledger.models.wallet_transaction import EntryType
from trainer_ledger.models.withdrawal_request import WithdrawalStatus
from trainer_ledger.config import settings
from trainer_ledger.database import utcnow
from trainer_ledger.services.commission import to_decimal, Number
from trainer_ledger.services.errors import (
    AlreadyCompleted,
    BelowMinimum,
    InsufficientBalance,
    InvalidAmount,
    InvalidTransition,
    NotFound,
)
from trainer_ledger.services.ledger_service import LedgerService
from trainer_ledger.services.locks import TrainerLockRegistry, trainer_locks

logger = logging.getLogger(__name__)


# Legal transitions; anything else is an InvalidTransition
TRANSITIONS = {
    WithdrawalStatus.PENDING: {WithdrawalStatus.APPROVED, WithdrawalStatus.REJECTED},
    WithdrawalStatus.APPROVED: {WithdrawalStatus.COMPLETED},
    WithdrawalStatus.REJECTED: set(),
    WithdrawalStatus.COMPLETED: set(),
}


class WithdrawalService:
    """Withdrawal Service

    A PENDING or APPROVED request is a reservation: it lowers the trainer's
    available balance without touching the ledger. The ledger is debited
    once, when the request reaches COMPLETED.
    """

    def __init__(self, db: AsyncSession, locks: TrainerLockRegistry = trainer_locks):
        self.db = db
        self.ledger = LedgerService(db, locks)

    async def submit(
        self,
        trainer_id: str,
        amount: Number,
        upi_id: str,
        bank_details: Optional[dict] = None,
        reason: Optional[str] = None,
    ) -> WithdrawalRequest:
        """
        Create a PENDING withdrawal request

        The availability check and the insert share one trainer_unit, so a
        second submit for the same trainer sees this reservation.
        """
        value = to_decimal(amount)
        if value <= 0:
            raise InvalidAmount(f"Withdrawal amount must be greater than 0, got {value}", amount=value)
        if value < settings.MIN_WITHDRAWAL:
            raise BelowMinimum(
                f"Minimum withdrawal is {settings.MIN_WITHDRAWAL}, requested {value}",
                minimum=settings.MIN_WITHDRAWAL,
                requested=value,
            )

        async with self.ledger.trainer_unit(trainer_id):
            available = await self.ledger.available_balance(trainer_id)
            if value > available:
                logger.warning(f"Withdrawal of {value} refused for trainer {trainer_id}: available {available}")
                raise InsufficientBalance(
                    f"Insufficient balance. Available: {available}, Requested: {value}",
                    available=available,
                    requested=value,
                )

            request = WithdrawalRequest(
                trainer_id=trainer_id,
                amount=value,
                upi_id=upi_id,
                bank_details=bank_details,
                reason=reason,
                status=WithdrawalStatus.PENDING,
            )
            self.db.add(request)
            await self.db.flush()

        logger.info(f"Withdrawal {request.id} of {value} submitted by trainer {trainer_id}")
        return request

    async def get_request(self, request_id: int) -> WithdrawalRequest:
        request = await self.db.get(WithdrawalRequest, request_id)
        if request is None:
            raise NotFound(f"Withdrawal request {request_id} not found", request_id=request_id)
        return request

    async def list_requests(
        self,
        trainer_id: Optional[str] = None,
        status: Optional[WithdrawalStatus] = None,
    ) -> List[WithdrawalRequest]:
        """Withdrawal requests, newest first"""
        stmt = select(WithdrawalRequest)
        if trainer_id is not None:
            stmt = stmt.where(WithdrawalRequest.trainer_id == trainer_id)
        if status is not None:
            stmt = stmt.where(WithdrawalRequest.status == status)
        stmt = stmt.order_by(WithdrawalRequest.request_date.desc(), WithdrawalRequest.id.desc())

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def _lock_request(self, request_id: int) -> WithdrawalRequest:
        stmt = (
            select(WithdrawalRequest)
            .where(WithdrawalRequest.id == request_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        request = result.scalar_one_or_none()
        if request is None:
            raise NotFound(f"Withdrawal request {request_id} not found", request_id=request_id)
        return request

    @staticmethod
    def _check_transition(request: WithdrawalRequest, target: WithdrawalStatus):
        if target not in TRANSITIONS[request.status]:
            raise InvalidTransition(
                f"Cannot move withdrawal {request.id} from {request.status.value} to {target.value}",
                request_id=request.id,
                current=request.status.value,
                requested=target.value,
            )

    async def _decide(self, request_id: int, target: WithdrawalStatus) -> WithdrawalRequest:
        trainer_id = (await self.get_request(request_id)).trainer_id

        async with self.ledger.trainer_unit(trainer_id):
            request = await self._lock_request(request_id)
            self._check_transition(request, target)
            request.status = target
            request.decision_date = utcnow()
            await self.db.flush()

        logger.info(f"Withdrawal {request_id} for trainer {trainer_id} is now {target.value}")
        return request

    async def approve(self, request_id: int) -> WithdrawalRequest:
        """PENDING -> APPROVED; the reservation stays in place"""
        return await self._decide(request_id, WithdrawalStatus.APPROVED)

    async def reject(self, request_id: int) -> WithdrawalRequest:
        """PENDING -> REJECTED; releases the reservation"""
        return await self._decide(request_id, WithdrawalStatus.REJECTED)

    async def complete(self, request_id: int) -> WithdrawalRequest:
        """
        APPROVED -> COMPLETED, debiting the ledger exactly once

        Completing an already COMPLETED request raises AlreadyCompleted and
        writes nothing.
        """
        trainer_id = (await self.get_request(request_id)).trainer_id

        async with self.ledger.trainer_unit(trainer_id):
            request = await self._lock_request(request_id)
            if request.status == WithdrawalStatus.COMPLETED:
                raise AlreadyCompleted(
                    f"Withdrawal {request_id} was already completed",
                    request_id=request_id,
                    completed_at=request.completed_at,
                )
            self._check_transition(request, WithdrawalStatus.COMPLETED)

            balance = await self.ledger.compute_balance(trainer_id)
            if request.amount > balance:
                raise InsufficientBalance(
                    f"Ledger balance {balance} does not cover withdrawal {request_id} of {request.amount}",
                    available=balance,
                    requested=request.amount,
                )

            await self.ledger.append_transaction(
                trainer_id=trainer_id,
                entry_type=EntryType.DEBIT,
                amount=request.amount,
                description=f"Withdrawal to {request.upi_id}",
                related_withdrawal_id=request.id,
            )
            request.status = WithdrawalStatus.COMPLETED
            request.completed_at = utcnow()
            await self.db.flush()

        logger.info(f"Withdrawal {request_id} of {request.amount} completed for trainer {trainer_id}")
        return request

    async def update_status(self, request_id: int, new_status: WithdrawalStatus) -> WithdrawalRequest:
        """Admin entry point: move a request to new_status"""
        if new_status == WithdrawalStatus.APPROVED:
            return await self.approve(request_id)
        if new_status == WithdrawalStatus.REJECTED:
            return await self.reject(request_id)
        if new_status == WithdrawalStatus.COMPLETED:
            return await self.complete(request_id)

        request = await self.get_request(request_id)
        raise InvalidTransition(
            f"Cannot move withdrawal {request_id} from {request.status.value} to {new_status.value}",
            request_id=request_id,
            current=request.status.value,
            requested=new_status.value,
        )
