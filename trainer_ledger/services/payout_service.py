"""Payout Service - Admin bulk payouts of accrued trainer earnings"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from trainer_ledger.models import TrainerAccount
from trainer_ledger.models.wallet_transaction import EntryType
from trainer_ledger.database import utcnow
from trainer_ledger.services.commission import to_decimal, Number
from trainer_ledger.services.errors import InvalidAmount, StalePayoutAmount
from trainer_ledger.services.ledger_service import LedgerService
from trainer_ledger.services.locks import TrainerLockRegistry, trainer_locks

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrainerPayout:
    trainer_id: str
    total_earnings: Decimal
    total_withdrawn: Decimal
    reserved: Decimal
    pending_amount: Decimal
    last_payout_date: Optional[datetime]


@dataclass(frozen=True)
class PayoutReceipt:
    trainer_id: str
    amount: Decimal
    entry_id: int
    remaining_pending: Decimal
    paid_at: datetime


class PayoutService:
    """Payout Service

    The pending amount of a trainer is the part of the balance not reserved
    by an open withdrawal request. It is recomputed inside the trainer's
    atomic unit on every payout; figures shown to the admin earlier are
    never trusted.
    """

    def __init__(self, db: AsyncSession, locks: TrainerLockRegistry = trainer_locks):
        self.db = db
        self.ledger = LedgerService(db, locks)

    async def pending_amount(self, trainer_id: str) -> Decimal:
        return await self.ledger.available_balance(trainer_id)

    async def list_payouts(self) -> List[TrainerPayout]:
        """Payout table rows for every trainer, largest pending amount first"""
        result = await self.db.execute(select(TrainerAccount).order_by(TrainerAccount.trainer_id))
        payouts = []
        for account in result.scalars().all():
            wallet = await self.ledger.get_wallet(account.trainer_id)
            payouts.append(TrainerPayout(
                trainer_id=account.trainer_id,
                total_earnings=wallet.total_earnings,
                total_withdrawn=wallet.total_withdrawn,
                reserved=wallet.reserved,
                pending_amount=wallet.available_balance,
                last_payout_date=account.last_payout_date,
            ))
        payouts.sort(key=lambda p: p.pending_amount, reverse=True)
        return payouts

    async def mark_paid(self, trainer_id: str, amount: Number) -> PayoutReceipt:
        """
        Debit a manual payout from the trainer's ledger

        Raises StalePayoutAmount when the recomputed pending amount no longer
        covers the requested amount.
        """
        value = to_decimal(amount)
        if value <= 0:
            raise InvalidAmount(f"Payout amount must be greater than 0, got {value}", amount=value)

        async with self.ledger.trainer_unit(trainer_id) as account:
            pending = await self.pending_amount(trainer_id)
            if value > pending:
                logger.warning(f"Stale payout of {value} for trainer {trainer_id}: pending is now {pending}")
                raise StalePayoutAmount(
                    f"Pending amount for trainer {trainer_id} is {pending}, cannot pay {value}",
                    pending=pending,
                    requested=value,
                )

            entry_id = await self.ledger.append_transaction(
                trainer_id=trainer_id,
                entry_type=EntryType.DEBIT,
                amount=value,
                description="Payout marked as paid by admin",
            )
            paid_at = utcnow()
            account.last_payout_date = paid_at

        logger.info(f"Payout of {value} marked paid for trainer {trainer_id}")
        return PayoutReceipt(
            trainer_id=trainer_id,
            amount=value,
            entry_id=entry_id,
            remaining_pending=pending - value,
            paid_at=paid_at,
        )
