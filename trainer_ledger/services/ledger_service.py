"""Ledger Service - Append-only trainer ledger and derived wallets"""
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import AsyncIterator, List, Optional, Tuple
import logging

from sqlalchemy import select, func, case
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from trainer_ledger.models import TrainerAccount, Transaction, WalletTransaction, WithdrawalRequest
from trainer_ledger.models.wallet_transaction import EntryType, EntryStatus
from trainer_ledger.models.withdrawal_request import OPEN_STATUSES
from trainer_ledger.config import settings
from trainer_ledger.database import utcnow
from trainer_ledger.services.commission import compute_split, quantize_money, to_decimal, Number
from trainer_ledger.services.errors import ConcurrencyConflict, InvalidAmount, NotFound, OrderConflict
from trainer_ledger.services.locks import TrainerLockRegistry, trainer_locks

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrainerWallet:
    """Wallet view derived from the ledger, never persisted"""
    trainer_id: str
    balance: Decimal
    total_earnings: Decimal
    total_withdrawn: Decimal
    reserved: Decimal
    available_balance: Decimal
    last_payout_date: Optional[datetime]
    ledger_version: int


class LedgerService:
    """Ledger Service - Single source of truth for trainer money

    Every state-changing operation runs inside trainer_unit(), which
    serializes work per trainer and commits or rolls back as one unit.
    """

    def __init__(self, db: AsyncSession, locks: TrainerLockRegistry = trainer_locks):
        self.db = db
        self.locks = locks

    @asynccontextmanager
    async def trainer_unit(self, trainer_id: str, create: bool = False) -> AsyncIterator[TrainerAccount]:
        """
        Atomic unit of work for one trainer

        Holds the in-process trainer lock and a FOR UPDATE lock on the
        trainer's account row, yields the account, then commits.
        Any exception rolls the whole unit back.
        """
        async with self.locks.hold(trainer_id):
            try:
                account = await self._lock_account(trainer_id, create=create)
                yield account
                await self.db.commit()
            except IntegrityError as e:
                await self.db.rollback()
                logger.warning(f"Concurrent write rejected for trainer {trainer_id}: {e.orig}")
                raise ConcurrencyConflict(
                    f"Concurrent update for trainer {trainer_id}, retry the request",
                    trainer_id=trainer_id,
                ) from e
            except Exception:
                await self.db.rollback()
                raise

    async def _lock_account(self, trainer_id: str, create: bool) -> TrainerAccount:
        stmt = (
            select(TrainerAccount)
            .where(TrainerAccount.trainer_id == trainer_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        account = result.scalar_one_or_none()

        if account is None:
            if not create:
                raise NotFound(f"Trainer '{trainer_id}' not found", trainer_id=trainer_id)
            account = TrainerAccount(trainer_id=trainer_id, ledger_version=0)
            self.db.add(account)
            await self.db.flush()
            logger.info(f"Opened ledger account for trainer {trainer_id}")

        return account

    async def get_account(self, trainer_id: str) -> TrainerAccount:
        stmt = select(TrainerAccount).where(TrainerAccount.trainer_id == trainer_id)
        result = await self.db.execute(stmt)
        account = result.scalar_one_or_none()
        if account is None:
            raise NotFound(f"Trainer '{trainer_id}' not found", trainer_id=trainer_id)
        return account

    async def append_transaction(
        self,
        trainer_id: str,
        entry_type: EntryType,
        amount: Number,
        description: str,
        related_withdrawal_id: Optional[int] = None,
        related_transaction_id: Optional[int] = None,
        status: EntryStatus = EntryStatus.SUCCESSFUL,
    ) -> int:
        """
        Append one immutable entry to the trainer's ledger
        Must be called inside trainer_unit() for the same trainer
        """
        if not self.locks.get(trainer_id).locked():
            raise RuntimeError(f"append_transaction for {trainer_id} called outside trainer_unit")

        value = to_decimal(amount)
        if value <= 0:
            raise InvalidAmount(f"Ledger amount must be greater than 0, got {value}", amount=value)

        account = await self.get_account(trainer_id)

        entry = WalletTransaction(
            trainer_id=trainer_id,
            entry_type=entry_type,
            status=status,
            amount=value,
            description=description,
            related_withdrawal_id=related_withdrawal_id,
            related_transaction_id=related_transaction_id,
        )
        self.db.add(entry)
        account.ledger_version += 1
        await self.db.flush()

        logger.info(f"Ledger {entry_type.value} {value} for trainer {trainer_id} (entry {entry.id}, v{account.ledger_version})")
        return entry.id

    async def _ledger_totals(self, trainer_id: str) -> Tuple[Decimal, Decimal]:
        """Return (successful credits, successful debits) for a trainer"""
        stmt = select(
            func.coalesce(func.sum(case(
                (WalletTransaction.entry_type == EntryType.CREDIT, WalletTransaction.amount),
                else_=0,
            )), 0),
            func.coalesce(func.sum(case(
                (WalletTransaction.entry_type == EntryType.DEBIT, WalletTransaction.amount),
                else_=0,
            )), 0),
        ).where(
            WalletTransaction.trainer_id == trainer_id,
            WalletTransaction.status == EntryStatus.SUCCESSFUL,
        )
        result = await self.db.execute(stmt)
        credits, debits = result.one()
        return quantize_money(credits), quantize_money(debits)

    async def compute_balance(self, trainer_id: str) -> Decimal:
        """Balance folded from the ledger: successful credits minus successful debits"""
        credits, debits = await self._ledger_totals(trainer_id)
        return credits - debits

    async def reserved_amount(self, trainer_id: str) -> Decimal:
        """Sum of the trainer's PENDING and APPROVED withdrawal requests"""
        stmt = select(func.coalesce(func.sum(WithdrawalRequest.amount), 0)).where(
            WithdrawalRequest.trainer_id == trainer_id,
            WithdrawalRequest.status.in_(OPEN_STATUSES),
        )
        result = await self.db.execute(stmt)
        return quantize_money(result.scalar_one())

    async def available_balance(self, trainer_id: str) -> Decimal:
        return await self.compute_balance(trainer_id) - await self.reserved_amount(trainer_id)

    async def get_wallet(self, trainer_id: str) -> TrainerWallet:
        account = await self.get_account(trainer_id)
        credits, debits = await self._ledger_totals(trainer_id)
        reserved = await self.reserved_amount(trainer_id)
        balance = credits - debits

        return TrainerWallet(
            trainer_id=trainer_id,
            balance=balance,
            total_earnings=credits,
            total_withdrawn=debits,
            reserved=reserved,
            available_balance=balance - reserved,
            last_payout_date=account.last_payout_date,
            ledger_version=account.ledger_version,
        )

    async def list_transactions(
        self,
        trainer_id: str,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[WalletTransaction], int]:
        """Ledger entries for a trainer, most recent first, with the total count"""
        await self.get_account(trainer_id)

        limit = min(max(limit, 1), settings.MAX_PAGE_SIZE)
        offset = max(offset, 0)

        count_stmt = select(func.count(WalletTransaction.id)).where(WalletTransaction.trainer_id == trainer_id)
        total = (await self.db.execute(count_stmt)).scalar_one()

        stmt = (
            select(WalletTransaction)
            .where(WalletTransaction.trainer_id == trainer_id)
            .order_by(WalletTransaction.created_at.desc(), WalletTransaction.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total

    async def _find_order(self, order_id: str, trainer_id: str) -> Optional[Transaction]:
        stmt = select(Transaction).where(Transaction.order_id == order_id)
        existing = (await self.db.execute(stmt)).scalar_one_or_none()
        if existing is None:
            return None

        if existing.trainer_id != trainer_id:
            logger.warning(
                f"Order {order_id} replayed for trainer {trainer_id}, "
                f"already recorded for {existing.trainer_id}"
            )
            raise OrderConflict(
                f"Order '{order_id}' is already recorded for another trainer",
                order_id=order_id,
                trainer_id=trainer_id,
            )

        logger.info(f"Order {order_id} already recorded, skipping")
        return existing

    async def record_payment(
        self,
        trainer_id: str,
        student_id: str,
        amount: Number,
        plan_name: str,
        order_id: str,
        timestamp: Optional[str] = None,
    ) -> Tuple[Transaction, bool]:
        """
        Record a completed payment and credit the trainer's share

        Returns (transaction, created). A repeated order_id returns the
        original transaction with created=False and writes nothing.
        Raises OrderConflict if the order belongs to another trainer.
        """
        split = compute_split(amount)

        existing = await self._find_order(order_id, trainer_id)
        if existing is not None:
            return existing, False

        async with self.trainer_unit(trainer_id, create=True):
            existing = await self._find_order(order_id, trainer_id)
            if existing is not None:
                return existing, False

            transaction = Transaction(
                trainer_id=trainer_id,
                student_id=student_id,
                order_id=order_id,
                plan_name=plan_name,
                amount=split.commission + split.trainer_share,
                commission=split.commission,
                trainer_share=split.trainer_share,
                timestamp=utcnow().isoformat() if timestamp is None else timestamp,
            )
            self.db.add(transaction)
            await self.db.flush()

            if split.trainer_share > 0:
                await self.append_transaction(
                    trainer_id=trainer_id,
                    entry_type=EntryType.CREDIT,
                    amount=split.trainer_share,
                    description=f"Earnings from {plan_name} plan (order {order_id})",
                    related_transaction_id=transaction.id,
                )

        logger.info(
            f"Payment {order_id} recorded: amount={transaction.amount} "
            f"commission={transaction.commission} trainer_share={transaction.trainer_share}"
        )
        return transaction, True
