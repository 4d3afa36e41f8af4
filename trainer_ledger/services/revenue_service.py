"""Revenue Service - Read-only rollups over sales and the trainer ledger"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional, Tuple
import logging

from sqlalchemy import select, func, case, or_
from sqlalchemy.ext.asyncio import AsyncSession

from trainer_ledger.models import Transaction, WalletTransaction
from trainer_ledger.models.wallet_transaction import EntryType, EntryStatus
from trainer_ledger.config import settings
from trainer_ledger.services.commission import quantize_money
from trainer_ledger.services.errors import MalformedTimestamp

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


@dataclass
class MonthlyRevenue:
    month: str
    revenue: Decimal = ZERO
    commission: Decimal = ZERO
    trainer_earnings: Decimal = ZERO


@dataclass
class RevenueSummary:
    total_revenue: Decimal
    total_commission: Decimal
    total_trainer_earnings: Decimal
    pending_payouts: Decimal
    current_month_revenue: Decimal
    monthly_revenue: List[MonthlyRevenue] = field(default_factory=list)
    excluded_records: int = 0


def parse_timestamp(raw: Optional[str], transaction_id: Optional[int] = None) -> datetime:
    """Parse an ISO-8601 sale timestamp into an aware UTC datetime"""
    if not raw or not isinstance(raw, str):
        raise MalformedTimestamp(raw, transaction_id)
    try:
        value = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    except ValueError:
        raise MalformedTimestamp(raw, transaction_id)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def month_key(value: datetime) -> str:
    return f"{value.year:04d}-{value.month:02d}"


def trailing_months(now: datetime, count: int) -> List[str]:
    """Month keys for the last `count` months ending with now's month, oldest first"""
    year, month = now.year, now.month
    keys = []
    for _ in range(max(count, 1)):
        keys.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(keys))


class RevenueService:
    """Revenue Service

    Reports tolerate slightly stale data and are never used to authorize
    a ledger write.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _sales_totals(self) -> Tuple[Decimal, Decimal, Decimal]:
        stmt = select(
            func.coalesce(func.sum(Transaction.amount), 0),
            func.coalesce(func.sum(Transaction.commission), 0),
            func.coalesce(func.sum(Transaction.trainer_share), 0),
        )
        revenue, commission, trainer_share = (await self.db.execute(stmt)).one()
        return quantize_money(revenue), quantize_money(commission), quantize_money(trainer_share)

    async def pending_payouts(self) -> Decimal:
        """Sum of all trainer balances not yet withdrawn"""
        stmt = select(
            func.coalesce(func.sum(case(
                (WalletTransaction.entry_type == EntryType.CREDIT, WalletTransaction.amount),
                else_=-WalletTransaction.amount,
            )), 0)
        ).where(WalletTransaction.status == EntryStatus.SUCCESSFUL)
        return quantize_money((await self.db.execute(stmt)).scalar_one())

    async def monthly_breakdown(self, now: Optional[datetime] = None) -> Tuple[List[MonthlyRevenue], int]:
        """
        Per-month revenue for the trailing REVENUE_TREND_MONTHS months

        Sales whose timestamp cannot be parsed are skipped and logged.
        Returns (months oldest first, number of skipped sales).
        """
        now = now or datetime.now(timezone.utc)
        buckets: Dict[str, MonthlyRevenue] = {
            key: MonthlyRevenue(month=key) for key in trailing_months(now, settings.REVENUE_TREND_MONTHS)
        }

        stmt = select(
            Transaction.id,
            Transaction.amount,
            Transaction.commission,
            Transaction.trainer_share,
            Transaction.timestamp,
        )
        result = await self.db.execute(stmt)

        excluded = 0
        for tx_id, amount, commission, trainer_share, raw_timestamp in result.all():
            try:
                occurred_at = parse_timestamp(raw_timestamp, tx_id)
            except MalformedTimestamp as e:
                excluded += 1
                logger.warning(f"Skipping transaction {tx_id} in revenue report: {e.message}")
                continue

            bucket = buckets.get(month_key(occurred_at))
            if bucket is None:
                continue
            bucket.revenue += quantize_money(amount)
            bucket.commission += quantize_money(commission)
            bucket.trainer_earnings += quantize_money(trainer_share)

        return list(buckets.values()), excluded

    async def get_summary(self, now: Optional[datetime] = None) -> RevenueSummary:
        now = now or datetime.now(timezone.utc)
        total_revenue, total_commission, total_trainer_earnings = await self._sales_totals()
        months, excluded = await self.monthly_breakdown(now)

        return RevenueSummary(
            total_revenue=total_revenue,
            total_commission=total_commission,
            total_trainer_earnings=total_trainer_earnings,
            pending_payouts=await self.pending_payouts(),
            current_month_revenue=months[-1].revenue,
            monthly_revenue=months,
            excluded_records=excluded,
        )

    async def list_sales(
        self,
        limit: int = 50,
        offset: int = 0,
        search: Optional[str] = None,
    ) -> Tuple[List[Transaction], int]:
        """
        Recorded sales, newest first, with the total count

        `search` is a case-insensitive substring match on student, trainer
        or plan name.
        """
        limit = min(max(limit, 1), settings.MAX_PAGE_SIZE)
        offset = max(offset, 0)

        filters = []
        if search and search.strip():
            pattern = f"%{search.strip().lower()}%"
            filters.append(or_(
                func.lower(Transaction.student_id).like(pattern),
                func.lower(Transaction.trainer_id).like(pattern),
                func.lower(Transaction.plan_name).like(pattern),
            ))

        total = (await self.db.execute(select(func.count(Transaction.id)).where(*filters))).scalar_one()
        stmt = (
            select(Transaction)
            .where(*filters)
            .order_by(Transaction.created_at.desc(), Transaction.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total
