"""Database Seed Script - Populates demo trainers, sales and withdrawals"""
import asyncio
import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select

from trainer_ledger.database import AsyncSessionLocal, init_db
from trainer_ledger.models import TrainerAccount
from trainer_ledger.services.ledger_service import LedgerService
from trainer_ledger.services.withdrawal_service import WithdrawalService


PLANS = {
    "Basic": Decimal("3999"),
    "Gold": Decimal("7499"),
    "Premium": Decimal("9999"),
}

TRAINERS = {
    "trainer_ravi": ["Premium", "Gold", "Basic", "Premium"],
    "trainer_anita": ["Gold", "Gold", "Basic"],
    "trainer_vikram": ["Basic"],
}


async def seed_database():
    """Seed the database with demo data"""
    print("=" * 60)
    print("DATABASE SEEDING STARTED")
    print("=" * 60)

    await init_db()

    async with AsyncSessionLocal() as session:
        result = await session.execute(select(TrainerAccount))
        if result.scalars().first():
            print("\n⚠️  Database already seeded. Skipping...")
            return

        ledger = LedgerService(session)
        withdrawals = WithdrawalService(session)
        now = datetime.now(timezone.utc)

        print("\n1️⃣  Recording completed payments...")
        order_no = 0
        for trainer_id, plans in TRAINERS.items():
            print(f"\n   👤 Trainer: {trainer_id}")
            for i, plan in enumerate(plans):
                order_no += 1
                transaction, _ = await ledger.record_payment(
                    trainer_id=trainer_id,
                    student_id=f"student_{order_no:03d}",
                    amount=PLANS[plan],
                    plan_name=plan,
                    order_id=f"SEED-ORD-{order_no:04d}",
                    timestamp=(now - timedelta(days=35 * i)).isoformat(),
                )
                print(f"      ✓ {plan}: {transaction.amount} "
                      f"(commission {transaction.commission}, trainer {transaction.trainer_share})")

        print("\n2️⃣  Creating withdrawal requests...")
        pending = await withdrawals.submit("trainer_ravi", Decimal("5000"), "ravi@okaxis", reason="Monthly payout")
        print(f"   ✓ Pending request #{pending.id} for trainer_ravi")

        approved = await withdrawals.submit("trainer_anita", Decimal("2500"), "anita@oksbi")
        await withdrawals.approve(approved.id)
        print(f"   ✓ Approved request #{approved.id} for trainer_anita")

        completed = await withdrawals.submit("trainer_anita", Decimal("1000"), "anita@oksbi")
        await withdrawals.approve(completed.id)
        await withdrawals.complete(completed.id)
        print(f"   ✓ Completed request #{completed.id} for trainer_anita")

        print("\n" + "=" * 60)
        print("✅ DATABASE SEEDING COMPLETED SUCCESSFULLY")
        print("=" * 60)

        print("\n📊 WALLETS:")
        for trainer_id in TRAINERS:
            wallet = await ledger.get_wallet(trainer_id)
            print(f"   • {trainer_id}: balance {wallet.balance}, available {wallet.available_balance}")

        print("\n💡 NEXT STEPS:")
        print("   1. Start the API server: uvicorn trainer_ledger.main:app --reload")
        print("   2. Visit: http://localhost:8000/docs")
        print("   3. GET /api/v1/trainers/trainer_ravi/wallet")
        print("\n" + "=" * 60)


async def main():
    """Main entry point"""
    try:
        await seed_database()
    except Exception as e:
        print(f"\n❌ Seeding failed: {str(e)}")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
