import os

# Keep the module-level engine off PostgreSQL during tests
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from trainer_ledger import models  # noqa: F401
from trainer_ledger.database import Base
from trainer_ledger.services.ledger_service import LedgerService
from trainer_ledger.services.locks import TrainerLockRegistry


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def locks():
    return TrainerLockRegistry()


@pytest.fixture
def ledger(db, locks):
    return LedgerService(db, locks)


_order_seq = iter(range(1, 1_000_000))


async def pay(ledger, trainer_id, amount, timestamp="2026-10-05T10:00:00+00:00", plan_name="Premium"):
    """Record a completed payment and return the transaction"""
    transaction, created = await ledger.record_payment(
        trainer_id=trainer_id,
        student_id="student_1",
        amount=Decimal(str(amount)),
        plan_name=plan_name,
        order_id=f"ORD-{next(_order_seq):06d}",
        timestamp=timestamp,
    )
    assert created
    return transaction
