import asyncio
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from trainer_ledger.models import WithdrawalRequest, WalletTransaction
from trainer_ledger.models.wallet_transaction import EntryType
from trainer_ledger.models.withdrawal_request import WithdrawalStatus
from trainer_ledger.services.errors import (
    AlreadyCompleted,
    BelowMinimum,
    InsufficientBalance,
    InvalidAmount,
    InvalidTransition,
    NotFound,
)
from trainer_ledger.services.withdrawal_service import WithdrawalService
from tests.conftest import pay


@pytest.fixture
def workflow(db, locks):
    return WithdrawalService(db, locks)


async def _count(db, model) -> int:
    return (await db.execute(select(func.count(model.id)))).scalar_one()


async def test_submit_reserves_available_balance(ledger, workflow) -> None:
    await pay(ledger, "trainer_1", 2500)  # balance 2000

    request = await workflow.submit("trainer_1", Decimal("1500"), "ravi@okaxis")
    assert request.status == WithdrawalStatus.PENDING

    wallet = await ledger.get_wallet("trainer_1")
    assert wallet.balance == Decimal("2000")
    assert wallet.reserved == Decimal("1500")
    assert wallet.available_balance == Decimal("500")

    with pytest.raises(InsufficientBalance):
        await workflow.submit("trainer_1", Decimal("600"), "ravi@okaxis")

    assert await _count(ledger.db, WithdrawalRequest) == 1


async def test_submit_over_balance_creates_nothing(ledger, workflow) -> None:
    await pay(ledger, "trainer_1", 2500)

    with pytest.raises(InsufficientBalance):
        await workflow.submit("trainer_1", Decimal("2000.01"), "ravi@okaxis")

    assert await _count(ledger.db, WithdrawalRequest) == 0


async def test_submit_below_minimum(ledger, workflow) -> None:
    await pay(ledger, "trainer_1", 2500)

    with pytest.raises(BelowMinimum):
        await workflow.submit("trainer_1", Decimal("499.99"), "ravi@okaxis")
    with pytest.raises(InvalidAmount):
        await workflow.submit("trainer_1", Decimal("-500"), "ravi@okaxis")

    assert await _count(ledger.db, WithdrawalRequest) == 0


async def test_submit_for_unknown_trainer(workflow) -> None:
    with pytest.raises(NotFound):
        await workflow.submit("ghost", Decimal("500"), "ghost@okaxis")


async def test_exact_available_balance_can_be_withdrawn(ledger, workflow) -> None:
    await pay(ledger, "trainer_1", 2500)
    await workflow.submit("trainer_1", Decimal("1500"), "ravi@okaxis")

    request = await workflow.submit("trainer_1", Decimal("500"), "ravi@okaxis")
    assert request.amount == Decimal("500")
    assert await ledger.available_balance("trainer_1") == Decimal("0")


async def test_concurrent_submits_cannot_overspend(ledger, session_factory, locks) -> None:
    await pay(ledger, "trainer_1", 2500)  # balance 2000

    async def attempt(amount: str):
        async with session_factory() as session:
            request = await WithdrawalService(session, locks).submit("trainer_1", Decimal(amount), "ravi@okaxis")
            return request.id

    results = await asyncio.gather(attempt("1200"), attempt("1000"), return_exceptions=True)

    accepted = [r for r in results if isinstance(r, int)]
    refused = [r for r in results if isinstance(r, Exception)]
    assert len(accepted) == 1
    assert len(refused) == 1
    assert isinstance(refused[0], InsufficientBalance)
    assert await _count(ledger.db, WithdrawalRequest) == 1


async def test_many_concurrent_submits_never_exceed_balance(ledger, session_factory, locks) -> None:
    await pay(ledger, "trainer_1", 2500)  # balance 2000

    async def attempt():
        async with session_factory() as session:
            try:
                await WithdrawalService(session, locks).submit("trainer_1", Decimal("500"), "ravi@okaxis")
                return True
            except InsufficientBalance:
                return False

    results = await asyncio.gather(*(attempt() for _ in range(6)))

    assert results.count(True) == 4
    assert await ledger.reserved_amount("trainer_1") == Decimal("2000")


async def test_full_lifecycle_debits_once(ledger, workflow) -> None:
    await pay(ledger, "trainer_1", 2500)
    request = await workflow.submit("trainer_1", Decimal("1500"), "ravi@okaxis", reason="Fuel money")
    request_id = request.id

    approved = await workflow.approve(request_id)
    assert approved.status == WithdrawalStatus.APPROVED
    assert approved.decision_date is not None
    assert await ledger.compute_balance("trainer_1") == Decimal("2000")
    assert await ledger.available_balance("trainer_1") == Decimal("500")

    completed = await workflow.complete(request_id)
    assert completed.status == WithdrawalStatus.COMPLETED
    assert completed.completed_at is not None

    wallet = await ledger.get_wallet("trainer_1")
    assert wallet.balance == Decimal("500")
    assert wallet.total_withdrawn == Decimal("1500")
    assert wallet.reserved == Decimal("0")
    assert wallet.total_earnings - wallet.total_withdrawn == wallet.balance

    with pytest.raises(AlreadyCompleted):
        await workflow.complete(request_id)

    entries, _ = await ledger.list_transactions("trainer_1")
    debits = [e for e in entries if e.entry_type == EntryType.DEBIT]
    assert len(debits) == 1
    assert debits[0].related_withdrawal_id == request_id
    assert await ledger.compute_balance("trainer_1") == Decimal("500")


async def test_complete_requires_approval(ledger, workflow) -> None:
    await pay(ledger, "trainer_1", 2500)
    request = await workflow.submit("trainer_1", Decimal("1500"), "ravi@okaxis")
    request_id = request.id

    with pytest.raises(InvalidTransition):
        await workflow.complete(request_id)

    assert await _count(ledger.db, WalletTransaction) == 1
    assert (await workflow.get_request(request_id)).status == WithdrawalStatus.PENDING


async def test_reject_after_approve_is_invalid(ledger, workflow) -> None:
    await pay(ledger, "trainer_1", 2500)
    request = await workflow.submit("trainer_1", Decimal("1500"), "ravi@okaxis")
    request_id = request.id
    await workflow.approve(request_id)

    with pytest.raises(InvalidTransition):
        await workflow.reject(request_id)

    assert (await workflow.get_request(request_id)).status == WithdrawalStatus.APPROVED


async def test_reject_releases_reservation(ledger, workflow) -> None:
    await pay(ledger, "trainer_1", 2500)
    request = await workflow.submit("trainer_1", Decimal("1500"), "ravi@okaxis")

    rejected = await workflow.reject(request.id)
    assert rejected.status == WithdrawalStatus.REJECTED
    assert await ledger.available_balance("trainer_1") == Decimal("2000")

    again = await workflow.submit("trainer_1", Decimal("2000"), "ravi@okaxis")
    assert again.status == WithdrawalStatus.PENDING


@pytest.mark.parametrize("terminal", [WithdrawalStatus.REJECTED, WithdrawalStatus.COMPLETED])
async def test_terminal_states_cannot_move(ledger, workflow, terminal) -> None:
    await pay(ledger, "trainer_1", 2500)
    request = await workflow.submit("trainer_1", Decimal("1000"), "ravi@okaxis")
    request_id = request.id
    if terminal == WithdrawalStatus.REJECTED:
        await workflow.reject(request_id)
    else:
        await workflow.approve(request_id)
        await workflow.complete(request_id)

    with pytest.raises(InvalidTransition):
        await workflow.approve(request_id)
    with pytest.raises(InvalidTransition):
        await workflow.reject(request_id)


async def test_update_status_dispatches_and_refuses_pending(ledger, workflow) -> None:
    await pay(ledger, "trainer_1", 2500)
    request = await workflow.submit("trainer_1", Decimal("1000"), "ravi@okaxis")
    request_id = request.id

    assert (await workflow.update_status(request_id, WithdrawalStatus.APPROVED)).status == WithdrawalStatus.APPROVED

    with pytest.raises(InvalidTransition):
        await workflow.update_status(request_id, WithdrawalStatus.PENDING)

    assert (await workflow.update_status(request_id, WithdrawalStatus.COMPLETED)).status == WithdrawalStatus.COMPLETED


async def test_unknown_request(workflow) -> None:
    with pytest.raises(NotFound):
        await workflow.approve(404)


async def test_list_requests_filters(ledger, workflow) -> None:
    await pay(ledger, "trainer_1", 2500)
    await pay(ledger, "trainer_2", 2500)
    first = await workflow.submit("trainer_1", Decimal("500"), "a@okaxis")
    await workflow.submit("trainer_1", Decimal("600"), "a@okaxis")
    await workflow.submit("trainer_2", Decimal("700"), "b@okaxis")
    await workflow.approve(first.id)

    mine = await workflow.list_requests(trainer_id="trainer_1")
    assert [r.amount for r in mine] == [Decimal("600"), Decimal("500")]

    pending = await workflow.list_requests(status=WithdrawalStatus.PENDING)
    assert {r.trainer_id for r in pending} == {"trainer_1", "trainer_2"}
    assert len(pending) == 2
