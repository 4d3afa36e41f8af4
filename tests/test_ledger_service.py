from decimal import Decimal

import pytest

from trainer_ledger.models.wallet_transaction import EntryType, EntryStatus
from trainer_ledger.services.errors import ConcurrencyConflict, InvalidAmount, NotFound, OrderConflict
from trainer_ledger.services.ledger_service import LedgerService
from trainer_ledger.services.payout_service import PayoutService
from tests.conftest import pay


async def test_payment_credits_trainer_share(ledger) -> None:
    transaction = await pay(ledger, "trainer_1", 9999)

    assert transaction.commission == Decimal("2000")
    assert transaction.trainer_share == Decimal("7999")
    assert transaction.commission + transaction.trainer_share == transaction.amount

    wallet = await ledger.get_wallet("trainer_1")
    assert wallet.balance == Decimal("7999")
    assert wallet.total_earnings == Decimal("7999")
    assert wallet.total_withdrawn == Decimal("0")
    assert wallet.ledger_version == 1


async def test_replayed_order_is_recorded_once(ledger) -> None:
    first, created = await ledger.record_payment(
        trainer_id="trainer_1", student_id="s1", amount=Decimal("2500"),
        plan_name="Gold", order_id="ORD-DUP", timestamp="2026-10-01T00:00:00Z",
    )
    first_id = first.id
    again, created_again = await ledger.record_payment(
        trainer_id="trainer_1", student_id="s1", amount=Decimal("2500"),
        plan_name="Gold", order_id="ORD-DUP", timestamp="2026-10-01T00:00:00Z",
    )

    assert created is True
    assert created_again is False
    assert again.id == first_id
    assert await ledger.compute_balance("trainer_1") == Decimal("2000")


async def test_invalid_payment_amount_writes_nothing(ledger) -> None:
    with pytest.raises(InvalidAmount):
        await ledger.record_payment(
            trainer_id="trainer_1", student_id="s1", amount=Decimal("0"),
            plan_name="Gold", order_id="ORD-ZERO",
        )
    with pytest.raises(NotFound):
        await ledger.get_wallet("trainer_1")


async def test_balance_ignores_pending_and_failed_entries(ledger) -> None:
    await pay(ledger, "trainer_1", 2500)

    async with ledger.trainer_unit("trainer_1"):
        await ledger.append_transaction(
            "trainer_1", EntryType.CREDIT, Decimal("100"), "Pending bonus", status=EntryStatus.PENDING,
        )
        await ledger.append_transaction(
            "trainer_1", EntryType.DEBIT, Decimal("50"), "Failed payout", status=EntryStatus.FAILED,
        )
        await ledger.append_transaction("trainer_1", EntryType.DEBIT, Decimal("300"), "Payout")

    wallet = await ledger.get_wallet("trainer_1")
    assert wallet.total_earnings == Decimal("2000")
    assert wallet.total_withdrawn == Decimal("300")
    assert wallet.balance == Decimal("1700")
    assert wallet.total_earnings - wallet.total_withdrawn == wallet.balance
    assert wallet.ledger_version == 4


async def test_append_outside_trainer_unit_is_refused(ledger) -> None:
    await pay(ledger, "trainer_1", 2500)
    with pytest.raises(RuntimeError):
        await ledger.append_transaction("trainer_1", EntryType.DEBIT, Decimal("10"), "Sneaky")


async def test_append_rejects_non_positive_amount(ledger) -> None:
    await pay(ledger, "trainer_1", 2500)
    with pytest.raises(InvalidAmount):
        async with ledger.trainer_unit("trainer_1"):
            await ledger.append_transaction("trainer_1", EntryType.DEBIT, Decimal("0"), "Nothing")


async def test_failed_unit_rolls_back_everything(ledger) -> None:
    await pay(ledger, "trainer_1", 2500)

    with pytest.raises(ValueError):
        async with ledger.trainer_unit("trainer_1"):
            await ledger.append_transaction("trainer_1", EntryType.DEBIT, Decimal("500"), "Payout")
            raise ValueError("boom")

    wallet = await ledger.get_wallet("trainer_1")
    assert wallet.balance == Decimal("2000")
    assert wallet.ledger_version == 1


async def test_unit_for_unknown_trainer_raises_not_found(ledger) -> None:
    with pytest.raises(NotFound):
        async with ledger.trainer_unit("ghost"):
            pass


async def test_list_transactions_most_recent_first_with_paging(ledger) -> None:
    for amount in (1000, 2000, 3000):
        await pay(ledger, "trainer_1", amount)

    entries, total = await ledger.list_transactions("trainer_1", limit=2, offset=0)
    assert total == 3
    assert [e.amount for e in entries] == [Decimal("2400"), Decimal("1600")]

    rest, total = await ledger.list_transactions("trainer_1", limit=2, offset=2)
    assert total == 3
    assert [e.amount for e in rest] == [Decimal("800")]


async def test_list_transactions_unknown_trainer(ledger) -> None:
    with pytest.raises(NotFound):
        await ledger.list_transactions("ghost")


async def test_trainers_are_isolated(ledger) -> None:
    await pay(ledger, "trainer_1", 2500)
    await pay(ledger, "trainer_2", 1000)

    assert await ledger.compute_balance("trainer_1") == Decimal("2000")
    assert await ledger.compute_balance("trainer_2") == Decimal("800")


async def test_balance_is_visible_from_another_session(ledger, session_factory, locks) -> None:
    await pay(ledger, "trainer_1", 2500)

    async with session_factory() as other:
        assert await LedgerService(other, locks).compute_balance("trainer_1") == Decimal("2000")


async def test_order_replayed_for_another_trainer_is_refused(ledger, db, locks) -> None:
    await ledger.record_payment(
        trainer_id="trainer_a", student_id="s1", amount=Decimal("2500"),
        plan_name="Gold", order_id="ORD-X", timestamp="2026-10-01T00:00:00Z",
    )

    with pytest.raises(OrderConflict) as exc_info:
        await ledger.record_payment(
            trainer_id="trainer_b", student_id="s1", amount=Decimal("2500"),
            plan_name="Gold", order_id="ORD-X", timestamp="2026-10-01T00:00:00Z",
        )
    assert exc_info.value.status_code == 409

    with pytest.raises(NotFound):
        await ledger.get_wallet("trainer_b")
    payouts = await PayoutService(db, locks).list_payouts()
    assert [p.trainer_id for p in payouts] == ["trainer_a"]
    assert await ledger.compute_balance("trainer_a") == Decimal("2000")


async def test_unique_violation_inside_unit_is_retryable_conflict(ledger) -> None:
    transaction = await pay(ledger, "trainer_1", 2500)
    transaction_id = transaction.id

    with pytest.raises(ConcurrencyConflict) as exc_info:
        async with ledger.trainer_unit("trainer_1"):
            await ledger.append_transaction(
                "trainer_1", EntryType.CREDIT, Decimal("2000"), "Duplicate credit",
                related_transaction_id=transaction_id,
            )
    assert exc_info.value.retryable is True
    assert exc_info.value.status_code == 409

    wallet = await ledger.get_wallet("trainer_1")
    assert wallet.balance == Decimal("2000")
    assert wallet.ledger_version == 1
    entries, total = await ledger.list_transactions("trainer_1")
    assert total == 1
