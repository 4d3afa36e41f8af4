import asyncio

from trainer_ledger.services.locks import TrainerLockRegistry


def test_same_trainer_shares_a_lock_while_referenced() -> None:
    registry = TrainerLockRegistry()
    lock = registry.get("t1")
    assert registry.get("t1") is lock
    assert registry.get("t2") is not lock


def test_unreferenced_locks_are_dropped() -> None:
    registry = TrainerLockRegistry()
    registry.get("t1")
    assert len(registry) == 0


async def test_hold_serializes_same_trainer() -> None:
    registry = TrainerLockRegistry()
    events = []

    async def worker(name: str):
        async with registry.hold("t1"):
            events.append(f"{name}-in")
            await asyncio.sleep(0.01)
            events.append(f"{name}-out")

    await asyncio.gather(worker("a"), worker("b"))
    assert events == ["a-in", "a-out", "b-in", "b-out"]


async def test_hold_does_not_block_other_trainers() -> None:
    registry = TrainerLockRegistry()
    events = []

    async def worker(trainer_id: str):
        async with registry.hold(trainer_id):
            events.append(f"{trainer_id}-in")
            await asyncio.sleep(0.01)
            events.append(f"{trainer_id}-out")

    await asyncio.gather(worker("t1"), worker("t2"))
    assert events[:2] == ["t1-in", "t2-in"]
