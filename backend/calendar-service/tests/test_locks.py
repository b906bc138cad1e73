import asyncio

import pytest

from calendar_service.core.locks import KeyedLockRegistry

pytestmark = pytest.mark.asyncio


async def test_same_key_is_serialized():
    locks = KeyedLockRegistry()
    events = []

    async def worker(name):
        async with locks.hold([("alice", 1, 2024)]):
            events.append(f"{name}-in")
            await asyncio.sleep(0.01)
            events.append(f"{name}-out")

    await asyncio.gather(worker("a"), worker("b"))

    assert events in (
        ["a-in", "a-out", "b-in", "b-out"],
        ["b-in", "b-out", "a-in", "a-out"],
    )


async def test_different_keys_do_not_block_each_other():
    locks = KeyedLockRegistry()
    inside = asyncio.Event()
    release = asyncio.Event()

    async def holder():
        async with locks.hold([("alice", 1, 2024)]):
            inside.set()
            await release.wait()

    task = asyncio.create_task(holder())
    await inside.wait()

    # 다른 키는 바로 잡힌다
    async with locks.hold([("bob", 1, 2024)]):
        pass

    release.set()
    await task


async def test_registry_forgets_unused_keys():
    locks = KeyedLockRegistry()

    async with locks.hold([("alice", 1, 2024), ("alice", 1, 2025)]):
        assert len(locks) == 2

    assert len(locks) == 0


async def test_overlapping_multi_key_holds_do_not_deadlock():
    locks = KeyedLockRegistry()
    k1 = ("alice", 1, 2024)
    k2 = ("alice", 1, 2025)

    async def worker(keys):
        async with locks.hold(keys):
            await asyncio.sleep(0.01)

    await asyncio.wait_for(
        asyncio.gather(worker([k1, k2]), worker([k2, k1]), worker([k1, k1])),
        timeout=2,
    )
    assert len(locks) == 0


async def test_lock_is_released_on_error():
    locks = KeyedLockRegistry()
    key = ("alice", 1, 2024)

    with pytest.raises(RuntimeError):
        async with locks.hold([key]):
            raise RuntimeError("boom")

    assert len(locks) == 0
    async with locks.hold([key]):
        pass
