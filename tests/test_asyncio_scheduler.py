import asyncio

import pytest

from deskclock.adapters.scheduler_adapters.asyncio_scheduler import AsyncioScheduler


def test_call_later_fires_once():
    calls = []

    async def scenario():
        scheduler = AsyncioScheduler()
        handle = scheduler.call_later(0.01, lambda: calls.append("fired"))
        await asyncio.sleep(0.05)
        return handle

    handle = asyncio.run(scenario())

    assert calls == ["fired"]
    assert handle.cancelled()


def test_cancelled_call_later_never_fires():
    calls = []

    async def scenario():
        scheduler = AsyncioScheduler()
        handle = scheduler.call_later(0.01, lambda: calls.append("fired"))
        handle.cancel()
        await asyncio.sleep(0.05)

    asyncio.run(scenario())

    assert calls == []


def test_call_every_repeats_until_cancelled():
    calls = []

    async def scenario():
        scheduler = AsyncioScheduler()
        handle = scheduler.call_every(0.01, lambda: calls.append(1))
        await asyncio.sleep(0.1)
        handle.cancel()
        count = len(calls)
        await asyncio.sleep(0.05)
        return count

    count = asyncio.run(scenario())

    assert count >= 2
    assert len(calls) == count


def test_callback_can_cancel_its_own_recurring_handle():
    calls = []
    handles = []

    def callback():
        calls.append(1)
        handles[0].cancel()

    async def scenario():
        scheduler = AsyncioScheduler()
        handles.append(scheduler.call_every(0.01, callback))
        await asyncio.sleep(0.05)

    asyncio.run(scenario())

    assert calls == [1]


def test_failing_callback_keeps_recurring():
    calls = []

    def callback():
        calls.append(1)
        raise RuntimeError("boom")

    async def scenario():
        scheduler = AsyncioScheduler()
        handle = scheduler.call_every(0.01, callback)
        await asyncio.sleep(0.06)
        handle.cancel()

    asyncio.run(scenario())

    assert len(calls) >= 2


def test_non_positive_interval_is_rejected():
    async def scenario():
        AsyncioScheduler().call_every(0, lambda: None)

    with pytest.raises(ValueError):
        asyncio.run(scenario())
