import asyncio

from deskclock.adapters.fastapi_adapters.helper_adapters import ConnectionManager
from deskclock.core.snapshot import DisplayState, ModeSnapshot


def make_state(primary="07:30"):
    return DisplayState(
        mode="TIME", snapshot=ModeSnapshot(primary, "", "TIME"), format_label="24H",
        alarm_indicator="AL: OFF", ringing=False, alarm_ringing=False, timer_expired=False,
        auto_mode=False, epoch_ms=0,
    )


class FakeWebSocket:
    def __init__(self, fail=False):
        self.sent = []
        self.accepted = False
        self.fail = fail

    async def accept(self):
        self.accepted = True

    async def send_text(self, message):
        if self.fail:
            raise RuntimeError("closed")
        self.sent.append(message)


def test_broadcast_dedupes_and_replays_last_state():
    async def scenario():
        manager = ConnectionManager(loop=asyncio.get_running_loop())
        first = FakeWebSocket()
        await manager.connect(first)
        manager.broadcast_display(make_state())
        manager.broadcast_display(make_state())
        await asyncio.sleep(0)

        late = FakeWebSocket()
        await manager.connect(late)
        return first, late

    first, late = asyncio.run(scenario())

    assert len(first.sent) == 1
    assert late.accepted
    assert late.sent == first.sent


def test_failing_client_is_dropped():
    async def scenario():
        manager = ConnectionManager(loop=asyncio.get_running_loop())
        broken = FakeWebSocket(fail=True)
        await manager.connect(broken)
        manager.broadcast_display(make_state("08:00"))
        await asyncio.sleep(0)
        return manager

    manager = asyncio.run(scenario())

    assert manager.active_connections == set()


def test_pending_sends_are_tracked_until_done():
    async def scenario():
        manager = ConnectionManager(loop=asyncio.get_running_loop())
        await manager.connect(FakeWebSocket())
        manager.broadcast_display(make_state("09:00"))
        pending = len(manager._send_tasks)
        for _ in range(3):
            await asyncio.sleep(0)
        return pending, len(manager._send_tasks)

    pending, remaining = asyncio.run(scenario())

    assert pending == 1
    assert remaining == 0
