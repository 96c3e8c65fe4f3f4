import pytest
import pytz

from deskclock.adapters.store_adapters import MemoryStoreAdapter
from deskclock.core.snapshot import ClockSnapshot
from deskclock.tools.time_tools import AlarmConfig, AlarmScheduler, AlarmStatus, ClockTick
from deskclock.utils.custom_exception import InvalidAlarmTimeError
from tests.test_doubles import FailingStore, epoch_ms


@pytest.fixture
def alarm(store, scheduler):
    return AlarmScheduler(store, scheduler, tz=pytz.utc)


@pytest.fixture
def wired(alarm, scheduler, clock):
    """An alarm fed by a running 1 Hz clock tick, as the desk clock wires it."""
    clock_tick = ClockTick(scheduler, clock)
    clock_tick.on_tick.add_listener(alarm.check)
    clock_tick.start()
    return alarm


def record(event):
    calls = []
    event.add_listener(lambda **kwargs: calls.append(kwargs))
    return calls


class TestConfig:
    def test_defaults(self, alarm):
        assert alarm.config == AlarmConfig(enabled=False, time="07:30")
        assert alarm.status is AlarmStatus.IDLE
        assert alarm.indicator() == "AL: OFF"

    def test_save_persists_and_arms(self, alarm, store):
        alarm.save(True, "06:45")

        assert alarm.status is AlarmStatus.ARMED
        assert alarm.indicator() == "AL: 06:45"
        assert store.load("alarm") == {"enabled": True, "time": "06:45"}

    def test_reload_restores_config(self, scheduler):
        store = MemoryStoreAdapter({"alarm": '{"enabled": true, "time": "22:05"}'})
        alarm = AlarmScheduler(store, scheduler)

        assert alarm.config == AlarmConfig(enabled=True, time="22:05")

    @pytest.mark.parametrize("raw", ['"07:30"', '{"enabled": true, "time": "7:3"}', '{"enabled": true}', "[1, 2]"])
    def test_malformed_stored_alarm_uses_defaults(self, scheduler, raw):
        alarm = AlarmScheduler(MemoryStoreAdapter({"alarm": raw}), scheduler)

        assert alarm.config == AlarmConfig()

    @pytest.mark.parametrize("bad", ["24:00", "7:30", "07:60", "0730", "", None, "ab:cd"])
    def test_invalid_time_is_rejected_and_not_applied(self, alarm, store, bad):
        with pytest.raises(InvalidAlarmTimeError):
            alarm.save(True, bad)

        assert alarm.config == AlarmConfig()
        assert store.load("alarm") is None

    def test_invalid_time_is_a_value_error(self, alarm):
        with pytest.raises(ValueError):
            alarm.save(True, "25:00")

    def test_save_with_failing_store_still_applies(self, scheduler):
        alarm = AlarmScheduler(FailingStore(), scheduler)
        alarm.save(True, "05:00")

        assert alarm.config.time == "05:00"
        assert alarm.status is AlarmStatus.ARMED

    def test_save_emits_change(self, alarm):
        changes = record(alarm.on_change)
        alarm.save(True, "08:00")

        assert changes == [{"config": AlarmConfig(True, "08:00")}]


class TestRinging:
    def test_rings_once_across_the_matching_minute(self, wired, scheduler, clock):
        wired.save(True, "07:30")
        fired = record(wired.on_fired)

        scheduler.advance(29_000)
        assert fired == []
        assert not wired.ringing

        # 07:30:00
        scheduler.advance(1000)
        assert fired == [{"time": "07:30"}]
        assert wired.status is AlarmStatus.RINGING

        scheduler.advance(59_000)
        assert len(fired) == 1
        assert wired.ringing

    def test_auto_silence_after_sixty_seconds(self, wired, scheduler, clock):
        wired.save(True, "07:30")
        silenced = record(wired.on_silenced)
        scheduler.advance(30_000)
        assert wired.ringing

        scheduler.advance(59_999)
        assert wired.ringing

        scheduler.advance(1)
        assert clock.now_ms == epoch_ms(2024, 3, 5, 7, 31, 0)
        assert not wired.ringing
        assert silenced == [{"reason": "timeout"}]
        assert wired.status is AlarmStatus.ARMED

    def test_explicit_stop_does_not_re_ring_in_same_minute(self, wired, scheduler):
        wired.save(True, "07:30")
        fired = record(wired.on_fired)
        silenced = record(wired.on_silenced)
        scheduler.advance(35_000)
        wired.stop()

        scheduler.advance(20_000)
        assert len(fired) == 1
        assert not wired.ringing
        assert silenced == [{"reason": "stopped"}]
        assert scheduler.pending == 1

    def test_rings_again_the_next_day(self, wired, scheduler):
        wired.save(True, "07:30")
        fired = record(wired.on_fired)
        scheduler.advance(31_000)
        wired.stop()

        scheduler.advance(24 * 3600 * 1000)
        assert len(fired) == 2

    def test_disabled_alarm_never_rings(self, wired, scheduler):
        fired = record(wired.on_fired)
        scheduler.advance(120_000)

        assert fired == []

    def test_disabling_while_ringing_silences(self, wired, scheduler):
        wired.save(True, "07:30")
        silenced = record(wired.on_silenced)
        scheduler.advance(31_000)
        wired.save(False, "07:30")

        assert not wired.ringing
        assert wired.status is AlarmStatus.IDLE
        assert silenced == [{"reason": "disabled"}]
        # the auto-silence timer was cancelled along with the ring
        assert scheduler.pending == 1

    def test_stop_when_idle_is_a_no_op(self, alarm):
        silenced = record(alarm.on_silenced)
        alarm.stop()

        assert silenced == []

    def test_skipped_minute_is_not_caught_up(self, alarm, scheduler, clock):
        alarm.save(True, "07:30")
        fired = record(alarm.on_fired)
        alarm.check(ClockSnapshot(epoch_ms(2024, 3, 5, 7, 29, 59)))
        alarm.check(ClockSnapshot(epoch_ms(2024, 3, 5, 7, 31, 0)))

        assert fired == []

    def test_compares_in_configured_timezone(self, scheduler):
        alarm = AlarmScheduler(MemoryStoreAdapter(), scheduler, tz=pytz.timezone("Europe/Lisbon"))
        alarm.save(True, "08:30")
        # 07:30 UTC is 08:30 in Lisbon during summer time
        alarm.check(ClockSnapshot(epoch_ms(2024, 7, 1, 7, 30, 0)))

        assert alarm.ringing
