import argparse
import asyncio
import re

from deskclock.adapters.scheduler_adapters.asyncio_scheduler import AsyncioScheduler
from deskclock.adapters.store_adapters import SqliteStoreAdapter
from deskclock.adapters.weather_adapters.open_meteo_adapter import OpenMeteoAdapter
from deskclock.core.desk_clock import DeskClock
from deskclock.core.snapshot import DisplayState
from deskclock.tools.weather_tools.temperature_feed import TemperatureFeed
from deskclock.utils.clock_format import timezone_or_local
from deskclock.utils.config import load_settings
from deskclock.utils.custom_exception import InvalidAlarmTimeError
from deskclock.utils.logging_handler import setup_logger
from deskclock.utils.time_conversions import parse_time_string

logger = setup_logger(__name__, console=False)


def render(state: DisplayState) -> str:
    snap = state.snapshot
    ring = "  ** RINGING **" if state.ringing else ""
    return f"[{snap.mode_label}] {snap.primary_text} {snap.secondary_text}  {state.alarm_indicator}{ring}"


def handle_user_command(desk_clock: DeskClock, command: str) -> bool:
    """Runs one console command. Returns False for an unknown command."""
    command = command.lower().strip()
    try:
        # --- Mode / display ---
        if command in ("", "cycle", "mode"):
            desk_clock.cycle_mode()
        elif command == "24h":
            desk_clock.toggle_24h()
        elif command == "celsius":
            desk_clock.toggle_celsius()
        elif command in ("auto on", "auto off"):
            desk_clock.set_auto_mode(command.endswith("on"))

        # --- Stopwatch ---
        elif command in ("start stopwatch", "pause stopwatch"):
            desk_clock.stopwatch_start_pause()
        elif command == "reset stopwatch":
            desk_clock.stopwatch_reset()

        # --- Timer ---
        elif command.startswith("start timer"):
            # no duration resumes or restarts the last one
            rest = command[len("start timer"):].strip()
            duration = parse_time_string(rest) if rest else None
            desk_clock.timer_start(duration)
        elif command == "pause timer":
            desk_clock.timer_pause()
        elif command == "resume timer":
            desk_clock.timer_resume()
        elif command == "reset timer":
            desk_clock.timer_reset()

        # --- Alarm ---
        elif command == "alarm off":
            desk_clock.alarm_save(False, desk_clock.alarm.config.time)
        elif command.startswith("alarm"):
            m = re.search(r"(\d{1,2}):(\d{2})", command)
            if not m:
                raise InvalidAlarmTimeError(f"No HH:MM found in '{command}'")
            desk_clock.alarm_save(True, f"{int(m.group(1)):02}:{m.group(2)}")
        elif command == "stop alarm":
            desk_clock.alarm_stop()

        elif command != "show":
            raise ValueError(f"Unknown command: {command}")
    except InvalidAlarmTimeError as e:
        logger.warning(str(e))
        print(e)
        return False
    except ValueError:
        logger.info("unknown command is given.....")
        return False
    print(render(desk_clock.display_state()))
    return True


async def user_input_loop(desk_clock, loop=None):
    loop = asyncio.get_running_loop() if loop is None else loop
    while True:
        user_input = await loop.run_in_executor(None, input, ">>> ")
        if user_input.strip().lower() in ("quit", "exit"):
            return
        handle_user_command(desk_clock, user_input)


async def main(settings):
    loop = asyncio.get_running_loop()
    scheduler = AsyncioScheduler(loop)
    store = SqliteStoreAdapter(settings.db_path)
    desk_clock = DeskClock(store, scheduler, tz=timezone_or_local(settings.timezone))
    feed = TemperatureFeed(OpenMeteoAdapter(), settings, scheduler, loop=loop)
    feed.on_update.add_listener(desk_clock.update_temperature)

    desk_clock.alarm.on_fired.add_listener(lambda time: print(f"\nALARM {time}!  (type 'stop alarm')"))
    desk_clock.timer.on_expired.add_listener(lambda: print("\nTimer: Time's up!"))

    desk_clock.start()
    feed.start()
    try:
        await user_input_loop(desk_clock, loop=loop)
    finally:
        feed.stop()
        desk_clock.stop()
        store.close()


def run():
    parser = argparse.ArgumentParser(description="Interactive desk clock.")
    parser.add_argument("--db-path", type=str)
    parser.add_argument("--timezone", type=str)
    parser.add_argument("--location", type=str)
    parsed = parser.parse_args()
    settings = load_settings()
    for field in ("db_path", "timezone", "location"):
        value = getattr(parsed, field)
        if value:
            setattr(settings, field, value)
    try:
        asyncio.run(main(settings))
    except KeyboardInterrupt:
        logger.info("="*50)
        logger.info("Exiting.")
        logger.info("="*50)

if __name__ == "__main__":
    run()
