import argparse
import asyncio
from dataclasses import dataclass
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, Field

from deskclock.adapters.fastapi_adapters.helper_adapters import ConnectionManager
from deskclock.adapters.scheduler_adapters.asyncio_scheduler import AsyncioScheduler
from deskclock.adapters.store_adapters import SqliteStoreAdapter
from deskclock.adapters.weather_adapters.open_meteo_adapter import OpenMeteoAdapter
from deskclock.core.desk_clock import DeskClock
from deskclock.tools.weather_tools.temperature_feed import TemperatureFeed
from deskclock.utils.clock_format import timezone_or_local
from deskclock.utils.config import Settings, load_settings
from deskclock.utils.custom_exception import InvalidAlarmTimeError
from deskclock.utils.logging_handler import setup_logger

logger = setup_logger(__name__)


@dataclass
class Args:
    db_path: Optional[str] = None
    timezone: Optional[str] = None
    location: Optional[str] = None
    fastapi_host: Optional[str] = None
    fastapi_port: Optional[int] = None


class TimerStartBody(BaseModel):
    duration_ms: int

class TimerSetBody(BaseModel):
    minutes: int = Field(0, ge=0)
    seconds: int = Field(0, ge=0)

class AlarmBody(BaseModel):
    enabled: bool
    time: str

class AutoModeBody(BaseModel):
    enabled: bool


def apply_args(settings: Settings, args: Args) -> Settings:
    """Command-line flags win over the environment."""
    if args.db_path:
        settings.db_path = args.db_path
    if args.timezone:
        settings.timezone = args.timezone
    if args.location:
        settings.location = args.location
    if args.fastapi_host:
        settings.host = args.fastapi_host
    if args.fastapi_port:
        settings.port = args.fastapi_port
    return settings


# --- APP FACTORY ---
def create_app(settings: Settings, weather_service=None):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        loop = asyncio.get_running_loop()
        scheduler = AsyncioScheduler(loop)
        store = SqliteStoreAdapter(settings.db_path)
        manager = ConnectionManager(loop=loop)

        desk_clock = DeskClock(store, scheduler, tz=timezone_or_local(settings.timezone))
        feed = TemperatureFeed(weather_service or OpenMeteoAdapter(), settings, scheduler, loop=loop)
        feed.on_update.add_listener(desk_clock.update_temperature)
        desk_clock.on_display.add_listener(manager.broadcast_display)

        app.state.connection_manager = manager
        app.state.desk_clock = desk_clock
        app.state.temperature_feed = feed

        desk_clock.start()
        feed.start()

        yield

        feed.stop()
        desk_clock.stop()
        store.close()

    app = FastAPI(lifespan=lifespan)

    def clock() -> DeskClock:
        return app.state.desk_clock

    def state():
        return clock().display_state().to_dict()

    @app.get("/state")
    async def get_state():
        return state()

    @app.get("/status")
    async def get_status():
        return clock().get_status()

    @app.post("/mode/cycle")
    async def cycle_mode():
        clock().cycle_mode()
        return state()

    @app.post("/stopwatch/start-pause")
    async def stopwatch_start_pause():
        clock().stopwatch_start_pause()
        return state()

    @app.post("/stopwatch/reset")
    async def stopwatch_reset():
        clock().stopwatch_reset()
        return state()

    @app.post("/timer/start")
    async def timer_start(body: TimerStartBody):
        clock().timer_start(body.duration_ms)
        return state()

    @app.post("/timer/set")
    async def timer_set(body: TimerSetBody):
        clock().timer_set(body.minutes, body.seconds)
        return state()

    @app.post("/timer/resume")
    async def timer_resume():
        clock().timer_resume()
        return state()

    @app.post("/timer/pause")
    async def timer_pause():
        clock().timer_pause()
        return state()

    @app.post("/timer/reset")
    async def timer_reset():
        clock().timer_reset()
        return state()

    @app.post("/alarm")
    async def alarm_save(body: AlarmBody):
        try:
            clock().alarm_save(body.enabled, body.time)
        except InvalidAlarmTimeError as e:
            raise HTTPException(status_code=422, detail=str(e))
        return state()

    @app.post("/alarm/stop")
    async def alarm_stop():
        clock().alarm_stop()
        return state()

    @app.post("/settings/24h")
    async def toggle_24h():
        clock().toggle_24h()
        return state()

    @app.post("/settings/celsius")
    async def toggle_celsius():
        clock().toggle_celsius()
        return state()

    @app.post("/settings/auto-mode")
    async def set_auto_mode(body: AutoModeBody):
        clock().set_auto_mode(body.enabled)
        return state()

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        manager = app.state.connection_manager
        await manager.connect(websocket)
        try:
            while True:
                # clients only listen; anything they send is ignored
                await websocket.receive_text()
        except WebSocketDisconnect:
            manager.disconnect(websocket)

    return app


def run_app(settings: Settings) -> None:
    app = create_app(settings)
    try:
        uvicorn.run(app, host=settings.host, port=settings.port)
    except Exception as e:
        logger.error(f"error in run_app: {e}")

def main() -> None:
    parser = argparse.ArgumentParser(description="Desk clock service.")
    parser.add_argument("--db-path", type=str)
    parser.add_argument("--timezone", type=str)
    parser.add_argument("--location", type=str)
    parser.add_argument("--fastapi-host", type=str)
    parser.add_argument("--fastapi-port", type=int)
    parsed_args = parser.parse_args()
    run_app(apply_args(load_settings(), Args(**vars(parsed_args))))

if __name__ == "__main__":
    logger.info("="*50)
    main()
