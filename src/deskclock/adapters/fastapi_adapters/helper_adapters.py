import json
import asyncio
from typing import Optional

from fastapi import WebSocket

from deskclock.core.snapshot import DisplayState
from deskclock.utils.logging_handler import setup_logger

logger = setup_logger(__name__)


# --- CONNECTION MANAGER ---
class ConnectionManager:
    """Fans display states out to every connected websocket client."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.active_connections: set[WebSocket] = set()
        self.loop = loop
        self._last_message: Optional[str] = None
        # strong references so pending sends are not garbage collected
        self._send_tasks: set[asyncio.Task] = set()

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.add(websocket)
        if self._last_message is not None:
            await websocket.send_text(self._last_message)

    def disconnect(self, websocket: WebSocket):
        self.active_connections.discard(websocket)

    def broadcast_display(self, state: DisplayState):
        """Event listener: called synchronously from heartbeats on the loop thread."""
        msg = json.dumps({"type": "display", "data": state.to_dict()})
        if msg == self._last_message:
            return
        self._last_message = msg
        if not self.active_connections:
            return
        loop = self.loop or asyncio.get_running_loop()
        task = loop.create_task(self._send_to_all(msg))
        self._send_tasks.add(task)
        task.add_done_callback(self._send_tasks.discard)

    async def _send_to_all(self, message: str):
        for ws in list(self.active_connections):
            try:
                await ws.send_text(message)
            except Exception as e:
                logger.debug(f"Dropping websocket client: {e}")
                self.disconnect(ws)
