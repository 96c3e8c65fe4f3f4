import asyncio
import inspect
from deskclock.utils import setup_logger

logger = setup_logger(__name__)


def _describe(listener) -> str:
    return getattr(listener, "__qualname__", None) or repr(listener)


class Event:
    """
    Listeners are called in subscription order on every emit. A listener that
    raises is logged and skipped; coroutine listeners are scheduled on the loop.
    """
    def __init__(self, name: str = "", loop: asyncio.AbstractEventLoop | None = None):
        self.name = name
        self._listeners = []
        self.loop = loop

    def __len__(self):
        return len(self._listeners)

    def add_listener(self, listener):
        if not callable(listener):
            raise ValueError("Listener must be callable")
        self._listeners.append(listener)

    def remove_listener(self, listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, *args, **kwargs):
        for listener in list(self._listeners):
            try:
                result = listener(*args, **kwargs)

                if inspect.iscoroutine(result):
                    loop = self.loop or _running_loop()
                    if loop is None:
                        result.close()
                        raise RuntimeError("Async listener requires event loop")
                    loop.call_soon_threadsafe(
                        asyncio.ensure_future,
                        self._safe_task(result, listener)
                    )

            except Exception:
                logger.exception(f"Error in {self.name or 'event'} listener {_describe(listener)}")

    async def _safe_task(self, coro, listener):
        try:
            await coro
        except Exception:
            logger.exception(f"Unhandled exception in async {self.name or 'event'} listener {_describe(listener)}")


def _running_loop():
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None
