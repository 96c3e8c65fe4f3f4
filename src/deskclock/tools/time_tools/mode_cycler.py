from deskclock.core.heartbeat import Heartbeat
from deskclock.core.modes import AUTO_CYCLE_LENGTH, MODES, Mode
from deskclock.ports.scheduler_port import Scheduler
from deskclock.ports.store_port import PersistentStore
from deskclock.utils import Event
from deskclock.utils.config import AUTO_CYCLE_S
from deskclock.utils.logging_handler import setup_logger

logger = setup_logger(__name__)

STORE_KEY = "autoModeEnabled"


class ModeCycler:
    """
    Which face is showing. Manual cycling walks all five modes; auto-cycling
    every AUTO_CYCLE_S seconds only walks TIME, DATE and TEMP. Only the
    auto-cycle flag is persisted, never the index.
    """
    def __init__(self, store: PersistentStore, scheduler: Scheduler):
        self.store = store
        self.index = 0
        self.auto_enabled = bool(store.load(STORE_KEY, False))
        self.on_change = Event("modes.on_change")
        self._auto_heartbeat = Heartbeat(scheduler, AUTO_CYCLE_S, self.auto_advance)

    @property
    def mode(self) -> Mode:
        return MODES[self.index]

    def start(self):
        """Resumes auto-cycling if it was enabled in a previous session."""
        if self.auto_enabled:
            self._auto_heartbeat.start()

    def stop(self):
        self._auto_heartbeat.stop()

    def cycle(self) -> Mode:
        self.index = (self.index + 1) % len(MODES)
        logger.debug(f"Mode changed to {self.mode.name}.")
        self.on_change.emit(mode=self.mode)
        return self.mode

    def auto_advance(self) -> Mode:
        self.index = (self.index + 1) % AUTO_CYCLE_LENGTH
        self.on_change.emit(mode=self.mode)
        return self.mode

    def set_auto(self, enabled: bool):
        self.auto_enabled = bool(enabled)
        if not self.store.save(STORE_KEY, self.auto_enabled):
            logger.warning("Auto-cycle preference kept in memory only.")
        if self.auto_enabled:
            self._auto_heartbeat.start()
        else:
            self._auto_heartbeat.stop()
        logger.info(f"Auto-cycle {'enabled' if self.auto_enabled else 'disabled'}.")

    @property
    def auto_active(self) -> bool:
        return self._auto_heartbeat.active
