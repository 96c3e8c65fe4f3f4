# deskclock/core/modes.py
from enum import Enum

class Mode(Enum):
    TIME = "TIME"
    DATE = "DATE"
    TEMP = "TEMP"
    STOPWATCH = "STOPWATCH"
    TIMER = "TIMER"

# cycle order
MODES = (Mode.TIME, Mode.DATE, Mode.TEMP, Mode.STOPWATCH, Mode.TIMER)

# auto-cycle only walks the passive faces: TIME, DATE, TEMP
AUTO_CYCLE_LENGTH = 3
