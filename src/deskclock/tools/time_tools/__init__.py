from deskclock.tools.time_tools.clock import ClockTick
from deskclock.tools.time_tools.stopwatch import StopwatchEngine
from deskclock.tools.time_tools.timer import TimerEngine
from deskclock.tools.time_tools.alarm import AlarmScheduler, AlarmConfig, AlarmStatus
from deskclock.tools.time_tools.mode_cycler import ModeCycler
