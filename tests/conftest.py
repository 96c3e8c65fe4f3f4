"""Shared pytest fixtures for the desk clock tests."""
import os
import tempfile

# loggers are created at import time, keep their files out of the source tree
os.environ.setdefault("DESKCLOCK_LOG_DIR", tempfile.mkdtemp(prefix="deskclock-logs-"))

import pytest
import pytz

from deskclock.adapters.store_adapters import MemoryStoreAdapter
from deskclock.core.desk_clock import DeskClock
from tests.test_doubles import FakeClock, ManualScheduler, epoch_ms

# Tuesday 5 March 2024, 07:29:30 UTC
START_MS = epoch_ms(2024, 3, 5, 7, 29, 30)


@pytest.fixture
def clock():
    return FakeClock(START_MS)


@pytest.fixture
def scheduler(clock):
    return ManualScheduler(clock)


@pytest.fixture
def store():
    return MemoryStoreAdapter()


@pytest.fixture
def desk_clock(store, scheduler, clock):
    return DeskClock(store, scheduler, clock, tz=pytz.utc)
