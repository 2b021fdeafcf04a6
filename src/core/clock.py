"""Wall-clock source. Every timestamp in the application is an integer number of milliseconds since the epoch."""

import time
from typing import Callable

Clock = Callable[[], int]


def current_time_ms() -> int:
    return time.time_ns() // 1_000_000
