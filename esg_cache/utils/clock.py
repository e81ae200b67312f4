"""
Millisecond clock helpers.

All cache timestamps are integer milliseconds since the epoch.
"""

import time
from typing import Callable

Clock = Callable[[], int]

MS_PER_SECOND = 1000
MS_PER_HOUR = 60 * 60 * MS_PER_SECOND
MS_PER_DAY = 24 * MS_PER_HOUR


def now_ms() -> int:
    """Get current wall-clock time in milliseconds."""
    return int(time.time() * MS_PER_SECOND)
