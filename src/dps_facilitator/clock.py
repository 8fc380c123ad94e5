"""
Time source used for invoice and quote expiration
"""

import time
from typing import Protocol


class Clock(Protocol):
    """Clock interface"""

    def now(self) -> int:
        """Current time in epoch milliseconds"""
        ...


class SystemClock:
    """Wall-clock time source"""

    def now(self) -> int:
        return time.time_ns() // 1_000_000
