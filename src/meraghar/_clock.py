"""Monotonic clock port and system adapter.

The controller only needs elapsed time (how long a status probe took),
so the port exposes a single ``now()`` returning monotonic seconds.
Wall-clock time is never used: NTP steps would corrupt latency figures.
"""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class ClockPort(Protocol):
    """Source of monotonic time used for latency measurement.

    Tests inject :class:`~meraghar.testing.FakeClock` to make
    ``Reachable.latency_s`` deterministic.
    """

    def now(self) -> float:
        """Return monotonic time in seconds from an arbitrary epoch."""
        ...


class SystemClock:
    """Production clock wrapping ``time.monotonic()``."""

    def now(self) -> float:
        return time.monotonic()
