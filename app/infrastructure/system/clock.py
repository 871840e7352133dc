from __future__ import annotations

import time

from app.application.ports.clock_port import ClockPort


class SystemClock(ClockPort):
    def now_ms(self) -> int:
        return time.time_ns() // 1_000_000
