from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TimeWindow:
    from_ms: int | None = None
    to_ms: int | None = None

    @classmethod
    def unbounded(cls) -> TimeWindow:
        return cls(from_ms=None, to_ms=None)

    @classmethod
    def trailing(cls, *, now_ms: int, duration_ms: int) -> TimeWindow:
        return cls(from_ms=now_ms - duration_ms, to_ms=now_ms)

    def duration_ms(self, *, now_ms: int, fallback_from_ms: int) -> int:
        start = self.from_ms if self.from_ms is not None else fallback_from_ms
        end = self.to_ms if self.to_ms is not None else now_ms
        return end - start
