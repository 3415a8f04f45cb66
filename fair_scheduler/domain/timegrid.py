# fair_scheduler/domain/timegrid.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator, List


@dataclass(frozen=True)
class TimeGrid:
    """Per-day start offsets (minutes from local midnight) between the day bounds"""
    day_start_minute: int
    day_end_minute: int
    step_minutes: int
    duration_minutes: int

    def start_offsets(self) -> List[int]:
        if self.step_minutes <= 0 or self.duration_minutes <= 0:
            return []
        out = []
        offset = self.day_start_minute
        while offset + self.duration_minutes <= self.day_end_minute:
            out.append(offset)
            offset += self.step_minutes
        return out

    def slots_per_day(self) -> int:
        return len(self.start_offsets())


def iter_dates(first: date, last: date) -> Iterator[date]:
    d = first
    while d <= last:
        yield d
        d += timedelta(days=1)
