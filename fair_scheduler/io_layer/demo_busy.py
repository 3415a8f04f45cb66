# fair_scheduler/io_layer/demo_busy.py
from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Optional

from fair_scheduler.config import DEFAULT_CONFIG, DemoFallbackConfig, DemoPattern
from fair_scheduler.domain.localtime import UTC, as_utc
from fair_scheduler.domain.models import BusyInterval


def monday_of(d: date) -> date:
    return d - timedelta(days=d.isoweekday() - 1)


@dataclass(frozen=True)
class DemoFallbackProvider:
    """
    Deterministic synthetic busy blocks for attendees with no calendar data.

    base_week is injected by the caller (normally the current week's Monday),
    so the same inputs always give the same blocks.
    """
    base_week: date
    cfg: DemoFallbackConfig = DEFAULT_CONFIG.demo

    def _shift_minutes(self, user_id: str, week_key: str, pattern: DemoPattern) -> int:
        digest = hashlib.sha256(f"{user_id}:{week_key}:{pattern.day_offset}".encode("utf-8")).hexdigest()
        raw = int(digest[:4], 16)
        span = self.cfg.max_shift_minutes * 2 + 1
        return raw % span - self.cfg.max_shift_minutes

    def _clamp_start(self, base: int, duration: int) -> int:
        max_start = max(self.cfg.earliest_minute, self.cfg.latest_minute - duration)
        return min(max(base, self.cfg.earliest_minute), max_start)

    def busy_blocks(self, user_id: Optional[str], range_start: datetime, range_end: datetime) -> List[BusyInterval]:
        if not user_id:
            return []
        rs, re_ = as_utc(range_start), as_utc(range_end)
        monday = monday_of(self.base_week)
        out: List[BusyInterval] = []

        for week in range(self.cfg.week_spread):
            week_start = monday + timedelta(weeks=week)
            week_key = week_start.isoformat()
            for pattern in self.cfg.patterns:
                shift = self._shift_minutes(user_id, week_key, pattern)
                start_minute = self._clamp_start(pattern.base_start_minute + shift, pattern.duration_minutes)
                day = week_start + timedelta(days=pattern.day_offset)
                start = datetime(day.year, day.month, day.day, tzinfo=UTC) + timedelta(minutes=start_minute)
                end = start + timedelta(minutes=pattern.duration_minutes)
                if end <= rs or start >= re_:
                    continue
                out.append(BusyInterval(user_id=user_id, start_utc=start, end_utc=end, created_at=start))
        return out
