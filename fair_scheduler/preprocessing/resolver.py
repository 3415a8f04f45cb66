# fair_scheduler/preprocessing/resolver.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple

from fair_scheduler.config import AppConfig, DEFAULT_CONFIG
from fair_scheduler.domain.intervals import covers, normalize, subtract, union
from fair_scheduler.domain.localtime import (
    as_utc,
    get_zone,
    local_dates_touched,
    local_minutes_of_day,
    override_to_local_interval_for_date,
    widen_over_repeated_range,
)
from fair_scheduler.domain.models import (
    AVAILABLE,
    AttendeeAvailabilityInput,
    Interval,
    Override,
    WeeklyWindow,
)

logger = logging.getLogger(__name__)

# (user_id, local date) -> effective intervals; lives for one generation call
EffectiveCache = Dict[Tuple[str, date], List[Interval]]


@dataclass(frozen=True)
class WindowCheck:
    """One attendee's view of one UTC window"""
    ok: bool                 # window sits inside a single local day
    covers: bool = False
    start_minute: int = 0
    end_minute: int = 0
    local_start: Optional[datetime] = None
    local_end: Optional[datetime] = None

    @property
    def available(self) -> bool:
        return self.ok and self.covers


def build_windows_by_day(windows: Iterable[WeeklyWindow], min_size: int = 1) -> Dict[int, List[Interval]]:
    by_day: Dict[int, List[Interval]] = {}
    for w in windows:
        by_day.setdefault(w.day_of_week, []).append(Interval(w.start_minute, w.end_minute))
    return {day: normalize(lst, min_size=min_size) for day, lst in by_day.items()}


def index_overrides_by_local_date(zone, overrides: Iterable[Override]) -> Dict[date, List[Override]]:
    """An override spanning several local dates is listed under each of them"""
    out: Dict[date, List[Override]] = {}
    for ov in overrides:
        for d in local_dates_touched(ov.start_at, ov.end_at, zone):
            out.setdefault(d, []).append(ov)
    return out


class AvailabilityResolver:
    """Weekly template + date overrides -> effective local intervals for one attendee"""

    def __init__(
        self,
        attendee: AttendeeAvailabilityInput,
        cache: Optional[EffectiveCache] = None,
        cfg: AppConfig = DEFAULT_CONFIG,
    ):
        self.user_id = attendee.user_id
        self.time_zone = attendee.time_zone
        self.zone = get_zone(attendee.time_zone)
        self.min_size = cfg.internal_min_interval_minutes
        self.cache: EffectiveCache = cache if cache is not None else {}

        if self.zone is None:
            logger.warning("unknown time zone %r for attendee %s; treated as unavailable",
                           attendee.time_zone, attendee.user_id)
            self.base_by_day: Dict[int, List[Interval]] = {}
            self.overrides_by_date: Dict[date, List[Override]] = {}
            return

        self.base_by_day = build_windows_by_day(attendee.windows, self.min_size)
        self.overrides_by_date = index_overrides_by_local_date(self.zone, attendee.overrides)

    def effective_intervals(self, d: date) -> List[Interval]:
        key = (self.user_id, d)
        hit = self.cache.get(key)
        if hit is not None:
            return hit

        if self.zone is None:
            result: List[Interval] = []
        else:
            result = self._compute(d)
        self.cache[key] = result
        return result

    def _compute(self, d: date) -> List[Interval]:
        base = self.base_by_day.get(d.isoweekday(), [])
        adds: List[Interval] = []
        removes: List[Interval] = []
        for ov in self.overrides_by_date.get(d, []):
            local = override_to_local_interval_for_date(ov, d, self.zone)
            if local is None:
                continue
            if ov.kind == AVAILABLE:
                adds.append(local)
            else:
                removes.append(local)

        # subtraction last: an UNAVAILABLE override always wins over additions
        with_adds = union(base, adds, min_size=self.min_size)
        effective = subtract(with_adds, removes, min_size=self.min_size)
        return normalize(effective, min_size=self.min_size)

    def check_window(self, start_utc: datetime, end_utc: datetime) -> WindowCheck:
        if self.zone is None:
            return WindowCheck(ok=False)

        local_start = as_utc(start_utc).astimezone(self.zone)
        local_end = as_utc(end_utc).astimezone(self.zone)
        # windows crossing local midnight are not evaluated for this attendee
        if local_start.date() != local_end.date():
            return WindowCheck(ok=False, local_start=local_start, local_end=local_end)

        start_minute, end_minute = widen_over_repeated_range(
            local_minutes_of_day(local_start), local_minutes_of_day(local_end), local_start, local_end,
        )
        effective = self.effective_intervals(local_start.date())
        return WindowCheck(
            ok=True,
            covers=covers(effective, start_minute, end_minute),
            start_minute=start_minute,
            end_minute=end_minute,
            local_start=local_start,
            local_end=local_end,
        )
