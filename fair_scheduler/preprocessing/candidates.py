# fair_scheduler/preprocessing/candidates.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List

from fair_scheduler.domain.localtime import get_zone, utc_instant_from_local_wall_clock
from fair_scheduler.domain.timegrid import TimeGrid, iter_dates

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateWindow:
    """Structurally valid meeting window, not yet checked against anyone"""
    local_date: date
    offset_minute: int
    start_utc: datetime
    end_utc: datetime


def generate_windows(
    time_zone: str,
    range_start: date,
    range_end: date,
    grid: TimeGrid,
) -> List[CandidateWindow]:
    """
    Every [date+offset, date+offset+duration) window in the request zone,
    range_start..range_end inclusive, in chronological order.
    Windows whose start does not exist on the wall clock are skipped.
    """
    zone = get_zone(time_zone)
    if zone is None:
        logger.warning("unknown request time zone %r; no windows generated", time_zone)
        return []

    offsets = grid.start_offsets()
    out: List[CandidateWindow] = []
    skipped = 0
    for d in iter_dates(range_start, range_end):
        for offset in offsets:
            start_utc = utc_instant_from_local_wall_clock(d, offset, zone)
            if start_utc is None:
                skipped += 1
                continue
            out.append(CandidateWindow(
                local_date=d,
                offset_minute=offset,
                start_utc=start_utc,
                end_utc=start_utc + timedelta(minutes=grid.duration_minutes),
            ))

    if skipped:
        logger.debug("skipped %d windows with no valid UTC instant in %s", skipped, time_zone)
    return out
