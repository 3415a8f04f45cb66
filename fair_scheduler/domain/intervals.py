# fair_scheduler/domain/intervals.py
from __future__ import annotations

import math
from typing import Iterable, List

from fair_scheduler.config import DEFAULT_CONFIG
from fair_scheduler.domain.models import Interval, MINUTES_PER_DAY


def clamp_minute(value: float) -> int:
    """Clamp to [0, 1440]; NaN becomes 0, fractions are truncated"""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return 0
    return max(0, min(MINUTES_PER_DAY, int(value)))


def normalize(intervals: Iterable[Interval], min_size: int = DEFAULT_CONFIG.min_interval_minutes) -> List[Interval]:
    """
    Clamp, drop empty/inverted/too-short intervals, sort by start and merge
    overlapping or touching intervals.
    """
    cleaned = []
    for iv in intervals:
        s, e = clamp_minute(iv.start), clamp_minute(iv.end)
        if s >= e or e - s < min_size:
            continue
        cleaned.append((s, e))
    cleaned.sort()

    merged: List[List[int]] = []
    for s, e in cleaned:
        if not merged or s > merged[-1][1]:
            merged.append([s, e])
        else:
            merged[-1][1] = max(merged[-1][1], e)
    return [Interval(s, e) for s, e in merged]


def union(base: Iterable[Interval], add: Iterable[Interval], min_size: int = DEFAULT_CONFIG.min_interval_minutes) -> List[Interval]:
    return normalize(list(base) + list(add), min_size=min_size)


def subtract(base: Iterable[Interval], remove: Iterable[Interval], min_size: int = DEFAULT_CONFIG.min_interval_minutes) -> List[Interval]:
    b = normalize(base, min_size=min_size)
    r = normalize(remove, min_size=min_size)
    if not r:
        return b

    out: List[Interval] = []
    for bi in b:
        fragments = [bi]
        for ri in r:
            nxt = []
            for f in fragments:
                # no overlap
                if ri.end <= f.start or ri.start >= f.end:
                    nxt.append(f)
                    continue
                if ri.start > f.start:
                    nxt.append(Interval(f.start, ri.start))
                if ri.end < f.end:
                    nxt.append(Interval(ri.end, f.end))
            fragments = nxt
            if not fragments:
                break
        out.extend(fragments)

    return normalize(out, min_size=min_size)


def covers(intervals: Iterable[Interval], start: int, end: int) -> bool:
    """True if a single interval contains the whole [start, end] span"""
    return any(iv.start <= start and iv.end >= end for iv in intervals)
