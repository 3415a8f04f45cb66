# fair_scheduler/domain/localtime.py
"""
UTC <-> attendee wall-clock conversions.

All comparisons between instants are done in UTC: aware datetimes sharing a
tzinfo compare by wall time and ignore fold, which is wrong across DST.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, tzinfo
from typing import List, Optional, Tuple

from dateutil import tz

from fair_scheduler.domain.models import Interval, Override, MINUTES_PER_DAY

UTC = tz.UTC


def get_zone(name: str) -> Optional[tzinfo]:
    """IANA name -> tzinfo; None if unknown (tz.gettz('') would give the host zone)"""
    if not name:
        return None
    return tz.gettz(name)


def as_utc(dt: datetime) -> datetime:
    # naive values are taken as UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_utc_iso(dt: datetime) -> str:
    return as_utc(dt).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_hhmm(hhmm: str) -> int:
    parts = hhmm.split(":")
    if len(parts) != 2 or not all(p.strip().isdigit() for p in parts):
        raise ValueError(f"Invalid time: {hhmm}")
    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Invalid time: {hhmm}")
    return hour * 60 + minute


def format_hhmm(minutes: int) -> str:
    m = max(0, min(MINUTES_PER_DAY - 1, int(minutes)))
    return f"{m // 60:02d}:{m % 60:02d}"


def local_midnight(d: date, zone: tzinfo) -> datetime:
    # a few zones skip midnight on DST days; resolve_imaginary moves it forward
    return tz.resolve_imaginary(datetime(d.year, d.month, d.day, tzinfo=zone))


def local_minutes_of_day(local_dt: datetime) -> int:
    """Wall-clock minutes since local midnight, rounded to the nearest minute"""
    seconds = local_dt.second + local_dt.microsecond / 1_000_000
    return local_dt.hour * 60 + local_dt.minute + int(round(seconds / 60))


def local_date_from_utc_instant(instant: datetime, zone: tzinfo) -> date:
    return as_utc(instant).astimezone(zone).date()


def utc_instant_from_local_wall_clock(d: date, minute_of_day: int, zone: tzinfo) -> Optional[datetime]:
    """
    Wall-clock reading on a local date -> UTC instant.
    None when the reading falls in a DST gap; an ambiguous reading resolves
    to its first occurrence (fold=0).
    """
    wall = datetime(d.year, d.month, d.day) + timedelta(minutes=minute_of_day)
    aware = wall.replace(tzinfo=zone)
    if not tz.datetime_exists(aware):
        return None
    return aware.astimezone(UTC)


def repeated_range_end_minute(local_dt: datetime) -> int:
    """Wall minute at which the fall-back range holding local_dt stops repeating"""
    probe = local_dt.replace(second=0, microsecond=0, fold=0)
    while tz.datetime_ambiguous(probe):
        nxt = probe + timedelta(minutes=1)
        if nxt.date() != local_dt.date():
            return MINUTES_PER_DAY
        probe = nxt
    return probe.hour * 60 + probe.minute


def widen_over_repeated_range(start_minute: int, end_minute: int,
                              local_start: datetime, local_end: datetime) -> Tuple[int, int]:
    """
    A span running from the first pass of a fall-back range into its second
    pass reads backwards on the wall clock. Widen it to everything it touches:
    from the start (or the top of the repeated range) to the end of that range.
    """
    if not (local_start.fold == 0 and local_end.fold == 1):
        return start_minute, end_minute
    shift = int((local_start.utcoffset() - local_end.utcoffset()).total_seconds()) // 60
    repeat_end = repeated_range_end_minute(local_end)
    return min(start_minute, repeat_end - shift), max(end_minute, repeat_end)


def local_dates_touched(start_utc: datetime, end_utc: datetime, zone: tzinfo) -> List[date]:
    first = local_date_from_utc_instant(start_utc, zone)
    last = local_date_from_utc_instant(end_utc, zone)
    out = []
    d = first
    while d <= last:
        out.append(d)
        d += timedelta(days=1)
    return out


def override_to_local_interval_for_date(override: Override, d: date, zone: tzinfo) -> Optional[Interval]:
    """
    Clip the override's UTC span to the local day [midnight, next midnight)
    and express it as wall-clock minutes. None when nothing of it lands on d.
    """
    day_start = local_midnight(d, zone).astimezone(UTC)
    day_end = local_midnight(d + timedelta(days=1), zone).astimezone(UTC)

    s = max(as_utc(override.start_at), day_start)
    e = min(as_utc(override.end_at), day_end)
    if e <= s:
        return None

    s_local = s.astimezone(zone)
    start = s_local.hour * 60 + s_local.minute
    if e == day_end:
        end = MINUTES_PER_DAY
    else:
        e_local = e.astimezone(zone)
        end = e_local.hour * 60 + e_local.minute + (1 if (e_local.second or e_local.microsecond) else 0)
        start, end = widen_over_repeated_range(start, end, s_local, e_local)

    if end <= start:
        return None
    return Interval(start, end)
