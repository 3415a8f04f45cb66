# fair_scheduler/io_layer/snapshot.py
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from fair_scheduler.domain.localtime import UTC, as_utc, get_zone, local_midnight
from fair_scheduler.domain.models import (
    AttendeeAvailabilityInput,
    AvailabilitySnapshot,
    AvailabilityTemplate,
    BusyInterval,
    Override,
    OverrideRecord,
)
from fair_scheduler.fingerprint import availability_versions, busy_versions, compute_data_fingerprint
from fair_scheduler.io_layer.demo_busy import DemoFallbackProvider

logger = logging.getLogger(__name__)


def request_range_utc(range_start: date, range_end: date, time_zone: str) -> Tuple[datetime, datetime]:
    """Local start of range_start .. local start of the day after range_end, in UTC"""
    zone = get_zone(time_zone)
    if zone is None:
        raise ValueError(f"Unknown time zone: {time_zone}")
    start = local_midnight(range_start, zone).astimezone(UTC)
    end = local_midnight(range_end + timedelta(days=1), zone).astimezone(UTC)
    return start, end


def _overlaps_range(start: datetime, end: datetime, range_start: datetime, range_end: datetime) -> bool:
    return as_utc(start) < range_end and as_utc(end) > range_start


def load_snapshot(
    attendee_user_ids: Sequence[str],
    templates: Iterable[AvailabilityTemplate],
    overrides: Iterable[OverrideRecord],
    busy_blocks: Iterable[BusyInterval],
    range_start_utc: datetime,
    range_end_utc: datetime,
    connected_user_ids: Iterable[str] = (),
    demo_provider: Optional[DemoFallbackProvider] = None,
) -> AvailabilitySnapshot:
    """
    Restrict stored records to the requested attendees and range, add demo
    busy time for attendees that have no calendar at all, and fingerprint
    the result.
    """
    wanted = set(attendee_user_ids)
    rs, re_ = as_utc(range_start_utc), as_utc(range_end_utc)

    by_user: Dict[str, AvailabilityTemplate] = {}
    for t in templates:
        if t.user_id in wanted:
            prev = by_user.get(t.user_id)
            # most recently updated template wins
            if prev is None or (t.updated_at and (prev.updated_at is None or as_utc(t.updated_at) > as_utc(prev.updated_at))):
                by_user[t.user_id] = t

    kept_overrides = sorted(
        (o for o in overrides if o.user_id in wanted and _overlaps_range(o.start_at, o.end_at, rs, re_)),
        key=lambda o: (as_utc(o.start_at), o.user_id),
    )
    real_busy = [
        b for b in busy_blocks
        if b.user_id in wanted and _overlaps_range(b.start_utc, b.end_utc, rs, re_)
    ]

    fallback: List[BusyInterval] = []
    if demo_provider is not None:
        connected = set(connected_user_ids)
        with_busy = {b.user_id for b in real_busy}
        for user_id in sorted(wanted):
            if user_id in connected or user_id in with_busy:
                continue
            blocks = demo_provider.busy_blocks(user_id, rs, re_)
            if blocks:
                logger.debug("demo fallback: %d busy blocks for %s", len(blocks), user_id)
            fallback.extend(blocks)

    all_busy = sorted(real_busy + fallback, key=lambda b: (as_utc(b.start_utc), b.user_id))

    fingerprint = compute_data_fingerprint(
        attendee_user_ids,
        availability_versions(by_user.values(), kept_overrides),
        busy_versions(all_busy),
    )
    return AvailabilitySnapshot(
        templates=by_user,
        overrides=kept_overrides,
        busy_blocks=all_busy,
        data_fingerprint=fingerprint,
    )


def merge_busy_into_overrides(overrides: Iterable[OverrideRecord], busy_blocks: Iterable[BusyInterval]) -> List[Override]:
    """The one place where synced busy time joins the override channel"""
    merged = [o.to_override() for o in overrides]
    merged.extend(b.to_override() for b in busy_blocks)
    return merged


def build_attendee_inputs(
    attendee_user_ids: Sequence[str],
    snapshot: AvailabilitySnapshot,
    default_time_zone: str,
) -> List[AttendeeAvailabilityInput]:
    """Engine inputs in the caller's attendee order"""
    overrides_by_user: Dict[str, List[OverrideRecord]] = {}
    for o in snapshot.overrides:
        overrides_by_user.setdefault(o.user_id, []).append(o)
    busy_by_user: Dict[str, List[BusyInterval]] = {}
    for b in snapshot.busy_blocks:
        busy_by_user.setdefault(b.user_id, []).append(b)

    out = []
    for user_id in attendee_user_ids:
        template = snapshot.templates.get(user_id)
        out.append(AttendeeAvailabilityInput(
            user_id=user_id,
            time_zone=template.time_zone if template else default_time_zone,
            windows=list(template.windows) if template else [],
            overrides=merge_busy_into_overrides(
                overrides_by_user.get(user_id, []),
                busy_by_user.get(user_id, []),
            ),
        ))
    return out
