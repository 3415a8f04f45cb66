# fair_scheduler/fingerprint.py
"""
Stable hashes for request idempotency and data staleness.

request key:      same request shape -> same key, whatever the attendee order
data fingerprint: changes whenever any attendee's template, override or busy
                  block recency changes
"""
from __future__ import annotations

import dataclasses
import hashlib
import json
from datetime import date, datetime
from typing import Any, Dict, Iterable, Mapping, Optional

from fair_scheduler.domain.localtime import as_utc, to_utc_iso
from fair_scheduler.domain.models import (
    AvailabilityTemplate,
    BusyInterval,
    OverrideRecord,
    SuggestionRequest,
)

NONE_SENTINEL = "none"


def canonical(value: Any) -> Any:
    """JSON-ready value with a single rendering per logical value"""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return canonical(dataclasses.asdict(value))
    if isinstance(value, datetime):
        return to_utc_iso(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {str(k): canonical(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [canonical(v) for v in value]
    return value


def stable_hash(payload: Any) -> str:
    text = json.dumps(canonical(payload), sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def compute_request_key(
    time_zone: str,
    range_start: date,
    range_end: date,
    duration_minutes: int,
    step_minutes: int,
    day_start_minute: int,
    day_end_minute: int,
    attendee_user_ids: Iterable[str],
) -> str:
    return stable_hash({
        "timeZone": time_zone,
        "rangeStart": range_start,
        "rangeEnd": range_end,
        "durationMinutes": duration_minutes,
        "stepMinutes": step_minutes,
        "dayStartMinute": day_start_minute,
        "dayEndMinute": day_end_minute,
        "attendeeUserIds": sorted(set(attendee_user_ids)),
    })


def request_key_for(request: SuggestionRequest) -> str:
    return compute_request_key(
        request.time_zone,
        request.range_start,
        request.range_end,
        request.duration_minutes,
        request.step_minutes,
        request.day_start_minute,
        request.day_end_minute,
        request.attendee_user_ids,
    )


def _keep_latest(out: Dict[str, datetime], user_id: str, ts: Optional[datetime]) -> None:
    if ts is None:
        return
    ts = as_utc(ts)
    current = out.get(user_id)
    if current is None or ts > current:
        out[user_id] = ts


def availability_versions(
    templates: Iterable[AvailabilityTemplate],
    overrides: Iterable[OverrideRecord],
) -> Dict[str, datetime]:
    """user_id -> latest template/override updated_at"""
    out: Dict[str, datetime] = {}
    for t in templates:
        _keep_latest(out, t.user_id, t.updated_at)
    for o in overrides:
        _keep_latest(out, o.user_id, o.updated_at)
    return out


def busy_versions(busy_blocks: Iterable[BusyInterval]) -> Dict[str, datetime]:
    """user_id -> latest busy block created_at"""
    out: Dict[str, datetime] = {}
    for b in busy_blocks:
        _keep_latest(out, b.user_id, b.created_at)
    return out


def compute_data_fingerprint(
    attendee_user_ids: Iterable[str],
    availability_by_user: Mapping[str, datetime],
    busy_by_user: Mapping[str, datetime],
) -> str:
    segments = []
    for user_id in sorted(set(attendee_user_ids)):
        a = availability_by_user.get(user_id)
        b = busy_by_user.get(user_id)
        segments.append(
            f"{user_id}:{to_utc_iso(a) if a else NONE_SENTINEL}:{to_utc_iso(b) if b else NONE_SENTINEL}"
        )
    return hashlib.sha256("|".join(segments).encode("utf-8")).hexdigest()
