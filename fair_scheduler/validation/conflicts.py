# fair_scheduler/validation/conflicts.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from fair_scheduler.domain.localtime import as_utc
from fair_scheduler.domain.models import (
    AVAILABLE,
    BusyInterval,
    OverrideRecord,
    SuggestionCandidate,
)


@dataclass(frozen=True)
class ConflictInterval:
    user_id: str
    start: datetime
    end: datetime


@dataclass(frozen=True)
class ConfirmationConflict(Exception):
    message: str


@dataclass(frozen=True)
class StaleDataConflict(ConfirmationConflict):
    recorded: str
    current: str


@dataclass(frozen=True)
class SlotConflict(ConfirmationConflict):
    conflict_user_ids: Tuple[str, ...]


def intervals_overlap(a_start, a_end, b_start, b_end) -> bool:
    """Half-open overlap: touching endpoints do not overlap"""
    return a_start < b_end and a_end > b_start


def find_conflicting_user_ids(start: datetime, end: datetime, intervals: Iterable[ConflictInterval]) -> List[str]:
    s, e = as_utc(start), as_utc(end)
    seen = set()
    for iv in intervals:
        if intervals_overlap(s, e, as_utc(iv.start), as_utc(iv.end)):
            seen.add(iv.user_id)
    return sorted(seen)


def blocking_intervals(
    attendee_user_ids: Iterable[str],
    busy_blocks: Iterable[BusyInterval],
    overrides: Iterable[OverrideRecord],
) -> List[ConflictInterval]:
    """Busy blocks and UNAVAILABLE overrides of the given attendees"""
    wanted = set(attendee_user_ids)
    out = [ConflictInterval(b.user_id, b.start_utc, b.end_utc) for b in busy_blocks if b.user_id in wanted]
    out.extend(
        ConflictInterval(o.user_id, o.start_at, o.end_at)
        for o in overrides
        if o.user_id in wanted and o.kind != AVAILABLE
    )
    return out


def check_confirmation(
    candidate: SuggestionCandidate,
    attendee_user_ids: Iterable[str],
    recorded_fingerprint: str,
    current_fingerprint: Optional[str],
    busy_blocks: Iterable[BusyInterval] = (),
    overrides: Iterable[OverrideRecord] = (),
    skip_staleness: bool = False,
) -> None:
    """
    Raise if confirming this candidate would act on stale or conflicting data.

    The fingerprint check runs first: any change to an attendee's data since
    generation is a conflict even if the slot itself still looks free. A
    missing current fingerprint counts as a change; only skip_staleness=True
    turns the check off.
    """
    if not skip_staleness and current_fingerprint != recorded_fingerprint:
        raise StaleDataConflict(
            "Availability changed since suggestions were generated; regenerate before confirming.",
            recorded=recorded_fingerprint,
            current=current_fingerprint,
        )

    ids = list(attendee_user_ids)
    conflicted = find_conflicting_user_ids(
        candidate.start_at,
        candidate.end_at,
        blocking_intervals(ids, busy_blocks, overrides),
    )
    if conflicted:
        raise SlotConflict(
            f"Slot conflicts with busy time for: {', '.join(conflicted)}",
            conflict_user_ids=tuple(conflicted),
        )
