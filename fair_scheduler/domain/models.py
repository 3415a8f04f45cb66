# fair_scheduler/domain/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

AVAILABLE = "AVAILABLE"
UNAVAILABLE = "UNAVAILABLE"
OVERRIDE_KINDS = (AVAILABLE, UNAVAILABLE)

MINUTES_PER_DAY = 1440


@dataclass(frozen=True)
class Interval:
    """Minutes since local midnight, half-open [start, end)"""
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class WeeklyWindow:
    day_of_week: int  # ISO weekday 1=Mon..7=Sun
    start_minute: int
    end_minute: int


@dataclass(frozen=True)
class Override:
    start_at: datetime  # UTC
    end_at: datetime    # UTC
    kind: str           # AVAILABLE / UNAVAILABLE


@dataclass(frozen=True)
class BusyInterval:
    """Busy time from an external calendar (or the demo fallback)"""
    user_id: str
    start_utc: datetime
    end_utc: datetime
    created_at: Optional[datetime] = None

    def to_override(self) -> Override:
        return Override(start_at=self.start_utc, end_at=self.end_utc, kind=UNAVAILABLE)


@dataclass(frozen=True)
class AttendeeAvailabilityInput:
    user_id: str
    time_zone: str
    windows: List[WeeklyWindow] = field(default_factory=list)
    overrides: List[Override] = field(default_factory=list)


@dataclass(frozen=True)
class SuggestionRequest:
    time_zone: str
    range_start: date
    range_end: date
    duration_minutes: int
    step_minutes: int
    day_start_minute: int
    day_end_minute: int
    attendees: List[AttendeeAvailabilityInput] = field(default_factory=list)
    max_candidates: Optional[int] = None  # falls back to config

    @property
    def attendee_user_ids(self) -> List[str]:
        return [a.user_id for a in self.attendees]


@dataclass(frozen=True)
class SuggestionScores:
    total: float
    attendance: float
    inconvenience: float
    fairness: float


@dataclass(frozen=True)
class WorstLocalTime:
    user_id: str
    local_start: datetime
    local_end: datetime
    time_zone: str
    penalty: float


@dataclass(frozen=True)
class Explanation:
    why: Tuple[str, ...]
    worst_local_time: Optional[WorstLocalTime] = None


@dataclass(frozen=True)
class SuggestionCandidate:
    start_at: datetime  # UTC
    end_at: datetime    # UTC
    attendance_ratio: float
    scores: SuggestionScores
    available_user_ids: Tuple[str, ...]
    missing_user_ids: Tuple[str, ...]
    explanation: Explanation
    rank: int = 0  # 1-based once ranked


# --- collaborator records (persistence shapes handed to the snapshot loader) ---

@dataclass(frozen=True)
class AvailabilityTemplate:
    user_id: str
    time_zone: str
    windows: List[WeeklyWindow]
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class OverrideRecord:
    user_id: str
    start_at: datetime
    end_at: datetime
    kind: str
    updated_at: Optional[datetime] = None

    def to_override(self) -> Override:
        return Override(start_at=self.start_at, end_at=self.end_at, kind=self.kind)


@dataclass
class AvailabilitySnapshot:
    templates: Dict[str, AvailabilityTemplate]   # user_id -> template
    overrides: List[OverrideRecord]
    busy_blocks: List[BusyInterval]              # real + demo fallback, sorted by start
    data_fingerprint: str
