# fair_scheduler/validation/validator.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from fair_scheduler.config import AppConfig, DEFAULT_CONFIG
from fair_scheduler.domain.intervals import normalize
from fair_scheduler.domain.localtime import as_utc, get_zone
from fair_scheduler.domain.models import (
    OVERRIDE_KINDS,
    AttendeeAvailabilityInput,
    Interval,
    SuggestionRequest,
)


@dataclass(frozen=True)
class ValidationError(Exception):
    message: str


@dataclass(frozen=True)
class ValidationWarning:
    message: str


def validate_request(request: SuggestionRequest, cfg: AppConfig = DEFAULT_CONFIG) -> None:
    """Caller-side checks; the engine itself never raises on these"""
    lim = cfg.limits

    # no attendees -> attendance ratio undefined, treat as a bad request
    if not request.attendees:
        raise ValidationError("At least one attendee is required.")

    ids = request.attendee_user_ids
    if len(set(ids)) != len(ids):
        dupes = sorted({i for i in ids if ids.count(i) > 1})
        raise ValidationError(f"Duplicate attendee ids: {', '.join(dupes)}")

    if get_zone(request.time_zone) is None:
        raise ValidationError(f"Unknown time zone: {request.time_zone}")

    if request.day_start_minute >= request.day_end_minute:
        raise ValidationError("dayStart must be before dayEnd")
    if request.day_start_minute < 0 or request.day_end_minute > 1440:
        raise ValidationError("Day bounds must lie within 00:00-24:00.")

    if request.range_start > request.range_end:
        raise ValidationError("Invalid date range: rangeStart is after rangeEnd.")
    days = (request.range_end - request.range_start).days + 1
    if days > lim.max_range_days:
        raise ValidationError(f"Date range spans {days} days; the limit is {lim.max_range_days}.")

    if not (lim.min_duration_minutes <= request.duration_minutes <= lim.max_duration_minutes):
        raise ValidationError(
            f"durationMinutes must be between {lim.min_duration_minutes} and {lim.max_duration_minutes}."
        )
    if not (lim.min_step_minutes <= request.step_minutes <= lim.max_step_minutes):
        raise ValidationError(
            f"stepMinutes must be between {lim.min_step_minutes} and {lim.max_step_minutes}."
        )

    if request.max_candidates is not None and request.max_candidates < 1:
        raise ValidationError("maxCandidates must be at least 1.")


def validate_attendees(attendees: List[AttendeeAvailabilityInput], cfg: AppConfig = DEFAULT_CONFIG) -> List[ValidationWarning]:
    """Data quality warnings; bad entries are dropped later by normalization"""
    warnings: List[ValidationWarning] = []

    for a in attendees:
        if get_zone(a.time_zone) is None:
            warnings.append(ValidationWarning(
                f"Attendee {a.user_id} has an unknown time zone '{a.time_zone}' and will be treated as unavailable."
            ))
        if not a.windows and not a.overrides:
            warnings.append(ValidationWarning(
                f"Attendee {a.user_id} has no weekly windows and no overrides; unavailable every day."
            ))
        for w in a.windows:
            if not (1 <= w.day_of_week <= 7):
                warnings.append(ValidationWarning(
                    f"Attendee {a.user_id} has a window on day {w.day_of_week} (expected 1-7); it is never used."
                ))
                continue
            iv = Interval(w.start_minute, w.end_minute)
            if not normalize([iv], min_size=cfg.internal_min_interval_minutes):
                warnings.append(ValidationWarning(
                    f"Attendee {a.user_id} has an empty window {w.start_minute}-{w.end_minute} on day {w.day_of_week}."
                ))
        for o in a.overrides:
            if o.kind not in OVERRIDE_KINDS:
                warnings.append(ValidationWarning(
                    f"Attendee {a.user_id} has an override of unknown kind '{o.kind}'; treated as UNAVAILABLE."
                ))
            elif as_utc(o.end_at) <= as_utc(o.start_at):
                warnings.append(ValidationWarning(
                    f"Attendee {a.user_id} has an override ending before it starts; it is ignored."
                ))

    return warnings
