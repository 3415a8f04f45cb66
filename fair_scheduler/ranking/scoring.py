# fair_scheduler/ranking/scoring.py
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import List, Optional, Sequence

from fair_scheduler.config import AppConfig, DEFAULT_CONFIG, PenaltyBands
from fair_scheduler.domain.models import (
    Explanation,
    SuggestionCandidate,
    SuggestionScores,
    WorstLocalTime,
)
from fair_scheduler.preprocessing.candidates import CandidateWindow
from fair_scheduler.preprocessing.resolver import AvailabilityResolver


@dataclass(frozen=True)
class AttendeePenalty:
    user_id: str
    penalty: float
    local_start: datetime
    local_end: datetime
    time_zone: str


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def penalty_for_local_interval(start_minute: int, end_minute: int, bands: PenaltyBands = DEFAULT_CONFIG.penalty) -> float:
    """Step function over local hours; band bounds are inclusive"""
    for start_hour, end_hour, penalty in bands.bands:
        if start_minute >= start_hour * 60 and end_minute <= end_hour * 60:
            return penalty
    return bands.outside


def _worst(penalties: Sequence[AttendeePenalty]) -> Optional[AttendeePenalty]:
    # first attendee (input order) holding the maximum penalty
    worst = None
    for p in penalties:
        if worst is None or p.penalty > worst.penalty:
            worst = p
    return worst


def build_explanation(
    available_count: int,
    total_count: int,
    scores: SuggestionScores,
    penalties: Sequence[AttendeePenalty],
) -> Explanation:
    why = [
        f"{available_count}/{total_count} attendees available",
        f"Attendance score: {scores.attendance:.2f}",
        f"Inconvenience score: {scores.inconvenience:.2f}",
        f"Fairness score: {scores.fairness:.2f}",
    ]
    worst = _worst(penalties)
    if worst is None or worst.penalty <= 0:
        return Explanation(why=tuple(why))

    why.append(
        f"Worst local time: {worst.user_id} "
        f"{worst.local_start:%H:%M}-{worst.local_end:%H:%M} ({worst.time_zone})"
    )
    return Explanation(
        why=tuple(why),
        worst_local_time=WorstLocalTime(
            user_id=worst.user_id,
            local_start=worst.local_start,
            local_end=worst.local_end,
            time_zone=worst.time_zone,
            penalty=worst.penalty,
        ),
    )


def score_window(
    window: CandidateWindow,
    resolvers: Sequence[AvailabilityResolver],
    cfg: AppConfig = DEFAULT_CONFIG,
) -> Optional[SuggestionCandidate]:
    """Score one window; None when nobody can attend"""
    available: List[str] = []
    missing: List[str] = []
    penalties: List[AttendeePenalty] = []

    for r in resolvers:
        check = r.check_window(window.start_utc, window.end_utc)
        if not check.available:
            missing.append(r.user_id)
            continue
        available.append(r.user_id)
        penalties.append(AttendeePenalty(
            user_id=r.user_id,
            penalty=penalty_for_local_interval(check.start_minute, check.end_minute, cfg.penalty),
            local_start=check.local_start,
            local_end=check.local_end,
            time_zone=r.time_zone,
        ))

    total = len(resolvers)
    ratio = len(available) / total if total else 0.0
    if ratio <= 0:
        return None

    # unavailable attendees do not enter the penalty average
    avg_penalty = sum(p.penalty for p in penalties) / len(penalties)
    max_penalty = max(p.penalty for p in penalties)

    attendance = clamp01(ratio)
    inconvenience = clamp01(1 - avg_penalty)
    fairness = clamp01(1 - max_penalty)
    w = cfg.weights
    scores = SuggestionScores(
        total=clamp01(w.attendance * attendance + w.inconvenience * inconvenience + w.fairness * fairness),
        attendance=attendance,
        inconvenience=inconvenience,
        fairness=fairness,
    )

    return SuggestionCandidate(
        start_at=window.start_utc,
        end_at=window.end_utc,
        attendance_ratio=ratio,
        scores=scores,
        available_user_ids=tuple(available),
        missing_user_ids=tuple(missing),
        explanation=build_explanation(len(available), total, scores, penalties),
    )


def ranking_key(c: SuggestionCandidate):
    return (-c.scores.total, -c.scores.attendance, -c.scores.fairness, c.start_at)


def rank_candidates(candidates: Sequence[SuggestionCandidate], max_candidates: int) -> List[SuggestionCandidate]:
    """Sort by total, attendance, fairness (desc) then UTC start (asc); cap and number 1..n"""
    ordered = sorted(candidates, key=ranking_key)[:max(0, max_candidates)]
    return [replace(c, rank=i) for i, c in enumerate(ordered, start=1)]
