# fair_scheduler/reporting/report.py
from __future__ import annotations

from typing import Dict, List, Sequence

import pandas as pd

from fair_scheduler.domain.localtime import to_utc_iso
from fair_scheduler.domain.models import SuggestionCandidate

CANDIDATE_COLUMNS = [
    "rank", "start_utc", "end_utc", "attendance_ratio",
    "score_total", "score_attendance", "score_inconvenience", "score_fairness",
    "available_user_ids", "missing_user_ids", "worst_user_id", "worst_penalty", "explanation",
]


def build_candidate_table(candidates: Sequence[SuggestionCandidate]) -> pd.DataFrame:
    rows = []
    for c in candidates:
        worst = c.explanation.worst_local_time
        rows.append(dict(
            rank=c.rank,
            start_utc=to_utc_iso(c.start_at),
            end_utc=to_utc_iso(c.end_at),
            attendance_ratio=round(c.attendance_ratio, 4),
            score_total=round(c.scores.total, 4),
            score_attendance=round(c.scores.attendance, 4),
            score_inconvenience=round(c.scores.inconvenience, 4),
            score_fairness=round(c.scores.fairness, 4),
            available_user_ids=",".join(c.available_user_ids),
            missing_user_ids=",".join(c.missing_user_ids),
            worst_user_id=worst.user_id if worst else "",
            worst_penalty=worst.penalty if worst else 0.0,
            explanation="; ".join(c.explanation.why),
        ))
    df = pd.DataFrame(rows, columns=CANDIDATE_COLUMNS)
    if not df.empty:
        df = df.sort_values("rank").reset_index(drop=True)
    return df


def build_attendee_summary(candidates: Sequence[SuggestionCandidate], attendee_user_ids: Sequence[str]) -> pd.DataFrame:
    """Per attendee: how many ranked slots include them and how often they get the worst hour"""
    counts: Dict[str, Dict[str, int]] = {
        uid: dict(available=0, missing=0, worst=0) for uid in attendee_user_ids
    }
    for c in candidates:
        for uid in c.available_user_ids:
            counts.setdefault(uid, dict(available=0, missing=0, worst=0))["available"] += 1
        for uid in c.missing_user_ids:
            counts.setdefault(uid, dict(available=0, missing=0, worst=0))["missing"] += 1
        worst = c.explanation.worst_local_time
        if worst is not None:
            counts.setdefault(worst.user_id, dict(available=0, missing=0, worst=0))["worst"] += 1

    total = len(candidates)
    rows: List[dict] = []
    for uid, d in counts.items():
        rows.append(dict(
            user_id=uid,
            available_count=d["available"],
            missing_count=d["missing"],
            worst_local_time_count=d["worst"],
            coverage=round(d["available"] / total, 4) if total else 0.0,
        ))
    df = pd.DataFrame(rows, columns=["user_id", "available_count", "missing_count", "worst_local_time_count", "coverage"])
    if not df.empty:
        df = df.sort_values(["coverage", "user_id"], ascending=[True, True]).reset_index(drop=True)
    return df
