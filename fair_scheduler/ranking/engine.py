# fair_scheduler/ranking/engine.py
from __future__ import annotations

import logging
from typing import List

from fair_scheduler.config import AppConfig, DEFAULT_CONFIG
from fair_scheduler.domain.models import SuggestionCandidate, SuggestionRequest
from fair_scheduler.domain.timegrid import TimeGrid
from fair_scheduler.preprocessing.candidates import generate_windows
from fair_scheduler.preprocessing.resolver import AvailabilityResolver
from fair_scheduler.ranking.scoring import rank_candidates, score_window

logger = logging.getLogger(__name__)


def generate_suggestions(request: SuggestionRequest, cfg: AppConfig = DEFAULT_CONFIG) -> List[SuggestionCandidate]:
    """
    Ranked meeting candidates for one request.

    Pure and synchronous: each attendee gets an effective-interval cache here,
    dropped on return, so concurrent calls share nothing.
    Callers validate the request first (validation.validator.validate_request);
    this function only degrades on bad calendar data.
    """
    max_candidates = request.max_candidates
    if max_candidates is None:
        max_candidates = cfg.limits.max_candidates

    grid = TimeGrid(
        day_start_minute=request.day_start_minute,
        day_end_minute=request.day_end_minute,
        step_minutes=request.step_minutes,
        duration_minutes=request.duration_minutes,
    )

    # per-attendee caches; attendee ids are not assumed unique here
    resolvers = [AvailabilityResolver(a, cache={}, cfg=cfg) for a in request.attendees]

    windows = generate_windows(request.time_zone, request.range_start, request.range_end, grid)

    scored = []
    for window in windows:
        candidate = score_window(window, resolvers, cfg)
        if candidate is not None:
            scored.append(candidate)

    ranked = rank_candidates(scored, max_candidates)
    logger.debug(
        "suggestions: %d windows, %d feasible, %d returned, %d cached (user, date) entries",
        len(windows), len(scored), len(ranked), sum(len(r.cache) for r in resolvers),
    )
    return ranked
