# fair_scheduler/config.py
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class ScoringWeights:
    """Weights of the total score (attendance dominates)"""
    attendance: float = 0.6
    inconvenience: float = 0.2
    fairness: float = 0.2


@dataclass(frozen=True)
class PenaltyBands:
    """Local time-of-day penalty: first band that contains the whole span wins"""
    # (start_hour, end_hour, penalty), bounds inclusive
    bands: Tuple[Tuple[int, int, float], ...] = (
        (9, 17, 0.0),
        (8, 18, 0.25),
        (7, 19, 0.6),
    )
    outside: float = 1.0


@dataclass(frozen=True)
class RequestLimits:
    min_duration_minutes: int = 15
    max_duration_minutes: int = 240
    min_step_minutes: int = 5
    max_step_minutes: int = 60
    default_step_minutes: int = 15
    default_day_start: str = "08:00"
    default_day_end: str = "20:00"
    max_candidates: int = 25
    max_range_days: int = 31


@dataclass(frozen=True)
class DemoPattern:
    day_offset: int          # 0=Monday
    base_start_minute: int
    duration_minutes: int


@dataclass(frozen=True)
class DemoFallbackConfig:
    """Synthetic busy blocks for attendees without a connected calendar"""
    week_spread: int = 2
    max_shift_minutes: int = 40
    earliest_minute: int = 6 * 60
    latest_minute: int = 21 * 60
    patterns: Tuple[DemoPattern, ...] = (
        DemoPattern(0, 9 * 60, 90),
        DemoPattern(1, 11 * 60 + 15, 60),
        DemoPattern(2, 14 * 60, 75),
        DemoPattern(3, 8 * 60 + 30, 120),
        DemoPattern(4, 13 * 60 + 30, 60),
    )


@dataclass(frozen=True)
class AppConfig:
    # interval normalization
    min_interval_minutes: int = 15
    internal_min_interval_minutes: int = 1

    weights: ScoringWeights = ScoringWeights()
    penalty: PenaltyBands = PenaltyBands()
    limits: RequestLimits = RequestLimits()
    demo: DemoFallbackConfig = DemoFallbackConfig()


DEFAULT_CONFIG = AppConfig()
