"""Efficiency scoring for candidate slots."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class ScoringConfig:
    first_job_base: float = 120.0
    travel_base: float = 40.0
    travel_penalty_per_minute: float = 0.8
    utilization_weight: float = 40.0
    short_travel_minutes: int = 15
    short_travel_bonus: float = 20.0
    medium_travel_minutes: int = 25
    medium_travel_bonus: float = 10.0
    home_bonus_base: float = 30.0
    team_base: float = 100.0


DEFAULT_SCORING = ScoringConfig()

EFFICIENCY_LABELS: tuple[tuple[int, str], ...] = (
    (90, "Optimal"),
    (70, "Bra"),
    (50, "OK"),
)
LOWEST_LABEL = "Låg"


def calculate_efficiency_score(
    travel_time: float,
    is_first_job: bool,
    gap_utilization: float,
    travel_time_home: Optional[float] = None,
    config: ScoringConfig = DEFAULT_SCORING,
) -> int:
    """Score a slot; higher is better.

    First jobs of the day are scored only on the drive from home. Later
    jobs combine a travel score, how much of the gap the visit fills and a
    bonus for short hops. A short drive home at the end of the day adds to
    either.
    """
    if is_first_job:
        score = config.first_job_base - travel_time
    else:
        travel_score = max(0.0, config.travel_base - travel_time * config.travel_penalty_per_minute)
        utilization = min(1.0, max(0.0, gap_utilization))
        if travel_time <= config.short_travel_minutes:
            bonus = config.short_travel_bonus
        elif travel_time <= config.medium_travel_minutes:
            bonus = config.medium_travel_bonus
        else:
            bonus = 0.0
        score = travel_score + utilization * config.utilization_weight + bonus

    if travel_time_home is not None:
        score += max(0.0, config.home_bonus_base - travel_time_home)
    return _round_half_up(score)


def calculate_team_score(total_travel_time: float, config: ScoringConfig = DEFAULT_SCORING) -> int:
    return _round_half_up(max(0.0, config.team_base - total_travel_time))


def efficiency_label(score: int) -> str:
    for threshold, label in EFFICIENCY_LABELS:
        if score >= threshold:
            return label
    return LOWEST_LABEL


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
