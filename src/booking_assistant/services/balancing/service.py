"""Ranking and per technician-day balancing of suggestions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Sequence, Tuple

from ..scheduling.models import Suggestion, TeamSuggestion


@dataclass(frozen=True, slots=True)
class RankingConfig:
    high_quality_score: int = 80
    max_per_group_high_quality: int = 5
    max_per_group_default: int = 2
    max_single_suggestions: int = 20
    max_team_suggestions: int = 10


DEFAULT_RANKING = RankingConfig()


def _group_by_day_and_technician(suggestions: Sequence[Suggestion]) -> Dict[Tuple[date, str], List[Suggestion]]:
    groups: Dict[Tuple[date, str], List[Suggestion]] = {}
    for suggestion in suggestions:
        key = (suggestion.start_time.date(), suggestion.technician_id)
        groups.setdefault(key, []).append(suggestion)
    return groups


def balance_suggestions(
    suggestions: Sequence[Suggestion],
    config: RankingConfig = DEFAULT_RANKING,
) -> List[Suggestion]:
    """Cap each technician-day, then order globally and truncate.

    A technician-day whose best score reaches the high-quality threshold
    keeps more of its earliest slots than an ordinary one, so a single
    strong pairing cannot crowd out every other technician.
    """
    retained: List[Suggestion] = []
    for group in _group_by_day_and_technician(suggestions).values():
        group.sort(key=lambda item: item.start_time)
        top_score = max(item.efficiency_score for item in group)
        limit = (
            config.max_per_group_high_quality
            if top_score >= config.high_quality_score
            else config.max_per_group_default
        )
        retained.extend(group[:limit])

    retained.sort(key=lambda item: (item.start_time.date(), -item.efficiency_score, item.start_time))
    return retained[: config.max_single_suggestions]


def rank_team_suggestions(
    suggestions: Sequence[TeamSuggestion],
    config: RankingConfig = DEFAULT_RANKING,
) -> List[TeamSuggestion]:
    ordered = sorted(suggestions, key=lambda item: (item.start_time, -item.efficiency_score))
    return ordered[: config.max_team_suggestions]
