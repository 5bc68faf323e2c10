"""Synchronized slots for jobs that need several technicians at once."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta, timezone
from itertools import combinations
from typing import Mapping, Sequence

from .models import TeamMember, TeamSuggestion, TechnicianDaySchedule
from .scoring import DEFAULT_SCORING, ScoringConfig, calculate_team_score


@dataclass(frozen=True, slots=True)
class TeamSearchConfig:
    stride_minutes: int = 15
    scoring: ScoringConfig = DEFAULT_SCORING


def group_by_day(schedules: Sequence[TechnicianDaySchedule]) -> dict[date, list[TechnicianDaySchedule]]:
    grouped: dict[date, list[TechnicianDaySchedule]] = defaultdict(list)
    for schedule in schedules:
        grouped[schedule.date].append(schedule)
    return dict(sorted(grouped.items()))


def find_team_slots(
    schedules: Sequence[TechnicianDaySchedule],
    team_size: int,
    duration_minutes: int,
    travel_from_home: Mapping[str, int],
    config: TeamSearchConfig = TeamSearchConfig(),
) -> list[TeamSuggestion]:
    """Every slot where a combination of ``team_size`` technicians is free.

    Members are assumed to drive straight from home; ``travel_from_home``
    maps technician id to minutes from home to the job. Candidates step
    through UTC instants and are reported in the facility timezone.
    """
    if team_size < 2:
        raise ValueError("team_size must be at least 2")

    duration = timedelta(minutes=duration_minutes)
    stride = timedelta(minutes=config.stride_minutes)
    results: list[TeamSuggestion] = []

    for day_schedules in group_by_day(schedules).values():
        if len(day_schedules) < team_size:
            continue
        for team in combinations(day_schedules, team_size):
            team_start = max(member.work_start.astimezone(timezone.utc) for member in team)
            team_end = min(member.work_end.astimezone(timezone.utc) for member in team)
            tz = team[0].work_start.tzinfo
            if team_start >= team_end:
                continue

            travel = [travel_from_home[member.technician.id] for member in team]
            score = calculate_team_score(sum(travel), config.scoring)

            candidate = team_start
            while candidate + duration <= team_end:
                end = candidate + duration
                if all(member.is_free(candidate, end) for member in team):
                    start_local = candidate.astimezone(tz)
                    arrival = start_local.strftime("%H:%M")
                    results.append(
                        TeamSuggestion(
                            technicians=[
                                TeamMember(
                                    id=member.technician.id,
                                    name=member.technician.name,
                                    travel_time_minutes=minutes,
                                    origin_description=f"from home, arriving at {arrival}",
                                )
                                for member, minutes in zip(team, travel)
                            ],
                            start_time=start_local,
                            end_time=end.astimezone(tz),
                            efficiency_score=score,
                        )
                    )
                candidate += stride
    return results
