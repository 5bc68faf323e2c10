from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from src.booking_assistant.services.balancing.service import (
    RankingConfig,
    balance_suggestions,
    rank_team_suggestions,
)
from src.booking_assistant.services.scheduling.models import Suggestion, TeamMember, TeamSuggestion

TZ = ZoneInfo("Europe/Stockholm")


def _suggestion(tech_id: str, day: int, hour: int, score: int) -> Suggestion:
    start = datetime(2026, 10, day, hour, 0, tzinfo=TZ)
    return Suggestion(
        technician_id=tech_id,
        technician_name=f"Tekniker {tech_id}",
        start_time=start,
        end_time=start + timedelta(hours=1),
        travel_time_minutes=20,
        is_first_job=hour == 8,
        efficiency_score=score,
        efficiency_label="",
        origin_description="",
    )


def test_high_quality_group_keeps_five_earliest():
    group = [_suggestion("T1", 19, hour, 60) for hour in range(8, 15)]
    group[6].efficiency_score = 85  # best slot is the latest one

    result = balance_suggestions(group)

    assert len(result) == 5
    assert sorted(s.start_time.hour for s in result) == [8, 9, 10, 11, 12]


def test_ordinary_group_keeps_two():
    group = [_suggestion("T1", 19, hour, 79) for hour in range(8, 12)]

    result = balance_suggestions(group)

    assert [s.start_time.hour for s in result] == [8, 9]


def test_groups_are_per_technician_and_day():
    suggestions = [
        *[_suggestion("T1", 19, hour, 50) for hour in range(8, 12)],
        *[_suggestion("T2", 19, hour, 50) for hour in range(8, 12)],
        *[_suggestion("T1", 20, hour, 50) for hour in range(8, 12)],
    ]

    result = balance_suggestions(suggestions)

    assert len(result) == 6


def test_global_order_is_day_then_score_then_time():
    suggestions = [
        _suggestion("T1", 20, 8, 99),
        _suggestion("T2", 19, 10, 70),
        _suggestion("T3", 19, 9, 70),
        _suggestion("T4", 19, 11, 90),
    ]

    result = balance_suggestions(suggestions)

    assert [(s.technician_id) for s in result] == ["T4", "T3", "T2", "T1"]


def test_global_cap_applies_after_balancing():
    suggestions = [_suggestion(f"T{t}", 19, hour, 95) for t in range(6) for hour in range(8, 15)]

    result = balance_suggestions(suggestions)

    assert len(result) == 20


def test_custom_config_is_honoured():
    config = RankingConfig(high_quality_score=50, max_per_group_high_quality=3, max_single_suggestions=4)
    suggestions = [_suggestion("T1", 19, hour, 60) for hour in range(8, 14)] + [
        _suggestion("T2", 19, hour, 60) for hour in range(8, 14)
    ]

    result = balance_suggestions(suggestions, config)

    assert len(result) == 4


def _team(hour: int, minute: int, score: int) -> TeamSuggestion:
    start = datetime(2026, 10, 19, hour, minute, tzinfo=TZ)
    return TeamSuggestion(
        technicians=[TeamMember(id="A", name="A", travel_time_minutes=10, origin_description="")],
        start_time=start,
        end_time=start + timedelta(hours=1),
        efficiency_score=score,
    )


def test_team_suggestions_sorted_by_time_then_score_and_capped():
    suggestions = [_team(8 + i // 4, (i % 4) * 15, 50) for i in range(12)]
    suggestions.append(_team(8, 0, 90))

    result = rank_team_suggestions(suggestions)

    assert len(result) == 10
    assert result[0].efficiency_score == 90
    assert [r.start_time for r in result] == sorted(r.start_time for r in result)
