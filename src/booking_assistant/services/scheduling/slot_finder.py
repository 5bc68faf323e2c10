"""Candidate slots for a single technician on a single day."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Protocol

from ...models.domain import Address, EventKind, EventSlot
from .models import Suggestion, TechnicianDaySchedule
from .scoring import DEFAULT_SCORING, ScoringConfig, calculate_efficiency_score, efficiency_label

HOME_TITLE = "home"
ABSENCE_TITLE = "absence"


class TravelLookup(Protocol):
    def minutes(self, origin: Address, destination: Address) -> int:
        ...


@dataclass(frozen=True, slots=True)
class SlotFinderConfig:
    stride_minutes: int = 60
    travel_home_threshold_minutes: int = 90
    scoring: ScoringConfig = DEFAULT_SCORING


def build_timeline(schedule: TechnicianDaySchedule) -> list[EventSlot]:
    """Virtual departure from home followed by the day's events in start order."""
    home = schedule.technician.home_address
    virtual_start = EventSlot(
        start=schedule.work_start,
        end=schedule.work_start,
        kind=EventKind.VIRTUAL_START,
        title=HOME_TITLE,
        address=home,
    )
    events = list(schedule.bookings)
    events.extend(
        EventSlot(start=absence.start, end=absence.end, kind=EventKind.ABSENCE, title=ABSENCE_TITLE)
        for absence in schedule.absences
    )
    events.sort(key=lambda event: event.start)
    return [virtual_start, *events]


def _clock(value: datetime, schedule: TechnicianDaySchedule) -> str:
    return value.astimezone(schedule.work_start.tzinfo).strftime("%H:%M")


def _describe(
    schedule: TechnicianDaySchedule,
    current: EventSlot,
    arrival: datetime,
    travel_minutes: int,
    travel_home_minutes: int | None,
) -> str:
    if current.kind is EventKind.VIRTUAL_START:
        text = f"from home, arriving at {_clock(arrival, schedule)}"
    else:
        text = (
            f"after {current.title} (ends {_clock(current.end, schedule)}), "
            f"arriving at {_clock(arrival, schedule)} (+{travel_minutes} min)"
        )
    if travel_home_minutes is not None:
        text += f"; estimated commute home {travel_home_minutes} min"
    return text


def find_slots_for_day(
    schedule: TechnicianDaySchedule,
    duration_minutes: int,
    destination: Address,
    travel: TravelLookup,
    config: SlotFinderConfig = SlotFinderConfig(),
) -> list[Suggestion]:
    """Walk the day's gaps and emit one suggestion per stride step.

    Arithmetic runs on UTC instants so a working window spanning a DST
    change keeps its real length; results are converted back to the
    facility timezone.
    """
    tech = schedule.technician
    tz = schedule.work_start.tzinfo
    work_start = schedule.work_start.astimezone(timezone.utc)
    work_end = schedule.work_end.astimezone(timezone.utc)
    duration = timedelta(minutes=duration_minutes)
    stride = timedelta(minutes=config.stride_minutes)
    home_threshold = timedelta(minutes=config.travel_home_threshold_minutes)

    timeline = build_timeline(schedule)
    suggestions: list[Suggestion] = []
    # latest-ending real event so far; a nested event never reopens a gap
    occupying: EventSlot | None = None

    for index, current in enumerate(timeline):
        if current.kind is EventKind.VIRTUAL_START:
            anchor = current
        else:
            if occupying is None or current.end > occupying.end:
                occupying = current
            anchor = occupying

        following = timeline[index + 1] if index + 1 < len(timeline) else None
        gap_start = anchor.end.astimezone(timezone.utc)
        gap_end = following.start.astimezone(timezone.utc) if following is not None else work_end
        if gap_end <= gap_start:
            continue

        is_first_job = anchor.kind is EventKind.VIRTUAL_START
        origin = anchor.address or tech.home_address
        travel_minutes = travel.minutes(origin, destination)

        if is_first_job:
            earliest = work_start
        else:
            earliest = max(gap_start + timedelta(minutes=travel_minutes), work_start)
        latest = min(gap_end, work_end) - duration

        usable_minutes = (min(gap_end, work_end) - max(gap_start, work_start)).total_seconds() / 60
        if usable_minutes <= 0:
            continue
        utilization = min(1.0, (travel_minutes + duration_minutes) / usable_minutes)

        candidate = earliest
        while candidate <= latest:
            end = candidate + duration
            travel_home = None
            if following is None and end >= work_end - home_threshold:
                travel_home = travel.minutes(destination, tech.home_address)

            score = calculate_efficiency_score(
                travel_minutes, is_first_job, utilization, travel_home, config.scoring
            )
            start_local = candidate.astimezone(tz)
            suggestions.append(
                Suggestion(
                    technician_id=tech.id,
                    technician_name=tech.name,
                    start_time=start_local,
                    end_time=end.astimezone(tz),
                    travel_time_minutes=travel_minutes,
                    is_first_job=is_first_job,
                    efficiency_score=score,
                    efficiency_label=efficiency_label(score),
                    origin_description=_describe(schedule, anchor, start_local, travel_minutes, travel_home),
                    travel_time_home_minutes=travel_home,
                )
            )
            candidate += stride
    return suggestions
