"""Scheduling domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from ...models.domain import AbsencePeriod, EventSlot, StaffMember


@dataclass(slots=True)
class TechnicianDaySchedule:
    technician: StaffMember
    date: date
    work_start: datetime
    work_end: datetime
    absences: List[AbsencePeriod] = field(default_factory=list)
    bookings: List[EventSlot] = field(default_factory=list)

    def is_free(self, start: datetime, end: datetime) -> bool:
        if any(booking.overlaps(start, end) for booking in self.bookings):
            return False
        return not any(absence.start < end and start < absence.end for absence in self.absences)


@dataclass(slots=True)
class Suggestion:
    technician_id: str
    technician_name: str
    start_time: datetime
    end_time: datetime
    travel_time_minutes: int
    is_first_job: bool
    efficiency_score: int
    efficiency_label: str
    origin_description: str
    travel_time_home_minutes: Optional[int] = None


@dataclass(slots=True)
class TeamMember:
    id: str
    name: str
    travel_time_minutes: int
    origin_description: str


@dataclass(slots=True)
class TeamSuggestion:
    technicians: List[TeamMember]
    start_time: datetime
    end_time: datetime
    efficiency_score: int
