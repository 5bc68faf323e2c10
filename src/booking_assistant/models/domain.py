"""Domain models for technicians, their calendars and addresses."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time
from enum import Enum
from typing import Optional

WEEKDAY_KEYS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


@dataclass(frozen=True, slots=True)
class Address:
    """A postal address in its canonical form.

    ``text`` is what gets sent to the travel time provider and shown to
    users; ``key`` is the case-folded, whitespace-collapsed form used for
    equality and caching.
    """

    text: str
    key: str


@dataclass(frozen=True, slots=True)
class WorkDay:
    start: time
    end: time
    active: bool


@dataclass(frozen=True, slots=True)
class WeeklyWorkTemplate:
    """Seven day entries indexed like ``date.weekday()`` (Monday == 0)."""

    days: tuple[WorkDay, ...]

    def for_weekday(self, weekday: int) -> WorkDay:
        return self.days[weekday]


@dataclass(slots=True)
class StaffMember:
    """Represents a technician as seen by the scheduling engine."""

    id: str
    name: str
    home_address: Address
    work_template: WeeklyWorkTemplate


@dataclass(frozen=True, slots=True)
class AbsencePeriod:
    start: datetime
    end: datetime


class EventKind(str, Enum):
    BOOKING = "booking"
    ABSENCE = "absence"
    VIRTUAL_START = "virtual_start"


@dataclass(frozen=True, slots=True)
class EventSlot:
    """Committed time on a technician's calendar."""

    start: datetime
    end: datetime
    kind: EventKind
    title: str = ""
    address: Optional[Address] = None

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return self.start < end and start < self.end


@dataclass(slots=True)
class TechnicianCalendar:
    """Raw bookings and absences fetched for one technician."""

    bookings: list[EventSlot] = field(default_factory=list)
    absences: list[AbsencePeriod] = field(default_factory=list)
