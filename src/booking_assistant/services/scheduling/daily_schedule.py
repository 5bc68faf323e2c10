"""Per-technician, per-day working windows for a search range."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Iterator, Mapping, Sequence

from ...models.domain import StaffMember, TechnicianCalendar
from .models import TechnicianDaySchedule


def iter_days(search_start: date, search_end: date) -> Iterator[date]:
    current = search_start
    while current <= search_end:
        yield current
        current += timedelta(days=1)


def day_bounds(day: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """Midnight to next midnight of a calendar day in the facility timezone."""
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return start, end


def build_daily_schedules(
    technicians: Sequence[StaffMember],
    calendars: Mapping[str, TechnicianCalendar],
    search_start: date,
    search_end: date,
    tz: tzinfo,
) -> list[TechnicianDaySchedule]:
    """Working windows with that day's absences and bookings attached.

    Days the template marks inactive, and days on which a single absence
    covers the whole working window, are left out entirely.
    """
    schedules: list[TechnicianDaySchedule] = []
    for tech in technicians:
        calendar = calendars.get(tech.id) or TechnicianCalendar()
        for day in iter_days(search_start, search_end):
            work_day = tech.work_template.for_weekday(day.weekday())
            if not work_day.active:
                continue

            day_start, day_end = day_bounds(day, tz)
            work_start = datetime.combine(day, work_day.start, tzinfo=tz)
            work_end = datetime.combine(day, work_day.end, tzinfo=tz)

            day_absences = [a for a in calendar.absences if a.start < day_end and a.end > day_start]
            if any(a.start <= work_start and a.end >= work_end for a in day_absences):
                continue

            day_bookings = [b for b in calendar.bookings if day_start <= b.start < day_end]
            schedules.append(
                TechnicianDaySchedule(
                    technician=tech,
                    date=day,
                    work_start=work_start,
                    work_end=work_end,
                    absences=sorted(day_absences, key=lambda a: a.start),
                    bookings=sorted(day_bookings, key=lambda b: b.start),
                )
            )
    return schedules
