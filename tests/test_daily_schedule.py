from datetime import date, datetime, time
from zoneinfo import ZoneInfo

from src.booking_assistant.data.ingestion import parse_address
from src.booking_assistant.models.domain import (
    AbsencePeriod,
    EventKind,
    EventSlot,
    StaffMember,
    TechnicianCalendar,
    WeeklyWorkTemplate,
    WorkDay,
)
from src.booking_assistant.services.scheduling.daily_schedule import build_daily_schedules

TZ = ZoneInfo("Europe/Stockholm")
MONDAY = date(2026, 10, 19)
TUESDAY = date(2026, 10, 20)
OFF = WorkDay(start=time(0, 0), end=time(0, 0), active=False)


def _template(*active_weekdays: int) -> WeeklyWorkTemplate:
    return WeeklyWorkTemplate(
        days=tuple(
            WorkDay(start=time(8, 0), end=time(16, 0), active=True) if weekday in active_weekdays else OFF
            for weekday in range(7)
        )
    )


def _tech(tech_id: str = "T1", active_weekdays=(0, 1, 2, 3, 4)) -> StaffMember:
    return StaffMember(
        id=tech_id,
        name=f"Tekniker {tech_id}",
        home_address=parse_address(f"Hemvägen {tech_id}, Stockholm"),
        work_template=_template(*active_weekdays),
    )


def _at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime.combine(day, time(hour, minute), tzinfo=TZ)


def test_work_window_is_anchored_in_facility_timezone():
    schedules = build_daily_schedules([_tech()], {}, MONDAY, MONDAY, TZ)

    assert len(schedules) == 1
    schedule = schedules[0]
    assert schedule.work_start == _at(MONDAY, 8)
    assert schedule.work_end == _at(MONDAY, 16)
    # CEST on this date
    assert schedule.work_start.utcoffset().total_seconds() == 2 * 3600


def test_inactive_template_days_are_skipped():
    tech = _tech(active_weekdays=(0,))
    schedules = build_daily_schedules([tech], {}, MONDAY, date(2026, 10, 25), TZ)

    assert [schedule.date for schedule in schedules] == [MONDAY]


def test_day_fully_covered_by_absence_is_excluded():
    absence = AbsencePeriod(start=_at(TUESDAY, 0), end=_at(TUESDAY, 23, 59))
    calendars = {"T1": TechnicianCalendar(absences=[absence])}

    schedules = build_daily_schedules([_tech()], calendars, MONDAY, TUESDAY, TZ)

    assert [schedule.date for schedule in schedules] == [MONDAY]
    assert all(schedule.date != TUESDAY for schedule in schedules)


def test_multi_day_absence_excludes_every_covered_day():
    absence = AbsencePeriod(start=_at(MONDAY, 6), end=_at(date(2026, 10, 21), 18))
    calendars = {"T1": TechnicianCalendar(absences=[absence])}

    schedules = build_daily_schedules([_tech()], calendars, MONDAY, date(2026, 10, 22), TZ)

    assert [schedule.date for schedule in schedules] == [date(2026, 10, 22)]


def test_partial_absence_is_kept_as_an_event():
    absence = AbsencePeriod(start=_at(MONDAY, 12), end=_at(MONDAY, 17))
    calendars = {"T1": TechnicianCalendar(absences=[absence])}

    schedules = build_daily_schedules([_tech()], calendars, MONDAY, MONDAY, TZ)

    assert len(schedules) == 1
    assert schedules[0].absences == [absence]


def test_bookings_are_assigned_to_the_day_they_start():
    monday_job = EventSlot(start=_at(MONDAY, 9), end=_at(MONDAY, 10), kind=EventKind.BOOKING, title="Råttor")
    tuesday_job = EventSlot(start=_at(TUESDAY, 9), end=_at(TUESDAY, 11), kind=EventKind.BOOKING, title="Getingar")
    calendars = {"T1": TechnicianCalendar(bookings=[tuesday_job, monday_job])}

    schedules = build_daily_schedules([_tech()], calendars, MONDAY, TUESDAY, TZ)

    by_day = {schedule.date: schedule for schedule in schedules}
    assert by_day[MONDAY].bookings == [monday_job]
    assert by_day[TUESDAY].bookings == [tuesday_job]


def test_technician_without_working_days_contributes_nothing():
    schedules = build_daily_schedules([_tech(active_weekdays=())], {}, MONDAY, date(2026, 10, 25), TZ)
    assert schedules == []
