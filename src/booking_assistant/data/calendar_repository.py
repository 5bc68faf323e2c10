"""Booking and absence queries with per-technician fan-out."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Sequence

from ..config import settings
from ..models.domain import AbsencePeriod, EventKind, EventSlot, StaffMember, TechnicianCalendar
from .ingestion import parse_address, parse_timestamp
from .staff_repository import SchedulingDataError, require_client

logger = logging.getLogger(__name__)

DEFAULT_BOOKING_TITLE = "Ärende"


def _row_to_booking(row: dict) -> EventSlot | None:
    try:
        start = parse_timestamp(row["start_date"])
        end = parse_timestamp(row["due_date"])
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Skipping booking with unreadable times: {e}")
        return None
    if end <= start:
        return None
    return EventSlot(
        start=start,
        end=end,
        kind=EventKind.BOOKING,
        title=row.get("title") or DEFAULT_BOOKING_TITLE,
        address=parse_address(row.get("adress")),
    )


def get_bookings(technician_id: str, window_start: datetime, window_end: datetime) -> list[EventSlot]:
    """Time-blocking bookings for one technician overlapping the window."""
    supabase = require_client()
    try:
        response = (
            supabase.table("cases_with_technician_view")
            .select("technician_id, start_date, due_date, title, adress, status")
            .eq("technician_id", technician_id)
            .lte("start_date", window_end.isoformat())
            .gte("due_date", window_start.isoformat())
            .order("start_date")
            .execute()
        )
    except Exception as exc:
        raise SchedulingDataError(f"Failed to load bookings for technician {technician_id}: {exc}") from exc

    skipped = set(settings.non_blocking_statuses)
    bookings: list[EventSlot] = []
    for row in response.data or []:
        if row.get("status") in skipped or not row.get("start_date") or not row.get("due_date"):
            continue
        booking = _row_to_booking(row)
        if booking is not None:
            bookings.append(booking)
    return bookings


def get_absences(technician_id: str, window_start: datetime, window_end: datetime) -> list[AbsencePeriod]:
    """Absence periods for one technician overlapping the window."""
    supabase = require_client()
    try:
        response = (
            supabase.table("technician_absences")
            .select("technician_id, start_date, end_date")
            .eq("technician_id", technician_id)
            .lte("start_date", window_end.isoformat())
            .gte("end_date", window_start.isoformat())
            .execute()
        )
    except Exception as exc:
        raise SchedulingDataError(f"Failed to load absences for technician {technician_id}: {exc}") from exc

    absences: list[AbsencePeriod] = []
    for row in response.data or []:
        try:
            absences.append(AbsencePeriod(start=parse_timestamp(row["start_date"]), end=parse_timestamp(row["end_date"])))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping absence with unreadable times: {e}")
    return absences


def _fetch_one(technician_id: str, window_start: datetime, window_end: datetime) -> TechnicianCalendar:
    return TechnicianCalendar(
        bookings=get_bookings(technician_id, window_start, window_end),
        absences=get_absences(technician_id, window_start, window_end),
    )


def fetch_calendars(
    staff: Sequence[StaffMember],
    window_start: datetime,
    window_end: datetime,
    *,
    max_workers: int | None = None,
) -> dict[str, TechnicianCalendar]:
    """Fetch every technician's calendar concurrently.

    Any failing technician fails the whole call: proceeding without a
    calendar would report that technician as free.
    """
    if not staff:
        return {}
    workers = min(max_workers or settings.calendar_fetch_workers, len(staff))
    ids = [member.id for member in staff]
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {tech_id: executor.submit(_fetch_one, tech_id, window_start, window_end) for tech_id in ids}
        try:
            return {tech_id: future.result() for tech_id, future in futures.items()}
        except SchedulingDataError:
            logger.exception("Calendar fetch failed")
            raise
        except Exception as exc:
            logger.exception("Calendar fetch failed")
            raise SchedulingDataError(f"Failed to load calendars: {exc}") from exc
