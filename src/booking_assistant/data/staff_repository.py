"""Technician directory queries: competent, active staff for a skill."""

from __future__ import annotations

import logging
from typing import Sequence

from ..db.supabase import get_supabase_client
from ..models.domain import StaffMember
from .ingestion import parse_address, parse_work_template

logger = logging.getLogger(__name__)


class SchedulingDataError(RuntimeError):
    """Raised when staff or calendar data cannot be read."""


def require_client():
    supabase = get_supabase_client()
    if not supabase:
        raise SchedulingDataError(
            "Supabase not configured. Set BOOKING_SUPABASE_URL and BOOKING_SUPABASE_KEY environment variables."
        )
    return supabase


def _row_to_staff(row: dict) -> StaffMember | None:
    home = parse_address(row.get("address"))
    if home is None:
        logger.info(f"Skipping technician {row.get('id')}: no home address on file")
        return None
    return StaffMember(
        id=str(row["id"]),
        name=str(row.get("name") or row["id"]),
        home_address=home,
        work_template=parse_work_template(row.get("work_schedule")),
    )


def get_competent_staff(
    required_skill: str,
    technician_ids: Sequence[str] | None = None,
) -> list[StaffMember]:
    """Active technicians with the skill, optionally limited to a subset of ids."""
    supabase = require_client()
    try:
        query = supabase.table("staff_competencies").select("staff_id").eq("pest_type", required_skill)
        if technician_ids:
            query = query.in_("staff_id", list(technician_ids))
        competencies = query.execute()
        staff_ids = sorted({str(row["staff_id"]) for row in (competencies.data or []) if row.get("staff_id")})
        if not staff_ids:
            return []

        response = (
            supabase.table("technicians")
            .select("id, name, address, work_schedule, is_active")
            .in_("id", staff_ids)
            .eq("is_active", True)
            .execute()
        )
    except Exception as exc:
        logger.error(f"Failed to load competent staff for '{required_skill}': {exc}")
        raise SchedulingDataError(f"Failed to load technicians for skill '{required_skill}': {exc}") from exc

    staff: list[StaffMember] = []
    for row in response.data or []:
        if not row.get("is_active", True):
            continue
        member = _row_to_staff(row)
        if member is not None:
            staff.append(member)
    staff.sort(key=lambda member: member.id)
    return staff
