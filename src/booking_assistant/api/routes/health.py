"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


def _get_travel_health_check():
    """Lazy import to avoid startup failures."""
    from ...services.travel.distance_matrix_client import check_health as travel_health_check
    return travel_health_check


@router.get("/health/travel", status_code=status.HTTP_200_OK)
def health_travel() -> dict:
    """Check the travel time provider."""
    try:
        travel_health_check = _get_travel_health_check()
        status_flag = travel_health_check()
        return {"service": "travel_time", "healthy": status_flag}
    except Exception as e:
        return {"service": "travel_time", "healthy": False, "error": str(e)}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database() -> dict:
    """Check database connection and that the scheduling tables respond."""
    from ...db.supabase import get_supabase_client

    supabase = get_supabase_client()
    if not supabase:
        return {
            "configured": False,
            "message": "Supabase not configured. Set BOOKING_SUPABASE_URL and BOOKING_SUPABASE_KEY environment variables.",
        }

    tables: dict[str, bool] = {}
    for table in ("technicians", "staff_competencies", "technician_absences", "cases_with_technician_view"):
        try:
            supabase.table(table).select("*", count="exact").limit(1).execute()
            tables[table] = True
        except Exception:
            tables[table] = False

    return {
        "configured": True,
        "connected": any(tables.values()),
        "tables": tables,
        "message": "Database connected." if all(tables.values()) else "Database reachable but some tables did not respond.",
    }
