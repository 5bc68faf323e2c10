"""Supabase client for the booking assistant backend."""

import logging
from functools import lru_cache
from supabase import create_client, Client
from ..config import settings


@lru_cache()
def get_supabase_client() -> Client | None:
    """Get cached Supabase client instance.

    Returns:
        Supabase Client instance if configured, None otherwise.
        Note: This does not test the connection - actual queries may fail with network errors.
    """
    if not settings.supabase_url or not settings.supabase_key:
        logging.warning("Supabase credentials not configured (missing URL or key)")
        return None

    try:
        client = create_client(settings.supabase_url, settings.supabase_key)
        return client
    except Exception as e:
        logging.error(f"Failed to create Supabase client: {e}")
        return None


# Typical queries issued by the repositories:
#
# # Competent staff for a skill
# result = supabase.table('staff_competencies') \
#     .select('staff_id') \
#     .eq('pest_type', 'Råttor') \
#     .execute()
#
# # Bookings overlapping a window
# result = supabase.table('cases_with_technician_view') \
#     .select('technician_id, start_date, due_date, title, adress, status') \
#     .eq('technician_id', technician_id) \
#     .lte('start_date', window_end) \
#     .gte('due_date', window_start) \
#     .execute()
