"""Normalization of raw store rows into domain values.

Rows coming back from the database are loosely typed: addresses can be
plain strings, JSON-encoded strings or objects carrying a
``formatted_address`` field, and work schedules may arrive JSON-encoded.
Everything is converted here, once, so the engine only ever sees
``Address``, ``WeeklyWorkTemplate`` and aware ``datetime`` values.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, time, timezone
from typing import Any, Mapping, Optional

from ..models.domain import WEEKDAY_KEYS, Address, WeeklyWorkTemplate, WorkDay

logger = logging.getLogger(__name__)

_INACTIVE_DAY = WorkDay(start=time(0, 0), end=time(0, 0), active=False)


def address_key(text: str) -> str:
    return " ".join(text.split()).casefold()


def parse_address(raw: Any) -> Optional[Address]:
    """Return the canonical ``Address`` for a raw value, or None if empty."""
    if raw is None:
        return None
    if isinstance(raw, Mapping):
        return parse_address(raw.get("formatted_address"))
    if not isinstance(raw, str):
        raw = str(raw)

    text = raw.strip()
    if not text:
        return None
    if text[0] in "{\"":
        try:
            decoded = json.loads(text)
        except json.JSONDecodeError:
            decoded = None
        if isinstance(decoded, (Mapping, str)):
            return parse_address(decoded)

    text = " ".join(text.split())
    return Address(text=text, key=address_key(text))


def _parse_clock(value: Any) -> time:
    if isinstance(value, time):
        return value
    hours, minutes = str(value).strip().split(":")[:2]
    return time(int(hours), int(minutes))


def _parse_work_day(raw: Any) -> WorkDay:
    if not isinstance(raw, Mapping) or not raw.get("active"):
        return _INACTIVE_DAY
    start = _parse_clock(raw["start"])
    end = _parse_clock(raw["end"])
    if end <= start:
        raise ValueError(f"work day ends before it starts ({start} - {end})")
    return WorkDay(start=start, end=end, active=True)


def parse_work_template(raw: Any) -> WeeklyWorkTemplate:
    """Convert a stored ``{monday: {start, end, active}, ...}`` schedule."""
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Unreadable work schedule, treating every day as inactive")
            raw = None
    if not isinstance(raw, Mapping):
        return WeeklyWorkTemplate(days=(_INACTIVE_DAY,) * len(WEEKDAY_KEYS))

    days: list[WorkDay] = []
    for key in WEEKDAY_KEYS:
        try:
            days.append(_parse_work_day(raw.get(key)))
        except (KeyError, ValueError, TypeError) as exc:
            logger.warning(f"Invalid '{key}' entry in work schedule ({exc}); day marked inactive")
            days.append(_INACTIVE_DAY)
    return WeeklyWorkTemplate(days=tuple(days))


def parse_timestamp(raw: Any) -> datetime:
    """Parse an ISO-8601 timestamp into an aware datetime (naive means UTC)."""
    if isinstance(raw, datetime):
        value = raw
    else:
        text = str(raw).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        value = datetime.fromisoformat(text)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value
