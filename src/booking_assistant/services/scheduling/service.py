"""Booking assistant orchestration: competent staff to ranked slots."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict
from datetime import date, datetime, timedelta
from typing import Sequence

from ...config import settings
from ...data.calendar_repository import fetch_calendars
from ...data.ingestion import parse_address
from ...data.staff_repository import get_competent_staff
from ...models.domain import Address, StaffMember
from ...schemas.assistant import (
    SlotRequest,
    SlotResponse,
    SuggestionModel,
    TeamSlotRequest,
    TeamSlotResponse,
    TeamSuggestionModel,
)
from ..balancing.service import RankingConfig, balance_suggestions, rank_team_suggestions
from ..travel.distance_matrix_client import DistanceMatrixClient
from ..travel.oracle import TravelTimeOracle
from .daily_schedule import build_daily_schedules, day_bounds
from .models import Suggestion, TechnicianDaySchedule
from .slot_finder import SlotFinderConfig, find_slots_for_day
from .team_search import TeamSearchConfig, find_team_slots as search_team_slots

logger = logging.getLogger(__name__)


class InvalidBookingRequest(ValueError):
    """The request is rejected before any data is read."""


def _validate(destination_address: str, required_skill: str, duration_minutes: int) -> Address:
    destination = parse_address(destination_address)
    if destination is None:
        raise InvalidBookingRequest("destination_address is required.")
    if not required_skill or not required_skill.strip():
        raise InvalidBookingRequest("required_skill is required.")
    if not settings.min_duration_minutes <= duration_minutes <= settings.max_duration_minutes:
        raise InvalidBookingRequest(
            f"duration_minutes must be between {settings.min_duration_minutes} "
            f"and {settings.max_duration_minutes} (got {duration_minutes})."
        )
    return destination


def _search_dates(search_start_date: date | None) -> tuple[date, date]:
    start = search_start_date or datetime.now(settings.tz).date()
    return start, start + timedelta(days=settings.search_window_days - 1)


def _make_oracle() -> TravelTimeOracle:
    try:
        provider = DistanceMatrixClient()
    except ValueError as e:
        logger.warning(f"Travel time provider unavailable ({e}); using default estimates.")
        provider = None
    return TravelTimeOracle(provider)


def _load_schedules(
    staff: Sequence[StaffMember],
    search_start: date,
    search_end: date,
) -> list[TechnicianDaySchedule]:
    tz = settings.tz
    window_start, _ = day_bounds(search_start, tz)
    _, window_end = day_bounds(search_end, tz)
    calendars = fetch_calendars(staff, window_start, window_end)
    return build_daily_schedules(staff, calendars, search_start, search_end, tz)


def _ranking_config() -> RankingConfig:
    return RankingConfig(
        high_quality_score=settings.high_quality_score,
        max_per_group_high_quality=settings.max_per_group_high_quality,
        max_per_group_default=settings.max_per_group_default,
        max_single_suggestions=settings.max_single_suggestions,
        max_team_suggestions=settings.max_team_suggestions,
    )


def _to_suggestion_model(suggestion: Suggestion) -> SuggestionModel:
    return SuggestionModel(**asdict(suggestion))


def find_slots(payload: SlotRequest) -> SlotResponse:
    destination = _validate(payload.destination_address, payload.required_skill, payload.duration_minutes)
    search_start, search_end = _search_dates(payload.search_start_date)
    metadata: dict = {
        "search_start": search_start.isoformat(),
        "search_end": search_end.isoformat(),
        "timezone": settings.facility_timezone,
    }

    staff = get_competent_staff(payload.required_skill.strip(), payload.technician_ids)
    metadata["technicians"] = len(staff)
    if not staff:
        logger.info(f"No competent technicians for '{payload.required_skill}'")
        return SlotResponse(suggestions=[], metadata=metadata)

    schedules = _load_schedules(staff, search_start, search_end)
    metadata["technician_days"] = len(schedules)

    oracle = _make_oracle()
    origins = [member.home_address for member in staff]
    origins.extend(
        booking.address for schedule in schedules for booking in schedule.bookings if booking.address is not None
    )
    oracle.resolve(origins, destination)

    finder_config = SlotFinderConfig(
        stride_minutes=settings.single_slot_stride_minutes,
        travel_home_threshold_minutes=settings.travel_home_threshold_minutes,
    )

    def run(schedule: TechnicianDaySchedule) -> list[Suggestion]:
        return find_slots_for_day(schedule, payload.duration_minutes, destination, oracle, finder_config)

    candidates: list[Suggestion] = []
    if schedules:
        with ThreadPoolExecutor(max_workers=min(settings.slot_search_workers, len(schedules))) as executor:
            for day_suggestions in executor.map(run, schedules):
                candidates.extend(day_suggestions)

    ranked = balance_suggestions(candidates, _ranking_config())
    metadata["candidates"] = len(candidates)
    metadata["travel_provider_calls"] = oracle.provider_calls
    logger.info(
        f"Slot search for '{payload.required_skill}': {len(staff)} technicians, {len(schedules)} technician-days, "
        f"{len(candidates)} candidates, {len(ranked)} returned"
    )
    return SlotResponse(suggestions=[_to_suggestion_model(s) for s in ranked], metadata=metadata)


def find_team_slots(payload: TeamSlotRequest) -> TeamSlotResponse:
    if payload.team_size < 2:
        raise InvalidBookingRequest(f"team_size must be at least 2 (got {payload.team_size}).")
    destination = _validate(payload.destination_address, payload.required_skill, payload.duration_minutes)
    search_start, search_end = _search_dates(payload.search_start_date)
    metadata: dict = {
        "search_start": search_start.isoformat(),
        "search_end": search_end.isoformat(),
        "timezone": settings.facility_timezone,
        "team_size": payload.team_size,
    }

    staff = get_competent_staff(payload.required_skill.strip())
    metadata["technicians"] = len(staff)
    if len(staff) < payload.team_size:
        logger.info(
            f"Only {len(staff)} competent technicians for '{payload.required_skill}', "
            f"team of {payload.team_size} requested"
        )
        return TeamSlotResponse(suggestions=[], metadata=metadata)

    schedules = _load_schedules(staff, search_start, search_end)
    metadata["technician_days"] = len(schedules)

    oracle = _make_oracle()
    travel_by_address = oracle.resolve([member.home_address for member in staff], destination)
    travel_from_home = {member.id: travel_by_address[member.home_address.key] for member in staff}

    results = search_team_slots(
        schedules,
        payload.team_size,
        payload.duration_minutes,
        travel_from_home,
        TeamSearchConfig(stride_minutes=settings.team_slot_stride_minutes),
    )
    ranked = rank_team_suggestions(results, _ranking_config())
    metadata["candidates"] = len(results)
    metadata["travel_provider_calls"] = oracle.provider_calls
    logger.info(
        f"Team search for '{payload.required_skill}' (size {payload.team_size}): "
        f"{len(results)} candidates, {len(ranked)} returned"
    )
    return TeamSlotResponse(
        suggestions=[TeamSuggestionModel(**asdict(item)) for item in ranked],
        metadata=metadata,
    )
