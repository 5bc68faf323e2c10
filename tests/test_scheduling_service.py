from datetime import date, datetime, time
from zoneinfo import ZoneInfo

import pytest

from src.booking_assistant.config import settings
from src.booking_assistant.data.ingestion import parse_address, parse_work_template
from src.booking_assistant.models.domain import StaffMember, TechnicianCalendar
from src.booking_assistant.schemas.assistant import SlotRequest, TeamSlotRequest
from src.booking_assistant.services.scheduling import service as scheduling_service
from src.booking_assistant.services.scheduling.service import InvalidBookingRequest

TZ = ZoneInfo("Europe/Stockholm")
MONDAY = date(2026, 10, 19)
MONDAY_ONLY = {"monday": {"start": "08:00", "end": "16:00", "active": True}}


def _staff(tech_id: str, name: str) -> StaffMember:
    return StaffMember(
        id=tech_id,
        name=name,
        home_address=parse_address(f"{name}vägen 1, Solna"),
        work_template=parse_work_template(MONDAY_ONLY),
    )


class FakeProvider:
    calls: list = []

    def durations(self, origins, destination):
        FakeProvider.calls.append(list(origins))
        return [20 for _ in origins]


@pytest.fixture
def wired(monkeypatch):
    staff = [_staff("T1", "Anna"), _staff("T2", "Bo")]
    FakeProvider.calls = []
    fetched = []

    def fake_fetch(members, window_start, window_end):
        fetched.append((window_start, window_end))
        return {member.id: TechnicianCalendar() for member in members}

    monkeypatch.setattr(scheduling_service, "get_competent_staff", lambda skill, ids=None: list(staff))
    monkeypatch.setattr(scheduling_service, "fetch_calendars", fake_fetch)
    monkeypatch.setattr(scheduling_service, "DistanceMatrixClient", FakeProvider)
    monkeypatch.setattr(settings, "travel_batch_pause_seconds", 0.0)
    return staff, fetched


def _request(**overrides) -> SlotRequest:
    values = {
        "destination_address": "Kundgatan 7, Stockholm",
        "required_skill": "Råttor",
        "duration_minutes": 60,
        "search_start_date": MONDAY,
    }
    values.update(overrides)
    return SlotRequest(**values)


def _team_request(**overrides) -> TeamSlotRequest:
    values = {
        "destination_address": "Kundgatan 7, Stockholm",
        "required_skill": "Råttor",
        "duration_minutes": 60,
        "search_start_date": MONDAY,
        "team_size": 2,
    }
    values.update(overrides)
    return TeamSlotRequest(**values)


def test_empty_monday_suggests_first_job_at_work_start(wired):
    response = scheduling_service.find_slots(_request())

    first = response.suggestions[0]
    assert first.start_time == datetime.combine(MONDAY, time(8), tzinfo=TZ)
    assert first.is_first_job is True
    assert first.travel_time_minutes == 20
    assert first.efficiency_score == 100
    assert first.efficiency_label == "Optimal"
    # both technicians are high quality, so five earliest slots each
    assert len(response.suggestions) == 10
    assert {s.technician_id for s in response.suggestions} == {"T1", "T2"}


def test_metadata_describes_the_search(wired):
    _, fetched = wired

    response = scheduling_service.find_slots(_request())

    assert response.metadata["search_start"] == "2026-10-19"
    assert response.metadata["search_end"] == "2026-10-25"
    assert response.metadata["technicians"] == 2
    assert response.metadata["technician_days"] == 2
    assert response.metadata["travel_provider_calls"] >= 1
    window_start, window_end = fetched[0]
    assert window_start == datetime(2026, 10, 19, tzinfo=TZ)
    assert window_end == datetime(2026, 10, 26, tzinfo=TZ)


def test_home_addresses_are_resolved_in_one_batch(wired):
    scheduling_service.find_slots(_request())

    assert FakeProvider.calls[0] == ["Annavägen 1, Solna", "Bovägen 1, Solna"]


@pytest.mark.parametrize("duration", [20, 29, 481])
def test_duration_out_of_range_is_rejected_before_any_lookup(monkeypatch, duration):
    def unexpected(*args, **kwargs):
        raise AssertionError("staff lookup must not run")

    monkeypatch.setattr(scheduling_service, "get_competent_staff", unexpected)

    with pytest.raises(InvalidBookingRequest):
        scheduling_service.find_slots(_request(duration_minutes=duration))


def test_blank_destination_is_rejected(monkeypatch):
    monkeypatch.setattr(scheduling_service, "get_competent_staff", lambda *args: pytest.fail("unexpected lookup"))

    with pytest.raises(InvalidBookingRequest):
        scheduling_service.find_slots(_request(destination_address="   "))


def test_no_competent_staff_returns_empty_result(monkeypatch):
    monkeypatch.setattr(scheduling_service, "get_competent_staff", lambda skill, ids=None: [])
    monkeypatch.setattr(scheduling_service, "fetch_calendars", lambda *args: pytest.fail("unexpected fetch"))

    response = scheduling_service.find_slots(_request())

    assert response.suggestions == []
    assert response.metadata["technicians"] == 0


def test_missing_api_key_uses_default_estimates(wired, monkeypatch):
    def unconfigured():
        raise ValueError("Google Maps API key is not configured")

    monkeypatch.setattr(scheduling_service, "DistanceMatrixClient", unconfigured)

    response = scheduling_service.find_slots(_request())

    assert response.suggestions
    assert {s.travel_time_minutes for s in response.suggestions} == {settings.travel_default_minutes}
    assert response.metadata["travel_provider_calls"] == 0


def test_team_slots_start_together_from_home(wired):
    response = scheduling_service.find_team_slots(_team_request())

    assert len(response.suggestions) == 10
    first = response.suggestions[0]
    assert first.start_time == datetime.combine(MONDAY, time(8), tzinfo=TZ)
    assert first.efficiency_score == 60
    assert [member.id for member in first.technicians] == ["T1", "T2"]
    assert first.technicians[0].origin_description == "from home, arriving at 08:00"
    starts = [s.start_time for s in response.suggestions]
    assert starts == sorted(starts)


def test_team_size_below_two_is_rejected(wired):
    with pytest.raises(InvalidBookingRequest):
        scheduling_service.find_team_slots(_team_request(team_size=1))


def test_team_larger_than_competent_staff_returns_empty(wired, monkeypatch):
    _, fetched = wired

    response = scheduling_service.find_team_slots(_team_request(team_size=3))

    assert response.suggestions == []
    assert fetched == []
