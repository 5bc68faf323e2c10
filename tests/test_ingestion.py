import json
from datetime import datetime, time, timezone

from src.booking_assistant.data.ingestion import parse_address, parse_timestamp, parse_work_template


def test_parse_address_accepts_every_stored_shape():
    plain = parse_address("  Storgatan 1,  Uppsala ")
    encoded = parse_address(json.dumps({"formatted_address": "Storgatan 1, Uppsala"}))
    mapping = parse_address({"formatted_address": "Storgatan 1, Uppsala", "lat": 59.8})
    quoted = parse_address(json.dumps("Storgatan 1, Uppsala"))

    assert plain.text == "Storgatan 1, Uppsala"
    assert plain == encoded == mapping == quoted


def test_parse_address_key_ignores_case_and_spacing():
    assert parse_address("STORGATAN 1, Uppsala").key == parse_address("storgatan  1, uppsala ").key


def test_parse_address_empty_values():
    assert parse_address(None) is None
    assert parse_address("   ") is None
    assert parse_address({"formatted_address": ""}) is None
    assert parse_address({}) is None


def test_parse_address_keeps_non_json_braces():
    address = parse_address("{Lager} Hamngatan 3")
    assert address.text == "{Lager} Hamngatan 3"


def test_parse_work_template_reads_days_in_weekday_order():
    raw = {
        "monday": {"start": "08:00", "end": "16:00", "active": True},
        "tuesday": {"start": "07:30", "end": "15:30", "active": True},
        "wednesday": {"start": "08:00", "end": "16:00", "active": False},
    }
    template = parse_work_template(json.dumps(raw))

    monday = template.for_weekday(0)
    assert monday.active and monday.start == time(8, 0) and monday.end == time(16, 0)
    assert template.for_weekday(1).start == time(7, 30)
    assert not template.for_weekday(2).active
    assert not template.for_weekday(6).active


def test_parse_work_template_marks_malformed_days_inactive():
    raw = {
        "monday": {"start": "16:00", "end": "08:00", "active": True},
        "tuesday": {"start": "later", "end": "16:00", "active": True},
        "friday": {"start": "08:00", "end": "12:00", "active": True},
    }
    template = parse_work_template(raw)

    assert not template.for_weekday(0).active
    assert not template.for_weekday(1).active
    assert template.for_weekday(4).active


def test_parse_work_template_missing_schedule_has_no_working_days():
    template = parse_work_template(None)
    assert not any(day.active for day in template.days)
    assert len(template.days) == 7


def test_parse_timestamp_naive_values_are_utc():
    assert parse_timestamp("2026-10-19T08:00:00") == datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)
    assert parse_timestamp("2026-10-19T08:00:00Z") == datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)
    assert parse_timestamp("2026-10-19T10:00:00+02:00") == datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)
