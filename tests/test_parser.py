from datetime import date, datetime
from pathlib import Path

import pytest

from reservation_parser.exceptions import ParsingError
from reservation_parser.ics_parser import parse_ics

NO_START_ICS = """
BEGIN:VCALENDAR
BEGIN:VEVENT
UID:nostart@rental.test
SUMMARY:공수T1/Kim
END:VEVENT
END:VCALENDAR
"""


@pytest.fixture
def sample_ics():
    return (Path(__file__).parent / "sample.ics").read_text(encoding="utf-8")


def test_parse_events(sample_ics):
    events = parse_ics(sample_ics)
    assert len(events) == 4

    e1 = events[0]
    assert e1.uid == "pickup-1@rental.test"
    assert e1.summary == "공수T1/Kim Minji/01012345678/GP12"
    assert e1.description == "1층 카운터"
    assert e1.start == datetime(2025, 3, 1, 10, 0)
    assert e1.source is None

    e3 = events[2]
    assert e3.start == date(2025, 3, 10)
    assert e3.description == "서울시 강남구\n테헤란로 1"

    assert events[3].description == ""


def test_parse_events_with_source(sample_ics):
    events = parse_ics(sample_ics, source="primary")

    assert all(event.source == "primary" for event in events)


def test_missing_dtstart_keeps_event_without_start():
    events = parse_ics(NO_START_ICS)

    assert len(events) == 1
    assert events[0].start is None


def test_invalid_content_raises_parsing_error():
    with pytest.raises(ParsingError):
        parse_ics("this is not a calendar")
