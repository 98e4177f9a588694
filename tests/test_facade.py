"""
Unit tests for the ReconciliationFacade.
"""

from datetime import date, datetime
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from reservation_parser.exceptions import ParsingError
from reservation_parser.facade import ReconciliationFacade
from reservation_parser.models import RawEvent
from reservation_parser.services.field_extractor import FieldExtractor
from reservation_parser.services.reconciliation_service import ReconciliationService


@pytest.fixture
def facade():
    service = ReconciliationService(
        extractor=FieldExtractor(clock=lambda: datetime(2025, 1, 1)),
        primary_source="primary",
    )
    return ReconciliationFacade(service)


@pytest.fixture
def sample_ics():
    return (Path(__file__).parent / "sample.ics").read_text(encoding="utf-8")


def test_reconcile_delegates_to_service():
    # Arrange
    service = MagicMock()
    service.reconcile.return_value = ["draft"]
    facade = ReconciliationFacade(service, extractor=MagicMock())
    events = [RawEvent(summary="공수T1/Kim")]

    # Act
    result = facade.reconcile(events)

    # Assert
    assert result == ["draft"]
    service.reconcile.assert_called_once_with(events)


def test_tag_month_window(facade):
    events = [
        RawEvent(summary="공수T1/Kim/01012345678/GP12", start=datetime(2025, 3, 28, 10), uid="p1"),
        RawEvent(summary="공반T1/Kim/01012345678/GP12", start=datetime(2025, 4, 2, 10), uid="r1"),
        RawEvent(summary="공수T1/Lee/01022223333/S24", start=datetime(2025, 4, 5, 10), uid="p2"),
        RawEvent(summary="공반T1/Lee/01022223333/S24", start=date(2025, 5, 1), uid="r2"),
        RawEvent(summary="공수T1/Park", start=None, uid="p3"),
        RawEvent(summary="공수T1/Kim/01012345678/GP12", start=datetime(2025, 3, 28, 10), uid="p1"),
    ]

    tagged = facade.tag_month_window(events, 2025, 3)

    assert [(event.uid, event.source) for event in tagged] == [
        ("p1", "primary"),
        ("r1", "next"),
    ]


def test_tag_month_window_drops_content_duplicates(facade):
    event = RawEvent(summary="공수T1/Kim", start=datetime(2025, 3, 3, 10))

    assert len(facade.tag_month_window([event, event], 2025, 3)) == 1


def test_tag_month_window_rejects_invalid_month(facade):
    with pytest.raises(ValueError):
        facade.tag_month_window([], 2025, 13)


def test_reconcile_month_rolls_over_year_end(facade):
    events = [
        RawEvent(summary="공수T1/Kim/01012345678/GP12", start=datetime(2024, 12, 29, 10), uid="p1"),
        RawEvent(summary="공반T1/Kim/01012345678/GP12", start=datetime(2025, 1, 3, 10), uid="r1"),
    ]

    drafts = facade.reconcile_month(events, 2024, 12)

    assert len(drafts) == 1
    assert drafts[0].event_keys == ("p1", "r1")
    assert drafts[0].score == 1.0


def test_reconcile_ics(facade, sample_ics):
    drafts = facade.reconcile_ics(sample_ics)

    assert len(drafts) == 2
    assert drafts[0].renter_name == "Kim Minji"
    assert drafts[0].is_matched
    assert drafts[1].renter_name == "Lee Jisoo"
    assert drafts[1].reasons == ("pickup-only",)
    assert drafts[1].renter_address == "서울시 강남구 테헤란로 1"


def test_reconcile_ics_for_month(facade, sample_ics):
    drafts = facade.reconcile_ics(sample_ics, year=2025, month=2)

    # March returns have no February pickup to close
    assert drafts == []


def test_reconcile_ics_propagates_parsing_error(facade):
    with pytest.raises(ParsingError):
        facade.reconcile_ics("this is not a calendar")


def test_summarize(facade, sample_ics):
    drafts = facade.reconcile_ics(sample_ics)

    assert facade.summarize(drafts) == {
        "total": 2,
        "matched": 1,
        "pickup_only": 1,
        "needs_review": 1,
    }
