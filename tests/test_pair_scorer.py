"""
Unit tests for the PairScorer.
"""

from datetime import datetime, timedelta, timezone

import pytest

from reservation_parser.models import DeviceCategory, EventRole, ParsedEventInfo
from reservation_parser.services.pair_scorer import PairScorer, normalize_contact

PICKUP_TIME = datetime(2025, 3, 1, 10, 0)


def make_info(role, name=None, phone=None, device=None, order=None, days=0.0):
    return ParsedEventInfo(
        role=role,
        event_datetime=PICKUP_TIME + timedelta(days=days),
        renter_name=name,
        renter_phone=phone,
        device_category=device,
        order_number=order,
    )


def pickup(**kwargs):
    return make_info(EventRole.PICKUP, **kwargs)


def ret(days=5.0, **kwargs):
    return make_info(EventRole.RETURN, days=days, **kwargs)


@pytest.fixture
def scorer():
    return PairScorer()


def test_normalize_contact():
    assert normalize_contact("010-1234 5678") == "01012345678"
    assert normalize_contact("010.1234.5678") == "01012345678"


def test_exact_match_gets_bonus_and_is_clamped(scorer):
    score = scorer.score(
        pickup(name="Kim", phone="01012345678", device=DeviceCategory.GP12),
        ret(name="Kim", phone="010-1234-5678", device=DeviceCategory.GP12),
    )

    assert score.name == 1.0
    assert score.contact == 1.0
    assert score.device == 1.0
    assert score.bonus == pytest.approx(0.2)
    assert score.total == 1.0
    assert score.is_strong


def test_partial_name_and_contact(scorer):
    score = scorer.score(
        pickup(name="Kim Minji", phone="01012345678"),
        ret(name="Kim", phone="12345678"),
    )

    assert score.name == 0.7
    assert score.contact == 0.8
    # device missing on both sides is a weak prior, not a bonus-qualifying match
    assert score.device == 0.3
    assert score.bonus == 0.0
    assert score.total == pytest.approx(0.7 * 0.35 + 0.8 * 0.35 + 0.3 * 0.2 + 1.0 * 0.05)


def test_device_mismatch_scores_zero(scorer):
    score = scorer.score(
        pickup(name="Kim", phone="01012345678", device=DeviceCategory.GP12),
        ret(name="Kim", phone="01012345678", device=DeviceCategory.GP11),
    )

    assert score.device == 0.0
    assert not score.is_strong
    assert score.bonus == 0.0


def test_device_missing_on_one_side(scorer):
    score = scorer.score(pickup(device=DeviceCategory.GP12), ret())

    assert score.device == 0.3


def test_missing_names_and_contacts_score_zero(scorer):
    score = scorer.score(pickup(), ret())

    assert score.name == 0.0
    assert score.contact == 0.0


@pytest.mark.parametrize(
    "days, expected",
    [
        (0.5, 0.3),
        (1, 0.3),
        (2, 0.9),
        (3, 0.9),
        (5, 1.0),
        (7, 1.0),
        (10, 0.9),
        (20, 0.8),
        (45, 0.6),
        (90, 0.3),
    ],
)
def test_time_gap_curve(scorer, days, expected):
    assert scorer.score(pickup(), ret(days=days)).time == expected


def test_order_number_match(scorer):
    assert scorer.score(pickup(order="A-1"), ret(order="A-1")).order == 1.0
    assert scorer.score(pickup(order="A-1"), ret(order="A-2")).order == 0.0
    assert scorer.score(pickup(), ret()).order == 0.0


def test_reasons_for_exact_match(scorer):
    p = pickup(name="Kim", phone="01012345678", device=DeviceCategory.GP12, order="A-1")
    r = ret(days=3, name="Kim", phone="01012345678", device=DeviceCategory.GP12, order="A-1")

    reasons = scorer.reasons(p, r, scorer.score(p, r))

    assert reasons == ["strong-match", "name+contact+device+order", "3-day gap"]


def test_reasons_for_weak_pair(scorer):
    p = pickup(name="Kim Minji")
    r = ret(days=2.5, name="Kim")

    reasons = scorer.reasons(p, r, scorer.score(p, r))

    assert reasons == ["3-day gap"]


def test_is_perfect_match(scorer):
    p = pickup(name="Kim", phone="010-1234-5678", device=DeviceCategory.GP12)

    assert scorer.is_perfect_match(p, ret(name="Kim", phone="01012345678", device=DeviceCategory.GP12))
    assert not scorer.is_perfect_match(p, ret(name="Kim", phone="01012345678", device=DeviceCategory.GP11))
    assert not scorer.is_perfect_match(p, ret(name="Kim", phone="01012345678"))
    assert not scorer.is_perfect_match(pickup(name="Kim"), ret(name="Kim"))


def test_mixed_naive_and_aware_times(scorer):
    p = pickup()
    r = ParsedEventInfo(
        role=EventRole.RETURN,
        event_datetime=datetime(2025, 3, 6, 10, 0, tzinfo=timezone.utc),
    )

    assert scorer.score(p, r).time == 1.0
