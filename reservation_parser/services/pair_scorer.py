"""
This module defines the PairScorer, which rates how likely a pickup entry and a
return entry belong to the same rental.
"""
import math
import re
from datetime import datetime
from typing import List

from ..models import MatchScore, ParsedEventInfo
from ..rules import STRONG_MATCH_TAG

NAME_WEIGHT = 0.35
CONTACT_WEIGHT = 0.35
DEVICE_WEIGHT = 0.20
TIME_WEIGHT = 0.05
ORDER_WEIGHT = 0.05
STRONG_MATCH_BONUS = 0.20

# Device information missing on either side is a weak prior, not a neutral skip.
MISSING_DEVICE_SCORE = 0.3

# (upper bound in days, score); rentals of a few days are the most common.
TIME_GAP_CURVE = (
    (1, 0.3),
    (3, 0.9),
    (7, 1.0),
    (14, 0.9),
    (30, 0.8),
    (60, 0.6),
)
LONG_GAP_SCORE = 0.3

contact_separator_pattern = re.compile(r"[-.\s]")


def normalize_contact(contact: str) -> str:
    """Strips the separators staff put into phone numbers."""
    return contact_separator_pattern.sub("", contact)


def day_gap(first: datetime, second: datetime) -> float:
    """Absolute distance between two moments in days."""
    if (first.tzinfo is None) != (second.tzinfo is None):
        first = first.replace(tzinfo=None)
        second = second.replace(tzinfo=None)
    return abs((second - first).total_seconds()) / 86400


class PairScorer:
    """Weighted multi-factor similarity between one pickup and one return."""

    def score(self, pickup: ParsedEventInfo, return_info: ParsedEventInfo) -> MatchScore:
        """
        Scores a pickup/return pair.

        Returns:
            A MatchScore holding every factor and the total clamped to 1.0.
        """
        name = self._name_score(pickup.renter_name, return_info.renter_name)
        contact = self._contact_score(pickup.renter_phone, return_info.renter_phone)
        device = self._device_score(pickup.device_category, return_info.device_category)
        gap = self._time_score(day_gap(pickup.event_datetime, return_info.event_datetime))
        order = 1.0 if pickup.order_number and pickup.order_number == return_info.order_number else 0.0

        bonus = 0.0
        if name >= 0.7 and contact >= 0.8 and device >= 0.8:
            bonus = STRONG_MATCH_BONUS

        total = (
            name * NAME_WEIGHT
            + contact * CONTACT_WEIGHT
            + device * DEVICE_WEIGHT
            + gap * TIME_WEIGHT
            + order * ORDER_WEIGHT
            + bonus
        )
        return MatchScore(
            name=name,
            contact=contact,
            device=device,
            time=gap,
            order=order,
            bonus=bonus,
            total=min(total, 1.0),
        )

    def reasons(
        self, pickup: ParsedEventInfo, return_info: ParsedEventInfo, score: MatchScore
    ) -> List[str]:
        """Human-readable tags explaining a score."""
        reasons = []
        if score.is_strong:
            reasons.append(STRONG_MATCH_TAG)

        elements = []
        if score.name > 0.9:
            elements.append("name")
        if score.contact > 0.9:
            elements.append("contact")
        if score.device == 1:
            elements.append("device")
        if score.order == 1:
            elements.append("order")
        if elements:
            reasons.append("+".join(elements))

        days = day_gap(pickup.event_datetime, return_info.event_datetime)
        reasons.append(f"{math.floor(days + 0.5)}-day gap")
        return reasons

    def is_perfect_match(self, pickup: ParsedEventInfo, return_info: ParsedEventInfo) -> bool:
        """Name, contact and device present on both sides and exactly equal."""
        return bool(
            pickup.renter_name
            and return_info.renter_name
            and pickup.renter_phone
            and return_info.renter_phone
            and pickup.device_category
            and return_info.device_category
            and pickup.renter_name == return_info.renter_name
            and normalize_contact(pickup.renter_phone) == normalize_contact(return_info.renter_phone)
            and pickup.device_category == return_info.device_category
        )

    @staticmethod
    def _name_score(first, second) -> float:
        if not first or not second:
            return 0.0
        if first == second:
            return 1.0
        if first in second or second in first:
            return 0.7
        return 0.0

    @staticmethod
    def _contact_score(first, second) -> float:
        if not first or not second:
            return 0.0
        first, second = normalize_contact(first), normalize_contact(second)
        if first == second:
            return 1.0
        if first in second or second in first:
            return 0.8
        return 0.0

    @staticmethod
    def _device_score(first, second) -> float:
        if first is None or second is None:
            return MISSING_DEVICE_SCORE
        return 1.0 if first == second else 0.0

    @staticmethod
    def _time_score(days: float) -> float:
        for upper_bound, value in TIME_GAP_CURVE:
            if days <= upper_bound:
                return value
        return LONG_GAP_SCORE
