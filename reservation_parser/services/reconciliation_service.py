"""
This module defines the ReconciliationService, which pairs pickup entries with
return entries and rebuilds provisional reservations from them.
"""
import logging
from datetime import date
from typing import Iterable, List, Optional, Set, Tuple

from ..config import (
    PRIMARY_SOURCE,
    SORT_WITHIN_TIERS,
    STRONG_MATCH_THRESHOLD,
    WEAK_MATCH_THRESHOLD,
)
from ..models import MatchCandidate, ParsedEventInfo, RawEvent, ReservationDraft
from ..rules import PERFECT_MATCH_TAG, PICKUP_ONLY_TAG
from .field_extractor import FieldExtractor, extract_all
from .pair_scorer import PairScorer

logger = logging.getLogger(__name__)


class ReconciliationService:
    """
    Turns a batch of calendar entries into reservation drafts.

    Every pickup is scored against every return; candidates are split into a
    strong and a weak tier and assigned greedily so that each entry ends up in
    at most one draft. Pickups left over become pickup-only drafts. Returns left
    over are dropped, their pickup being expected in an earlier batch.
    """

    def __init__(
        self,
        extractor: Optional[FieldExtractor] = None,
        scorer: Optional[PairScorer] = None,
        primary_source: str = PRIMARY_SOURCE,
        strong_threshold: float = STRONG_MATCH_THRESHOLD,
        weak_threshold: float = WEAK_MATCH_THRESHOLD,
        sort_within_tiers: bool = SORT_WITHIN_TIERS,
    ):
        self.extractor = extractor or FieldExtractor()
        self.scorer = scorer or PairScorer()
        self.primary_source = primary_source
        self.strong_threshold = strong_threshold
        self.weak_threshold = weak_threshold
        self.sort_within_tiers = sort_within_tiers

    def reconcile(self, events: List[RawEvent]) -> List[ReservationDraft]:
        """
        Reconstructs reservations from raw calendar entries.

        Args:
            events: Calendar entries, pickups and returns mixed. Pickups whose
                source is set to anything but the primary tag are ignored.

        Returns:
            Drafts sorted by pickup date (return date when there is no pickup).
        """
        parsed = extract_all(events, self.extractor)
        pickups = [
            info
            for info in parsed
            if info.is_pickup
            and (not info.event.source or info.event.source == self.primary_source)
        ]
        returns = [info for info in parsed if info.is_return]
        logger.info(f"Pickup events: {len(pickups)}, return events: {len(returns)}")

        strong, weak = self.build_candidates(pickups, returns)
        drafts, consumed = self.assign(strong + weak)

        for pickup in pickups:
            if pickup.key not in consumed:
                drafts.append(ReservationDraft.pickup_only(pickup, PICKUP_ONLY_TAG))
                consumed.add(pickup.key)

        unmatched_returns = [info for info in returns if info.key not in consumed]
        if unmatched_returns:
            logger.debug(
                f"Dropping {len(unmatched_returns)} return events without a pickup in this batch."
            )

        drafts.sort(key=lambda draft: draft.sort_date or date.max)
        return drafts

    def build_candidates(
        self, pickups: Iterable[ParsedEventInfo], returns: List[ParsedEventInfo]
    ) -> Tuple[List[MatchCandidate], List[MatchCandidate]]:
        """
        Scores every pickup against every return.

        Returns:
            The strong tier and the weak tier, each in assignment order.
            Candidates below the weak threshold are discarded.
        """
        strong = []
        weak = []
        for pickup in pickups:
            for return_info in returns:
                score = self.scorer.score(pickup, return_info)
                reasons = self.scorer.reasons(pickup, return_info, score)
                perfect = self.scorer.is_perfect_match(pickup, return_info)

                complete = bool(
                    pickup.renter_name
                    and return_info.renter_name
                    and pickup.renter_phone
                    and return_info.renter_phone
                    and pickup.device_category
                    and return_info.device_category
                )
                # A device disagreement keeps a pair out of the strong tier.
                if (
                    complete
                    and score.device > 0
                    and (perfect or score.total >= self.strong_threshold)
                ):
                    strong.append(
                        MatchCandidate(
                            pickup=pickup,
                            return_info=return_info,
                            score=1.0 if perfect else score.total,
                            reasons=[PERFECT_MATCH_TAG] + reasons if perfect else reasons,
                            strong=True,
                        )
                    )
                elif score.total >= self.weak_threshold:
                    weak.append(
                        MatchCandidate(
                            pickup=pickup,
                            return_info=return_info,
                            score=score.total,
                            reasons=reasons,
                        )
                    )

        if self.sort_within_tiers:
            strong.sort(key=lambda candidate: candidate.score, reverse=True)
            weak.sort(key=lambda candidate: candidate.score, reverse=True)
        return strong, weak

    def assign(
        self, candidates: Iterable[MatchCandidate], consumed: Optional[Set[str]] = None
    ) -> Tuple[List[ReservationDraft], Set[str]]:
        """
        Walks the candidates once, keeping each one whose events are both unused.

        Args:
            candidates: Candidates in priority order.
            consumed: Event keys already used elsewhere; copied, not modified.

        Returns:
            The matched drafts and the set of event keys they consumed.
        """
        consumed = set(consumed or ())
        drafts = []
        for candidate in candidates:
            pickup_key = candidate.pickup.key
            return_key = candidate.return_info.key
            if pickup_key in consumed or return_key in consumed:
                continue

            logger.debug(
                f"{'Strong' if candidate.strong else 'Weak'} match: "
                f"{candidate.pickup.renter_name} ({candidate.pickup.event_datetime:%Y-%m-%d}) <-> "
                f"{candidate.return_info.renter_name} ({candidate.return_info.event_datetime:%Y-%m-%d}) "
                f"= {candidate.score:.6f}"
            )
            drafts.append(
                ReservationDraft.matched(
                    candidate.pickup, candidate.return_info, candidate.score, candidate.reasons
                )
            )
            consumed.add(pickup_key)
            consumed.add(return_key)
        return drafts, consumed
