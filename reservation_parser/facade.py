"""
This module defines the central facade for the reservation reconciler.
"""

import logging
from datetime import datetime
from typing import List, Optional

from .config import NEXT_SOURCE, STRONG_MATCH_THRESHOLD
from .ics_parser import parse_ics
from .models import RawEvent, ReservationDraft
from .services.field_extractor import FieldExtractor
from .services.reconciliation_service import ReconciliationService

logger = logging.getLogger(__name__)


class ReconciliationFacade:
    """
    The central entry point for reconciling calendar entries.
    It prepares event batches and hands them to the ReconciliationService.
    """

    def __init__(
        self,
        reconciliation_service: ReconciliationService,
        extractor: Optional[FieldExtractor] = None,
    ):
        self.reconciliation_service = reconciliation_service
        self.extractor = extractor or reconciliation_service.extractor

    def reconcile(self, events: List[RawEvent]) -> List[ReservationDraft]:
        """Reconciles a batch of events as given."""
        return self.reconciliation_service.reconcile(events)

    def tag_month_window(self, events: List[RawEvent], year: int, month: int) -> List[RawEvent]:
        """
        Selects the events relevant to one month and tags their source.

        Events starting in the month are tagged as primary. Return events from
        the following month are kept as well so that rentals crossing the month
        boundary can still be closed; they carry the secondary tag and so never
        produce pickups of their own. Everything else is dropped, as are
        duplicated entries.

        Args:
            events: Calendar entries covering at least the month and the next one.
            year: The year of the month to reconcile.
            month: The month to reconcile (1-12).

        Returns:
            The selected events with their source tag set.
        """
        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month: {month}")
        next_year, next_month = (year + 1, 1) if month == 12 else (year, month + 1)

        tagged = []
        seen = set()
        for event in events:
            if event.start is None:
                logger.warning(f"Skipping event '{event.summary}' without a start date.")
                continue

            identity = event.uid or event.compute_hash()
            if identity in seen:
                continue
            seen.add(identity)

            start = event.start.date() if isinstance(event.start, datetime) else event.start
            if (start.year, start.month) == (year, month):
                tagged.append(self._with_source(event, self.reconciliation_service.primary_source))
            elif (start.year, start.month) == (next_year, next_month):
                if self.extractor.extract(event).is_return:
                    tagged.append(self._with_source(event, NEXT_SOURCE))

        logger.info(
            f"Selected {len(tagged)} of {len(events)} events for {year}-{month:02d}."
        )
        return tagged

    def reconcile_month(self, events: List[RawEvent], year: int, month: int) -> List[ReservationDraft]:
        """Reconciles the rentals whose pickup falls in the given month."""
        return self.reconcile(self.tag_month_window(events, year, month))

    def reconcile_ics(
        self, ics_text: str, year: Optional[int] = None, month: Optional[int] = None
    ) -> List[ReservationDraft]:
        """
        Reads a calendar export and reconciles it.

        Raises:
            ParsingError: If the calendar export cannot be parsed.
        """
        events = parse_ics(ics_text)
        if year is not None and month is not None:
            return self.reconcile_month(events, year, month)
        return self.reconcile(events)

    def summarize(self, drafts: List[ReservationDraft]) -> dict:
        """Counts drafts by outcome; low-confidence drafts need human confirmation."""
        matched = [draft for draft in drafts if draft.is_matched]
        needs_review = [
            draft
            for draft in drafts
            if not draft.is_matched or draft.score < STRONG_MATCH_THRESHOLD
        ]
        return {
            "total": len(drafts),
            "matched": len(matched),
            "pickup_only": len(drafts) - len(matched),
            "needs_review": len(needs_review),
        }

    @staticmethod
    def _with_source(event: RawEvent, source: str) -> RawEvent:
        return RawEvent(
            summary=event.summary,
            description=event.description,
            start=event.start,
            source=source,
            uid=event.uid,
        )
