"""
This module defines the FieldExtractor for reading reservation fields out of
free-text calendar entries.

Staff write entries such as ``공수T1/Kim Minji/01012345678/GP12``: an action
marker, then name, contact and device separated by slashes. Entries that do not
follow the convention are scanned for labeled fields instead.
"""
import logging
import re
from datetime import date, datetime, time
from typing import Callable, List, Optional, Tuple

from ..models import EventRole, HandoverMethod, ParsedEventInfo, RawEvent
from ..rules import (
    ACTION_RULES,
    CONTACT_LABELS,
    FALLBACK_ROLE_KEYWORDS,
    MESSAGING_PREFIXES,
    NAME_LABELS,
    NAME_STOPLIST,
    ORDER_NUMBER_LABELS,
    TERMINAL_TOKENS,
)
from .device_classifier import DeviceClassifier

# Get a logger instance for this module
logger = logging.getLogger(__name__)

SEGMENT_DELIMITER = "/"
ADDRESS_METHODS = (HandoverMethod.DELIVERY, HandoverMethod.HOTEL)

_PHONE_SHAPE = r"01[016789][-.\s]?\d{3,4}[-.\s]?\d{4}"
phone_pattern = re.compile(rf"^({_PHONE_SHAPE})$")
phone_search_pattern = re.compile(rf"(?<!\d)({_PHONE_SHAPE})(?!\d)")
phone_separator_pattern = re.compile(r"[-.\s]")

_MESSAGING = {label.lower(): canonical for label, canonical in MESSAGING_PREFIXES}
_messaging_alternation = "|".join(re.escape(label) for label, _ in MESSAGING_PREFIXES)
messaging_pattern = re.compile(
    rf"^({_messaging_alternation})(?:\s*[:：@]\s*|\s+)(\S.*)$", re.IGNORECASE
)

_all_labels = "|".join(
    [re.escape(label) for label in NAME_LABELS + CONTACT_LABELS]
    + [re.escape(label) for label, _ in MESSAGING_PREFIXES]
    + list(ORDER_NUMBER_LABELS)
)
name_label_pattern = re.compile(
    rf"(?<![A-Za-z])(?:{'|'.join(re.escape(label) for label in NAME_LABELS)})\s*[:：]\s*"
    rf"(?P<value>.+?)(?=\s*(?<![A-Za-z])(?:{_all_labels})\s*[:：]|[\n/,|]|$)",
    re.IGNORECASE,
)
contact_label_pattern = re.compile(
    rf"(?<![A-Za-z])(?P<label>{'|'.join(re.escape(label) for label in CONTACT_LABELS)}|{_messaging_alternation})"
    r"\s*[:：]\s*(?P<value>[^\s/,|]+)",
    re.IGNORECASE,
)
order_number_pattern = re.compile(
    rf"(?:{'|'.join(ORDER_NUMBER_LABELS)})\s*[:：#]?\s*([A-Z0-9\-]+)", re.IGNORECASE
)
reservation_id_pattern = re.compile(r"(?<![A-Za-z0-9])[A-Z]{2}\d{8}[A-Z0-9]{4}(?![A-Za-z0-9])")
whitespace_pattern = re.compile(r"\s+")


class FieldExtractor:
    """Turns one RawEvent into a ParsedEventInfo. Missing fields stay None."""

    def __init__(
        self,
        device_classifier: Optional[DeviceClassifier] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.device_classifier = device_classifier or DeviceClassifier()
        self.clock = clock

    def extract(self, event: RawEvent, key: Optional[str] = None) -> ParsedEventInfo:
        """
        Extracts structured reservation fields from a calendar entry.

        Args:
            event: The calendar entry to read.
            key: Identifier used to track consumption of the event. Defaults to
                the event UID.

        Returns:
            A ParsedEventInfo. Its role is UNKNOWN when the entry is neither a
            pickup nor a return.
        """
        summary = event.summary or ""
        description = event.description or ""
        full_text = f"{summary} {description}"
        segments = [part.strip() for part in summary.split(SEGMENT_DELIMITER)]
        has_segments = len(segments) >= 2

        role, method = self._detect_role(summary, full_text)
        if role is EventRole.UNKNOWN:
            logger.debug(f"No pickup or return marker in '{summary}'.")

        if has_segments:
            renter_name = segments[1] or None
        else:
            renter_name = self._labeled_name(full_text)

        if len(segments) >= 3 and segments[2]:
            renter_phone = self._segment_contact(segments[2])
        elif has_segments:
            renter_phone = None
        else:
            renter_phone = self._scan_contact(full_text)

        device_category = None
        if len(segments) >= 4:
            device_category = self.device_classifier.classify(segments[3])
        if device_category is None:
            device_category = self.device_classifier.classify(full_text, bare_numbers=False)

        renter_address = None
        if method in ADDRESS_METHODS and description.strip():
            renter_address = whitespace_pattern.sub(" ", description).strip()

        order_match = order_number_pattern.search(full_text)
        reservation_match = reservation_id_pattern.search(full_text)

        return ParsedEventInfo(
            role=role,
            method=method,
            renter_name=renter_name,
            renter_phone=renter_phone,
            renter_address=renter_address,
            device_category=device_category,
            order_number=order_match.group(1) if order_match else None,
            reservation_id=reservation_match.group(0) if reservation_match else None,
            event_datetime=self._event_datetime(event),
            key=key if key is not None else (event.uid or ""),
            event=event,
        )

    def _detect_role(
        self, summary: str, full_text: str
    ) -> Tuple[EventRole, Optional[HandoverMethod]]:
        upper_summary = summary.upper()
        for rule in ACTION_RULES:
            if any(
                all(token.upper() in upper_summary for token in alternative)
                for alternative in rule.markers
            ):
                method = rule.method
                if rule.scan_terminal:
                    method = self._scan_terminal(full_text)
                return rule.role, method

        for keywords, role in FALLBACK_ROLE_KEYWORDS:
            if any(keyword.upper() in upper_summary for keyword in keywords):
                return role, None
        return EventRole.UNKNOWN, None

    @staticmethod
    def _scan_terminal(text: str) -> Optional[HandoverMethod]:
        upper_text = text.upper()
        for tokens, method in TERMINAL_TOKENS:
            if any(token.upper() in upper_text for token in tokens):
                return method
        return None

    @staticmethod
    def _labeled_name(text: str) -> Optional[str]:
        for match in name_label_pattern.finditer(text):
            value = match.group("value").strip()
            if value and value.lower() not in NAME_STOPLIST:
                return value
        return None

    def _segment_contact(self, segment: str) -> Optional[str]:
        phone_match = phone_pattern.match(segment)
        if phone_match:
            return phone_separator_pattern.sub("", phone_match.group(1))

        handle_match = messaging_pattern.match(segment)
        if handle_match:
            return self._messaging_handle(handle_match.group(1), handle_match.group(2))

        if self.device_classifier.is_device_name(segment):
            return None
        return segment

    def _scan_contact(self, text: str) -> Optional[str]:
        phone_match = phone_search_pattern.search(text)
        if phone_match:
            return phone_separator_pattern.sub("", phone_match.group(1))

        label_match = contact_label_pattern.search(text)
        if not label_match:
            return None
        label = label_match.group("label").lower()
        value = label_match.group("value")
        if label in _MESSAGING:
            return self._messaging_handle(label, value)
        return value

    @staticmethod
    def _messaging_handle(label: str, handle: str) -> str:
        return f"{_MESSAGING[label.lower()]}:{handle.strip()}"

    def _event_datetime(self, event: RawEvent) -> datetime:
        start = event.start
        if isinstance(start, datetime):
            return start
        if isinstance(start, date):
            return datetime.combine(start, time.min)
        # TODO: callers should reject undated entries instead of placing them at "now".
        logger.warning(
            f"Event '{event.summary}' has no start time; using the current time."
        )
        return self.clock()


def extract_all(events: List[RawEvent], extractor: Optional[FieldExtractor] = None) -> List[ParsedEventInfo]:
    """
    Extracts every event, keyed by UID or by list position when the UID is
    missing. A UID seen earlier in the batch gets its position appended, so
    recurrence overrides and reused ids stay distinct.
    """
    extractor = extractor or FieldExtractor()
    parsed = []
    seen_keys = set()
    for index, event in enumerate(events):
        key = event.uid or f"#{index}"
        while key in seen_keys:
            key = f"{key}#{index}"
        seen_keys.add(key)
        parsed.append(extractor.extract(event, key=key))
    return parsed
