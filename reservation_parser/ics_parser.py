"""
This module provides functionality for reading calendar exports.

It uses the icalendar library to turn an iCal file into RawEvent objects.
"""
import logging
from typing import List, Optional

from icalendar import Calendar

from .exceptions import ParsingError
from .models import RawEvent

# Get a logger instance for this module
logger = logging.getLogger(__name__)


def parse_ics(ics_text: str, source: Optional[str] = None) -> List[RawEvent]:
    """
    Parse an ICS file and return a list of RawEvent objects.

    Args:
        ics_text: The content of the iCal file.
        source: Optional source tag attached to every event.

    Raises:
        ParsingError: If the content is not a readable calendar.
    """
    try:
        cal = Calendar.from_ical(ics_text)
    except ValueError as e:
        raise ParsingError(f"Failed to parse ICS file: {e}") from e

    events = []
    for component in cal.walk("VEVENT"):
        uid = component.get("UID")
        uid = str(uid) if uid is not None else None

        dt_start = component.get("DTSTART")
        if dt_start is None:
            logger.warning(f"Event with UID {uid} has no DTSTART.")
            start = None
        else:
            # The .dt attribute holds the date or datetime object
            start = dt_start.dt

        description = (
            str(component.get("DESCRIPTION", ""))
            .replace("\\n", "\n")
            .replace("\\\\", "\\")
            .strip()
        )
        summary = str(component.get("SUMMARY", "")).strip()

        events.append(
            RawEvent(
                summary=summary,
                description=description,
                start=start,
                source=source,
                uid=uid,
            )
        )

    logger.info(f"Read {len(events)} events from calendar file.")
    return events
