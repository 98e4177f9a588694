"""
This module defines the data models for the reservation parser.
"""

import hashlib
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional, Tuple, Union


class EventRole(Enum):
    """Whether a calendar entry hands equipment out or takes it back."""

    PICKUP = "pickup"
    RETURN = "return"
    UNKNOWN = "unknown"


class HandoverMethod(Enum):
    """Where or how the equipment changes hands."""

    TERMINAL1 = "T1"
    TERMINAL2 = "T2"
    DELIVERY = "delivery"
    OFFICE = "office"
    HOTEL = "hotel"


class DeviceCategory(Enum):
    """Closed set of rentable device codes."""

    S25 = "S25"
    S24 = "S24"
    S23 = "S23"
    S22 = "S22"
    GP13 = "GP13"
    GP12 = "GP12"
    GP11 = "GP11"
    GP10 = "GP10"
    GP8 = "GP8"
    POCKET3 = "POCKET3"
    ACTION5 = "ACTION5"
    PS5 = "PS5"
    GLAMPAM = "GLAMPAM"
    AIRWRAP = "AIRWRAP"
    AIRSTRAIGHT = "AIRSTRAIGHT"
    INSTA360 = "INSTA360"
    STROLLER = "STROLLER"
    WAGON = "WAGON"
    MINIEVO = "MINIEVO"
    ETC = "ETC"


def _parse_start(start: Any) -> Optional[Union[datetime, date]]:
    """Reads a calendar-API start value ({"dateTime": ...} or {"date": ...})."""
    if isinstance(start, (datetime, date)) or start is None:
        return start
    if isinstance(start, dict):
        if start.get("dateTime"):
            raw = start["dateTime"]
        elif start.get("date"):
            try:
                return date.fromisoformat(start["date"])
            except (TypeError, ValueError):
                return None
        else:
            return None
    else:
        raw = start
    try:
        return datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass(frozen=True)
class RawEvent:
    """A single free-text calendar entry as supplied by the caller."""

    summary: str = ""
    description: str = ""
    start: Optional[Union[datetime, date]] = None
    source: Optional[str] = None
    uid: Optional[str] = None

    @classmethod
    def from_dict(cls, item: dict) -> "RawEvent":
        """Builds an event from a calendar-API item."""
        return cls(
            summary=item.get("summary") or "",
            description=item.get("description") or "",
            start=_parse_start(item.get("start")),
            source=item.get("_source") or item.get("source"),
            uid=item.get("id") or item.get("uid"),
        )

    def compute_hash(self) -> str:
        """Compute SHA256 hash of the event content, ignoring UID and source."""
        raw = f"{self.summary}|{self.description}|{self.start.isoformat() if self.start else ''}"
        return hashlib.sha256(raw.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class ParsedEventInfo:
    """Structured fields recovered from one RawEvent."""

    role: EventRole
    event_datetime: datetime
    method: Optional[HandoverMethod] = None
    renter_name: Optional[str] = None
    renter_phone: Optional[str] = None
    renter_address: Optional[str] = None
    device_category: Optional[DeviceCategory] = None
    order_number: Optional[str] = None
    reservation_id: Optional[str] = None
    key: str = ""
    event: Optional[RawEvent] = field(default=None, compare=False, repr=False)

    @property
    def is_pickup(self) -> bool:
        return self.role is EventRole.PICKUP

    @property
    def is_return(self) -> bool:
        return self.role is EventRole.RETURN

    @property
    def pickup_method(self) -> Optional[HandoverMethod]:
        return self.method if self.is_pickup else None

    @property
    def return_method(self) -> Optional[HandoverMethod]:
        return self.method if self.is_return else None


@dataclass(frozen=True)
class MatchScore:
    """Per-factor similarity of a pickup/return pair."""

    name: float
    contact: float
    device: float
    time: float
    order: float
    bonus: float
    total: float

    @property
    def is_strong(self) -> bool:
        """True when name, contact and device all agree closely enough for the bonus."""
        return self.name >= 0.7 and self.contact >= 0.8 and self.device >= 0.8


@dataclass
class MatchCandidate:
    """A scored pickup/return pairing considered during reconciliation."""

    pickup: ParsedEventInfo
    return_info: ParsedEventInfo
    score: float
    reasons: List[str]
    strong: bool = False


@dataclass(frozen=True)
class ReservationDraft:
    """
    A provisional reservation rebuilt from a pickup event and, when one was
    found, its matching return event.
    """

    pickup: ParsedEventInfo
    score: float
    reasons: Tuple[str, ...]
    return_info: Optional[ParsedEventInfo] = None
    reservation_id: Optional[str] = None
    device_category: Optional[DeviceCategory] = None
    pickup_at: Optional[datetime] = None
    pickup_method: Optional[HandoverMethod] = None
    return_at: Optional[datetime] = None
    return_method: Optional[HandoverMethod] = None
    renter_name: str = ""
    renter_phone: str = ""
    renter_address: str = ""
    order_number: Optional[str] = None
    status: str = "pending"

    @classmethod
    def matched(
        cls, pickup: ParsedEventInfo, return_info: ParsedEventInfo, score: float, reasons
    ) -> "ReservationDraft":
        """Blends a pickup and a return into one draft, preferring pickup-side fields."""
        return cls(
            pickup=pickup,
            return_info=return_info,
            score=score,
            reasons=tuple(reasons),
            reservation_id=pickup.reservation_id,
            device_category=pickup.device_category,
            pickup_at=pickup.event_datetime,
            pickup_method=pickup.pickup_method,
            return_at=return_info.event_datetime,
            return_method=return_info.return_method,
            renter_name=pickup.renter_name or "",
            renter_phone=pickup.renter_phone or "",
            renter_address=pickup.renter_address or return_info.renter_address or "",
            order_number=pickup.order_number,
        )

    @classmethod
    def pickup_only(cls, pickup: ParsedEventInfo, reason: str) -> "ReservationDraft":
        """A draft for a pickup that no return could be paired with."""
        return cls(
            pickup=pickup,
            score=0.0,
            reasons=(reason,),
            reservation_id=pickup.reservation_id,
            device_category=pickup.device_category,
            pickup_at=pickup.event_datetime,
            pickup_method=pickup.pickup_method,
            renter_name=pickup.renter_name or "",
            renter_phone=pickup.renter_phone or "",
            renter_address=pickup.renter_address or "",
            order_number=pickup.order_number,
        )

    @property
    def is_matched(self) -> bool:
        return self.return_info is not None

    @property
    def sort_date(self) -> Optional[date]:
        moment = self.pickup_at or self.return_at
        return moment.date() if moment else None

    @property
    def event_keys(self) -> Tuple[str, ...]:
        if self.return_info is None:
            return (self.pickup.key,)
        return (self.pickup.key, self.return_info.key)

    def lookup_key(self) -> Tuple[str, str, Optional[str], Optional[str]]:
        """Fields a reservation store is searched by to spot drafts already saved."""
        return (
            self.renter_name,
            self.renter_phone,
            self.pickup_at.strftime("%Y-%m-%d") if self.pickup_at else None,
            self.device_category.value if self.device_category else None,
        )

    def to_dict(self) -> dict:
        """Flat record in the shape the review screen and reservation store expect."""

        def _day(moment):
            return moment.strftime("%Y-%m-%d") if moment else None

        def _clock(moment):
            return moment.strftime("%H:%M") if moment else None

        return {
            "reservation_id": self.reservation_id,
            "device_category": self.device_category.value if self.device_category else None,
            "pickup_date": _day(self.pickup_at),
            "pickup_time": _clock(self.pickup_at),
            "pickup_method": self.pickup_method.value if self.pickup_method else None,
            "return_date": _day(self.return_at),
            "return_time": _clock(self.return_at),
            "return_method": self.return_method.value if self.return_method else None,
            "renter_name": self.renter_name,
            "renter_phone": self.renter_phone,
            "renter_address": self.renter_address,
            "order_number": self.order_number,
            "pickup_event": self.pickup.key,
            "return_event": self.return_info.key if self.return_info else None,
            "match_confidence": self.score,
            "match_reason": list(self.reasons),
            "status": self.status,
        }
