"""
Priority-ordered lookup tables used to read staff shorthand in calendar entries.

Every table is evaluated top-down and the first hit wins, so more specific
entries must come before more general ones. New shorthand is added here
without touching the extraction code.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from .models import DeviceCategory, EventRole, HandoverMethod


@dataclass(frozen=True)
class ActionRule:
    """
    Maps summary markers to a role and handover method.

    ``markers`` is a tuple of alternatives; each alternative is a tuple of
    tokens that must all appear in the summary. A rule without a method asks
    the extractor to look for a terminal token in the full text.
    """

    markers: Tuple[Tuple[str, ...], ...]
    role: EventRole
    method: Optional[HandoverMethod] = None
    scan_terminal: bool = False


ACTION_RULES: Tuple[ActionRule, ...] = (
    ActionRule((("공수T1",), ("공수 T1",)), EventRole.PICKUP, HandoverMethod.TERMINAL1),
    ActionRule((("공수T2",), ("공수 T2",)), EventRole.PICKUP, HandoverMethod.TERMINAL2),
    ActionRule((("공수",),), EventRole.PICKUP, scan_terminal=True),
    ActionRule((("공반T1",), ("공반 T1",)), EventRole.RETURN, HandoverMethod.TERMINAL1),
    ActionRule((("공반T2",), ("공반 T2",)), EventRole.RETURN, HandoverMethod.TERMINAL2),
    ActionRule((("공반",),), EventRole.RETURN, scan_terminal=True),
    ActionRule((("택배발송",), ("배수",)), EventRole.PICKUP, HandoverMethod.DELIVERY),
    ActionRule((("택배반납예약",), ("배반",)), EventRole.RETURN, HandoverMethod.DELIVERY),
    ActionRule((("호텔수령",), ("호텔", "수령")), EventRole.PICKUP, HandoverMethod.HOTEL),
    ActionRule((("호텔반납",), ("호텔", "반납")), EventRole.RETURN, HandoverMethod.HOTEL),
    ActionRule((("사무실수령",), ("오피스수령",)), EventRole.PICKUP, HandoverMethod.OFFICE),
    ActionRule((("사무실반납",), ("오피스반납",)), EventRole.RETURN, HandoverMethod.OFFICE),
)

# Used only when no action rule matched; the role is known but the method is not.
FALLBACK_ROLE_KEYWORDS: Tuple[Tuple[Tuple[str, ...], EventRole], ...] = (
    (("수령", "픽업", "PICKUP"), EventRole.PICKUP),
    (("반납", "리턴", "RETURN"), EventRole.RETURN),
)

TERMINAL_TOKENS: Tuple[Tuple[Tuple[str, ...], HandoverMethod], ...] = (
    (("T1", "터미널1"), HandoverMethod.TERMINAL1),
    (("T2", "터미널2"), HandoverMethod.TERMINAL2),
)

DEVICE_ALIASES: Tuple[Tuple[DeviceCategory, Tuple[str, ...]], ...] = (
    (DeviceCategory.S25, ("25", "S25", "에스25", "갤럭시S25", "Galaxy S25")),
    (DeviceCategory.S24, ("24", "S24", "에스24", "갤럭시S24", "Galaxy S24")),
    (DeviceCategory.S23, ("23", "S23", "에스23", "갤럭시S23", "Galaxy S23")),
    (DeviceCategory.S22, ("22", "S22", "에스22", "갤럭시S22", "Galaxy S22")),
    (DeviceCategory.GP13, ("13", "GP13", "고프로13", "GoPro13")),
    (DeviceCategory.GP12, ("12", "GP12", "고프로12", "GoPro12")),
    (DeviceCategory.GP11, ("11", "GP11", "고프로11", "GoPro11")),
    (DeviceCategory.GP10, ("10", "GP10", "고프로10", "GoPro10")),
    (DeviceCategory.GP8, ("8", "GP8", "고프로8", "GoPro8")),
    (DeviceCategory.POCKET3, ("POCKET3", "포켓3")),
    (DeviceCategory.ACTION5, ("ACTION5", "액션5")),
    (DeviceCategory.PS5, ("PS5", "플스5", "플레이스테이션5")),
    (DeviceCategory.GLAMPAM, ("GLAMPAM", "글램팜", "GLP")),
    (DeviceCategory.AIRWRAP, ("AIRWRAP", "에어랩", "다이슨")),
    (DeviceCategory.AIRSTRAIGHT, ("AIRSTRAIGHT", "에어스트레이트")),
    (DeviceCategory.INSTA360, ("INSTA360", "인스타360")),
    (DeviceCategory.STROLLER, ("STROLLER", "유모차")),
    (DeviceCategory.WAGON, ("WAGON", "웨건")),
    (DeviceCategory.MINIEVO, ("MINIEVO", "미니에보")),
    (DeviceCategory.ETC, ("기타", "ETC", "OTHER", "그외", "기타기기")),
)

# Messaging-app labels and the canonical prefix stored with the handle.
MESSAGING_PREFIXES: Tuple[Tuple[str, str], ...] = (
    ("kakaotalk", "KAKAO"),
    ("kakao", "KAKAO"),
    ("카카오톡", "KAKAO"),
    ("카카오", "KAKAO"),
    ("카톡", "KAKAO"),
    ("wechat", "WECHAT"),
    ("위챗", "WECHAT"),
    ("whatsapp", "WHATSAPP"),
    ("왓츠앱", "WHATSAPP"),
    ("line", "LINE"),
    ("라인", "LINE"),
)

NAME_LABELS: Tuple[str, ...] = ("고객명", "예약자", "이름", "성함", "customer", "name")

CONTACT_LABELS: Tuple[str, ...] = ("연락처", "전화번호", "전화", "휴대폰", "phone", "tel", "contact")

ORDER_NUMBER_LABELS: Tuple[str, ...] = (
    "주문번호",
    r"(?<![A-Za-z])order\s*(?:number\b|no\b\.?|#)",
)

# Operational words that show up after a name label but are never a name.
NAME_STOPLIST = frozenset(
    {
        "delivery",
        "return",
        "pickup",
        "hotel",
        "office",
        "택배",
        "반납",
        "수령",
        "호텔",
        "사무실",
        "공수",
        "공반",
        "배송",
    }
)

PERFECT_MATCH_TAG = "perfect-match"
STRONG_MATCH_TAG = "strong-match"
PICKUP_ONLY_TAG = "pickup-only"
