"""
This module defines the DeviceClassifier for mapping free text to device codes.
"""
import re
from typing import Optional, Pattern, Sequence, Tuple

from ..models import DeviceCategory
from ..rules import DEVICE_ALIASES


class DeviceClassifier:
    """Finds the first device category whose alias appears in a piece of text."""

    def __init__(
        self, aliases: Sequence[Tuple[DeviceCategory, Sequence[str]]] = DEVICE_ALIASES
    ):
        self._patterns = [
            (category, [(alias, self._compile(alias)) for alias in names])
            for category, names in aliases
        ]
        self._names = {
            self._squash(alias) for _, names in aliases for alias in names
        }

    @staticmethod
    def _compile(alias: str) -> Pattern[str]:
        # Bare model numbers must not be read out of phone numbers or dates.
        if alias.isdigit():
            return re.compile(rf"(?<!\d){alias}(?!\d)")
        return re.compile(re.escape(alias), re.IGNORECASE)

    @staticmethod
    def _squash(text: str) -> str:
        return re.sub(r"\s+", "", text).upper()

    def classify(self, text: str, bare_numbers: bool = True) -> Optional[DeviceCategory]:
        """
        Returns the first category, in table order, with an alias in the text.

        Args:
            text: Any free text, e.g. a summary segment or a full event body.
            bare_numbers: Whether plain model numbers such as ``12`` count.
                Turn this off for text that may hold times or dates.

        Returns:
            The matching DeviceCategory, or None when nothing matched.
        """
        if not text:
            return None
        for category, patterns in self._patterns:
            if any(
                pattern.search(text)
                for alias, pattern in patterns
                if bare_numbers or not alias.isdigit()
            ):
                return category
        return None

    def is_device_name(self, text: str) -> bool:
        """True when the whole token is one of the known device aliases."""
        return bool(text) and self._squash(text) in self._names
