"""Locale handling and script-based language detection.

Two locales are supported: English (primary) and Kannada (secondary).
Detection is a plain Unicode block test, no model involved.
"""

from __future__ import annotations
import re
from enum import Enum


KANNADA_PATTERN = re.compile(r"[\u0C80-\u0CFF]")
LATIN_PATTERN = re.compile(r"[A-Za-z]")


class Locale(str, Enum):
    PRIMARY = "en"
    SECONDARY = "kn"

    @property
    def speech_tag(self) -> str:
        """BCP-47 tag handed to recognizers and synthesizers."""
        return f"{self.value}-IN"

    def toggled(self) -> "Locale":
        return Locale.PRIMARY if self is Locale.SECONDARY else Locale.SECONDARY

    @classmethod
    def parse(cls, value: str | None) -> "Locale":
        """Lenient parse: anything that is not a known code falls back to primary."""
        if isinstance(value, Locale):
            return value
        code = (value or "").strip().lower()
        for member in cls:
            if code == member.value or code.startswith(member.value + "-"):
                return member
        return cls.PRIMARY


def detect_locale(text: str | None) -> Locale:
    if not text:
        return Locale.PRIMARY
    return Locale.SECONDARY if KANNADA_PATTERN.search(text) else Locale.PRIMARY
