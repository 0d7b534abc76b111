"""Voice agent: speech capture, language detection, relay and playback."""

from .language import Locale, detect_locale
from .widget import VoiceWidget

__all__ = ["Locale", "detect_locale", "VoiceWidget"]
