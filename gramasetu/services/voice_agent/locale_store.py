"""Client-local persistence of the locale preference.

Stored as a tiny JSON document (``{"lang": "kn"}``). If the file cannot be
read or written the store keeps working from memory for the rest of the
session.
"""

from __future__ import annotations
import json
import logging
import os
from pathlib import Path

from .language import Locale

logger = logging.getLogger(__name__)

DEFAULT_STATE_FILE = Path.home() / ".gramasetu" / "state.json"
_KEY = "lang"


class LocaleStore:
    def __init__(self, path: str | os.PathLike | None = None):
        self.path = Path(path) if path else None
        self._current: Locale | None = None

    def get(self) -> Locale:
        if self._current is not None:
            return self._current
        stored = self._read()
        self._current = Locale.parse(stored) if stored else Locale.PRIMARY
        return self._current

    def save(self, locale: Locale | str | None) -> None:
        if not locale:
            return
        self._current = Locale.parse(locale)
        self._write(self._current)

    def _read(self) -> str | None:
        if self.path is None:
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning("Locale storage unreadable (%s); using in-memory value", e)
            return None
        value = data.get(_KEY) if isinstance(data, dict) else None
        return value if isinstance(value, str) else None

    def _write(self, locale: Locale) -> None:
        if self.path is None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump({_KEY: locale.value}, f)
        except OSError as e:
            logger.warning("Locale storage unavailable (%s); keeping preference in memory only", e)
