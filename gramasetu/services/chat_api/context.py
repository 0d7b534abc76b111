"""Per-session conversation context with a fixed-size sliding window.

Each session key keeps only its most recent `window` entries; appending past
capacity drops the oldest one (a `deque(maxlen=...)` does the eviction).
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, List


@dataclass(frozen=True)
class ContextEntry:
    role: str
    content: str
    locale: str


class ConversationContextStore:
    def __init__(self, window: int = 10) -> None:
        if window <= 0:
            raise ValueError("window must be > 0")
        self.window = int(window)
        self._sessions: Dict[str, Deque[ContextEntry]] = {}

    def _get(self, key: str) -> Deque[ContextEntry]:
        if key not in self._sessions:
            self._sessions[key] = deque(maxlen=self.window)
        return self._sessions[key]

    def append(self, key: str, role: str, content: str, locale: str) -> None:
        self._get(key).append(ContextEntry(role=role, content=content, locale=locale))

    def entries(self, key: str) -> List[ContextEntry]:
        return list(self._sessions.get(key, ()))

    def messages(self, key: str) -> List[Dict[str, str]]:
        """Entries in chat-completion shape (locale tag stripped)."""
        return [{"role": e.role, "content": e.content} for e in self._sessions.get(key, ())]

    def reset_if_locale_changed(self, key: str, locale: str) -> bool:
        """Drop the session's context when the conversation switches language."""
        held = self._sessions.get(key)
        if held and held[0].locale and held[0].locale != locale:
            held.clear()
            return True
        return False

    def clear(self, key: str) -> None:
        self._sessions.pop(key, None)

    def clear_all(self) -> None:
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)
