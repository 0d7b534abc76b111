from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, List, Optional


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class TranscriptEntry:
    role: Role
    text: str


class TranscriptView:
    """Append-only list of exchanged messages.

    `on_append` lets a front end render each bubble as it arrives (the CLI
    prints them); the view itself holds no business logic.
    """

    def __init__(self, on_append: Optional[Callable[[TranscriptEntry], None]] = None):
        self._entries: List[TranscriptEntry] = []
        self.on_append = on_append

    def add(self, role: Role | str, text: str) -> TranscriptEntry:
        entry = TranscriptEntry(role=Role(role), text=text)
        self._entries.append(entry)
        if self.on_append:
            self.on_append(entry)
        return entry

    def clear(self) -> None:
        self._entries.clear()

    @property
    def entries(self) -> List[TranscriptEntry]:
        return list(self._entries)

    def __iter__(self) -> Iterator[TranscriptEntry]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
