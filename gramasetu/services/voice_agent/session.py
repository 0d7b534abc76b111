"""Session state shared by the speech input and output coordinators.

One instance per widget. Only the coordinators mutate it, always from the
event loop thread, so no locking is needed.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass
class SessionState:
    listening: bool = False
    speaking: bool = False
    resume_listening_after_speech: bool = False

    def reset(self) -> None:
        """Return to idle (used when the widget is closed)."""
        self.listening = False
        self.speaking = False
        self.resume_listening_after_speech = False
