"""Conversation relay: recognized text in, spoken reply out.

Posts `{message, language}` to the chat backend and hands the reply to the
transcript and the speech output coordinator. Kannada replies that come back
with Latin letters in them are re-requested once.
"""

from __future__ import annotations
import logging
import re
import uuid
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Pattern, Protocol

import httpx

from . import messages
from .language import LATIN_PATTERN, Locale
from .transcript import Role, TranscriptView

logger = logging.getLogger(__name__)

SESSION_HEADER = "X-Session-Id"

INSTRUCTIONS = {
    Locale.SECONDARY: (
        "\nನೀವು ಒಬ್ಬ ಸ್ನೇಹಭರಿತ, ಸರಳ, ಮತ್ತು ಸದಾ ಶಿಷ್ಟ Kannada ಸಹಾಯಗಾರ.\n"
        "ನೀವು ಸರಳ ಮಾತಿನ ಶೈಲಿಯಲ್ಲಿ 100% ಕನ್ನಡದ ಉತ್ತರ ನೀಡಿ.\n"
    ),
    Locale.PRIMARY: "Reply in short, friendly English.",
}


def compose_prompt(text: str, locale: Locale) -> str:
    return f"{INSTRUCTIONS[Locale.parse(locale)]}\n\nUser: {text}"


@dataclass
class FidelityPolicy:
    """When to re-ask because the reply came back in the wrong script.

    Heuristic only: the model is asked for pure Kannada and sometimes mixes
    in English. The trigger pattern and the locales it applies to are
    configurable.
    """

    pattern: Pattern[str] = LATIN_PATTERN
    locales: FrozenSet[Locale] = field(default_factory=lambda: frozenset({Locale.SECONDARY}))
    enabled: bool = True

    @classmethod
    def from_regex(cls, regex: str, **kwargs) -> "FidelityPolicy":
        return cls(pattern=re.compile(regex), **kwargs)

    def should_retry(self, reply: str, locale: Locale) -> bool:
        if not self.enabled or Locale.parse(locale) not in self.locales:
            return False
        return bool(reply) and self.pattern.search(reply) is not None


class Speaker(Protocol):
    def speak(self, text: str, locale: Locale): ...


class ConversationRelay:
    def __init__(
        self,
        transcript: TranscriptView,
        speaker: Optional[Speaker],
        base_url: str = "http://localhost:4000",
        path: str = "/api/chat",
        clear_path: str = "/api/cb-clear",
        timeout: float = 15.0,
        policy: Optional[FidelityPolicy] = None,
        session_id: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.transcript = transcript
        self.speaker = speaker
        self.base_url = base_url.rstrip("/")
        self.url = self.base_url + path
        self.clear_url = self.base_url + clear_path
        self.timeout = timeout
        self.policy = policy or FidelityPolicy()
        self.session_id = session_id or uuid.uuid4().hex
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            transport=self._transport,
            headers={SESSION_HEADER: self.session_id},
        )

    async def send(self, text: str, locale: Locale | str, is_retry: bool = False) -> Optional[str]:
        """Relay one utterance. Returns the accepted reply, or None on failure."""
        locale = Locale.parse(locale)
        payload = {"message": compose_prompt(text, locale), "language": locale.value}
        try:
            async with self._client() as client:
                resp = await client.post(self.url, json=payload)

            if not resp.is_success:
                logger.warning("Chat backend returned %s", resp.status_code)
                self.transcript.add(Role.ASSISTANT, messages.CONNECTION_ERROR)
                return None

            data = resp.json()
            reply = (data.get("reply") if isinstance(data, dict) else None) or messages.NO_ANSWER

            if not is_retry and self.policy.should_retry(reply, locale):
                logger.info("Reply not in %s; asking once more", locale.value)
                return await self.send(text, locale, is_retry=True)
        except Exception as e:
            logger.error("API Error: %s", e)
            self.transcript.add(Role.ASSISTANT, messages.GENERIC_ERROR)
            return None

        self.transcript.add(Role.ASSISTANT, reply)
        if self.speaker is not None:
            try:
                self.speaker.speak(reply, locale)
            except Exception as e:
                logger.warning("Could not speak reply: %s", e)
        return reply

    async def clear_context(self) -> bool:
        """Ask the backend to forget this session's conversation context."""
        try:
            async with self._client() as client:
                resp = await client.post(self.clear_url)
                resp.raise_for_status()
            return True
        except Exception as e:
            logger.warning(f"Could not clear backend context: {e}")
            return False
