"""Voice widget: wires the coordinators, relay and transcript together."""

from __future__ import annotations
import logging
from typing import Callable, Optional

import httpx

from .config import AgentConfig
from .language import Locale
from .locale_store import LocaleStore
from .relay import ConversationRelay, FidelityPolicy
from .session import SessionState
from .stt import Recognizer, SpeechInputCoordinator
from .transcript import TranscriptView
from .tts import SpeechOutputCoordinator, Synthesizer

logger = logging.getLogger(__name__)


class VoiceWidget:
    def __init__(
        self,
        config: Optional[AgentConfig] = None,
        recognizer: Optional[Recognizer] = None,
        synthesizer: Optional[Synthesizer] = None,
        locale_store: Optional[LocaleStore] = None,
        transcript: Optional[TranscriptView] = None,
        policy: Optional[FidelityPolicy] = None,
        on_mic: Optional[Callable[[bool], None]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or AgentConfig()
        self.state = SessionState()
        self.locale_store = locale_store or LocaleStore(self.config.state_file)
        self.transcript = transcript or TranscriptView()
        self.listener = SpeechInputCoordinator(
            self.state,
            recognizer,
            self.locale_store,
            self.transcript,
            on_transcript=self._relay_transcript,
            on_mic=on_mic,
        )
        self.speaker = SpeechOutputCoordinator(
            self.state, self.listener, synthesizer, resume_delay=self.config.resume_delay
        )
        self.relay = ConversationRelay(
            self.transcript,
            self.speaker,
            base_url=self.config.api_base_url,
            path=self.config.api_path,
            clear_path=self.config.clear_path,
            timeout=self.config.api_timeout,
            policy=policy,
            transport=transport,
        )
        self.is_open = False
        # normalize whatever was stored (or write the default on first run)
        self.locale_store.save(self.locale_store.get())

    @property
    def locale(self) -> Locale:
        return self.locale_store.get()

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.listener.stop()
        self.speaker.stop()
        self.state.reset()
        self.is_open = False

    def toggle_listening(self) -> bool:
        return self.listener.toggle()

    def toggle_locale(self) -> Locale:
        new_locale = self.locale.toggled()
        self.locale_store.save(new_locale)
        self.listener.invalidate()
        logger.info("Locale switched to %s", new_locale.value)
        return new_locale

    def clear_chat(self) -> None:
        self.transcript.clear()

    async def forget_remote_context(self) -> bool:
        return await self.relay.clear_context()

    async def drain(self) -> None:
        """Wait until recognition handlers have finished relaying."""
        await self.listener.drain()

    async def _relay_transcript(self, text: str, locale: Locale):
        return await self.relay.send(text, locale)
