"""Speech input coordinator.

Owns at most one recognition session at a time. Sessions are
single-utterance: they report START, then RESULT or ERROR, then END.
The platform side (whisper, a test fake, ...) only has to implement the
`Recognizer` / `RecognitionSession` protocols below; every state transition
happens here, in `_handle`, on the event loop.
"""

from __future__ import annotations
import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import AsyncIterator, Awaitable, Callable, Optional, Protocol, Set

from . import messages
from .errors import CapabilityUnavailable
from .language import Locale, detect_locale
from .locale_store import LocaleStore
from .session import SessionState
from .transcript import Role, TranscriptView

logger = logging.getLogger(__name__)


class Ev(Enum):
    START = auto()
    RESULT = auto()
    ERROR = auto()
    END = auto()


@dataclass
class RecognitionEvent:
    kind: Ev
    text: str = ""  # transcript for RESULT
    error: Optional[str] = None  # reason for ERROR


class RecognitionSession(Protocol):
    def events(self) -> AsyncIterator[RecognitionEvent]:
        """Start capturing and stream events until END. Iterated exactly once."""
        ...

    def stop(self) -> None:
        """Abort capture. Must be safe to call at any time, any number of times."""
        ...


class Recognizer(Protocol):
    def open_session(self, language_tag: str) -> RecognitionSession: ...


TranscriptHandler = Callable[[str, Locale], Awaitable[object]]


class SpeechInputCoordinator:
    def __init__(
        self,
        state: SessionState,
        recognizer: Optional[Recognizer],
        locale_store: LocaleStore,
        transcript: TranscriptView,
        on_transcript: Optional[TranscriptHandler] = None,
        on_mic: Optional[Callable[[bool], None]] = None,
    ):
        self.state = state
        self.recognizer = recognizer
        self.locale_store = locale_store
        self.transcript = transcript
        self.on_transcript = on_transcript
        self.on_mic = on_mic
        self._session: Optional[RecognitionSession] = None
        self._tasks: Set[asyncio.Task] = set()
        self._alerted = False

    @property
    def active(self) -> bool:
        return self._session is not None

    def toggle(self) -> bool:
        if self.state.listening:
            self.stop()
            return False
        if self.state.speaking and self.state.resume_listening_after_speech:
            # second press during playback withdraws the deferred start
            self.state.resume_listening_after_speech = False
            return False
        return self.start()

    def start(self) -> bool:
        """Open a fresh session bound to the current locale.

        Returns False when no recognizer is available, or while speech is
        playing; in that case listening starts once playback ends. Any
        session still open is dropped first, so there is never more than one.
        """
        if self.recognizer is None:
            logger.warning("Speech recognition is not available on this platform")
            if not self._alerted:
                self._alerted = True
                self.transcript.add(Role.ASSISTANT, messages.RECOGNITION_UNSUPPORTED)
            return False
        if self.state.speaking:
            logger.debug("Speech is playing; listening deferred until it ends")
            self.state.resume_listening_after_speech = True
            return False
        if self._session is not None:
            self.stop()

        locale = self.locale_store.get()
        session = self.recognizer.open_session(locale.speech_tag)
        self._session = session
        self._spawn(self._pump(session))
        logger.debug("Recognition session opened (%s)", locale.speech_tag)
        return True

    def stop(self) -> None:
        session, self._session = self._session, None
        if session is not None:
            try:
                session.stop()
            except Exception as e:
                logger.debug("Ignoring error while stopping recognition: %s", e)
        self._set_idle()

    def invalidate(self) -> None:
        """Tear down the in-flight session after a locale change.

        Events the old session still emits are ignored; the next `start()`
        opens a session bound to the new locale.
        """
        if self._session is not None:
            logger.info("Locale changed; discarding active recognition session")
        self.stop()

    async def drain(self) -> None:
        """Wait for running session pumps and transcript handlers."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ----------------- internals -----------------
    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _pump(self, session: RecognitionSession) -> None:
        try:
            async for ev in session.events():
                if session is not self._session:
                    continue  # invalidated: drain silently
                self._handle(session, ev)
        except Exception as e:
            if session is self._session:
                self._handle(session, RecognitionEvent(Ev.ERROR, error=str(e)))
        finally:
            if session is self._session:
                self._session = None
                self._set_idle()

    def _handle(self, session: RecognitionSession, ev: RecognitionEvent) -> None:
        if ev.kind is Ev.START:
            self.state.listening = True
            self._mic(True)

        elif ev.kind is Ev.RESULT:
            text = (ev.text or "").strip()
            if not text:
                return
            self._finish(session)
            detected = detect_locale(text)
            self.locale_store.save(detected)
            self.transcript.add(Role.USER, text)
            if self.on_transcript is not None:
                self._spawn(self._dispatch(text, detected))

        elif ev.kind is Ev.ERROR:
            logger.warning("Recognition error: %s", ev.error)
            self._finish(session)
            self.transcript.add(Role.ASSISTANT, messages.RECOGNITION_FAILED)

        elif ev.kind is Ev.END:
            self._finish(session)

    async def _dispatch(self, text: str, locale: Locale) -> None:
        try:
            await self.on_transcript(text, locale)
        except Exception:
            logger.exception("Transcript handler failed")

    def _finish(self, session: RecognitionSession) -> None:
        if session is self._session:
            self.stop()

    def _set_idle(self) -> None:
        was_listening = self.state.listening
        self.state.listening = False
        if was_listening:
            self._mic(False)

    def _mic(self, on: bool) -> None:
        if self.on_mic is not None:
            self.on_mic(on)


# ----------------- whisper + sounddevice backend -----------------
class WhisperSession:
    """One fixed-length recording, transcribed with whisper in the requested language."""

    def __init__(self, recognizer: "WhisperRecognizer", language: str):
        self.recognizer = recognizer
        self.language = language
        self._stopped = False

    async def events(self) -> AsyncIterator[RecognitionEvent]:
        if self._stopped:
            yield RecognitionEvent(Ev.END)
            return
        yield RecognitionEvent(Ev.START)
        try:
            audio = await asyncio.to_thread(self.recognizer.record)
            if not self._stopped:
                text = await asyncio.to_thread(self.recognizer.transcribe, audio, self.language)
                yield RecognitionEvent(Ev.RESULT, text=text)
        except Exception as e:
            yield RecognitionEvent(Ev.ERROR, error=str(e))
        yield RecognitionEvent(Ev.END)

    def stop(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        self.recognizer.abort()


class WhisperRecognizer:
    def __init__(self, model_name: str = "base", duration: float = 5.0, fs: int = 16000):
        try:
            import numpy as np
            import sounddevice as sd
            import whisper
        except ImportError as e:
            raise CapabilityUnavailable(f"speech recognition libraries missing: {e}") from e
        self._np = np
        self._sd = sd
        self.duration = duration
        self.fs = fs
        logger.info("Loading Whisper model: %s", model_name)
        load_start = time.time()
        self.model = whisper.load_model(model_name)
        logger.info("Model loaded in %.2fs", time.time() - load_start)

    def open_session(self, language_tag: str) -> WhisperSession:
        return WhisperSession(self, Locale.parse(language_tag).value)

    def record(self):
        logger.info("Recording for %s seconds...", self.duration)
        audio = self._sd.rec(int(self.duration * self.fs), samplerate=self.fs, channels=1, dtype="float32")
        self._sd.wait()  # returns early if abort() ran
        return self._np.squeeze(audio)

    def transcribe(self, audio, language: str) -> str:
        t0 = time.time()
        result = self.model.transcribe(audio, language=language, fp16=False)
        logger.info("Transcription took %.2fs", time.time() - t0)
        return (result.get("text") or "").strip()

    def abort(self) -> None:
        self._sd.stop()


def load_recognizer(model_name: str = "base", duration: float = 5.0) -> WhisperRecognizer:
    try:
        return WhisperRecognizer(model_name=model_name, duration=duration)
    except CapabilityUnavailable:
        raise
    except Exception as e:
        raise CapabilityUnavailable(f"speech recognition unavailable: {e}") from e
