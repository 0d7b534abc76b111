"""Speech output coordinator: voice selection, playback and listen/speak arbitration."""

from __future__ import annotations
import asyncio
import logging
import os
import tempfile
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol, Sequence

from .errors import CapabilityUnavailable
from .language import Locale
from .session import SessionState

logger = logging.getLogger(__name__)

FEMALE_VOICE_HINTS = (
    "female", "zira", "anya", "meera", "sangeet", "sangeetha",
    "google", "amy", "samantha", "alloy",
)
DEFAULT_RESUME_DELAY = 0.2  # seconds


@dataclass(frozen=True)
class Voice:
    name: str
    lang: str = ""


@dataclass
class Utterance:
    text: str
    lang: str
    voice: Optional[Voice] = None
    rate: float = 1.0
    pitch: float = 1.05


class Synthesizer(Protocol):
    def get_voices(self) -> Sequence[Voice]: ...

    async def play(self, utterance: Utterance, on_start: Callable[[], None]) -> None:
        """Play the utterance and return once playback has ended.

        `on_start` must be called on the event loop when audio actually begins.
        """
        ...

    def cancel(self) -> None: ...


class Listener(Protocol):
    def start(self) -> bool: ...

    def stop(self) -> None: ...


def select_voice(voices: Sequence[Voice], locale: Locale) -> Optional[Voice]:
    """Layered pick: locale + female hint, then locale, then hint, then anything."""
    code = Locale.parse(locale).value

    def lang_match(v: Voice) -> bool:
        return bool(v.lang) and code in v.lang.lower()

    def hinted(v: Voice) -> bool:
        name = (v.name or "").lower()
        return any(h in name for h in FEMALE_VOICE_HINTS)

    for accept in (lambda v: lang_match(v) and hinted(v), lang_match, hinted):
        found = next((v for v in voices if accept(v)), None)
        if found:
            return found
    return voices[0] if voices else None


class SpeechOutputCoordinator:
    def __init__(
        self,
        state: SessionState,
        listener: Listener,
        synthesizer: Optional[Synthesizer],
        resume_delay: float = DEFAULT_RESUME_DELAY,
    ):
        self.state = state
        self.listener = listener
        self.synthesizer = synthesizer
        self.resume_delay = resume_delay
        self._task: Optional[asyncio.Task] = None
        self._restart: Optional[asyncio.TimerHandle] = None

    def speak(self, text: str, locale: Locale | str) -> Optional[asyncio.Task]:
        """Replace whatever is playing with `text`. No synthesizer, no sound."""
        locale = Locale.parse(locale)
        self._cancel_playback()
        if self._restart is not None:
            # the replaced restart carries over to the new utterance
            self._restart.cancel()
            self._restart = None
            self.state.resume_listening_after_speech = True
        if self.synthesizer is None:
            return None

        voices = list(self.synthesizer.get_voices() or [])
        utterance = Utterance(text=text, lang=locale.speech_tag, voice=select_voice(voices, locale))
        task = asyncio.get_running_loop().create_task(self._play(utterance))
        self._task = task
        return task

    def stop(self) -> None:
        self._cancel_playback()
        if self._restart is not None:
            self._restart.cancel()
            self._restart = None
        self.state.resume_listening_after_speech = False

    async def _play(self, utterance: Utterance) -> None:
        try:
            await self.synthesizer.play(utterance, self._on_start)
        except Exception as e:
            logger.warning("Speech playback failed: %s", e)
        self._on_end()

    def _on_start(self) -> None:
        self.state.speaking = True
        self.state.resume_listening_after_speech = (
            self.state.resume_listening_after_speech or self.state.listening
        )
        self.listener.stop()

    def _on_end(self) -> None:
        self._task = None
        self.state.speaking = False
        if self.state.resume_listening_after_speech:
            self.state.resume_listening_after_speech = False
            loop = asyncio.get_running_loop()
            self._restart = loop.call_later(self.resume_delay, self._resume_listening)

    def _resume_listening(self) -> None:
        self._restart = None
        if not self.state.speaking:
            self.listener.start()

    def _cancel_playback(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
        if self.synthesizer is not None:
            try:
                self.synthesizer.cancel()
            except Exception as e:
                logger.debug("Ignoring error while cancelling playback: %s", e)
        self.state.speaking = False


# ----------------- Coqui TTS + simpleaudio backend -----------------
class CoquiSynthesizer:
    """Synthesize to a temporary wav with Coqui TTS, then play it with simpleaudio.

    One model per locale; each configured model is exposed as a `Voice` whose
    `lang` is that locale's speech tag. Models load on first use.
    """

    def __init__(self, models: Dict[str, str]):
        try:
            import simpleaudio
            from TTS.api import TTS
        except ImportError as e:
            raise CapabilityUnavailable(f"speech synthesis libraries missing: {e}") from e
        self._sa = simpleaudio
        self._tts_cls = TTS
        self._voices = [Voice(name=name, lang=Locale.parse(code).speech_tag) for code, name in models.items() if name]
        self._loaded: Dict[str, object] = {}
        self._play_obj = None

    def get_voices(self) -> Sequence[Voice]:
        return list(self._voices)

    def _model(self, name: str):
        if name not in self._loaded:
            logger.info("Loading TTS model: %s", name)
            self._loaded[name] = self._tts_cls(model_name=name)
        return self._loaded[name]

    async def play(self, utterance: Utterance, on_start: Callable[[], None]) -> None:
        voice = utterance.voice or (self._voices[0] if self._voices else None)
        if voice is None:
            raise CapabilityUnavailable("no TTS model configured")
        fd, out = tempfile.mkstemp(suffix=".wav")
        os.close(fd)
        play_obj = None
        try:
            tts = self._model(voice.name)
            await asyncio.to_thread(tts.tts_to_file, text=utterance.text, file_path=out)
            wave_obj = self._sa.WaveObject.from_wave_file(out)
            play_obj = self._play_obj = wave_obj.play()
            on_start()
            while play_obj.is_playing():
                await asyncio.sleep(0.05)
        finally:
            if self._play_obj is play_obj:
                self._play_obj = None
            os.remove(out)

    def cancel(self) -> None:
        if self._play_obj is not None:
            self._play_obj.stop()


def load_synthesizer(models: Dict[str, str]) -> CoquiSynthesizer:
    try:
        return CoquiSynthesizer(models)
    except CapabilityUnavailable:
        raise
    except Exception as e:
        raise CapabilityUnavailable(f"speech synthesis unavailable: {e}") from e
