"""In-memory stand-ins for the speech platform, used across the voice agent tests."""

import asyncio
from typing import List, Optional

from gramasetu.services.voice_agent.stt import Ev, RecognitionEvent
from gramasetu.services.voice_agent.tts import Utterance, Voice


async def settle(rounds: int = 10) -> None:
    """Let queued callbacks and tasks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class FakeSession:
    def __init__(self, tag: str, end_on_stop: bool = True):
        self.tag = tag
        self.end_on_stop = end_on_stop
        self.stop_calls = 0
        self.stopped = False
        self._q: "asyncio.Queue[RecognitionEvent]" = asyncio.Queue()

    def emit(self, kind: Ev, **kw) -> None:
        self._q.put_nowait(RecognitionEvent(kind, **kw))

    async def events(self):
        while True:
            ev = await self._q.get()
            yield ev
            if ev.kind is Ev.END:
                return

    def stop(self) -> None:
        self.stop_calls += 1
        if self.stopped:
            return
        self.stopped = True
        if self.end_on_stop:
            self.emit(Ev.END)


class FakeRecognizer:
    def __init__(self, auto_start: bool = True, end_on_stop: bool = True):
        self.auto_start = auto_start
        self.end_on_stop = end_on_stop
        self.sessions: List[FakeSession] = []

    def open_session(self, language_tag: str) -> FakeSession:
        session = FakeSession(language_tag, end_on_stop=self.end_on_stop)
        if self.auto_start:
            session.emit(Ev.START)
        self.sessions.append(session)
        return session

    @property
    def last(self) -> FakeSession:
        return self.sessions[-1]


class FakeSynthesizer:
    """Plays instantly when `duration` is set, otherwise waits for `finish()`."""

    def __init__(self, voices: Optional[List[Voice]] = None, duration: Optional[float] = None, fail: bool = False):
        self.voices = voices if voices is not None else [Voice("Google UK English Female", "en-GB")]
        self.duration = duration
        self.fail = fail
        self.played: List[Utterance] = []
        self.cancel_calls = 0
        self._done: Optional[asyncio.Event] = None

    def get_voices(self):
        return self.voices

    async def play(self, utterance, on_start):
        self.played.append(utterance)
        on_start()
        if self.fail:
            raise RuntimeError("audio device lost")
        if self.duration is not None:
            await asyncio.sleep(self.duration)
            return
        self._done = asyncio.Event()
        await self._done.wait()

    def finish(self) -> None:
        if self._done is not None:
            self._done.set()

    def cancel(self) -> None:
        self.cancel_calls += 1


class FakeSpeaker:
    def __init__(self):
        self.calls = []

    def speak(self, text, locale):
        self.calls.append((text, locale))
