"""Terminal front end for the voice agent.

Press ENTER to toggle the mic. Other commands:
  l  switch language (EN/KN)
  c  clear the chat
  cc clear the chat and the server-side context
  q  quit
"""

from __future__ import annotations
import asyncio
import logging

from . import messages
from .config import AgentConfig
from .errors import CapabilityUnavailable
from .stt import load_recognizer
from .transcript import Role, TranscriptEntry, TranscriptView
from .tts import load_synthesizer
from .widget import VoiceWidget

logger = logging.getLogger(__name__)


def _print_entry(entry: TranscriptEntry) -> None:
    if entry.role is Role.USER:
        print("📝 You said:", entry.text)
    else:
        print("🤖", entry.text)


def _print_mic(on: bool) -> None:
    print("🎤 listening..." if on else "🎤 off")


def build_widget(config: AgentConfig) -> VoiceWidget:
    try:
        recognizer = load_recognizer(config.whisper_model, duration=config.record_seconds)
    except CapabilityUnavailable as e:
        logger.warning("Recognition disabled: %s", e)
        recognizer = None
    try:
        synthesizer = load_synthesizer(config.tts_models)
    except CapabilityUnavailable as e:
        logger.warning("Speech output disabled: %s", e)
        synthesizer = None
    return VoiceWidget(
        config,
        recognizer=recognizer,
        synthesizer=synthesizer,
        transcript=TranscriptView(on_append=_print_entry),
        on_mic=_print_mic,
    )


async def run(config: AgentConfig) -> None:
    widget = build_widget(config)
    widget.open()
    print(messages.MIC_HINT)
    try:
        while widget.is_open:
            badge = widget.locale.value.upper()
            cmd = (await asyncio.to_thread(input, f"[{badge}] Press ENTER to talk... ")).strip().lower()
            if cmd == "q":
                break
            elif cmd == "l":
                print("🌐 Language:", widget.toggle_locale().value.upper())
            elif cmd == "c":
                widget.clear_chat()
            elif cmd == "cc":
                widget.clear_chat()
                await widget.forget_remote_context()
            else:
                widget.toggle_listening()
    except (EOFError, KeyboardInterrupt):
        pass
    finally:
        widget.close()
        await widget.drain()


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s - %(message)s")
    asyncio.run(run(AgentConfig.from_env()))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
