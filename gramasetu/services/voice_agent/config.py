"""Voice agent configuration.

Environment variables consumed (with fallbacks):
  VOICE_API_BASE_URL  (default http://localhost:4000)
  VOICE_API_PATH      (default /api/chat)
  VOICE_API_CLEAR_PATH (default /api/cb-clear)
  VOICE_API_TIMEOUT   (seconds, default 15)
  GRAMASETU_STATE_FILE (default ~/.gramasetu/state.json)
  WHISPER_MODEL       (default base)
  RECORD_SECONDS      (default 5)
  TTS_MODEL_EN / TTS_MODEL_KN
  RESUME_DELAY_MS     (default 200)
"""

from __future__ import annotations
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

from dotenv import load_dotenv

from .locale_store import DEFAULT_STATE_FILE


@dataclass
class AgentConfig:
    api_base_url: str = "http://localhost:4000"
    api_path: str = "/api/chat"
    clear_path: str = "/api/cb-clear"
    api_timeout: float = 15.0
    state_file: Path = DEFAULT_STATE_FILE
    whisper_model: str = "base"
    record_seconds: float = 5.0
    tts_models: Dict[str, str] = field(default_factory=lambda: {
        "en": "tts_models/en/ljspeech/tacotron2-DDC",
        "kn": "tts_models/kan/fairseq/vits",
    })
    resume_delay: float = 0.2

    @classmethod
    def from_env(cls) -> "AgentConfig":
        load_dotenv(override=False)
        defaults = cls()
        return cls(
            api_base_url=os.getenv("VOICE_API_BASE_URL", defaults.api_base_url).rstrip("/"),
            api_path=os.getenv("VOICE_API_PATH", defaults.api_path),
            clear_path=os.getenv("VOICE_API_CLEAR_PATH", defaults.clear_path),
            api_timeout=float(os.getenv("VOICE_API_TIMEOUT", defaults.api_timeout)),
            state_file=Path(os.getenv("GRAMASETU_STATE_FILE", str(defaults.state_file))).expanduser(),
            whisper_model=os.getenv("WHISPER_MODEL", defaults.whisper_model),
            record_seconds=float(os.getenv("RECORD_SECONDS", defaults.record_seconds)),
            tts_models={
                "en": os.getenv("TTS_MODEL_EN", defaults.tts_models["en"]),
                "kn": os.getenv("TTS_MODEL_KN", defaults.tts_models["kn"]),
            },
            resume_delay=int(os.getenv("RESUME_DELAY_MS", "200")) / 1000.0,
        )
