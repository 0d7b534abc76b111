from __future__ import annotations

import os
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv


load_dotenv(override=False)


def _origins(raw: str) -> List[str]:
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings:
    """Backend settings loaded from environment variables.

    Two OpenAI keys are read on purpose: OPENAI_KEY serves the voice
    assistant (/api/chat), OPENAI_API_KEY the text chatbot (/api/cb-chat).
    """

    def __init__(self) -> None:
        self.voice_api_key: Optional[str] = os.getenv("OPENAI_KEY") or None
        self.chatbot_api_key: Optional[str] = os.getenv("OPENAI_API_KEY") or None
        self.model: str = os.getenv("OPENAI_MODEL", "gpt-4.1-mini")
        self.voice_temperature: float = float(os.getenv("VOICE_TEMPERATURE", "0.7"))
        self.chatbot_temperature: float = float(os.getenv("CHATBOT_TEMPERATURE", "0.7"))
        self.context_window: int = int(os.getenv("CONTEXT_WINDOW", "10"))
        self.allowed_origins: List[str] = _origins(os.getenv("ALLOWED_ORIGINS", "*"))
        self.frontend_dir: Optional[str] = os.getenv("FRONTEND_DIR") or None
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = int(os.getenv("PORT", "4000"))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
