"""Thin wrapper around the OpenAI async client."""

from __future__ import annotations
import logging
from typing import Dict, List, Optional

from openai import AsyncOpenAI

from .prompts import TRANSLATE_TEMPLATE, TRANSLATOR_PROMPT

logger = logging.getLogger(__name__)


class ChatModel:
    def __init__(self, api_key: Optional[str], model: str = "gpt-4.1-mini", client: Optional[AsyncOpenAI] = None):
        self.model = model
        self._client = client
        if self._client is None and api_key:
            self._client = AsyncOpenAI(api_key=api_key)

    @property
    def configured(self) -> bool:
        return self._client is not None

    async def complete(self, messages: List[Dict[str, str]], temperature: float = 0.7) -> str:
        """Return the trimmed reply text ("" when the model sent nothing)."""
        if self._client is None:
            raise RuntimeError("OpenAI client not configured (missing API key)")
        completion = await self._client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=temperature,
        )
        if not completion.choices:
            return ""
        return (completion.choices[0].message.content or "").strip()

    async def translate_to_english(self, text: str) -> str:
        """Best effort: any failure returns the input unchanged."""
        if not self.configured:
            return text
        try:
            out = await self.complete(
                [
                    {"role": "system", "content": TRANSLATOR_PROMPT},
                    {"role": "user", "content": TRANSLATE_TEMPLATE.format(text=text)},
                ],
                temperature=0,
            )
            return out or text
        except Exception:
            logger.exception("translate_to_english failed")
            return text
