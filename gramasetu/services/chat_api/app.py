from __future__ import annotations

import logging
import os
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from .context import ConversationContextStore
from .llm import ChatModel
from .prompts import chatbot_prompt, voice_prompt
from .settings import get_settings


logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s - %(message)s")
logger = logging.getLogger("gramasetu.chat_api")

SESSION_HEADER = "x-session-id"

NO_ANSWER_KN = "ಕ್ಷಮಿಸಿ — ಉತ್ತರ ಸಿಗಲಿಲ್ಲ."
CONNECTION_ERROR_KN = "⚠️ ಸಂಪರ್ಕದಲ್ಲಿ ದೋಷ. ದಯವಿಟ್ಟು ಮತ್ತೆ ಪ್ರಯತ್ನಿಸಿ."
CONFIG_ERROR = "⚠️ Server configuration error. Contact admin."

settings = get_settings()

app = FastAPI(title="Gramasetu Chat Relay", version="0.3.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if not settings.voice_api_key:
    logger.warning("OPENAI_KEY not set; /api/chat (voice assistant) will fail until it is configured.")
if not settings.chatbot_api_key:
    logger.warning("OPENAI_API_KEY not set; /api/cb-chat (chatbot) will fail until it is configured.")

_voice_model = ChatModel(settings.voice_api_key, model=settings.model)
_chatbot_model = ChatModel(settings.chatbot_api_key, model=settings.model)
_context_store = ConversationContextStore(window=settings.context_window)


def get_voice_model() -> ChatModel:
    return _voice_model


def get_chatbot_model() -> ChatModel:
    return _chatbot_model


def get_context_store() -> ConversationContextStore:
    return _context_store


def session_key(request: Request) -> str:
    """Context partition key: explicit session header, else the client address."""
    key = request.headers.get(SESSION_HEADER)
    if key:
        return key.strip()
    return request.client.host if request.client else "anonymous"


class ChatRequest(BaseModel):
    message: Optional[str] = None
    language: Optional[str] = None


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/api/chat")
async def voice_chat(req: ChatRequest, model: ChatModel = Depends(get_voice_model)):
    if not req.message or not req.language:
        return JSONResponse(status_code=400, content={"reply": "Invalid request"})

    if not model.configured:
        logger.error("OPENAI_KEY missing: cannot call OpenAI for voice assistant.")
        return JSONResponse(status_code=500, content={"reply": CONFIG_ERROR})

    try:
        reply = await model.complete(
            [
                {"role": "system", "content": voice_prompt(req.language)},
                {"role": "user", "content": req.message},
            ],
            temperature=settings.voice_temperature,
        )
    except Exception as e:
        logger.exception("API Error (voice assistant): %s", e)
        return JSONResponse(status_code=500, content={"reply": CONNECTION_ERROR_KN})

    return {"reply": reply or NO_ANSWER_KN}


@app.post("/api/cb-chat")
async def chatbot_chat(
    req: ChatRequest,
    request: Request,
    model: ChatModel = Depends(get_chatbot_model),
    store: ConversationContextStore = Depends(get_context_store),
):
    user_message = req.message or ""
    language = req.language or "en"

    if not user_message:
        return JSONResponse(status_code=400, content={"reply": "Message required"})

    if not model.configured:
        logger.error("OPENAI_API_KEY missing: cannot call OpenAI for chatbot.")
        return JSONResponse(status_code=500, content={"reply": CONFIG_ERROR})

    key = session_key(request)
    try:
        if language == "en":
            user_message = await model.translate_to_english(user_message)

        logger.info("Incoming /api/cb-chat session=%s -> %s", key, user_message)

        if store.reset_if_locale_changed(key, language):
            logger.info("Language switched to %s; context reset for session=%s", language, key)

        store.append(key, "user", user_message, language)
        messages = [{"role": "system", "content": chatbot_prompt(language)}, *store.messages(key)]

        bot_reply = await model.complete(messages, temperature=settings.chatbot_temperature)
        if not bot_reply:
            logger.error("No content in chatbot response")
            return JSONResponse(status_code=500, content={"reply": "⚠️ No response from model."})

        store.append(key, "assistant", bot_reply, language)
        return {"reply": bot_reply}
    except Exception as e:
        logger.exception("Chatbot server error: %s", e)
        return JSONResponse(status_code=500, content={"reply": "Failed to connect to chatbot model."})


@app.post("/api/cb-clear")
async def chatbot_clear(request: Request, store: ConversationContextStore = Depends(get_context_store)):
    key = session_key(request)
    store.clear(key)
    logger.info("Chatbot context cleared for session=%s", key)
    return {"ok": True}


# Static frontend last so the API routes above take precedence.
if settings.frontend_dir and os.path.isdir(settings.frontend_dir):
    app.mount("/", StaticFiles(directory=settings.frontend_dir, html=True), name="frontend")


def main() -> int:
    import uvicorn

    logger.info("Server running on http://localhost:%s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
