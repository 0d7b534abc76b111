import asyncio
import json

import httpx

from fakes import FakeRecognizer, FakeSynthesizer, settle

from gramasetu.services.voice_agent import VoiceWidget, messages
from gramasetu.services.voice_agent.config import AgentConfig
from gramasetu.services.voice_agent.language import Locale
from gramasetu.services.voice_agent.locale_store import LocaleStore
from gramasetu.services.voice_agent.relay import compose_prompt
from gramasetu.services.voice_agent.stt import Ev
from gramasetu.services.voice_agent.transcript import Role


def make_widget(handler, synth=None, recognizer=None, store=None):
    config = AgentConfig(api_base_url="http://relay.test", resume_delay=0.01)
    return VoiceWidget(
        config,
        recognizer=recognizer or FakeRecognizer(),
        synthesizer=synth or FakeSynthesizer(duration=0),
        locale_store=store or LocaleStore(None),
        transport=httpx.MockTransport(handler),
    )


def test_kannada_utterance_end_to_end():
    requests = []

    def handler(request):
        requests.append(json.loads(request.content))
        return httpx.Response(200, json={"reply": "ನಮಸ್ಕಾರ, ಹೇಗಿದ್ದೀರಾ?"})

    async def scenario():
        synth = FakeSynthesizer(duration=0)
        rec = FakeRecognizer()
        widget = make_widget(handler, synth=synth, recognizer=rec)
        widget.open()
        widget.toggle_listening()
        await settle()
        assert widget.state.listening

        rec.last.emit(Ev.RESULT, text="ನಮಸ್ಕಾರ")
        await widget.drain()
        await asyncio.sleep(0.02)

        assert requests == [{"message": compose_prompt("ನಮಸ್ಕಾರ", Locale.SECONDARY), "language": "kn"}]
        assert [(e.role, e.text) for e in widget.transcript] == [
            (Role.USER, "ನಮಸ್ಕಾರ"),
            (Role.ASSISTANT, "ನಮಸ್ಕಾರ, ಹೇಗಿದ್ದೀರಾ?"),
        ]
        assert len(synth.played) == 1
        assert synth.played[0].text == "ನಮಸ್ಕಾರ, ಹೇಗಿದ್ದೀರಾ?"
        assert synth.played[0].lang == "kn-IN"
        assert widget.locale is Locale.SECONDARY
        assert not widget.state.listening
        assert not widget.state.speaking
        assert len(rec.sessions) == 1  # not listening before speech, so no auto-resume

    asyncio.run(scenario())


def test_backend_failure_end_to_end():
    async def scenario():
        synth = FakeSynthesizer(duration=0)
        rec = FakeRecognizer()
        widget = make_widget(lambda r: httpx.Response(502), synth=synth, recognizer=rec)
        widget.toggle_listening()
        await settle()
        rec.last.emit(Ev.RESULT, text="what time is it")
        await widget.drain()

        bot_entries = [e for e in widget.transcript if e.role is Role.ASSISTANT]
        assert [e.text for e in bot_entries] == [messages.CONNECTION_ERROR]
        assert synth.played == []
        assert not widget.state.listening
        assert not widget.state.speaking

    asyncio.run(scenario())


def test_toggle_locale_persists_and_rebinds_recognition():
    async def scenario():
        rec = FakeRecognizer()
        widget = make_widget(lambda r: httpx.Response(200, json={"reply": "ok"}), recognizer=rec)
        assert widget.locale is Locale.PRIMARY
        widget.toggle_listening()
        await settle()
        first = rec.last
        assert first.tag == "en-IN"

        assert widget.toggle_locale() is Locale.SECONDARY
        assert first.stopped
        assert not widget.state.listening

        widget.toggle_listening()
        await settle()
        assert rec.last.tag == "kn-IN"
        widget.close()
        await widget.drain()

    asyncio.run(scenario())


def test_locale_preference_is_stored(tmp_path):
    path = tmp_path / "state.json"
    widget = make_widget(lambda r: httpx.Response(200), store=LocaleStore(path))
    assert json.loads(path.read_text(encoding="utf-8")) == {"lang": "en"}
    widget.toggle_locale()
    assert LocaleStore(path).get() is Locale.SECONDARY


def test_close_resets_session_state():
    async def scenario():
        synth = FakeSynthesizer()
        widget = make_widget(lambda r: httpx.Response(200), synth=synth)
        widget.open()
        widget.toggle_listening()
        await settle()
        widget.speaker.speak("hello", Locale.PRIMARY)
        await settle()
        assert widget.state.speaking
        assert widget.state.resume_listening_after_speech

        widget.close()
        widget.close()
        assert not widget.is_open
        assert not widget.state.listening
        assert not widget.state.speaking
        assert not widget.state.resume_listening_after_speech
        await widget.drain()

    asyncio.run(scenario())


def test_clear_chat_and_remote_context_are_independent():
    cleared = []

    def handler(request):
        cleared.append(request.url.path)
        return httpx.Response(200, json={"ok": True})

    async def scenario():
        widget = make_widget(handler)
        widget.transcript.add(Role.USER, "hello")
        widget.transcript.add(Role.ASSISTANT, "hi")

        widget.clear_chat()
        assert len(widget.transcript) == 0
        assert cleared == []

        assert await widget.forget_remote_context() is True
        assert cleared == ["/api/cb-clear"]

    asyncio.run(scenario())


def test_mic_toggle_while_speaking_never_overlaps():
    async def scenario():
        synth = FakeSynthesizer()
        rec = FakeRecognizer()
        widget = make_widget(lambda r: httpx.Response(200), synth=synth, recognizer=rec)
        widget.open()
        widget.speaker.speak("hello", Locale.PRIMARY)
        await settle()

        widget.toggle_listening()
        await settle()
        assert widget.state.speaking
        assert not widget.state.listening
        assert rec.sessions == []

        widget.close()
        await widget.drain()

    asyncio.run(scenario())
