import pytest

from gramasetu.services.voice_agent.language import Locale, detect_locale


@pytest.mark.parametrize("text", ["ನಮಸ್ಕಾರ", "hello ನಮಸ್ಕಾರ", "ೞ", "ಀ", "123 ಕ"])
def test_kannada_code_point_means_secondary(text):
    assert detect_locale(text) is Locale.SECONDARY


@pytest.mark.parametrize("text", ["hello", "Turn on the light!", "42", " "])
def test_ascii_means_primary(text):
    assert detect_locale(text) is Locale.PRIMARY


@pytest.mark.parametrize("text", ["", None])
def test_empty_defaults_to_primary(text):
    assert detect_locale(text) is Locale.PRIMARY


def test_other_scripts_are_not_kannada():
    # Devanagari and Telugu sit next to the Kannada block
    assert detect_locale("नमस्ते") is Locale.PRIMARY
    assert detect_locale("నమస్కారం") is Locale.PRIMARY


def test_locale_helpers():
    assert Locale.SECONDARY.speech_tag == "kn-IN"
    assert Locale.PRIMARY.speech_tag == "en-IN"
    assert Locale.PRIMARY.toggled() is Locale.SECONDARY
    assert Locale.SECONDARY.toggled() is Locale.PRIMARY
    assert Locale.parse("kn-IN") is Locale.SECONDARY
    assert Locale.parse("KN") is Locale.SECONDARY
    assert Locale.parse("fr") is Locale.PRIMARY
    assert Locale.parse(None) is Locale.PRIMARY
