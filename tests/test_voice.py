"""Tests del feedback por voz con un motor pyttsx3 simulado."""

import threading

import pytest

import voice.feedback
from config.settings import CalculatorConfig
from core.calculator import DisplayProjection
from voice.feedback import VoiceFeedback, result_to_speech


class FakeVoice:
    def __init__(self, id, name):
        self.id = id
        self.name = name
        self.languages = []


class FakeTTS:
    def __init__(self):
        self.properties = {}
        self.said = []
        self.spoken = threading.Event()

    def setProperty(self, name, value):
        self.properties[name] = value

    def getProperty(self, name):
        return [FakeVoice("com.voice.en-US", "Alex"), FakeVoice("com.voice.es-ES", "Monica")]

    def say(self, text):
        self.said.append(text)

    def runAndWait(self):
        self.spoken.set()


@pytest.fixture
def tts(monkeypatch):
    fake = FakeTTS()
    monkeypatch.setattr(voice.feedback.pyttsx3, "init", lambda: fake)
    return fake


@pytest.fixture
def config():
    return CalculatorConfig()


def test_engine_configured_from_config(tts, config):
    VoiceFeedback(config)
    assert tts.properties["volume"] == config.voice_volume
    assert tts.properties["rate"] == config.voice_rate
    assert tts.properties["voice"] == "com.voice.es-ES"


def test_disabled_voice_does_not_init(monkeypatch, config):
    def fail():
        raise AssertionError("pyttsx3.init no debería llamarse")

    monkeypatch.setattr(voice.feedback.pyttsx3, "init", fail)
    config.voice_enabled = False
    feedback = VoiceFeedback(config)
    assert feedback.engine is None
    feedback.speak("hola")


def test_init_failure_disables_voice(monkeypatch, config, capsys):
    def broken():
        raise RuntimeError("sin driver")

    monkeypatch.setattr(voice.feedback.pyttsx3, "init", broken)
    feedback = VoiceFeedback(config)
    assert feedback.engine is None
    assert config.voice_enabled is False
    assert "⚠" in capsys.readouterr().out


def test_set_enabled_inits_lazily(tts, config):
    config.voice_enabled = False
    feedback = VoiceFeedback(config)
    assert feedback.engine is None
    assert feedback.set_enabled(True) is True
    assert feedback.engine is tts


def test_speak_runs_in_background(tts, config):
    feedback = VoiceFeedback(config)
    feedback.speak("igual a 8")
    assert tts.spoken.wait(2.0)
    assert tts.said == ["igual a 8"]


@pytest.mark.parametrize("token, projection, phrase", [
    ("num_7", DisplayProjection("7", "", False), "siete"),
    ("add", DisplayProjection("7", "7 +", False), "más"),
    ("divide", DisplayProjection("7", "7 ÷", False), "entre"),
    ("decimal", DisplayProjection("0.", "", False), "punto"),
    ("clear_all", DisplayProjection("0", "", False), "todo borrado"),
    ("equal", DisplayProjection("8", "", False), "igual a 8"),
    ("equal", DisplayProjection("-2.5", "", False), "igual a menos 2 coma 5"),
    ("equal", DisplayProjection("Cannot divide by zero", "5 ÷", True),
     "no se puede dividir entre cero"),
    ("multiply", DisplayProjection("Overflow", "", True), "desbordamiento"),
])
def test_phrase_for(tts, config, token, projection, phrase):
    assert VoiceFeedback(config).phrase_for(token, projection) == phrase


def test_result_to_speech():
    assert result_to_speech("3.5") == "3 coma 5"
    assert result_to_speech("-4") == "menos 4"


# --- Anuncios según el cambio de proyección ---

def test_operator_announces_intermediate_result(tts, config):
    previous = DisplayProjection("3", "2 +", False)
    projection = DisplayProjection("5", "5 ×", False)
    assert VoiceFeedback(config).phrase_for("multiply", projection, previous) == "5, por"


def test_operator_without_pending_operation_only_names_operator(tts, config):
    previous = DisplayProjection("7", "", False)
    projection = DisplayProjection("7", "7 +", False)
    assert VoiceFeedback(config).phrase_for("add", projection, previous) == "más"


def test_unchanged_projection_is_silent(tts, config):
    error = DisplayProjection("Cannot divide by zero", "5 ÷", True)
    idle = DisplayProjection("5", "", False)
    feedback = VoiceFeedback(config)
    assert feedback.phrase_for("add", error, error) is None
    assert feedback.phrase_for("equal", idle, idle) is None


def test_auto_clear_is_announced(tts, config):
    feedback = VoiceFeedback(config)
    feedback.announce_auto_clear(DisplayProjection("0", "", False))
    assert tts.spoken.wait(2.0)
    assert tts.said == ["error borrado, 0"]
