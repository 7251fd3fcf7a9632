"""Tests de la aplicación sin abrir ventana."""

import pytest

cv2 = pytest.importorskip("cv2")

from app.calculator_app import KeyboardCalculatorApp
from config.settings import CalculatorConfig
from config.theme import DARK, LIGHT, ThemeStore
from core.calculator import DIVISION_BY_ZERO


@pytest.fixture
def app(tmp_path):
    config = CalculatorConfig()
    config.voice_enabled = False
    config.theme_file = str(tmp_path / "tema.json")
    return KeyboardCalculatorApp(config=config)


def _keys(app, text):
    for ch in text:
        app.handle_key(ord(ch))
    return app.engine.projection


def _click(app, token, event=None):
    button = next(b for b in app.ui.buttons if b.token == token)
    x, y = button.x + button.w // 2, button.y + button.h // 2
    app.handle_mouse(cv2.EVENT_LBUTTONDOWN if event is None else event, x, y, 0, None)


def test_keyboard_calculation(app):
    assert _keys(app, "7*8=").primary == "56"


def test_quit_key(app):
    assert app.handle_key(ord("q")) is False
    assert app.handle_key(ord("5")) is True


def test_unmapped_key_is_ignored(app):
    _keys(app, "12")
    app.handle_key(ord("z"))
    assert app.engine.projection.primary == "12"


def test_mouse_clicks_dispatch_tokens(app):
    for token in ("num_1", "num_5", "divide", "num_3", "equal"):
        _click(app, token)
    assert app.engine.projection.primary == "5"


def test_mouse_move_sets_hover(app):
    _click(app, "add", cv2.EVENT_MOUSEMOVE)
    assert app.hover_token == "add"
    app.handle_mouse(cv2.EVENT_MOUSEMOVE, 1, 1, 0, None)
    assert app.hover_token is None


def test_theme_toggle_is_persisted(app):
    assert app.theme == LIGHT
    app.handle_key(ord("t"))
    assert app.theme == DARK
    assert ThemeStore(app.config.theme_file).load() == DARK


def test_theme_button(app):
    _click(app, "toggle_theme")
    assert app.theme == DARK


def test_theme_loaded_on_start(tmp_path):
    config = CalculatorConfig()
    config.voice_enabled = False
    config.theme_file = str(tmp_path / "tema.json")
    ThemeStore(config.theme_file).save(DARK)
    assert KeyboardCalculatorApp(config=config).theme == DARK


def test_error_shows_feedback_and_clears_in_loop(app):
    now = [0.0]
    app.scheduler.clock = lambda: now[0]

    _keys(app, "5/0=")
    assert app.engine.projection.primary == DIVISION_BY_ZERO
    assert app.ui.feedback_msg == DIVISION_BY_ZERO

    now[0] = app.config.error_clear_delay
    app.scheduler.run_pending()
    assert app.engine.projection.primary == "0"


def test_theme_change_does_not_touch_calculation(app):
    _keys(app, "5+3")
    app.toggle_theme()
    assert app.engine.projection.secondary == "5 +"
    assert _keys(app, "=").primary == "8"


def test_render(app):
    img = app.render()
    assert img.shape == (app.config.window_height, app.config.window_width, 3)


# --- Voz y teclas de Linux ---

class RecordingVoice:
    def __init__(self):
        self.announced = []
        self.auto_cleared = []

    def announce(self, token, projection, previous=None):
        self.announced.append((token, projection.primary))

    def announce_auto_clear(self, projection):
        self.auto_cleared.append(projection.primary)


def test_only_changed_projections_are_announced(app):
    app.voice = RecordingVoice()
    _keys(app, "5=")
    assert app.voice.announced == [("num_5", "5")]

    _keys(app, "/0=")
    app.voice.announced.clear()
    _keys(app, "+=")
    assert app.voice.announced == []
    assert app.engine.projection.primary == DIVISION_BY_ZERO


def test_error_auto_clear_is_announced(app):
    now = [0.0]
    app.scheduler.clock = lambda: now[0]
    app.voice = RecordingVoice()

    _keys(app, "5/0=")
    assert app.voice.auto_cleared == []

    now[0] = app.config.error_clear_delay
    app.scheduler.run_pending()
    assert app.voice.auto_cleared == ["0"]


def test_keys_with_modifier_bits(app):
    for code in (0x100032, 0x1002B, 0xFFB3, 0xFF0D):
        app.handle_key(code)
    assert app.engine.projection.primary == "5"
    assert app.handle_key(0x100071) is False
