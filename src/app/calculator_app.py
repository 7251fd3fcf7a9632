"""
Aplicación principal que integra todos los componentes.

Este módulo contiene la clase KeyboardCalculatorApp.
"""

import cv2

from config.settings import CalculatorConfig
from config.theme import ThemeStore
from core.calculator import CalculationEngine
from core.keymap import normalize_key, token_for_key
from core.scheduler import LoopScheduler
from ui.layout import THEME_TOKEN, button_at
from ui.renderer import UIRenderer
from voice.feedback import VoiceFeedback


# Colores de feedback (BGR)
COLOR_INFO = (200, 130, 0)
COLOR_ERROR = (69, 53, 220)


# ============================================================================
class KeyboardCalculatorApp:
    """
    Aplicación de calculadora con teclado y ratón.

    Arquitectura:
        - CalculationEngine: Máquina de estados y aritmética
        - LoopScheduler: Borrado diferido de errores, ejecutado en el bucle
        - UIRenderer: Renderizado de la ventana con OpenCV
        - VoiceFeedback: Anuncios por voz
        - KeyboardCalculatorApp: Coordinador y loop principal
    """

    def __init__(self, config=None, theme_store=None):
        """
        Args:
            config (CalculatorConfig): Configuración (opcional)
            theme_store (ThemeStore): Persistencia del tema (opcional)
        """
        self.config = config if config else CalculatorConfig()
        self.theme_store = theme_store if theme_store else ThemeStore(self.config.theme_file)
        self.theme = self.theme_store.load(default=self.config.theme)

        self.scheduler = LoopScheduler()
        self.engine = CalculationEngine(
            max_digits=self.config.max_digits,
            error_clear_delay=self.config.error_clear_delay,
            scheduler=self.scheduler,
        )
        self.ui = UIRenderer(self.config.window_width, self.config.window_height, self.config)
        self.voice = VoiceFeedback(self.config)

        self.hover_token = None     # Botón bajo el puntero
        self.running = False
        self._dispatching = False   # True mientras handle_token despacha
        self.engine.add_listener(self._on_engine_change)

    def handle_token(self, token):
        """
        Envía un token al motor y da feedback visual y por voz.

        Returns:
            DisplayProjection: Proyección tras aplicar el token
        """
        previous = self.engine.projection
        self._dispatching = True
        try:
            projection = self.engine.dispatch(token)
        finally:
            self._dispatching = False
        if projection == previous:
            return projection
        if projection.is_error:
            self.ui.show_feedback(projection.primary, COLOR_ERROR)
        self.voice.announce(token, projection, previous)
        return projection

    def _on_engine_change(self, projection):
        """Anuncia las transiciones que no vienen de una tecla (borrado automático del error)."""
        if not self._dispatching and not projection.is_error:
            self.voice.announce_auto_clear(projection)

    def toggle_theme(self):
        self.theme = self.theme_store.toggle(self.theme)
        self.ui.show_feedback(f"TEMA {self.theme.upper()}", COLOR_INFO)
        return self.theme

    def toggle_voice(self):
        enabled = self.voice.set_enabled(not self.config.voice_enabled)
        status = "ACTIVADA" if enabled else "DESACTIVADA"
        print(f"🔊 Voz: {status}")
        self.ui.show_feedback(f"VOZ {status}", COLOR_INFO)
        if enabled:
            self.voice.speak("voz activada")
        return enabled

    def handle_key(self, code):
        """
        Procesa una tecla de cv2.waitKeyEx().

        Controles de la aplicación:
            - 'q': Salir
            - 't': Cambiar tema
            - 'v': Activar/desactivar voz
        El resto se traduce a tokens con token_for_key().

        Returns:
            bool: False si la aplicación debe terminar
        """
        code = normalize_key(code)
        if code == ord('q'):
            return False
        if code == ord('t'):
            self.toggle_theme()
        elif code == ord('v'):
            self.toggle_voice()
        else:
            token = token_for_key(code)
            if token:
                self.handle_token(token)
        return True

    def handle_mouse(self, event, x, y, flags, param):
        """Callback de ratón de OpenCV: clic en botones y resaltado al pasar."""
        button = button_at(self.ui.buttons, x, y)
        if event == cv2.EVENT_MOUSEMOVE:
            self.hover_token = button.token if button else None
        elif event == cv2.EVENT_LBUTTONDOWN and button:
            if button.token == THEME_TOKEN:
                self.toggle_theme()
            else:
                self.handle_token(button.token)

    def render(self):
        return self.ui.render(self.engine.projection, self.theme, self.hover_token)

    def _window_closed(self):
        return cv2.getWindowProperty(self.config.window_title, cv2.WND_PROP_VISIBLE) < 1

    def run(self):
        """
        Bucle principal de la aplicación.

        Ciclo de ejecución:
            1. Ejecutar tareas diferidas vencidas (borrado de errores)
            2. Renderizar la calculadora
            3. Mostrar frame y procesar teclado
            4. Repetir hasta 'q' o cierre de la ventana
        """
        print("\n" + "=" * 70)
        print("CALCULADORA - TECLADO Y RATON")
        print("=" * 70)
        print("\nNumeros: 0-9 | Operaciones: + - * / | Decimal: .")
        print("Calcular: Enter o = | Borrar todo: Esc | Borrar ultimo: Backspace/Supr")
        print("\nPresiona 'q' para salir, 't' para cambiar tema, 'v' para la voz")
        print("=" * 70 + "\n")

        cv2.namedWindow(self.config.window_title, cv2.WINDOW_AUTOSIZE)
        cv2.setMouseCallback(self.config.window_title, self.handle_mouse)

        self.running = True
        while self.running:
            self.scheduler.run_pending()
            cv2.imshow(self.config.window_title, self.render())

            key = cv2.waitKeyEx(self.config.frame_delay_ms)
            if key != -1 and not self.handle_key(key):
                break
            if self._window_closed():
                break

        self.running = False
        cv2.destroyAllWindows()
        print("\nOK Aplicacion cerrada correctamente")
