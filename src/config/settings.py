"""
Configuración centralizada de la calculadora.

Este módulo contiene las preferencias del motor, la ventana, el tema y el
feedback por voz.
"""

import os

from core.calculator import ERROR_CLEAR_DELAY, MAX_DIGITS


DEFAULT_THEME_FILE = os.path.join(os.path.expanduser("~"), ".calculadora_teclado.json")


# ============================================================================
# CLASE: CalculatorConfig
# Propósito: Preferencias de la calculadora
# Responsabilidades:
#   - Parámetros del motor (dígitos máximos, retardo de borrado de errores)
#   - Tamaño de ventana y ritmo del bucle de frames
#   - Tema visual y fichero donde se guarda
#   - Preferencias de voz (volumen, velocidad, idioma)
# ============================================================================
class CalculatorConfig:
    """
    Configuración de la calculadora con valores por defecto.

    Todas las opciones son atributos simples que se pueden cambiar tras
    crear la instancia (por ejemplo desde la línea de comandos).
    """

    def __init__(self):
        """Inicializa configuración con valores por defecto."""
        # ====================================================================
        # MOTOR DE CÁLCULO
        # ====================================================================
        self.max_digits = MAX_DIGITS        # Dígitos máximos en el display
        self.error_clear_delay = ERROR_CLEAR_DELAY   # Segundos hasta borrar un error

        # ====================================================================
        # VENTANA
        # ====================================================================
        self.window_title = "Calculadora"
        self.window_width = 420
        self.window_height = 640
        self.frame_delay_ms = 30            # Espera de cv2.waitKeyEx por frame

        # ====================================================================
        # TEMA
        # ====================================================================
        self.theme = "light"                # 'light' o 'dark'
        self.theme_file = DEFAULT_THEME_FILE

        # ====================================================================
        # CONFIGURACIÓN DE VOZ
        # ====================================================================
        self.voice_enabled = True           # Activar/desactivar feedback por voz
        self.voice_volume = 0.8             # Volumen (0.0-1.0)
        self.voice_rate = 150               # Velocidad de habla (palabras por minuto)
        self.voice_language = 'es'          # Idioma ('es', 'en', etc.)

        # ====================================================================
        # AYUDAS VISUALES
        # ====================================================================
        self.show_keyboard_hint = True      # Pie con la pista de teclado
        self.feedback_frames = 40           # Duración de mensajes temporales (frames)

    def window_size(self):
        """Retorna (ancho, alto) de la ventana."""
        return self.window_width, self.window_height
