"""
Interfaz de usuario y renderizado.

Este módulo contiene la clase UIRenderer que dibuja la calculadora sobre un
lienzo de numpy con OpenCV.
"""

import cv2
import numpy as np

from config.settings import CalculatorConfig
from config.theme import DARK, LIGHT
from .layout import (
    DISPLAY_HEIGHT, FOOTER_HEIGHT, HEADER_HEIGHT, MARGIN, build_buttons,
)


# Paletas en BGR
PALETTES = {
    LIGHT: {
        "background": (242, 242, 242),
        "title": (60, 60, 60),
        "display": (255, 255, 255),
        "display_border": (205, 205, 205),
        "text": (30, 30, 30),
        "secondary": (130, 130, 130),
        "error": (69, 53, 220),
        "number": (255, 255, 255),
        "operator": (245, 225, 200),
        "action": (225, 225, 225),
        "equals": (0, 140, 255),
        "theme": (225, 225, 225),
        "button_text": (40, 40, 40),
        "equals_text": (255, 255, 255),
        "hover": (0, 0, 0),
        "hint": (140, 140, 140),
    },
    DARK: {
        "background": (32, 32, 32),
        "title": (210, 210, 210),
        "display": (50, 50, 50),
        "display_border": (80, 80, 80),
        "text": (245, 245, 245),
        "secondary": (160, 160, 160),
        "error": (90, 90, 255),
        "number": (70, 70, 70),
        "operator": (110, 80, 50),
        "action": (55, 55, 55),
        "equals": (0, 140, 255),
        "theme": (60, 60, 60),
        "button_text": (240, 240, 240),
        "equals_text": (255, 255, 255),
        "hover": (255, 255, 255),
        "hint": (120, 120, 120),
    },
}

# Las fuentes Hershey solo tienen ASCII
ASCII_SYMBOLS = {"−": "-", "×": "x", "÷": "/"}


def to_ascii(text):
    """Sustituye los símbolos de operador por equivalentes ASCII dibujables."""
    for symbol, replacement in ASCII_SYMBOLS.items():
        text = text.replace(symbol, replacement)
    return text


def fit_font_scale(text, max_width, start=2.2, minimum=0.8, thickness=3,
                   font=cv2.FONT_HERSHEY_DUPLEX):
    """Reduce la escala de fuente hasta que el texto quepa en max_width."""
    scale = start
    while scale > minimum:
        text_w = cv2.getTextSize(text, font, scale, thickness)[0][0]
        if text_w <= max_width:
            break
        scale -= 0.1
    return max(scale, minimum)


# ============================================================================
class UIRenderer:
    """
    Renderizador de la calculadora.

    Componentes visuales:
        1. Cabecera: título y botón de tema
        2. Display: operación pendiente (arriba) y número actual (grande)
        3. Teclado: botones por tipo (número, operador, acción, igual)
        4. Pie: pista de uso del teclado
        5. Feedback: mensajes temporales con fade-out
    """

    def __init__(self, width, height, config=None):
        """
        Args:
            width (int): Ancho de la ventana en píxeles
            height (int): Alto de la ventana en píxeles
            config (CalculatorConfig): Configuración (opcional)
        """
        self.width = width
        self.height = height
        self.config = config if config else CalculatorConfig()
        self.buttons = build_buttons(width, height)
        self.feedback_msg = ""               # Mensaje de feedback actual
        self.feedback_timer = 0              # Frames restantes para mostrar feedback
        self.feedback_color = None           # None = color de texto del tema

    def show_feedback(self, msg, color=None, duration=None):
        """
        Muestra mensaje de feedback temporal.

        Args:
            msg (str): Mensaje a mostrar
            color (tuple): Color BGR del mensaje (None = color del tema)
            duration (int): Duración en frames (por defecto config.feedback_frames)
        """
        self.feedback_msg = msg
        self.feedback_color = color
        self.feedback_timer = duration if duration is not None else self.config.feedback_frames

    def render(self, projection, theme, hover_token=None):
        """
        Dibuja un frame completo.

        Args:
            projection (DisplayProjection): Estado a mostrar
            theme (str): 'light' o 'dark'
            hover_token (str): Token del botón bajo el puntero (opcional)

        Returns:
            np.ndarray: Imagen BGR de height x width
        """
        palette = PALETTES.get(theme, PALETTES[LIGHT])
        img = np.full((self.height, self.width, 3), palette["background"], dtype=np.uint8)

        self.draw_header(img, palette)
        self.draw_display(img, projection, palette)
        self.draw_buttons(img, palette, hover_token)
        if self.config.show_keyboard_hint:
            self.draw_footer(img, palette)
        self.draw_feedback(img, palette)
        return img

    def draw_header(self, img, palette):
        cv2.putText(img, "CALCULADORA", (MARGIN, HEADER_HEIGHT - 22),
                    cv2.FONT_HERSHEY_DUPLEX, 0.9, palette["title"], 2)

    def draw_display(self, img, projection, palette):
        """
        Dibuja el display principal.

        Colores del texto principal:
            - Color de texto del tema: número normal
            - Rojo: mensaje de error
        """
        x, y = MARGIN, HEADER_HEIGHT
        w, h = self.width - 2 * MARGIN, DISPLAY_HEIGHT
        cv2.rectangle(img, (x, y), (x + w, y + h), palette["display"], -1)
        cv2.rectangle(img, (x, y), (x + w, y + h), palette["display_border"], 2)

        # Operación pendiente, alineada a la derecha
        secondary = to_ascii(projection.secondary)
        if secondary:
            text_w = cv2.getTextSize(secondary, cv2.FONT_HERSHEY_SIMPLEX, 0.8, 2)[0][0]
            cv2.putText(img, secondary, (x + w - 15 - text_w, y + 45),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.8, palette["secondary"], 2)

        primary = to_ascii(projection.primary)
        color = palette["error"] if projection.is_error else palette["text"]
        thickness = 2 if projection.is_error else 3
        scale = fit_font_scale(primary, w - 30, thickness=thickness)
        text_w = cv2.getTextSize(primary, cv2.FONT_HERSHEY_DUPLEX, scale, thickness)[0][0]
        cv2.putText(img, primary, (x + w - 15 - text_w, y + h - 30),
                    cv2.FONT_HERSHEY_DUPLEX, scale, color, thickness)

    def draw_buttons(self, img, palette, hover_token=None):
        for button in self.buttons:
            x, y, w, h = button.x, button.y, button.w, button.h
            cv2.rectangle(img, (x, y), (x + w, y + h), palette[button.kind], -1)

            if button.token == hover_token:
                # Resaltado semitransparente
                overlay = img.copy()
                cv2.rectangle(overlay, (x, y), (x + w, y + h), palette["hover"], -1)
                cv2.addWeighted(overlay, 0.12, img, 0.88, 0, img)

            text_color = palette["equals_text"] if button.kind == "equals" else palette["button_text"]
            scale = 0.6 if button.kind == "theme" else 1.1
            (text_w, text_h), _ = cv2.getTextSize(button.label, cv2.FONT_HERSHEY_DUPLEX, scale, 2)
            cv2.putText(img, button.label, (x + (w - text_w) // 2, y + (h + text_h) // 2),
                        cv2.FONT_HERSHEY_DUPLEX, scale, text_color, 2)

    def draw_footer(self, img, palette):
        cv2.putText(img, "Usa el teclado para ir mas rapido | t: tema | v: voz | q: salir",
                    (MARGIN, self.height - FOOTER_HEIGHT // 2 + 5),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.42, palette["hint"], 1)

    def draw_feedback(self, img, palette):
        """
        Dibuja el mensaje de feedback temporal sobre el display.

        Efecto:
            - Fade-out usando alpha blending en los últimos 20 frames
            - Duración controlada por feedback_timer
        """
        if self.feedback_timer > 0:
            self.feedback_timer -= 1
            alpha = min(self.feedback_timer / 20.0, 1.0)

            base = self.feedback_color if self.feedback_color else palette["text"]
            background = np.array(palette["display"], dtype=float)
            color = tuple(int(c) for c in background + (np.array(base) - background) * alpha)
            cv2.putText(img, self.feedback_msg, (MARGIN + 15, HEADER_HEIGHT + 45),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.7, color, 2)
