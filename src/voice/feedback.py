"""
Sistema de feedback por voz usando pyttsx3.

Este módulo anuncia en voz alta lo que ocurre en la calculadora (teclas,
resultados y errores), ejecutándose de forma asíncrona para no bloquear la
interfaz.
"""

import threading
from collections import deque

import pyttsx3


NUMBERS_ES = {
    "0": "cero", "1": "uno", "2": "dos", "3": "tres", "4": "cuatro",
    "5": "cinco", "6": "seis", "7": "siete", "8": "ocho", "9": "nueve",
}

TOKENS_ES = {
    "add": "más",
    "subtract": "menos",
    "multiply": "por",
    "divide": "entre",
    "decimal": "punto",
    "clear_all": "todo borrado",
    "clear_entry": "entrada borrada",
    "backspace": "borrado",
}

OPERATOR_PHRASES = ("add", "subtract", "multiply", "divide")

ERRORS_ES = {
    "Cannot divide by zero": "no se puede dividir entre cero",
    "Overflow": "desbordamiento",
    "Error": "error de cálculo",
}


def result_to_speech(text):
    """Convierte el texto de un resultado en una frase natural ("-2.5" → "menos 2 coma 5")."""
    if text.startswith("-"):
        text = "menos " + text[1:]
    return text.replace(".", " coma ")


# ============================================================================
# CLASE: VoiceFeedback
# Propósito: Síntesis de voz para feedback auditivo
# Responsabilidades:
#   - Anunciar teclas, resultados y errores en español
#   - Ejecutar en hilo separado para no bloquear UI
#   - Gestionar cola de mensajes para evitar solapamiento
# ============================================================================
class VoiceFeedback:
    """
    Sistema de feedback por voz usando pyttsx3.

    Características:
        - Ejecución asíncrona (no bloquea la aplicación)
        - Cola de mensajes (un mensaje a la vez)
        - Motor inicializado solo cuando la voz se activa
    """

    def __init__(self, config):
        """
        Args:
            config (CalculatorConfig): Configuración de la calculadora
        """
        self.config = config
        self.engine = None
        self.is_speaking = False
        self.message_queue = deque(maxlen=5)  # Cola de máximo 5 mensajes
        self._lock = threading.Lock()

        if self.config.voice_enabled:
            self._init_engine()

    def _init_engine(self):
        """Inicializa pyttsx3; si falla, la voz queda desactivada."""
        try:
            self.engine = pyttsx3.init()
            self._configure_engine()
            print("✓ Sistema de voz inicializado correctamente")
        except Exception as e:
            print(f"⚠ Advertencia: No se pudo inicializar el sistema de voz: {e}")
            self.engine = None
            self.config.voice_enabled = False

    def _configure_engine(self):
        """Aplica volumen, velocidad y, si existe, una voz del idioma configurado."""
        self.engine.setProperty('volume', self.config.voice_volume)
        self.engine.setProperty('rate', self.config.voice_rate)

        # Identificadores tipo "es-ES", "es_MX" o "spanish+es"
        language = self.config.voice_language.lower()
        markers = (f"{language}-", f"{language}_", f"+{language}", f"/{language}")
        for voice in self.engine.getProperty('voices'):
            voice_id = voice.id.lower()
            languages = [str(lang).lower() for lang in (getattr(voice, 'languages', None) or [])]
            if any(m in voice_id for m in markers) or any(language in lang for lang in languages):
                self.engine.setProperty('voice', voice.id)
                print(f"✓ Voz seleccionada: {voice.name}")
                return
        print("⚠ No se encontró voz en el idioma configurado. Usando voz predeterminada.")

    def set_enabled(self, enabled):
        """Activa o desactiva la voz, inicializando el motor si hace falta."""
        self.config.voice_enabled = enabled
        if enabled and self.engine is None:
            self._init_engine()
        return self.config.voice_enabled

    def speak(self, text):
        """
        Reproduce un mensaje de voz de forma asíncrona.

        Args:
            text (str): Texto a sintetizar
        """
        if not self.config.voice_enabled or not self.engine:
            return

        with self._lock:
            self.message_queue.append(text)
            if self.is_speaking:
                return
            self.is_speaking = True

        thread = threading.Thread(target=self._process_queue, daemon=True)
        thread.start()

    def _process_queue(self):
        """Procesa la cola de mensajes uno por uno."""
        while True:
            with self._lock:
                if not self.message_queue:
                    self.is_speaking = False
                    return
                message = self.message_queue.popleft()
            try:
                self.engine.say(message)
                self.engine.runAndWait()
            except Exception as e:
                print(f"⚠ Error al reproducir voz: {e}")

    def phrase_for(self, token, projection, previous=None):
        """
        Frase que corresponde a un token ya aplicado.

        Args:
            token (str): Token despachado al motor
            projection (DisplayProjection): Proyección resultante
            previous (DisplayProjection): Proyección antes del token (opcional)

        Returns:
            str | None: Frase a pronunciar, o None si no hay nada que decir

        Si el token no cambió nada (operador durante un error, "=" sin
        operación pendiente) no se dice nada. Un operador que resuelve la
        operación pendiente anuncia también el resultado intermedio.
        """
        if previous is not None and projection == previous:
            return None
        if projection.is_error:
            return ERRORS_ES.get(projection.primary, projection.primary)
        if token.startswith("num_"):
            return NUMBERS_ES[token.split("_")[1]]
        if token == "equal":
            return f"igual a {result_to_speech(projection.primary)}"
        if (token in OPERATOR_PHRASES and previous is not None
                and projection.primary != previous.primary):
            return f"{result_to_speech(projection.primary)}, {TOKENS_ES[token]}"
        return TOKENS_ES.get(token)

    def announce(self, token, projection, previous=None):
        """Anuncia el efecto de un token."""
        phrase = self.phrase_for(token, projection, previous)
        if phrase:
            self.speak(phrase)

    def announce_auto_clear(self, projection):
        """Anuncia que el error se borró solo y lo que queda en el display."""
        self.speak(f"error borrado, {result_to_speech(projection.primary)}")
