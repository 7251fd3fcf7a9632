"""
Motor de cálculo aritmético por tokens.

Este módulo contiene la clase CalculationEngine, una máquina de estados que
recibe tokens discretos (dígitos, punto decimal, operadores y comandos) y
mantiene un cálculo en curso evaluado estrictamente de izquierda a derecha.
"""

import math
import threading
from collections import namedtuple
from functools import partial

from .scheduler import TimerScheduler


MAX_DIGITS = 12                 # Ancho máximo del display (sin contar el punto)
ERROR_CLEAR_DELAY = 2.0         # Segundos hasta borrar un error automáticamente

# Símbolos de operador tal y como se muestran en el display secundario
ADD = "+"
SUBTRACT = "−"
MULTIPLY = "×"
DIVIDE = "÷"
OPERATORS = (ADD, SUBTRACT, MULTIPLY, DIVIDE)

# Mensajes de error que ocupan el display mientras dura el error
DIVISION_BY_ZERO = "Cannot divide by zero"
OVERFLOW = "Overflow"
GENERIC_ERROR = "Error"

# Modos del estado (un único tag en vez de varios flags independientes)
MODE_EDITING = "editing"    # El usuario está escribiendo el número actual
MODE_FRESH = "fresh"        # El siguiente dígito empieza un número nuevo
MODE_ERROR = "error"        # El display muestra un mensaje de error

# Identificadores de token que acepta dispatch()
DIGIT_TOKENS = tuple(f"num_{d}" for d in range(10))
OPERATOR_TOKENS = {
    "add": ADD,
    "subtract": SUBTRACT,
    "multiply": MULTIPLY,
    "divide": DIVIDE,
}
COMMAND_TOKENS = ("decimal", "equal", "clear_all", "clear_entry", "backspace")


DisplayProjection = namedtuple("DisplayProjection", ["primary", "secondary", "is_error"])


class EngineState(namedtuple("EngineState", ["text", "accumulator", "operator", "mode"])):
    """
    Estado inmutable del motor.

    Campos:
        - text: Texto del display ("0" es el valor vacío canónico)
        - accumulator: Operando ya confirmado (float) o None
        - operator: Operador pendiente (uno de OPERATORS) o None
        - mode: MODE_EDITING, MODE_FRESH o MODE_ERROR

    El seguimiento del punto decimal se deriva del texto, así que no puede
    quedar desincronizado.
    """

    __slots__ = ()

    @property
    def is_error(self):
        return self.mode == MODE_ERROR

    @property
    def awaiting_fresh_operand(self):
        return self.mode == MODE_FRESH

    @property
    def has_decimal_point(self):
        return not self.is_error and "." in self.text

    @property
    def decimal_place_count(self):
        if not self.has_decimal_point:
            return 0
        return len(self.text.split(".", 1)[1])

    @property
    def digit_count(self):
        """Longitud del texto sin contar el punto decimal."""
        return len(self.text.replace(".", ""))


INITIAL_STATE = EngineState("0", None, None, MODE_EDITING)


# ============================================================================
# FORMATO Y PARSEO DE NÚMEROS
# ============================================================================
def _strip_zeros(text):
    """Quita ceros finales y un punto final suelto ("2.500" → "2.5", "8.0" → "8")."""
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _round_half_up(value):
    return int(math.floor(value + 0.5))


def format_result(value, max_digits=MAX_DIGITS):
    """
    Convierte el resultado de una operación en el texto del display.

    Args:
        value (float): Resultado numérico
        max_digits (int): Ancho máximo del display

    Returns:
        str: Texto formateado

    Reglas:
        1. No finito → "Error"
        2. |valor| ≥ 10^max_digits → notación exponencial con 6 decimales
        3. Redondeo a 10 decimales para ocultar ruido binario, sin ceros finales
        4. Si aún es demasiado largo, se ajustan los decimales al espacio que
           deja la parte entera (o se redondea a entero si no queda espacio)
    """
    if not math.isfinite(value):
        return GENERIC_ERROR

    if abs(value) >= 10 ** max_digits:
        return f"{value:.6e}"

    rounded = round(value, 10)
    if rounded == 0:
        rounded = 0.0   # Evita "-0"

    formatted = repr(rounded)
    if "e" in formatted or "E" in formatted:
        # repr usa exponente para valores pequeños; aquí siempre decimal
        formatted = f"{rounded:.10f}"
    formatted = _strip_zeros(formatted)

    if len(formatted) > max_digits:
        integer_part = str(int(math.floor(abs(rounded))))
        available_decimals = max_digits - len(integer_part)
        if available_decimals > 0:
            formatted = _strip_zeros(f"{rounded:.{available_decimals}f}")
        else:
            formatted = str(_round_half_up(rounded))

    return formatted


def parse_number(text):
    """
    Convierte el texto del display en float.

    Raises:
        ValueError: Si el texto no representa un número finito
    """
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"valor no finito: {text!r}")
    return value


# ============================================================================
# CLASE: CalculationEngine
# Propósito: Máquina de estados de la calculadora
# Responsabilidades:
#   - Construir el número actual dígito a dígito (máximo 12 dígitos)
#   - Encadenar operaciones de izquierda a derecha, sin precedencia
#   - Formatear resultados para el display
#   - Gestionar el estado de error y su borrado automático
# ============================================================================
class CalculationEngine:
    """
    Motor de cálculo dirigido por tokens.

    Modelo de operación:
        1. Los dígitos se acumulan en el texto del display
        2. Un operador guarda el número como acumulador (o resuelve la
           operación pendiente) y espera un operando nuevo
        3. "=" aplica el operador pendiente y muestra el resultado
        4. Los errores se muestran como mensaje y se borran solos tras
           error_clear_delay segundos, o antes con cualquier edición

    Nunca lanza excepciones por errores de cálculo: siempre hay una
    proyección válida para el display.
    """

    def __init__(self, max_digits=MAX_DIGITS, error_clear_delay=ERROR_CLEAR_DELAY,
                 scheduler=None):
        """
        Args:
            max_digits (int): Dígitos máximos del número en edición
            error_clear_delay (float): Segundos hasta el borrado automático del error
            scheduler: Objeto con schedule(delay, callback) que devuelve una
                tarea cancelable (por defecto TimerScheduler)
        """
        self.max_digits = max_digits
        self.error_clear_delay = error_clear_delay
        self._scheduler = scheduler if scheduler else TimerScheduler()
        self._state = INITIAL_STATE
        self._lock = threading.RLock()
        self._error_task = None         # Tarea de borrado automático pendiente
        self._error_generation = 0      # Identifica la entrada en error vigente
        self._listeners = []

    # ── Lectura del estado ──────────────────────────────────────────

    @property
    def state(self):
        return self._state

    @property
    def projection(self):
        """Proyección actual del display (texto principal, secundario, error)."""
        state = self._state
        secondary = ""
        if state.accumulator is not None and state.operator is not None:
            secondary = f"{format_result(state.accumulator, self.max_digits)} {state.operator}"
        return DisplayProjection(state.text, secondary, state.is_error)

    def add_listener(self, callback):
        """Registra callback(projection), llamado tras cada transición."""
        self._listeners.append(callback)

    def _notify(self):
        projection = self.projection
        for callback in list(self._listeners):
            callback(projection)

    # ── Entrada de tokens ───────────────────────────────────────────

    def dispatch(self, token):
        """
        Aplica un token y devuelve la nueva proyección.

        Args:
            token (str): "num_0".."num_9", "decimal", "add", "subtract",
                "multiply", "divide", "equal", "clear_all", "clear_entry",
                "backspace"

        Raises:
            ValueError: Si el token no existe
        """
        if token in DIGIT_TOKENS:
            self.input_digit(token.split("_")[1])
        elif token in OPERATOR_TOKENS:
            self.input_operator(OPERATOR_TOKENS[token])
        elif token == "decimal":
            self.input_decimal()
        elif token == "equal":
            self.calculate()
        elif token == "clear_all":
            self.clear_all()
        elif token == "clear_entry":
            self.clear_entry()
        elif token == "backspace":
            self.backspace()
        else:
            raise ValueError(f"Token desconocido: {token!r}")
        return self.projection

    def input_digit(self, digit):
        """Añade un dígito; a partir de max_digits se ignora sin error."""
        digit = str(digit)
        with self._lock:
            if self._state.is_error:
                self._reset()

            state = self._state
            if state.awaiting_fresh_operand:
                state = state._replace(text=digit, mode=MODE_EDITING)
            elif state.text == "0":
                state = state._replace(text=digit)
            elif state.digit_count < self.max_digits:
                state = state._replace(text=state.text + digit)
            self._state = state
            self._notify()

    def input_decimal(self):
        """Añade el punto decimal (un único punto por número)."""
        with self._lock:
            if self._state.is_error:
                self._reset()

            state = self._state
            if state.awaiting_fresh_operand:
                state = state._replace(text="0.", mode=MODE_EDITING)
            elif not state.has_decimal_point and state.digit_count < self.max_digits:
                state = state._replace(text=state.text + ".")
            self._state = state
            self._notify()

    def input_operator(self, operator):
        """
        Fija el operador pendiente.

        Comportamiento:
            - Con error activo: se ignora
            - Operadores seguidos: gana el último, sin consumir operando
            - Con una operación pendiente: se resuelve primero (izquierda a
              derecha) y su resultado pasa a ser el acumulador
        """
        if operator not in OPERATORS:
            raise ValueError(f"Operador desconocido: {operator!r}")

        with self._lock:
            state = self._state
            if state.is_error:
                return

            if state.awaiting_fresh_operand and state.operator is not None:
                self._state = state._replace(operator=operator)
                self._notify()
                return

            if state.accumulator is not None and state.operator is not None:
                accumulator = self._calculate()
                if accumulator is None:
                    self._notify()
                    return
            else:
                try:
                    accumulator = parse_number(state.text)
                except ValueError:
                    self._enter_error(GENERIC_ERROR)
                    self._notify()
                    return

            self._state = self._state._replace(
                accumulator=accumulator, operator=operator, mode=MODE_FRESH)
            self._notify()

    def calculate(self):
        """
        Aplica el operador pendiente ("=").

        Returns:
            float | None: Resultado sin formatear, o None si no había nada que
            calcular o se produjo un error
        """
        with self._lock:
            result = self._calculate()
            self._notify()
            return result

    def clear_all(self):
        """Vuelve al estado inicial (botón C / Escape)."""
        with self._lock:
            self._reset()
            self._notify()

    def clear_entry(self):
        """Borra solo el número actual; la operación pendiente se conserva (CE)."""
        with self._lock:
            self._cancel_error_task()
            mode = self._state.mode
            if mode == MODE_ERROR:
                mode = MODE_EDITING
            self._state = self._state._replace(text="0", mode=mode)
            self._notify()

    def backspace(self):
        """Borra el último carácter; con error activo equivale a clear_all."""
        with self._lock:
            state = self._state
            if state.is_error:
                self._reset()
            elif len(state.text) > 1:
                text = state.text[:-1]
                if text == "-":
                    text = "0"
                self._state = state._replace(text=text)
            else:
                self._state = state._replace(text="0")
            self._notify()

    # ── Lógica interna (se llama con el lock tomado) ────────────────

    def _calculate(self):
        state = self._state
        if state.is_error or state.operator is None or state.accumulator is None:
            return None

        try:
            current = parse_number(state.text)
            if state.operator == ADD:
                result = state.accumulator + current
            elif state.operator == SUBTRACT:
                result = state.accumulator - current
            elif state.operator == MULTIPLY:
                result = state.accumulator * current
            else:
                if current == 0:
                    self._enter_error(DIVISION_BY_ZERO)
                    return None
                result = state.accumulator / current
        except OverflowError:
            self._enter_error(OVERFLOW)
            return None
        except (ValueError, ArithmeticError):
            self._enter_error(GENERIC_ERROR)
            return None

        if not math.isfinite(result):
            self._enter_error(OVERFLOW)
            return None

        self._state = EngineState(format_result(result, self.max_digits), None, None, MODE_FRESH)
        return result

    def _reset(self):
        self._cancel_error_task()
        self._state = INITIAL_STATE

    def _enter_error(self, message):
        """Muestra el mensaje y programa su borrado automático."""
        self._cancel_error_task()
        self._error_generation += 1
        self._state = self._state._replace(text=message, mode=MODE_ERROR)
        self._error_task = self._scheduler.schedule(
            self.error_clear_delay, partial(self._expire_error, self._error_generation))

    def _cancel_error_task(self):
        if self._error_task is not None:
            self._error_task.cancel()
            self._error_task = None

    def _expire_error(self, generation):
        with self._lock:
            # Una tarea vieja que llega tarde no debe borrar nada
            if generation != self._error_generation or not self._state.is_error:
                return
            self._error_task = None
            self._state = INITIAL_STATE
            self._notify()
