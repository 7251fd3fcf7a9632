"""
Traducción de teclas a tokens de la calculadora.

Los códigos son los que devuelve cv2.waitKeyEx(). Las teclas imprimibles
llegan como su código ASCII; en Linux (GTK y Qt) las especiales llegan como
keysyms de X11 y GTK añade el estado de modificadores a partir del bit 16.
"""

KEY_ENTER = 13
KEY_LINEFEED = 10
KEY_ESCAPE = 27
KEY_BACKSPACE = 8

# Delete: macOS (127), GTK (65535 / 0xFFFF), Windows (3014656 / 0x2E0000)
KEY_DELETE_CODES = (127, 0xFFFF, 0x2E0000)

# Keysyms de X11
XK_BACKSPACE = 0xFF08
XK_RETURN = 0xFF0D
XK_ESCAPE = 0xFF1B
XK_KP_ENTER = 0xFF8D
XK_KP_DELETE = 0xFF9F
XK_KP_MULTIPLY = 0xFFAA
XK_KP_ADD = 0xFFAB
XK_KP_SUBTRACT = 0xFFAD
XK_KP_DECIMAL = 0xFFAE
XK_KP_DIVIDE = 0xFFAF
XK_KP_0 = 0xFFB0

MODIFIER_MASK_LIMIT = 0x1000000    # Por debajo, los bits 16+ son modificadores de GTK

CHAR_TOKENS = {
    "+": "add",
    "-": "subtract",
    "*": "multiply",
    "/": "divide",
    ".": "decimal",
    "=": "equal",
}
CHAR_TOKENS.update({str(d): f"num_{d}" for d in range(10)})

SPECIAL_TOKENS = {
    KEY_ENTER: "equal",
    KEY_LINEFEED: "equal",
    KEY_ESCAPE: "clear_all",
    KEY_BACKSPACE: "backspace",
    XK_RETURN: "equal",
    XK_KP_ENTER: "equal",
    XK_ESCAPE: "clear_all",
    XK_BACKSPACE: "backspace",
    XK_KP_DELETE: "backspace",
    XK_KP_ADD: "add",
    XK_KP_SUBTRACT: "subtract",
    XK_KP_MULTIPLY: "multiply",
    XK_KP_DIVIDE: "divide",
    XK_KP_DECIMAL: "decimal",
}
SPECIAL_TOKENS.update({code: "backspace" for code in KEY_DELETE_CODES})
SPECIAL_TOKENS.update({XK_KP_0 + d: f"num_{d}" for d in range(10)})


def normalize_key(code):
    """
    Quita los bits de modificadores (Shift, NumLock...) que añade GTK.

    Los códigos especiales conocidos (como Delete en Windows, 0x2E0000) se
    devuelven intactos.
    """
    if code is None or code < 0 or code in SPECIAL_TOKENS:
        return code
    if code < MODIFIER_MASK_LIMIT:
        return code & 0xFFFF
    return code


def token_for_key(code):
    """
    Devuelve el token asociado a un código de tecla.

    Args:
        code (int): Código de cv2.waitKeyEx() (-1 si no se pulsó nada)

    Returns:
        str | None: Identificador de token, o None si la tecla no es de la
        calculadora
    """
    code = normalize_key(code)
    if code is None or code < 0:
        return None
    if code in SPECIAL_TOKENS:
        return SPECIAL_TOKENS[code]
    if code < 0x110000:
        return CHAR_TOKENS.get(chr(code))
    return None
