"""
Disposición de los botones de la calculadora.

Calcula los rectángulos de cada botón para un tamaño de ventana y resuelve
qué botón hay bajo el puntero. No depende de OpenCV.
"""

from collections import namedtuple


Button = namedtuple("Button", ["label", "token", "kind", "x", "y", "w", "h"])

HEADER_HEIGHT = 60
DISPLAY_HEIGHT = 160
FOOTER_HEIGHT = 40
MARGIN = 12
GAP = 8

THEME_TOKEN = "toggle_theme"    # No es un token del motor: lo gestiona la app

# Filas del teclado: (etiqueta, token, tipo, columnas que ocupa)
# Las etiquetas son ASCII porque las fuentes Hershey de OpenCV no tienen ÷ ni ×
BUTTON_ROWS = [
    [("C", "clear_all", "action", 1), ("CE", "clear_entry", "action", 1),
     ("<-", "backspace", "action", 1), ("/", "divide", "operator", 1)],
    [("7", "num_7", "number", 1), ("8", "num_8", "number", 1),
     ("9", "num_9", "number", 1), ("x", "multiply", "operator", 1)],
    [("4", "num_4", "number", 1), ("5", "num_5", "number", 1),
     ("6", "num_6", "number", 1), ("-", "subtract", "operator", 1)],
    [("1", "num_1", "number", 1), ("2", "num_2", "number", 1),
     ("3", "num_3", "number", 1), ("+", "add", "operator", 1)],
    [("0", "num_0", "number", 2), (".", "decimal", "action", 1),
     ("=", "equal", "equals", 1)],
]
COLUMNS = 4


def build_buttons(width, height):
    """
    Calcula la posición de todos los botones.

    Args:
        width (int): Ancho de la ventana en píxeles
        height (int): Alto de la ventana en píxeles

    Returns:
        list[Button]: Botón de tema (cabecera) seguido del teclado, fila a fila
    """
    buttons = [Button("Tema", THEME_TOKEN, "theme",
                      width - MARGIN - 90, MARGIN, 90, HEADER_HEIGHT - 2 * MARGIN)]

    top = HEADER_HEIGHT + DISPLAY_HEIGHT + MARGIN
    bottom = height - FOOTER_HEIGHT
    rows = len(BUTTON_ROWS)
    cell_w = (width - 2 * MARGIN - (COLUMNS - 1) * GAP) / COLUMNS
    cell_h = (bottom - top - (rows - 1) * GAP) / rows

    for r, row in enumerate(BUTTON_ROWS):
        col = 0
        y = top + r * (cell_h + GAP)
        for label, token, kind, span in row:
            x = MARGIN + col * (cell_w + GAP)
            w = span * cell_w + (span - 1) * GAP
            buttons.append(Button(label, token, kind, int(x), int(y), int(w), int(cell_h)))
            col += span
    return buttons


def button_at(buttons, x, y):
    """Retorna el botón que contiene el punto (x, y), o None."""
    for button in buttons:
        if button.x <= x < button.x + button.w and button.y <= y < button.y + button.h:
            return button
    return None
