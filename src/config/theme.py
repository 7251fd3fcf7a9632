"""
Persistencia del tema visual (claro / oscuro).

El tema se guarda en un fichero JSON pequeño. Cualquier problema al leer o
escribir se avisa por consola y se sigue con el tema por defecto.
"""

import json


LIGHT = "light"
DARK = "dark"
THEMES = (LIGHT, DARK)
DEFAULT_THEME = LIGHT


def next_theme(theme):
    """Retorna el tema contrario."""
    return DARK if theme == LIGHT else LIGHT


class ThemeStore:
    """
    Guarda y recupera el tema elegido por el usuario.

    Formato del fichero: {"theme": "dark"}
    """

    def __init__(self, path):
        self.path = path

    def load(self, default=DEFAULT_THEME):
        """
        Lee el tema guardado.

        Args:
            default (str): Tema a usar si no hay uno guardado válido

        Returns:
            str: Tema guardado, o default
        """
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return default
        except (OSError, ValueError) as e:
            print(f"⚠ No se pudo leer el tema guardado ({e}). Usando '{default}'.")
            return default

        theme = data.get("theme") if isinstance(data, dict) else None
        if theme not in THEMES:
            print(f"⚠ Tema desconocido {theme!r}. Usando '{default}'.")
            return default
        return theme

    def save(self, theme):
        """
        Guarda el tema.

        Raises:
            ValueError: Si el tema no es 'light' ni 'dark'
        """
        if theme not in THEMES:
            raise ValueError(f"Tema desconocido: {theme!r}")
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump({"theme": theme}, f)
        except OSError as e:
            print(f"⚠ No se pudo guardar el tema: {e}")

    def toggle(self, theme):
        """Cambia al otro tema, lo guarda y lo retorna."""
        new_theme = next_theme(theme)
        self.save(new_theme)
        return new_theme
