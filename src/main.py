"""
Punto de entrada de la calculadora.

Ejecución:
    python3 src/main.py [--theme dark] [--no-voice] [--error-delay 2.0]

Requisitos:
    - Python 3.9+
    - opencv-python, numpy, pyttsx3
"""

import argparse
import traceback

from app.calculator_app import KeyboardCalculatorApp
from config.settings import CalculatorConfig
from config.theme import THEMES, ThemeStore


def build_config(argv=None):
    """Construye la configuración a partir de los argumentos de línea de comandos."""
    parser = argparse.ArgumentParser(description="Calculadora aritmética con teclado y ratón")
    parser.add_argument("--theme", choices=THEMES, default=None,
                        help="Tema inicial (se guarda como preferencia)")
    parser.add_argument("--theme-file", default=None,
                        help="Fichero JSON donde se guarda el tema")
    parser.add_argument("--no-voice", action="store_true",
                        help="Desactivar el feedback por voz")
    parser.add_argument("--error-delay", type=float, default=None,
                        help="Segundos hasta borrar automáticamente un error")
    args = parser.parse_args(argv)

    config = CalculatorConfig()
    if args.theme_file:
        config.theme_file = args.theme_file
    if args.no_voice:
        config.voice_enabled = False
    if args.error_delay is not None:
        config.error_clear_delay = args.error_delay
    if args.theme:
        config.theme = args.theme
    return config, args.theme is not None


def main(argv=None):
    config, theme_given = build_config(argv)
    store = ThemeStore(config.theme_file)
    if theme_given:
        store.save(config.theme)

    try:
        app = KeyboardCalculatorApp(config=config, theme_store=store)
        app.run()
    except KeyboardInterrupt:
        # Usuario presionó Ctrl+C
        print("\nInterrumpido por el usuario")
    except Exception as e:
        # Error inesperado - mostrar información completa
        print(f"\nError: {e}")
        traceback.print_exc()
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
