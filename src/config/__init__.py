"""
Módulo de configuración de la calculadora.
Contiene las preferencias y la persistencia del tema.
"""

from .settings import CalculatorConfig
from .theme import ThemeStore

__all__ = ['CalculatorConfig', 'ThemeStore']
