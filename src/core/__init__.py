"""
Módulo core con la lógica principal de cálculo.
Contiene el motor de la calculadora, los planificadores y el mapa de teclas.
"""

from .calculator import CalculationEngine, DisplayProjection, format_result
from .scheduler import LoopScheduler, TimerScheduler

__all__ = ['CalculationEngine', 'DisplayProjection', 'format_result',
           'LoopScheduler', 'TimerScheduler']
