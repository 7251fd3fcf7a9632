"""
Módulo de interfaz de usuario.
Contiene la disposición de botones y el renderizador de UI.
"""

from .layout import build_buttons, button_at
from .renderer import UIRenderer

__all__ = ['UIRenderer', 'build_buttons', 'button_at']
