"""Fixtures compartidas: reloj manual, planificador de bucle y motor."""

import pytest

from core.calculator import CalculationEngine
from core.keymap import token_for_key
from core.scheduler import LoopScheduler


class FakeClock:
    """Reloj que solo avanza cuando el test lo pide."""

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    return LoopScheduler(clock=clock)


@pytest.fixture
def engine(scheduler):
    return CalculationEngine(scheduler=scheduler)


@pytest.fixture
def press(engine):
    """Teclea una cadena como lo haría el usuario ("5+3=")."""
    def _press(keys):
        for ch in keys:
            token = token_for_key(ord(ch))
            assert token is not None, f"tecla sin token: {ch!r}"
            engine.dispatch(token)
        return engine.projection
    return _press
