"""
Programación de tareas diferidas y cancelables.

El motor de cálculo solo necesita schedule(delay, callback) → tarea con
cancel(). Aquí hay dos implementaciones:
    - LoopScheduler: se consulta desde el bucle de frames de la interfaz
    - TimerScheduler: usa threading.Timer (uso sin interfaz)
"""

import threading
import time


class ScheduledTask:
    """Tarea programada para ejecutarse una sola vez en el instante `due`."""

    def __init__(self, due, callback):
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.done = False

    def cancel(self):
        self.cancelled = True


# ============================================================================
# CLASE: LoopScheduler
# Propósito: Ejecutar callbacks diferidos desde el bucle principal
# Responsabilidades:
#   - Guardar tareas pendientes con su instante de vencimiento
#   - Ejecutar las vencidas cuando el bucle llama a run_pending()
# ============================================================================
class LoopScheduler:
    """
    Planificador cooperativo para el bucle de frames.

    Todo se ejecuta en el hilo que llama a run_pending(), así que las
    transiciones del motor nunca se solapan con el renderizado.
    """

    def __init__(self, clock=time.monotonic):
        """
        Args:
            clock (callable): Fuente de tiempo en segundos (inyectable en tests)
        """
        self.clock = clock
        self._tasks = []

    def schedule(self, delay, callback):
        task = ScheduledTask(self.clock() + delay, callback)
        self._tasks.append(task)
        return task

    @property
    def pending(self):
        """Número de tareas no canceladas que aún no se han ejecutado."""
        return sum(1 for task in self._tasks if not task.cancelled)

    def run_pending(self):
        """
        Ejecuta las tareas vencidas.

        Returns:
            int: Número de callbacks ejecutados
        """
        now = self.clock()
        due = [t for t in self._tasks if not t.cancelled and t.due <= now]
        self._tasks = [t for t in self._tasks if not t.cancelled and t.due > now]

        for task in due:
            task.done = True
            task.callback()
        return len(due)


class _TimerTask:
    """Envoltorio de threading.Timer con la interfaz cancel() de ScheduledTask."""

    def __init__(self, timer):
        self._timer = timer

    def cancel(self):
        self._timer.cancel()


class TimerScheduler:
    """Planificador basado en hilos: cada tarea es un threading.Timer daemon."""

    def schedule(self, delay, callback):
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return _TimerTask(timer)
