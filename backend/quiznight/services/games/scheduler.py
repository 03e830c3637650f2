"""Round timers.

The engine only sees the ``schedule(delay, callback) -> handle`` capability
and ``handle.cancel()``. Cancellation is best effort: a callback that has
already been released may still run, so the engine re-checks the session
phase and question index when it fires.
"""

import itertools
from typing import Callable


class TimerHandle:
    _ids = itertools.count(1)

    def __init__(self, delay: float):
        self.id = next(self._ids)
        self.delay = delay
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        # Idempotent
        self._cancelled = True

    def __repr__(self):
        return f"<TimerHandle id={self.id} delay={self.delay} cancelled={self.cancelled}>"


class SocketIOScheduler:
    """Runs timer callbacks on Socket.IO background tasks.

    The worker sleeps in steps of at most ``step`` seconds through
    ``socketio.sleep`` so it yields to the eventlet/gevent hub, and checks
    for cancellation between steps.
    """

    def __init__(self, socketio, logger=None, step: float = 0.5):
        self._socketio = socketio
        self._logger = logger
        self._step = step

    def schedule(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(delay)
        self._socketio.start_background_task(self._worker, handle, callback)
        return handle

    def _worker(self, handle: TimerHandle, callback: Callable[[], None]) -> None:
        slept = 0.0
        while slept < handle.delay and not handle.cancelled:
            step = min(self._step, handle.delay - slept)
            self._socketio.sleep(step)
            slept += step
        if handle.cancelled:
            return
        try:
            callback()
        except Exception:
            if self._logger is not None:
                self._logger.exception(f"[timer-error] handle={handle.id}")
