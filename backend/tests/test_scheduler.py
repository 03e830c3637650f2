import logging

from quiznight.services.games.scheduler import SocketIOScheduler


class DeferredSocketIO:
    """Queues background tasks until ``run`` and records cooperative sleeps."""

    def __init__(self, on_sleep=None):
        self.sleeps = []
        self.tasks = []
        self._on_sleep = on_sleep

    def start_background_task(self, target, *args):
        self.tasks.append((target, args))

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        if self._on_sleep is not None:
            self._on_sleep(len(self.sleeps))

    def run(self):
        while self.tasks:
            target, args = self.tasks.pop(0)
            target(*args)


def test_timer_sleeps_in_steps_then_fires_once():
    sio = DeferredSocketIO()
    fired = []
    SocketIOScheduler(sio, step=0.5).schedule(2, lambda: fired.append('x'))
    assert fired == []
    sio.run()
    assert sio.sleeps == [0.5, 0.5, 0.5, 0.5]
    assert fired == ['x']


def test_last_step_is_shortened():
    sio = DeferredSocketIO()
    SocketIOScheduler(sio, step=0.5).schedule(1.25, lambda: None)
    sio.run()
    assert sio.sleeps == [0.5, 0.5, 0.25]


def test_cancel_during_sleep_stops_the_timer():
    handles = []
    fired = []

    def cancel_after_second_step(count):
        if count == 2:
            handles[0].cancel()

    sio = DeferredSocketIO(on_sleep=cancel_after_second_step)
    handles.append(SocketIOScheduler(sio, step=0.5).schedule(20, lambda: fired.append('x')))
    sio.run()

    assert fired == []
    assert sio.sleeps == [0.5, 0.5]


def test_cancel_before_start_never_sleeps():
    sio = DeferredSocketIO()
    fired = []
    handle = SocketIOScheduler(sio).schedule(20, lambda: fired.append('x'))
    handle.cancel()
    sio.run()
    assert sio.sleeps == []
    assert fired == []


def test_failing_callback_is_logged(caplog):
    logger = logging.getLogger('quiznight.tests.timer')

    def boom():
        raise RuntimeError('boom')

    sio = DeferredSocketIO()
    SocketIOScheduler(sio, logger=logger).schedule(0.1, boom)
    with caplog.at_level(logging.ERROR, logger='quiznight.tests.timer'):
        sio.run()
    assert any('[timer-error]' in r.getMessage() for r in caplog.records)
