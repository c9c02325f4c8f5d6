"""Timer host and task spawning - the only ways cleanup touches the host loop.

The scheduler never reaches for a global host instance; it receives a
``TimerHost`` and a ``TaskSpawner`` at construction.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor

log = logging.getLogger('loadout_retention')


class TimerHandle:
    """Cancellable reference to a registered timer. cancel() is idempotent."""

    def __init__(self, cancel_fn):
        self._cancel_fn = cancel_fn

    @property
    def cancelled(self):
        return self._cancel_fn is None

    def cancel(self):
        cancel_fn, self._cancel_fn = self._cancel_fn, None
        if cancel_fn is not None:
            cancel_fn()


class TimerHost:
    """Scheduling capability offered by the host application.

    Timers registered here are not tied to host reconfiguration (level or map
    changes); they fire until cancelled.
    """

    def call_later(self, delay_seconds, callback):
        """Run callback once after delay_seconds. Returns a TimerHandle."""
        raise NotImplementedError

    def call_every(self, interval_seconds, callback):
        """Run callback every interval_seconds. Returns a TimerHandle."""
        raise NotImplementedError


class TornadoTimerHost(TimerHost):
    """TimerHost over a Tornado IOLoop (PeriodicCallback / call_later)."""

    def __init__(self, io_loop=None):
        self._io_loop = io_loop

    @property
    def io_loop(self):
        if self._io_loop is None:
            from tornado.ioloop import IOLoop
            self._io_loop = IOLoop.current()
        return self._io_loop

    def call_later(self, delay_seconds, callback):
        io_loop = self.io_loop
        state = {'cancelled': False, 'timeout': None}

        # Both run on the loop thread, in submission order
        def schedule():
            if not state['cancelled']:
                state['timeout'] = io_loop.call_later(delay_seconds, callback)

        def cancel():
            state['cancelled'] = True
            if state['timeout'] is not None:
                io_loop.remove_timeout(state['timeout'])

        io_loop.add_callback(schedule)
        return TimerHandle(lambda: io_loop.add_callback(cancel))

    def call_every(self, interval_seconds, callback):
        from tornado.ioloop import PeriodicCallback
        io_loop = self.io_loop
        periodic_callback = PeriodicCallback(callback, interval_seconds * 1000)
        # start() binds to IOLoop.current(), so it must run on the loop thread
        io_loop.add_callback(periodic_callback.start)
        return TimerHandle(lambda: io_loop.add_callback(periodic_callback.stop))


def _log_task_failure(future):
    if future.cancelled():
        return
    error = future.exception()
    if error is not None:
        log.error(f"[TaskSpawner] Background task failed: {error}")


class TaskSpawner:
    """Fire-and-forget dispatch onto a thread pool.

    spawn() returns immediately with a Future; nothing waits on it and the
    scheduler never cancels it. Exceptions escaping the task are logged.
    """

    def __init__(self, max_workers=2, executor=None):
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="loadout-cleanup")

    def spawn(self, fn, *args):
        future = self._executor.submit(fn, *args)
        future.add_done_callback(_log_task_failure)
        return future

    def shutdown(self, wait=False):
        self._executor.shutdown(wait=wait)


class InlineTaskSpawner(TaskSpawner):
    """Runs tasks on the calling thread; for tests and single-threaded hosts."""

    def __init__(self):
        self._executor = None

    def spawn(self, fn, *args):
        future = Future()
        try:
            future.set_result(fn(*args))
        except Exception as e:
            future.set_exception(e)
        _log_task_failure(future)
        return future

    def shutdown(self, wait=False):
        pass
