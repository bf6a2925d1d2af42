"""Single-threaded main execution context.

All session state is mutated on one thread. Background threads never touch
that state directly; they post callables into the context's queue, which the
owning thread drains in order.
"""

import queue
import threading
from typing import Any, Callable, Optional

from loguru import logger


class Ticker:
    """Calls a callback on a background thread every ``interval`` seconds.

    The callback runs off the main context; it should only read external state
    and ``post`` the result back.
    """

    def __init__(self, interval: float, callback: Callable[[], Any]):
        self.interval = interval
        self.callback = callback
        self._stop_event = threading.Event()
        self.thread: Optional[threading.Thread] = None

    def start(self) -> None:
        self.thread = threading.Thread(
            target=self._run, name="mlradio-ticker", daemon=True
        )
        self.thread.start()

    def _run(self) -> None:
        while not self._stop_event.wait(self.interval):
            try:
                self.callback()
            except Exception:
                logger.exception("Ticker callback failed")

    def cancel(self) -> None:
        self._stop_event.set()

    @property
    def cancelled(self) -> bool:
        return self._stop_event.is_set()


class MainContext:
    """Queue-backed event loop owning all session mutations.

    ``post`` is safe from any thread. ``run_pending`` and ``run_forever`` must
    only be called from the thread that owns the context.
    """

    def __init__(self) -> None:
        self._queue: queue.Queue = queue.Queue()
        self._running = False

    def post(self, callback: Callable[..., Any], *args: Any) -> None:
        """Schedule ``callback(*args)`` on the main context."""
        self._queue.put((callback, args))

    def spawn(
        self, target: Callable[..., Any], *args: Any, name: str = "mlradio-task"
    ) -> threading.Thread:
        """Run ``target(*args)`` on a background daemon thread."""
        thread = threading.Thread(target=target, args=args, name=name, daemon=True)
        thread.silent_logging = True
        thread.start()
        return thread

    def every(self, interval: float, callback: Callable[[], Any]) -> Ticker:
        """Call ``callback`` on a background thread every ``interval`` seconds."""
        ticker = Ticker(interval, callback)
        ticker.start()
        return ticker

    def _execute(self, callback: Callable[..., Any], args: tuple) -> None:
        try:
            callback(*args)
        except Exception:
            logger.exception(f"Unhandled error in main context callback {callback!r}")

    def run_pending(self) -> int:
        """Run every queued callback without blocking.

        Returns:
            Number of callbacks executed
        """
        executed = 0
        while True:
            try:
                callback, args = self._queue.get_nowait()
            except queue.Empty:
                return executed
            self._execute(callback, args)
            executed += 1

    def run_forever(self, poll_interval: float = 0.1) -> None:
        """Drain the queue until ``stop`` is called."""
        self._running = True
        logger.debug("Main context started")
        while self._running:
            try:
                callback, args = self._queue.get(timeout=poll_interval)
            except queue.Empty:
                continue
            self._execute(callback, args)
        logger.debug("Main context stopped")

    def stop(self) -> None:
        """Stop ``run_forever`` after the current callback."""
        self._running = False
