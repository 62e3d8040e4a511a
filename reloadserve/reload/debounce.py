"""
Trailing-edge debounce timer.
"""

from typing import Callable, Optional
import logging
import threading
import time

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Collapses bursts of events into a single callback.

    Each trigger() restarts the quiet window; the callback fires once the
    window passes with no further events. The clock is injectable so the
    timing can be driven by hand through poll() without starting the
    background thread.
    """

    def __init__(
        self,
        window: float,
        callback: Callable[[], None],
        clock: Callable[[], float] = time.monotonic,
    ):
        self._window = window
        self._callback = callback
        self._clock = clock
        self._last_event: Optional[float] = None
        self._stopped = False
        self._cond = threading.Condition()
        self._thread: Optional[threading.Thread] = None

    @property
    def pending(self) -> bool:
        """Whether an event is waiting for its quiet window."""
        with self._cond:
            return self._last_event is not None

    def trigger(self) -> None:
        """Record an event, restarting the quiet window."""
        with self._cond:
            self._last_event = self._clock()
            self._cond.notify()

    def _remaining(self) -> float:
        # Caller holds the lock and has checked that an event is pending
        return self._last_event + self._window - self._clock()

    def poll(self) -> bool:
        """Fire the callback if the quiet window has elapsed. Returns True if fired."""
        with self._cond:
            if self._last_event is None or self._remaining() > 0:
                return False
            self._last_event = None
        self._fire()
        return True

    def _fire(self) -> None:
        try:
            self._callback()
        except Exception:
            logger.exception("Debounced callback failed")

    def _run(self) -> None:
        while True:
            with self._cond:
                while self._last_event is None and not self._stopped:
                    self._cond.wait()
                if self._stopped:
                    return
                remaining = self._remaining()
                if remaining > 0:
                    self._cond.wait(remaining)
                    continue
                self._last_event = None
            self._fire()

    def start(self) -> None:
        """Start the background timer thread."""
        with self._cond:
            if self._thread is not None:
                return
            self._stopped = False
            self._thread = threading.Thread(target=self._run, name="debouncer", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop the timer thread, dropping any pending event."""
        with self._cond:
            self._stopped = True
            self._last_event = None
            self._cond.notify()
            thread, self._thread = self._thread, None
        if thread is not None:
            thread.join(timeout)
