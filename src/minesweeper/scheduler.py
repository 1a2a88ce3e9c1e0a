"""
Delayed callbacks for the presentation layer.

The engine never waits on a clock; whatever drives it schedules ticks and
deferred notifications through a Scheduler.
"""
import threading
from abc import ABC, abstractmethod
from typing import Callable


# ============================================================================
# Scheduler Interface
# ============================================================================

class ScheduledCall(ABC):
    """Handle for a pending callback."""

    @abstractmethod
    def cancel(self) -> None:
        """Prevent the callback from running if it has not run yet."""


class Scheduler(ABC):
    """Runs callbacks after a delay."""

    @abstractmethod
    def call_later(
        self, delay: float, callback: Callable[[], None]
    ) -> ScheduledCall:
        """
        Schedule a callback.

        Args:
            delay: Seconds to wait.
            callback: Function to run once the delay has passed.

        Returns:
            Handle that cancels the call.
        """


# ============================================================================
# Thread-based Scheduler
# ============================================================================

class _TimerCall(ScheduledCall):

    def __init__(self, timer: threading.Timer) -> None:
        self._timer = timer

    def cancel(self) -> None:
        self._timer.cancel()


class ThreadingScheduler(Scheduler):
    """
    Scheduler backed by threading.Timer.

    Callbacks run on timer threads, so callers must serialise whatever
    the callback touches.
    """

    def call_later(
        self, delay: float, callback: Callable[[], None]
    ) -> ScheduledCall:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return _TimerCall(timer)
