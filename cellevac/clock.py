"""Wall-clock timers and tickers with waitable expiry."""

from __future__ import annotations

import threading
import time


class Timer:
    """A one-shot timer that can be waited on, stopped and reset."""

    def __init__(self, duration: float) -> None:
        self._cond = threading.Condition()
        self._deadline = time.monotonic() + duration
        self._stopped = False

    def _fired(self, now: float) -> None:
        pass

    def wait(self, timeout: float | None = None) -> bool:
        """Block until it fires; False if stopped or the timeout passes first."""
        end = None if timeout is None else time.monotonic() + timeout
        with self._cond:
            while not self._stopped:
                now = time.monotonic()
                if now >= self._deadline:
                    self._fired(now)
                    return True
                if end is not None and now >= end:
                    return False
                self._cond.wait(min(self._deadline, end or self._deadline) - now)
            return False

    def stop(self) -> None:
        """Stop it so that waiters return False."""
        with self._cond:
            self._stopped = True
            self._cond.notify_all()

    def reset(self, duration: float) -> None:
        """Rearm to fire ``duration`` seconds from now."""
        with self._cond:
            self._deadline = time.monotonic() + duration
            self._stopped = False
            self._cond.notify_all()


class Ticker(Timer):
    """Fires repeatedly at a fixed interval; missed ticks are dropped."""

    def __init__(self, interval: float) -> None:
        if interval <= 0:
            raise ValueError("ticker interval must be positive")
        super().__init__(interval)
        self._interval = interval

    def _fired(self, now: float) -> None:
        while self._deadline <= now:
            self._deadline += self._interval

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the next tick; False if stopped or the timeout passes first."""
        return super().wait(timeout)

    def stop(self) -> None:
        """Stop ticking so that waiters return False."""
        super().stop()


class SystemClock:
    """Clock backed by the system's monotonic time."""

    def now(self) -> float:
        return time.monotonic()

    def new_timer(self, duration: float) -> Timer:
        return Timer(duration)

    def new_ticker(self, interval: float) -> Ticker:
        return Ticker(interval)