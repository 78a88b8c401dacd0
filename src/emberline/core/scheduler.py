"""Virtual timer scheduler keyed on accumulated logical time.

Timers never look at the wall clock. The owner advances logical time once per
tick; a timer fires when logical time reaches its target. Pausing a timer
freezes its remaining delay, and resuming re-targets it relative to the
current logical time, so no position in the schedule is lost.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable


@dataclass
class Timer:
    fire_at: float
    seq: int
    callback: Callable[[], None]
    remaining: float | None = None
    cancelled: bool = False
    dispatched: bool = False

    @property
    def paused(self) -> bool:
        return self.remaining is not None

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.dispatched)


class Scheduler:
    def __init__(self) -> None:
        self.now = 0.0
        self._timers: list[Timer] = []
        self._seq = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def schedule(self, delay: float, callback: Callable[[], None]) -> Timer:
        """Register ``callback`` to fire ``delay`` logical ms from now."""
        self._seq += 1
        timer = Timer(fire_at=self.now + max(0.0, delay), seq=self._seq, callback=callback)
        if self._closed:
            timer.cancelled = True
            return timer
        self._timers.append(timer)
        return timer

    def pause(self, timer: Timer) -> None:
        if not timer.pending or timer.paused:
            return
        timer.remaining = max(0.0, timer.fire_at - self.now)

    def resume(self, timer: Timer) -> None:
        if not timer.pending or not timer.paused:
            return
        timer.fire_at = self.now + timer.remaining
        timer.remaining = None

    def cancel(self, timer: Timer) -> None:
        timer.cancelled = True

    def cancel_all(self) -> None:
        for timer in self._timers:
            timer.cancelled = True
        self._timers.clear()

    def close(self) -> None:
        self.cancel_all()
        self._closed = True

    def pending_count(self) -> int:
        return sum(1 for t in self._timers if t.pending)

    def advance(self, delta: float) -> int:
        """Move logical time forward and fire every due timer in order.

        Returns the number of callbacks fired.
        """
        if self._closed or delta < 0:
            return 0
        self.now += delta
        fired = 0
        while True:
            due = [t for t in self._timers if t.pending and not t.paused and t.fire_at <= self.now]
            if not due:
                break
            timer = min(due, key=lambda t: (t.fire_at, t.seq))
            timer.dispatched = True
            timer.callback()
            fired += 1
            if self._closed:
                break
        self._timers = [t for t in self._timers if t.pending]
        return fired
