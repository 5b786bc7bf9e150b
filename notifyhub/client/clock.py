"""Timer sources driving the client reconnect schedule."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Clock(Protocol):
    """Schedule a callback after a delay expressed in seconds."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class LoopClock:
    """Clock backed by the running asyncio event loop."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)


@dataclass(order=True)
class ManualTimer:
    deadline: float
    sequence: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class ManualClock:
    """Virtual clock whose time only moves when :meth:`advance` is called."""

    def __init__(self) -> None:
        self.now = 0.0
        self._timers: list[ManualTimer] = []
        self._sequence = 0

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        self._sequence += 1
        timer = ManualTimer(self.now + max(delay, 0.0), self._sequence, callback)
        self._timers.append(timer)
        return timer

    @property
    def pending(self) -> list[float]:
        """Remaining delays of the timers that have neither fired nor been cancelled."""

        return sorted(timer.deadline - self.now for timer in self._timers if not timer.cancelled)

    def advance(self, seconds: float) -> int:
        """Move time forward, firing due timers in deadline order. Returns how many fired."""

        target = self.now + seconds
        fired = 0
        while True:
            due = [timer for timer in self._timers if not timer.cancelled and timer.deadline <= target]
            if not due:
                break
            timer = min(due)
            self._timers.remove(timer)
            self.now = timer.deadline
            timer.callback()
            fired += 1
        self._timers = [timer for timer in self._timers if not timer.cancelled]
        self.now = target
        return fired


__all__ = ["Clock", "LoopClock", "ManualClock", "ManualTimer", "TimerHandle"]
