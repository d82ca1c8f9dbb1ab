"""Clocks used to schedule the waits of scripted sequences.

``AsyncioClock`` defers to the running event loop, which plays the role of the
UI thread. ``VirtualClock`` only moves when told to, so tests can step through
delays deterministically.
"""
from __future__ import annotations

import asyncio
import heapq
import itertools
import time
from typing import Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Clock(Protocol):
    def now(self) -> float: ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioClock:
    """Schedules callbacks on an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self.loop.time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(max(0.0, delay), callback)


class _VirtualTimer:
    __slots__ = ("when", "seq", "callback", "cancelled")

    def __init__(self, when: float, seq: int, callback: Callable[[], None]):
        self.when = when
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def __lt__(self, other: _VirtualTimer) -> bool:
        return (self.when, self.seq) < (other.when, other.seq)


class VirtualClock:
    """Manually advanced clock.

    Timers due at the same instant fire in the order they were scheduled.
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._timers: list[_VirtualTimer] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> _VirtualTimer:
        timer = _VirtualTimer(self._now + max(0.0, delay), next(self._seq), callback)
        heapq.heappush(self._timers, timer)
        return timer

    @property
    def pending(self) -> int:
        return sum(1 for t in self._timers if not t.cancelled)

    def next_deadline(self) -> float | None:
        self._drop_cancelled()
        return self._timers[0].when if self._timers else None

    def advance(self, seconds: float) -> int:
        """Move time forward, firing every timer that comes due.

        Returns:
            Number of callbacks fired
        """
        target = self._now + seconds
        fired = 0
        while True:
            self._drop_cancelled()
            if not self._timers or self._timers[0].when > target:
                break
            timer = heapq.heappop(self._timers)
            self._now = timer.when
            timer.callback()
            fired += 1
        self._now = target
        return fired

    def run_until_idle(self, max_steps: int = 10_000) -> int:
        """Fire timers in deadline order until none are left."""
        fired = 0
        while fired < max_steps:
            deadline = self.next_deadline()
            if deadline is None:
                break
            fired += self.advance(deadline - self._now)
        return fired

    def _drop_cancelled(self) -> None:
        while self._timers and self._timers[0].cancelled:
            heapq.heappop(self._timers)

    def drain_realtime(self, sleep: Callable[[float], None] = time.sleep) -> int:
        """Fire pending timers, sleeping in real time until each comes due.

        Lets synchronous front ends (a blocking prompt loop) honour delays
        without an event loop.
        """
        fired = 0
        while True:
            deadline = self.next_deadline()
            if deadline is None:
                return fired
            wait = deadline - self._now
            if wait > 0:
                sleep(wait)
            fired += self.advance(wait)
