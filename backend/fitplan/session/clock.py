"""
Tick sources for the session engine.

A clock hands out repeating ticks through ``schedule_interval(callback,
interval)``; the returned handle stops the tick with ``cancel()``. The engine
only ever talks to this interface, so it runs the same way under an asyncio
loop, under virtual time in tests, or driven by hand.
"""
from __future__ import annotations

import asyncio
from typing import Callable, Optional, Protocol


class TickHandle(Protocol):
    def cancel(self) -> None: ...


class Clock(Protocol):
    def schedule_interval(self, callback: Callable[[], None], interval: float) -> TickHandle: ...


class _AsyncioTick:
    def __init__(self, loop: asyncio.AbstractEventLoop, callback, interval: float):
        self._loop = loop
        self._callback = callback
        self._interval = interval
        self.active = True
        self._timer = loop.call_later(interval, self._fire)

    def _fire(self):
        if not self.active:
            return
        # re-arm first so the callback may cancel this tick
        self._timer = self._loop.call_later(self._interval, self._fire)
        self._callback()

    def cancel(self):
        self.active = False
        self._timer.cancel()


class AsyncioClock:
    """Ticks on an asyncio event loop via ``call_later``."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def schedule_interval(self, callback, interval: float) -> _AsyncioTick:
        loop = self._loop or asyncio.get_running_loop()
        return _AsyncioTick(loop, callback, interval)


class _ManualTick:
    def __init__(self, clock: "ManualClock", callback, interval: float):
        self._clock = clock
        self.callback = callback
        self.interval = interval
        self.due = clock.now + interval
        self.active = True

    def cancel(self):
        self.active = False
        self._clock._ticks.discard(self)


class ManualClock:
    """Virtual time: nothing fires until ``advance`` is called."""

    def __init__(self):
        self.now = 0.0
        self._ticks: set[_ManualTick] = set()

    def schedule_interval(self, callback, interval: float) -> _ManualTick:
        tick = _ManualTick(self, callback, interval)
        self._ticks.add(tick)
        return tick

    @property
    def pending(self) -> int:
        return len(self._ticks)

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [t for t in self._ticks if t.due <= target]
            if not due:
                break
            tick = min(due, key=lambda t: t.due)
            self.now = tick.due
            tick.due += tick.interval
            tick.callback()
        self.now = target
