"""Cancelable per-second countdown and the schedulers that drive it."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from utils.event_bus import EventStream


class TickHandle(Protocol):
    def cancel(self) -> None:
        ...

    def remaining(self) -> float:
        """Seconds until the next fire."""
        ...


class TickScheduler(Protocol):
    """Anything that can call back repeatedly; cancel must be safe from inside the callback."""

    def schedule_repeating(
        self,
        interval: float,
        callback: Callable[[], None],
        first_delay: float | None = None,
    ) -> TickHandle:
        ...


class _FrameHandle:
    def __init__(
        self,
        scheduler: FrameTickScheduler,
        interval: float,
        callback: Callable[[], None],
        due: float,
    ) -> None:
        self._scheduler = scheduler
        self.interval = interval
        self.callback = callback
        self.due = due
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def remaining(self) -> float:
        return max(0.0, self.due - self._scheduler.now)


class FrameTickScheduler:
    """Scheduler advanced explicitly by a frame loop (or a test) via ``advance``."""

    _EPSILON = 1e-9

    def __init__(self) -> None:
        self._now = 0.0
        self._handles: list[_FrameHandle] = []

    @property
    def now(self) -> float:
        return self._now

    def schedule_repeating(
        self,
        interval: float,
        callback: Callable[[], None],
        first_delay: float | None = None,
    ) -> _FrameHandle:
        delay = interval if first_delay is None else max(0.0, first_delay)
        handle = _FrameHandle(self, interval, callback, self._now + delay)
        self._handles.append(handle)
        return handle

    def advance(self, seconds: float) -> None:
        target = self._now + max(0.0, seconds)
        while True:
            due = [
                h for h in self._handles
                if not h.cancelled and h.due <= target + self._EPSILON
            ]
            if not due:
                break
            handle = min(due, key=lambda h: h.due)
            self._now = handle.due
            handle.due += handle.interval
            handle.callback()
        self._now = target
        self._handles = [h for h in self._handles if not h.cancelled]

    def active_count(self) -> int:
        return sum(1 for h in self._handles if not h.cancelled)


class _AsyncioHandle:
    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        interval: float,
        callback: Callable[[], None],
        first_delay: float,
    ) -> None:
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._cancelled = False
        self._timer = loop.call_later(first_delay, self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        # Next fire is queued before the callback so a cancel() from inside it covers both.
        self._timer = self._loop.call_later(self._interval, self._fire)
        self._callback()

    def cancel(self) -> None:
        self._cancelled = True
        self._timer.cancel()

    def remaining(self) -> float:
        return max(0.0, self._timer.when() - self._loop.time())


class AsyncioTickScheduler:
    """Scheduler running on a single asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def schedule_repeating(
        self,
        interval: float,
        callback: Callable[[], None],
        first_delay: float | None = None,
    ) -> _AsyncioHandle:
        loop = self._loop or asyncio.get_running_loop()
        delay = interval if first_delay is None else max(0.0, first_delay)
        return _AsyncioHandle(loop, interval, callback, delay)


@dataclass(frozen=True)
class TimerTick:
    remaining_seconds: int
    expired: bool


class SessionTimer:
    """Countdown with at most one active schedule per instance.

    Arming always disarms first. The countdown stops itself on expiry before
    the expiring tick is published. Disarming remembers how far the current
    second had progressed so ``resume`` picks up mid-second.
    """

    def __init__(self, scheduler: TickScheduler, interval_seconds: float = 1.0) -> None:
        self._scheduler = scheduler
        self._interval = interval_seconds
        self._remaining = 0
        self._handle: TickHandle | None = None
        self._generation = 0
        self._carry: float | None = None
        self.ticks: EventStream[TimerTick] = EventStream("timer")

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def is_running(self) -> bool:
        return self._handle is not None

    @property
    def carry_seconds(self) -> float | None:
        """Delay until the next tick saved by the last disarm, if any."""
        return self._carry

    def set_remaining(self, seconds: int) -> None:
        self._remaining = max(0, int(seconds))
        self._carry = None

    def arm(self, seconds: int) -> None:
        """Start a fresh countdown whose first tick is one full interval away."""
        seconds = int(seconds)
        if seconds <= 0:
            raise ValueError(f"Countdown must be positive (got {seconds})")
        self.disarm()
        self._remaining = seconds
        self._carry = None
        self._schedule(None)

    def resume(self) -> None:
        """Continue the countdown from where the last disarm left it."""
        if self._remaining <= 0:
            raise ValueError("Nothing left to resume")
        self.disarm()
        carry, self._carry = self._carry, None
        self._schedule(carry)

    def disarm(self) -> None:
        handle, self._handle = self._handle, None
        if handle is not None:
            self._carry = min(self._interval, handle.remaining())
            handle.cancel()

    def _schedule(self, first_delay: float | None) -> None:
        self._generation += 1
        generation = self._generation
        self._handle = self._scheduler.schedule_repeating(
            self._interval, lambda: self._on_tick(generation), first_delay
        )

    def _on_tick(self, generation: int) -> None:
        if generation != self._generation or self._handle is None:
            return
        self._remaining = max(0, self._remaining - 1)
        expired = self._remaining == 0
        if expired:
            self.disarm()
        self.ticks.publish(TimerTick(remaining_seconds=self._remaining, expired=expired))
