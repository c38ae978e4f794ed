"""
Cancellable one-shot timers for scenario scripts.

AsyncioScheduler runs on the event loop (API process).
ManualScheduler keeps a virtual clock that callers advance explicitly
(CLI runs and tests), so scripts replay deterministically.
"""

import asyncio
import heapq
import itertools
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


@dataclass(order=True)
class TimerHandle:
    """A pending callback. Ordered by due time, then by arming order."""
    due: float
    seq: int
    callback: Callback = field(compare=False)
    label: str = field(default="", compare=False)
    cancelled: bool = field(default=False, compare=False)


class Scheduler(ABC):
    """Base class: a clock plus a set of cancellable one-shot timers."""

    def __init__(self):
        self._handles: Dict[int, TimerHandle] = {}
        self._seq = itertools.count()

    @abstractmethod
    def now(self) -> float:
        """Current clock reading in seconds."""
        ...

    @abstractmethod
    def _arm(self, handle: TimerHandle) -> None:
        ...

    def _disarm(self, handle: TimerHandle) -> None:
        pass

    def call_later(self, delay: float, callback: Callback, label: str = "") -> TimerHandle:
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        handle = TimerHandle(
            due=self.now() + delay, seq=next(self._seq), callback=callback, label=label
        )
        self._handles[handle.seq] = handle
        self._arm(handle)
        return handle

    def cancel(self, handle: TimerHandle) -> None:
        if handle.cancelled or handle.seq not in self._handles:
            return
        handle.cancelled = True
        self._handles.pop(handle.seq, None)
        self._disarm(handle)
        logger.debug("Cancelled timer %s", handle.label or handle.seq)

    def cancel_all(self) -> int:
        """Cancel every pending timer. Returns how many were cancelled."""
        handles = list(self._handles.values())
        for handle in handles:
            self.cancel(handle)
        return len(handles)

    @property
    def pending(self) -> List[TimerHandle]:
        return sorted(self._handles.values())

    def _fire(self, handle: TimerHandle) -> None:
        if handle.cancelled:
            return
        self._handles.pop(handle.seq, None)
        handle.callback()


class ManualScheduler(Scheduler):
    """Virtual-time scheduler. Nothing fires until advance() is called."""

    def __init__(self, start: float = 0.0):
        super().__init__()
        self._now = start
        self._queue: List[TimerHandle] = []

    def now(self) -> float:
        return self._now

    def _arm(self, handle: TimerHandle) -> None:
        heapq.heappush(self._queue, handle)

    def _disarm(self, handle: TimerHandle) -> None:
        # Cancelled handles leave the queue immediately
        self._queue = [queued for queued in self._queue if queued.seq != handle.seq]
        heapq.heapify(self._queue)

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, firing due callbacks in time order.
        Callbacks armed while advancing fire too if they fall inside the window.

        Returns:
            Number of callbacks fired.
        """
        if seconds < 0:
            raise ValueError("cannot move the clock backwards")
        target = self._now + seconds
        fired = 0
        while self._queue and self._queue[0].due <= target:
            handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = max(self._now, handle.due)
            self._fire(handle)
            fired += 1
        self._now = target
        return fired


class AsyncioScheduler(Scheduler):
    """Wall-clock scheduler backed by loop.call_later."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        super().__init__()
        self._loop = loop
        self._timers: Dict[int, asyncio.TimerHandle] = {}

    def now(self) -> float:
        return time.time()

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def _arm(self, handle: TimerHandle) -> None:
        delay = max(handle.due - self.now(), 0.0)
        self._timers[handle.seq] = self._get_loop().call_later(delay, self._run, handle)

    def _run(self, handle: TimerHandle) -> None:
        self._timers.pop(handle.seq, None)
        self._fire(handle)

    def _disarm(self, handle: TimerHandle) -> None:
        timer = self._timers.pop(handle.seq, None)
        if timer is not None:
            timer.cancel()
