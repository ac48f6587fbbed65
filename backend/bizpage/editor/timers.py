# FILE: backend/bizpage/editor/timers.py
# PHOENIX PROTOCOL - CANCELLABLE TIMERS
# 1. The editor never touches asyncio timers directly; it asks a Scheduler.
# 2. ManualScheduler runs on a virtual clock so debounce tests are deterministic.

import asyncio
import heapq
import itertools
from typing import Callable, List, Optional, Protocol, Tuple

class TimerHandle(Protocol):
    def cancel(self) -> None: ...

class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...

class AsyncioScheduler:
    """Real time, backed by the running event loop."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)

class _ManualHandle:
    def __init__(self, when: float, callback: Callable[[], None]):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

class ManualScheduler:
    """Virtual clock: callbacks fire only when advance() moves time past them."""

    def __init__(self):
        self.now = 0.0
        self._queue: List[Tuple[float, int, _ManualHandle]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = _ManualHandle(self.now + max(delay, 0.0), callback)
        heapq.heappush(self._queue, (handle.when, next(self._counter), handle))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def advance(self, seconds: float) -> int:
        """Moves the clock forward and fires every due callback in order. Returns how many fired."""
        target = self.now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = when
            handle.callback()
            fired += 1
        self.now = target
        return fired

class Debouncer:
    """Runs the most recently scheduled callback once input has been quiet for `wait` seconds."""

    def __init__(self, scheduler: Scheduler, wait: float):
        self.scheduler = scheduler
        self.wait = wait
        self._handle: Optional[TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, callback: Callable[[], None]) -> None:
        self.cancel()

        def fire() -> None:
            self._handle = None
            callback()

        self._handle = self.scheduler.call_later(self.wait, fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
