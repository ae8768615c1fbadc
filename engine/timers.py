"""
timers.py — Cancellable Scheduled Callbacks
============================================
The scheduler never sleeps or blocks.  It asks a Timer to call it back
later and keeps the returned handle so it can cancel.

    handle = timer.call_later(0.5, callback)
    handle.cancel()                       # idempotent

Two backends:

  • PollingTimer – callbacks fire only when the owner calls poll().  The
    clock is injectable (time.monotonic by default), so tests can drive
    virtual time and a web server can poll on every request.
  • AsyncioTimer – thin wrapper over loop.call_later for apps that
    already run an asyncio event loop.

Both are single-threaded: callbacks run on the thread that polls / runs
the loop.
"""

import asyncio
import heapq
import itertools
import time
from typing import Callable, List, Optional

Callback = Callable[[], None]


class TimerHandle:
    __slots__ = ("when", "_callback", "_cancelled")

    def __init__(self, when: float, callback: Callback):
        self.when = when
        self._callback = callback
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True
        self._callback = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def _run(self) -> None:
        if not self._cancelled and self._callback is not None:
            callback, self._callback = self._callback, None
            self._cancelled = True
            callback()


class PollingTimer:
    """
    Attributes:
        clock : Zero-arg callable returning monotonic seconds.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self._queue: List[tuple] = []            # (when, seq, handle)
        self._seq = itertools.count()
        self._firing_at: Optional[float] = None  # due time of the callback being run

    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        # a callback re-arming itself counts from its own due time, not from
        # whenever poll() happened to run it
        base = self._firing_at if self._firing_at is not None else self.clock()
        handle = TimerHandle(base + max(0.0, delay), callback)
        heapq.heappush(self._queue, (handle.when, next(self._seq), handle))
        return handle

    def poll(self) -> int:
        """
        Run every callback that is due, in due order.  Callbacks scheduled
        while polling run in the same call if they are already due, so a
        late poll catches up on every tick it missed.
        Returns the number of callbacks run.
        """
        fired = 0
        while self._queue:
            when, _, handle = self._queue[0]
            if handle.cancelled:
                heapq.heappop(self._queue)
                continue
            if when > self.clock():
                break
            heapq.heappop(self._queue)
            self._firing_at = when
            try:
                handle._run()
            finally:
                self._firing_at = None
            fired += 1
        return fired

    def next_due(self) -> Optional[float]:
        for when, _, handle in sorted(self._queue):
            if not handle.cancelled:
                return when
        return None

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h in self._queue if not h.cancelled)


class AsyncioTimer:
    """call_later on an asyncio loop.  Handles are asyncio.TimerHandle."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay: float, callback: Callback) -> asyncio.TimerHandle:
        return self.loop.call_later(max(0.0, delay), callback)
