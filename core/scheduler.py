"""
core/scheduler.py — Cooperative one-shot scheduling for TurnClock.

The scheduler owns a private clock that only moves when update(dt) is
called. main.py feeds it the frame delta each frame; tests feed it whole
seconds. There are no threads: every callback runs inside update(), on
the same execution context as input handling.

Scheduling is delay-based. A callback armed for +1s from inside another
callback is due one second after *that* callback's due time, so a large
dt fires a self-rearming tick several times, in order, instead of once.

Usage:
    scheduler = Scheduler()
    handle = scheduler.arm(1.0, on_tick)

    # each frame:
    scheduler.update(dt)

    # on pause:
    scheduler.cancel(handle)
"""

from __future__ import annotations
import itertools
import logging
from typing import Callable, Hashable

logger = logging.getLogger(__name__)


class Handle:
    """A single armed callback.

    Attributes:
        due:       Scheduler time at which the callback fires.
        callback:  Zero-argument callable.
        cancelled: True once cancel() has been called on this handle.
        fired:     True once the callback has run.
    """

    def __init__(self, due: float, seq: int, callback: Callable[[], None]) -> None:
        self.due:       float = due
        self.seq:       int   = seq
        self.callback         = callback
        self.cancelled: bool  = False
        self.fired:     bool  = False

    @property
    def active(self) -> bool:
        """True while the callback is still waiting to fire."""
        return not (self.cancelled or self.fired)

    def __repr__(self) -> str:
        state = "active" if self.active else ("fired" if self.fired else "cancelled")
        return f"<Handle due={self.due:.3f} {state}>"


class Scheduler:
    """Delay-based scheduler driven by explicit time advancement.

    Attributes:
        _now:     Current scheduler time in seconds.
        _pending: Handles armed but not yet fired or cancelled.
        _seq:     Tie-breaker so handles due at the same time fire in arm order.
    """

    def __init__(self) -> None:
        self._now:     float        = 0.0
        self._pending: list[Handle] = []
        self._seq                   = itertools.count()

    def now(self) -> float:
        """Return the scheduler's current time in seconds."""
        return self._now

    def arm(self, interval: float, callback: Callable[[], None]) -> Handle:
        """Schedule callback to run once, interval seconds from now.

        Args:
            interval: Delay in seconds. Negative values are treated as 0.
            callback: Zero-argument callable.

        Returns:
            The Handle to pass to cancel().
        """
        handle = Handle(self._now + max(0.0, interval), next(self._seq), callback)
        self._pending.append(handle)
        return handle

    def cancel(self, handle: Handle | None) -> None:
        """Cancel a handle. No-op for None, fired, or already-cancelled handles."""
        if handle is None or not handle.active:
            return
        handle.cancelled = True
        self._pending.remove(handle)

    def pending(self) -> int:
        """Return how many handles are still waiting to fire."""
        return len(self._pending)

    def update(self, dt: float) -> None:
        """Advance the clock by dt seconds, firing every handle that falls due.

        Handles fire in (due, arm order). While a callback runs, now()
        reports that handle's due time, so re-arming from inside a callback
        keeps a fixed cadence.

        Args:
            dt: Seconds elapsed since the last update. Negative values are ignored.
        """
        target = self._now + max(0.0, dt)
        while True:
            due = [h for h in self._pending if h.due <= target]
            if not due:
                break
            handle = min(due, key=lambda h: (h.due, h.seq))
            self._pending.remove(handle)
            self._now = max(self._now, handle.due)
            handle.fired = True
            handle.callback()
        self._now = target


class Debouncer:
    """Run a callback once after a quiet delay, keyed by an opaque target id.

    Triggering the same target again before the delay elapses replaces the
    pending callback and restarts the delay. Targets are independent.

    Usage:
        debouncer = Debouncer(scheduler)
        debouncer.trigger("message", 2.0, clear_message)
    """

    def __init__(self, scheduler: Scheduler) -> None:
        self._scheduler = scheduler
        self._handles: dict[Hashable, Handle] = {}

    def trigger(self, target_id: Hashable, delay: float, callback: Callable[[], None]) -> None:
        """(Re)start the delay for target_id; callback runs when it elapses."""
        self.cancel(target_id)

        def fire() -> None:
            self._handles.pop(target_id, None)
            callback()

        self._handles[target_id] = self._scheduler.arm(delay, fire)
        logger.debug("debounce armed target=%r delay=%.2fs", target_id, delay)

    def cancel(self, target_id: Hashable) -> None:
        """Drop any pending callback for target_id. No-op if none is pending."""
        self._scheduler.cancel(self._handles.pop(target_id, None))

    def is_pending(self, target_id: Hashable) -> bool:
        """Return True if target_id has a callback waiting to run."""
        return target_id in self._handles
