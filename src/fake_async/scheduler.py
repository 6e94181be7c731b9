# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Deterministic scheduler that fakes the passage of time.

FakeAsync captures timers and microtasks created by the code it runs and
only fires them when the test advances virtual time with elapse() or one of
the flush methods. Everything happens synchronously on the calling thread.

Example:
    >>> fake = FakeAsync()
    >>> fired = []
    >>> handle = fake.create_timer(timedelta(seconds=5), lambda: fired.append("done"))
    >>> fake.elapse(timedelta(seconds=4))
    >>> fired
    []
    >>> fake.elapse(timedelta(seconds=1))
    >>> fired
    ['done']
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional, TypeVar

from .boundary import capture, CaptureBoundary
from .clock import as_duration, DurationLike, FakeClock, VirtualClock, ZERO
from .config import DEFAULT_FLUSH_TIMEOUT, FlushOptions
from .errors import FlushTimeoutError, IllegalStateError, InvalidArgumentError
from .microtasks import MicrotaskQueue
from .timers import OneShot, Periodic, TimerEntry, TimerHandle, TimerRegistry

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FakeAsync(CaptureBoundary):
    """
    Owns the virtual clock, the pending timers and the microtask queue.

    Microtasks are drained before any timer is considered and again after
    every timer fires. Timers fire in order of their next fire time, and in
    creation order when those are equal.
    """

    def __init__(self) -> None:
        self._clock = VirtualClock()
        self._timers = TimerRegistry()
        self._microtasks = MicrotaskQueue()
        # Horizon of the elapse() call currently running, None when idle.
        self._elapsing_to: Optional[timedelta] = None

    @property
    def elapsed(self) -> timedelta:
        """Virtual time elapsed since this instance was created."""
        return self._clock.elapsed

    @property
    def periodic_timer_count(self) -> int:
        """Number of active periodic timers."""
        return sum(1 for entry in self._timers if entry.is_periodic)

    @property
    def non_periodic_timer_count(self) -> int:
        """Number of active one-shot timers."""
        return sum(1 for entry in self._timers if not entry.is_periodic)

    @property
    def microtask_count(self) -> int:
        """Number of microtasks waiting to run."""
        return len(self._microtasks)

    def get_clock(self, initial_time: datetime) -> FakeClock:
        """
        Return a clock that starts at ``initial_time`` plus the time already
        elapsed, and moves with every later elapse() or elapse_blocking().
        """
        return FakeClock(initial_time, self._clock)

    def run(self, callback: Callable[[FakeAsync], T]) -> T:
        """
        Call ``callback(self)`` with this instance installed as the capture
        boundary, and return its result.

        Timers and microtasks created through fake_async.boundary inside the
        callback are owned by this instance. The boundary is removed again
        when the callback returns or raises.
        """
        with capture(self):
            return callback(self)

    def elapse(self, duration: DurationLike) -> None:
        """
        Simulate the asynchronous passage of ``duration``.

        Every timer due within the new horizon fires, in order, with the
        microtask queue drained before and after each one.

        Raises:
            InvalidArgumentError: If duration is negative
            IllegalStateError: If a previous call to elapse() has not completed
        """
        duration = self._check_duration(duration)
        if self._elapsing_to is not None:
            raise IllegalStateError("Cannot elapse until previous elapse is complete")

        self._elapsing_to = self._clock.elapsed + duration
        logger.debug("Elapsing from %s to %s", self._clock.elapsed, self._elapsing_to)
        try:
            with capture(self):
                self._fire_timers_while(self._is_within_elapse)
            self._clock.advance_to(self._elapsing_to)
        finally:
            self._elapsing_to = None

    def elapse_blocking(self, duration: DurationLike) -> None:
        """
        Simulate the synchronous passage of ``duration``, as from a blocking
        or expensive call.

        No timers or microtasks run. When called while elapse() is running,
        the in-flight horizon is pushed out so timers in the extra time
        still fire before that elapse() returns.

        Raises:
            InvalidArgumentError: If duration is negative
        """
        duration = self._check_duration(duration)
        self._clock.advance_by(duration)
        if self._elapsing_to is not None and self._clock.elapsed > self._elapsing_to:
            self._elapsing_to = self._clock.elapsed

    def flush_microtasks(self) -> None:
        """Run pending microtasks until none are left. Does not run timers."""
        with capture(self):
            self._microtasks.drain_all()

    def flush_timers(
        self,
        timeout: Optional[DurationLike] = None,
        flush_periodic_timers: Optional[bool] = None,
        *,
        options: Optional[FlushOptions] = None,
    ) -> None:
        """
        Elapse time until there are no more timers to fire.

        Args:
            timeout: How much virtual time may pass before giving up.
                Defaults to one hour.
            flush_periodic_timers: If True (the default), keep running
                periodic timers until they are canceled. If False, stop once
                only periodic timers remain and each has had a chance to run
                at the final elapsed time.
            options: A prebuilt FlushOptions, instead of the two arguments

        Raises:
            FlushTimeoutError: If a timer would fire after the timeout
            InvalidArgumentError: If options is combined with the other arguments
        """
        if options is None:
            options = FlushOptions(
                timeout=DEFAULT_FLUSH_TIMEOUT if timeout is None else timeout,
                flush_periodic_timers=(
                    True if flush_periodic_timers is None else flush_periodic_timers
                ),
            )
        elif timeout is not None or flush_periodic_timers is not None:
            raise InvalidArgumentError(
                "Pass either options or timeout/flush_periodic_timers, not both"
            )

        timeout_limit = options.timeout
        flush_periodic = options.flush_periodic_timers
        absolute_timeout = self._clock.elapsed + timeout_limit

        def should_fire(entry: TimerEntry) -> bool:
            if entry.next_fire > absolute_timeout:
                logger.warning(
                    "Timer %d due at %s is past the flush limit %s",
                    entry.id,
                    entry.next_fire,
                    absolute_timeout,
                )
                raise FlushTimeoutError(
                    f"Exceeded timeout {timeout_limit} while flushing timers"
                )

            if flush_periodic:
                return not self._timers.is_empty()

            # Keep going until only periodic timers are left *and* each of
            # them has run against the final elapsed time.
            return any(
                not pending.is_periodic or pending.next_fire <= self._clock.elapsed
                for pending in self._timers
            )

        with capture(self):
            self._fire_timers_while(should_fire)
        logger.debug(
            "Flushed timers at %s, %d periodic still active",
            self._clock.elapsed,
            self.periodic_timer_count,
        )

    def create_timer(
        self, delay: DurationLike, callback: Callable[[], None]
    ) -> TimerHandle:
        delay = max(as_duration(delay), ZERO)
        entry = self._timers.create(self._clock.elapsed + delay, OneShot(callback))
        return entry.handle

    def create_periodic_timer(
        self, period: DurationLike, callback: Callable[[TimerHandle], None]
    ) -> TimerHandle:
        period = max(as_duration(period), ZERO)
        entry = self._timers.create(
            self._clock.elapsed + period, Periodic(callback, period)
        )
        return entry.handle

    def schedule_microtask(self, callback: Callable[[], None]) -> None:
        self._microtasks.enqueue(callback)

    def _is_within_elapse(self, entry: TimerEntry) -> bool:
        # Read live: elapse_blocking() may push the horizon out mid-loop.
        assert self._elapsing_to is not None
        return entry.next_fire <= self._elapsing_to

    def _fire_timers_while(self, predicate: Callable[[TimerEntry], bool]) -> None:
        """
        Fire the earliest timer until ``predicate`` rejects it.

        Microtasks are flushed before and after each timer fires, and the
        clock is moved to each timer's fire time before it runs.
        """
        self._microtasks.drain_all()
        while not self._timers.is_empty():
            entry = self._timers.earliest()
            if not predicate(entry):
                break

            self._clock.advance_to(entry.next_fire)
            self._fire(entry)
            self._microtasks.drain_all()

    def _fire(self, entry: TimerEntry) -> None:
        logger.debug("Firing timer %d at %s", entry.id, self._clock.elapsed)
        kind = entry.kind
        if isinstance(kind, Periodic):
            kind.callback(entry.handle)
            entry.next_fire += kind.period
        else:
            # Deactivate first so the callback sees its own timer as inactive.
            self._timers.remove(entry.id)
            kind.callback()

    @staticmethod
    def _check_duration(duration: DurationLike) -> timedelta:
        duration = as_duration(duration)
        if duration < ZERO:
            raise InvalidArgumentError(f"Duration may not be negative: {duration}")
        return duration
