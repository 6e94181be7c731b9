# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Capture boundary between code under test and the fake scheduler.

Runtimes and application code that want their timers and microtasks to be
controllable call the functions in this module instead of scheduling work on
a real clock. The boundary in effect is held in a context variable, so
installing one with capture() (or FakeAsync.run()) only affects the current
context and is undone when the block exits.

Example:
    >>> from fake_async import FakeAsync, boundary
    >>>
    >>> def poll(fake):
    ...     boundary.create_timer(timedelta(seconds=5), lambda: print("timeout"))
    ...
    >>> fake = FakeAsync()
    >>> fake.run(poll)
    >>> fake.elapse(timedelta(seconds=5))
    timeout
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Callable, Iterator, Optional, TYPE_CHECKING

from .clock import DurationLike
from .errors import IllegalStateError

if TYPE_CHECKING:
    from .timers import TimerHandle


class CaptureBoundary(ABC):
    """The three scheduling hooks a runtime calls instead of its native ones."""

    @abstractmethod
    def create_timer(
        self, delay: DurationLike, callback: Callable[[], None]
    ) -> TimerHandle:
        """Schedule ``callback`` to run once after ``delay``.

        Args:
            delay: Virtual delay; negative values are treated as zero
            callback: Zero-argument callable

        Returns:
            Handle that can cancel the timer
        """
        ...

    @abstractmethod
    def create_periodic_timer(
        self, period: DurationLike, callback: Callable[[TimerHandle], None]
    ) -> TimerHandle:
        """Schedule ``callback`` to run every ``period`` until canceled.

        Args:
            period: Virtual interval; negative values are treated as zero
            callback: Callable receiving the timer's handle

        Returns:
            Handle that can cancel the timer
        """
        ...

    @abstractmethod
    def schedule_microtask(self, callback: Callable[[], None]) -> None:
        """Queue ``callback`` to run before any further timer fires."""
        ...


_current_boundary: ContextVar[Optional[CaptureBoundary]] = ContextVar(
    "fake_async_boundary", default=None
)


def current_boundary() -> Optional[CaptureBoundary]:
    """Return the boundary installed in this context, if any."""
    return _current_boundary.get()


@contextmanager
def capture(target: CaptureBoundary) -> Iterator[CaptureBoundary]:
    """Install ``target`` as the current boundary for the duration of the block."""
    token = _current_boundary.set(target)
    try:
        yield target
    finally:
        _current_boundary.reset(token)


def _require_boundary() -> CaptureBoundary:
    target = _current_boundary.get()
    if target is None:
        raise IllegalStateError(
            "No capture boundary installed; call this from inside FakeAsync.run()"
        )
    return target


def create_timer(delay: DurationLike, callback: Callable[[], None]) -> TimerHandle:
    """Create a one-shot timer on the current boundary."""
    return _require_boundary().create_timer(delay, callback)


def create_periodic_timer(
    period: DurationLike, callback: Callable[[TimerHandle], None]
) -> TimerHandle:
    """Create a periodic timer on the current boundary."""
    return _require_boundary().create_periodic_timer(period, callback)


def schedule_microtask(callback: Callable[[], None]) -> None:
    """Schedule a microtask on the current boundary."""
    _require_boundary().schedule_microtask(callback)
