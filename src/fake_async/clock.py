# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""Virtual clock for deterministic simulation."""

from datetime import datetime, timedelta
from typing import Union

ZERO = timedelta(0)

DurationLike = Union[timedelta, int, float]


def as_duration(value: DurationLike) -> timedelta:
    """Coerce a timedelta or a number of seconds into a timedelta."""
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(
            f"Expected a timedelta or a number of seconds, got {type(value).__name__}"
        )
    return timedelta(seconds=value)


class VirtualClock:
    """Elapsed virtual time since the owning scheduler was created.

    Only moves forward. The scheduler is the only writer.
    """

    def __init__(self) -> None:
        self._elapsed: timedelta = ZERO

    @property
    def elapsed(self) -> timedelta:
        return self._elapsed

    def now(self, base: datetime) -> datetime:
        return base + self._elapsed

    def advance_to(self, target: timedelta) -> None:
        """Move to ``target`` if it is later than the current value."""
        if target > self._elapsed:
            self._elapsed = target

    def advance_by(self, delta: timedelta) -> None:
        if delta < ZERO:
            raise ValueError("Cannot move the virtual clock backwards")
        self._elapsed += delta


class FakeClock:
    """
    Reads ``initial_time`` plus the scheduler's elapsed virtual time.

    The reader holds the live clock rather than a snapshot, so every call
    reflects elapse and elapse_blocking activity that happened since it was
    created.

    Example:
        >>> clock = fake.get_clock(datetime(2024, 1, 1))
        >>> fake.elapse(timedelta(minutes=5))
        >>> clock.now()
        datetime.datetime(2024, 1, 1, 0, 5)
    """

    def __init__(self, initial_time: datetime, clock: VirtualClock) -> None:
        self._initial_time = initial_time
        self._clock = clock

    @property
    def initial_time(self) -> datetime:
        return self._initial_time

    def now(self) -> datetime:
        """Return the current fake wall-clock time."""
        return self._clock.now(self._initial_time)

    def __call__(self) -> datetime:
        return self.now()

    def __repr__(self) -> str:
        return f"FakeClock(initial_time={self._initial_time!r}, now={self.now()!r})"
