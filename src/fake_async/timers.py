# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Fake timers and the registry that owns them.

Timers live in a registry keyed by an integer id assigned at creation. A
timer is active exactly while its id is in the registry; handles look the id
up instead of carrying their own state, so cancellation is visible
everywhere at once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from itertools import count
from typing import Callable, Dict, Iterator, Optional, Union

from .errors import UnimplementedError


@dataclass(frozen=True)
class OneShot:
    """Timer that fires once. The callback takes no arguments."""

    callback: Callable[[], None]


@dataclass(frozen=True)
class Periodic:
    """Timer that fires every ``period``. The callback receives the timer handle."""

    callback: Callable[["TimerHandle"], None]
    period: timedelta


TimerKind = Union[OneShot, Periodic]


@dataclass
class TimerEntry:
    """A single pending unit of delayed work."""

    id: int
    next_fire: timedelta
    kind: TimerKind
    handle: TimerHandle = field(repr=False)

    @property
    def is_periodic(self) -> bool:
        return isinstance(self.kind, Periodic)


class TimerHandle:
    """
    Handle returned to code that created a timer.

    Mirrors the small surface a runtime timer exposes: cancel() and is_active.
    """

    def __init__(self, timer_id: int, registry: TimerRegistry) -> None:
        self._id = timer_id
        self._registry = registry

    @property
    def id(self) -> int:
        return self._id

    @property
    def is_active(self) -> bool:
        return self._id in self._registry

    @property
    def tick(self) -> int:
        """Fake timers do not count their firings."""
        raise UnimplementedError("tick is not supported by fake timers")

    def cancel(self) -> None:
        """Cancel the timer. Canceling an inactive timer does nothing."""
        self._registry.remove(self._id)

    def __repr__(self) -> str:
        state = "active" if self.is_active else "inactive"
        return f"TimerHandle(id={self._id}, {state})"


class TimerRegistry:
    """The set of active timers, indexed by id."""

    def __init__(self) -> None:
        self._entries: Dict[int, TimerEntry] = {}
        self._ids: Iterator[int] = count()

    def create(self, next_fire: timedelta, kind: TimerKind) -> TimerEntry:
        """Allocate an id and a handle for a new timer and register it."""
        timer_id = next(self._ids)
        entry = TimerEntry(
            id=timer_id,
            next_fire=next_fire,
            kind=kind,
            handle=TimerHandle(timer_id, self),
        )
        self.insert(entry)
        return entry

    def insert(self, entry: TimerEntry) -> None:
        self._entries[entry.id] = entry

    def remove(self, timer_id: int) -> None:
        self._entries.pop(timer_id, None)

    def get(self, timer_id: int) -> Optional[TimerEntry]:
        return self._entries.get(timer_id)

    def earliest(self) -> TimerEntry:
        """
        Return the entry that fires next.

        Ties on next_fire go to the timer created first.

        Raises:
            ValueError: If the registry is empty
        """
        if not self._entries:
            raise ValueError("No active timers")
        return min(self._entries.values(), key=lambda entry: (entry.next_fire, entry.id))

    def is_empty(self) -> bool:
        return not self._entries

    def __contains__(self, timer_id: object) -> bool:
        return timer_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TimerEntry]:
        # Snapshot so callers may cancel while iterating.
        return iter(list(self._entries.values()))
