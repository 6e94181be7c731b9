# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""FIFO queue of zero-delay callbacks."""

from collections import deque
from typing import Callable, Deque

Microtask = Callable[[], None]


class MicrotaskQueue:
    """Pending microtasks in the order they were scheduled.

    The queue is unbounded. Code that keeps scheduling microtasks from inside
    microtasks will make drain_all() run forever, the same way it would starve
    a real event loop.
    """

    def __init__(self) -> None:
        self._pending: Deque[Microtask] = deque()

    def enqueue(self, callback: Microtask) -> None:
        self._pending.append(callback)

    def drain_all(self) -> None:
        """Run microtasks until none are left, including newly scheduled ones."""
        while self._pending:
            callback = self._pending.popleft()
            callback()

    def __len__(self) -> int:
        return len(self._pending)
