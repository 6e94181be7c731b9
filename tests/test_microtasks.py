# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""Tests for MicrotaskQueue."""

from fake_async.microtasks import MicrotaskQueue


class TestMicrotaskQueue:
    """Tests for FIFO draining."""

    def test_runs_in_insertion_order(self):
        """Microtasks run in the order they were enqueued."""
        queue = MicrotaskQueue()
        ran = []
        for i in range(3):
            queue.enqueue(lambda i=i: ran.append(i))

        queue.drain_all()

        assert ran == [0, 1, 2]
        assert len(queue) == 0

    def test_drains_microtasks_scheduled_while_draining(self):
        """Microtasks added by a running microtask also run before drain_all returns."""
        queue = MicrotaskQueue()
        ran = []

        def first():
            ran.append("first")
            queue.enqueue(lambda: ran.append("nested"))

        queue.enqueue(first)
        queue.enqueue(lambda: ran.append("second"))
        queue.drain_all()

        assert ran == ["first", "second", "nested"]

    def test_drain_on_empty_queue_is_noop(self):
        """Draining an empty queue does nothing."""
        queue = MicrotaskQueue()
        queue.drain_all()
        assert len(queue) == 0

    def test_len_counts_pending(self):
        """len() reports how many microtasks are waiting."""
        queue = MicrotaskQueue()
        queue.enqueue(lambda: None)
        queue.enqueue(lambda: None)
        assert len(queue) == 2
