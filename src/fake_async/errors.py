# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Exceptions raised by the fake_async scheduler.

Each error also derives from the closest builtin exception so callers can
catch either the package type or the familiar builtin family.
"""


class FakeAsyncError(Exception):
    """Base class for all fake_async errors."""

    pass


class InvalidArgumentError(FakeAsyncError, ValueError):
    """Raised when a negative duration is passed to elapse or elapse_blocking."""

    pass


class IllegalStateError(FakeAsyncError, RuntimeError):
    """Raised when elapse is called while another elapse is still running."""

    pass


class FlushTimeoutError(FakeAsyncError, TimeoutError):
    """Raised when flush_timers would have to wait past its timeout."""

    pass


class UnimplementedError(FakeAsyncError, NotImplementedError):
    """Raised when accessing a timer attribute that fake timers do not track."""

    pass
