# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Deterministic fake time for testing timer and microtask driven code.

Provides FakeAsync, a scheduler that captures delayed, periodic and
zero-delay work and runs it only when a test advances virtual time.
"""

from importlib import metadata

from .boundary import (
    capture,
    CaptureBoundary,
    create_periodic_timer,
    create_timer,
    current_boundary,
    schedule_microtask,
)
from .clock import FakeClock, VirtualClock
from .config import DEFAULT_FLUSH_TIMEOUT, FlushOptions
from .errors import (
    FakeAsyncError,
    FlushTimeoutError,
    IllegalStateError,
    InvalidArgumentError,
    UnimplementedError,
)
from .scheduler import FakeAsync
from .timers import TimerHandle

try:
    __version__ = metadata.version("fake-async")
except metadata.PackageNotFoundError:  # pragma: no cover - local dev
    __version__ = "0.0.0"

__all__ = [
    "capture",
    "CaptureBoundary",
    "create_periodic_timer",
    "create_timer",
    "current_boundary",
    "DEFAULT_FLUSH_TIMEOUT",
    "FakeAsync",
    "FakeAsyncError",
    "FakeClock",
    "FlushOptions",
    "FlushTimeoutError",
    "IllegalStateError",
    "InvalidArgumentError",
    "schedule_microtask",
    "TimerHandle",
    "UnimplementedError",
    "VirtualClock",
]
