# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""Pydantic models for scheduler configuration."""

from datetime import timedelta

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_FLUSH_TIMEOUT = timedelta(hours=1)


class FlushOptions(BaseModel):
    """Options controlling FakeAsync.flush_timers()."""

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        frozen=True,
    )

    timeout: timedelta = Field(
        default=DEFAULT_FLUSH_TIMEOUT,
        description=(
            "How much virtual time may elapse before flushing gives up. "
            "Numbers are read as seconds."
        ),
    )
    flush_periodic_timers: bool = Field(
        default=True,
        description=(
            "Keep firing periodic timers until they are canceled. When false, "
            "stop once only periodic timers remain and each has run at the "
            "final elapsed time."
        ),
    )
