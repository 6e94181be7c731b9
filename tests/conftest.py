# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Pytest configuration for fake_async tests.

This file adds the src directory to sys.path so that tests can import
fake_async without installing it, and provides shared fixtures.
"""

import sys
from pathlib import Path
from typing import List

import pytest

# Add src to path for tests to find the fake_async package
_src_path = str(Path(__file__).resolve().parent.parent / "src")
if _src_path not in sys.path:
    sys.path.insert(0, _src_path)

from fake_async import FakeAsync  # noqa: E402


@pytest.fixture
def fake() -> FakeAsync:
    """A fresh scheduler with no elapsed time and nothing pending."""
    return FakeAsync()


@pytest.fixture
def log() -> List[str]:
    """Ordered record of callbacks, appended to by the test."""
    return []
