# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0


"""Shared fixtures for taskkit tests."""

from __future__ import annotations

from collections.abc import Generator

import pytest
from taskkit.config import TaskKitConfig, reset_config, set_config
from taskkit.logging import configure_logging

configure_logging(quiet=True)


@pytest.fixture(autouse=True)
def _default_config() -> Generator[None]:
    """Pin the built-in defaults so a stray taskkit.toml or TASKKIT_* env var can't leak in."""
    set_config(TaskKitConfig())
    yield
    reset_config()
