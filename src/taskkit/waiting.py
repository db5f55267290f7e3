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


"""Poll a condition until it holds or a timeout elapses."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from taskkit import timing
from taskkit._util import call_maybe_async, describe
from taskkit.config import get_config
from taskkit.errors import WaitTimeoutError, require
from taskkit.logging import get_logger

logger = get_logger(__name__)


async def wait_for(
    condition: Callable[[], bool | Awaitable[bool]],
    interval: float | None = None,
    timeout: float | None = None,
) -> None:
    """Return once *condition* is truthy.

    The condition is checked immediately and then every *interval*
    seconds. Between checks the task sleeps; nothing spins.

    Args:
        condition: Zero-argument predicate, sync or async.
        interval: Seconds between checks. Defaults to
            ``TaskKitConfig.poll_interval``.
        timeout: Give up once more than this many seconds have passed at
            a failed check. Defaults to ``TaskKitConfig.wait_timeout``.

    Raises:
        WaitTimeoutError: If the timeout elapsed first.
        InvalidArgumentError: If *interval* <= 0 or *timeout* < 0.
        Exception: Anything *condition* raises, unchanged.
    """
    cfg = get_config()
    interval = cfg.poll_interval if interval is None else interval
    timeout = cfg.wait_timeout if timeout is None else timeout
    require(interval > 0, f'interval must be > 0, got {interval}')
    require(timeout >= 0, f'timeout must be >= 0, got {timeout}')

    loop = asyncio.get_running_loop()
    started = loop.time()
    checks = 0
    while True:
        checks += 1
        if await call_maybe_async(condition):
            return
        if loop.time() - started > timeout:
            logger.debug('wait_timed_out', condition=describe(condition), timeout=timeout, checks=checks)
            raise WaitTimeoutError(timeout)
        await timing.delay(interval)


__all__ = [
    'wait_for',
]
