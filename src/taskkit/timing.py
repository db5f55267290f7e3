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


"""Timing helpers: the delay primitive, timeouts and elapsed-time measurement.

:func:`delay` is the single suspension point the other modules use for
waiting (retry backoff, ``wait_for`` polling), so tests can patch it in
one place per module.

Unlike a plain race between an operation and a timer, :func:`with_timeout`
cancels the operation when the budget runs out; nothing keeps running in
the background after the caller has been told it timed out.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Generic, TypeVar

from taskkit._util import Task, call_maybe_async
from taskkit.errors import OperationTimeoutError, require
from taskkit.logging import get_logger

logger = get_logger(__name__)

T = TypeVar('T')


async def delay(seconds: float) -> None:
    """Suspend the current task for *seconds*.

    Raises:
        InvalidArgumentError: If *seconds* is negative.
    """
    require(seconds >= 0, f'delay must be >= 0, got {seconds}')
    await asyncio.sleep(seconds)


async def with_timeout(aw: Awaitable[T], seconds: float) -> T:
    """Await *aw*, cancelling it if it takes longer than *seconds*.

    Args:
        aw: A coroutine, task or future.
        seconds: Time budget. ``0`` only succeeds for work that is
            already done.

    Returns:
        The result of *aw*.

    Raises:
        OperationTimeoutError: If the budget elapsed. *aw* has been
            cancelled by the time this is raised.
        InvalidArgumentError: If *seconds* is negative.
        Exception: Anything *aw* raises in time, unchanged, including
            its own :class:`TimeoutError`.
    """
    require(seconds >= 0, f'timeout must be >= 0, got {seconds}')
    operation = asyncio.ensure_future(aw)
    try:
        done, _ = await asyncio.wait({operation}, timeout=seconds)
    except asyncio.CancelledError:
        operation.cancel()
        raise
    if done:
        # The operation's own errors, TimeoutError included, pass through.
        return operation.result()

    logger.debug('operation_timed_out', timeout=seconds)
    operation.cancel()
    await asyncio.gather(operation, return_exceptions=True)
    raise OperationTimeoutError(seconds)


@dataclass(frozen=True)
class Measurement(Generic[T]):
    """Result of :func:`measure_time`. ``elapsed`` is in seconds."""

    result: T
    elapsed: float


async def measure_time(fn: Task[T]) -> Measurement[T]:
    """Run *fn* and report how long it took.

    Exceptions from *fn* propagate; nothing is measured for a failed run.
    """
    start = time.perf_counter()
    result = await call_maybe_async(fn)
    return Measurement(result, time.perf_counter() - start)


__all__ = [
    'Measurement',
    'delay',
    'measure_time',
    'with_timeout',
]
