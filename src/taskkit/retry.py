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


"""Retry with exponential backoff.

Backoff schedule (``base_delay=1.0``, ``max_attempts=4``)::

    attempt 1 ──✗──▶ delay(1.0) ──▶ attempt 2 ──✗──▶ delay(2.0)
        ──▶ attempt 3 ──✗──▶ delay(4.0) ──▶ attempt 4 ──✗──▶ raise

    delay after attempt n = base_delay * 2 ** (n - 1)

The schedule is deterministic. ``max_delay`` caps each step and
``jitter=True`` spreads retries with full jitter
(``uniform(0, computed_delay)``), which helps when many callers retry
against the same dependency at once.

When the budget is spent, the exception from the last attempt is
re-raised as-is: same object, same traceback. :func:`retry_on_error`
additionally lets a predicate stop early on errors that retrying will
not fix.

Only :class:`Exception` subclasses are retried. Cancellation and
``KeyboardInterrupt`` propagate immediately.
"""

from __future__ import annotations

import random
from collections.abc import Callable
from typing import TypeVar

from taskkit import timing
from taskkit._util import Task, call_maybe_async, describe
from taskkit.config import get_config
from taskkit.errors import require
from taskkit.logging import get_logger

logger = get_logger(__name__)

T = TypeVar('T')

# 2.0 ** 1024 overflows a float.
_MAX_EXPONENT = 1023


def backoff_delay(
    attempt: int,
    base_delay: float,
    *,
    max_delay: float | None = None,
    jitter: bool = False,
) -> float:
    """Seconds to wait after failed attempt number *attempt* (1-based).

    The exponent stops growing at the largest finite power of two, so
    very long budgets keep returning a capped or huge delay instead of
    overflowing.
    """
    if base_delay == 0:
        return 0.0
    computed = base_delay * 2.0 ** min(attempt - 1, _MAX_EXPONENT)
    if max_delay is not None:
        computed = min(computed, max_delay)
    if jitter:
        computed = random.uniform(0, computed)  # noqa: S311 - not security-sensitive
    return computed


async def _attempt_loop(
    fn: Task[T],
    *,
    should_retry: Callable[[Exception], bool] | None,
    max_attempts: int | None,
    base_delay: float | None,
    max_delay: float | None,
    jitter: bool,
) -> T:
    cfg = get_config()
    attempts = cfg.max_attempts if max_attempts is None else max_attempts
    base = cfg.base_delay if base_delay is None else base_delay
    require(
        isinstance(attempts, int) and not isinstance(attempts, bool) and attempts >= 1,
        f'max_attempts must be an int >= 1, got {attempts!r}',
    )
    require(base >= 0, f'base_delay must be >= 0, got {base}')
    require(max_delay is None or max_delay >= 0, f'max_delay must be >= 0, got {max_delay}')

    attempt = 1
    while True:
        try:
            return await call_maybe_async(fn)
        except Exception as exc:
            if attempt >= attempts:
                raise
            if should_retry is not None and not should_retry(exc):
                raise
            wait = backoff_delay(attempt, base, max_delay=max_delay, jitter=jitter)
            logger.debug(
                'retry_scheduled',
                operation=describe(fn),
                attempt=attempt,
                max_attempts=attempts,
                delay=wait,
                error=repr(exc),
            )
            if wait > 0:
                await timing.delay(wait)
            attempt += 1


async def retry(
    fn: Task[T],
    max_attempts: int | None = None,
    base_delay: float | None = None,
    *,
    max_delay: float | None = None,
    jitter: bool = False,
) -> T:
    """Call *fn* until it succeeds or the attempt budget runs out.

    Args:
        fn: Zero-argument operation (async or sync).
        max_attempts: Total attempts including the first. Defaults to
            ``TaskKitConfig.max_attempts``.
        base_delay: Seconds to wait after the first failure; doubled
            after every further failure. Defaults to
            ``TaskKitConfig.base_delay``.
        max_delay: Optional cap on each wait.
        jitter: Apply full jitter to each wait.

    Returns:
        The first successful result.

    Raises:
        InvalidArgumentError: If *max_attempts* < 1 or a delay is negative.
            *fn* is not called.
        Exception: The last attempt's exception, unchanged.
    """
    return await _attempt_loop(
        fn,
        should_retry=None,
        max_attempts=max_attempts,
        base_delay=base_delay,
        max_delay=max_delay,
        jitter=jitter,
    )


async def retry_on_error(
    fn: Task[T],
    should_retry: Callable[[Exception], bool],
    max_attempts: int | None = None,
    *,
    base_delay: float = 0.0,
    max_delay: float | None = None,
    jitter: bool = False,
) -> T:
    """Like :func:`retry`, but only for errors *should_retry* accepts.

    When the predicate returns false the error propagates at once, no
    matter how many attempts are left. Attempts follow each other
    immediately unless *base_delay* is set.

    Example::

        await retry_on_error(
            lambda: client.get(url),
            lambda exc: isinstance(exc, ConnectionError),
            max_attempts=5,
        )
    """
    return await _attempt_loop(
        fn,
        should_retry=should_retry,
        max_attempts=max_attempts,
        base_delay=base_delay,
        max_delay=max_delay,
        jitter=jitter,
    )


__all__ = [
    'backoff_delay',
    'retry',
    'retry_on_error',
]
