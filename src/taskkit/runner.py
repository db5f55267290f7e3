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


"""Running many tasks: bounded concurrency and strict sequencing.

Key Concepts::

    ┌──────────────────┬──────────────────────────────────────────────────┐
    │ Helper           │ Behavior                                         │
    ├──────────────────┼──────────────────────────────────────────────────┤
    │ concurrent()     │ At most C tasks in flight. Results in submission │
    │                  │ order. First failure cancels the rest.           │
    ├──────────────────┼──────────────────────────────────────────────────┤
    │ sequence()       │ One task at a time, in order. First failure      │
    │                  │ stops the run; later tasks never start.          │
    └──────────────────┴──────────────────────────────────────────────────┘

Bounded runner::

    tasks:  t0   t1   t2   t3   t4   t5      concurrency = 2
             │    │    │    │    │    │
             ▼    ▼    ▼    ▼    ▼    ▼
           ┌─────────────────────────────┐
           │        Semaphore(2)         │   slot free ──▶ invoke task
           └─────────────────────────────┘
             │    │
             ▼    ▼
           results[i] = value of tasks[i]

A task is a zero-argument callable. It is not invoked until it holds a
slot, so no more than C operations ever exist at once. Failure
propagates the task's own exception after every sibling has been
cancelled and has finished unwinding.

Usage::

    from taskkit.runner import concurrent

    pages = await concurrent([lambda u=u: fetch(u) for u in urls], concurrency=3)
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import Any, TypeVar

from taskkit._util import Task, call_maybe_async
from taskkit.config import get_config
from taskkit.errors import require
from taskkit.logging import get_logger

logger = get_logger(__name__)

T = TypeVar('T')


async def concurrent(tasks: Iterable[Task[T]], concurrency: int | None = None) -> list[T]:
    """Run *tasks* with at most *concurrency* of them in flight.

    Args:
        tasks: Zero-argument callables; sync callables and callables
            returning awaitables are accepted.
        concurrency: Ceiling on simultaneously running tasks. Defaults
            to ``TaskKitConfig.concurrency``.

    Returns:
        One result per task, ``results[i]`` belonging to ``tasks[i]``.

    Raises:
        InvalidArgumentError: If *concurrency* is not an int >= 1.
        Exception: The first exception raised by a task, unchanged.
    """
    limit = get_config().concurrency if concurrency is None else concurrency
    require(
        isinstance(limit, int) and not isinstance(limit, bool) and limit >= 1,
        f'concurrency must be an int >= 1, got {limit!r}',
        'A limit of 0 would never start a task.',
    )

    pending = list(tasks)
    if not pending:
        return []

    semaphore = asyncio.Semaphore(limit)
    failed = asyncio.Event()

    async def _run(task: Task[T]) -> T:
        async with semaphore:
            # A slot freed by a failing task must not start the next one.
            if failed.is_set():
                raise asyncio.CancelledError
            try:
                return await call_maybe_async(task)
            except Exception:
                failed.set()
                raise

    futures: list[asyncio.Future[Any]] = [asyncio.ensure_future(_run(task)) for task in pending]
    try:
        done, not_done = await asyncio.wait(futures, return_when=asyncio.FIRST_EXCEPTION)
        if not_done:
            logger.debug('siblings_cancelled', count=len(not_done))
            for future in not_done:
                future.cancel()
            await asyncio.gather(*not_done, return_exceptions=True)
        for future in futures:
            if future in done and not future.cancelled() and future.exception() is not None:
                raise future.exception()  # type: ignore[misc]
        return [future.result() for future in futures]
    finally:
        for future in futures:
            if not future.done():
                future.cancel()


async def sequence(tasks: Iterable[Task[T]]) -> list[T]:
    """Run *tasks* one after another, in order.

    Each task is invoked only after the previous one finished. The first
    exception propagates unchanged and the remaining tasks are skipped.

    Returns:
        The results in submission order.
    """
    results: list[T] = []
    for task in tasks:
        results.append(await call_maybe_async(task))
    return results


__all__ = [
    'concurrent',
    'sequence',
]
