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


"""Debounce and throttle wrappers.

Each wrapper owns its state; nothing is shared between two wrapped
functions, and all state changes happen inside a single event-loop step,
so no locks are needed.

Async wrappers::

    debounce_async(fn, 0.3)

        call(a) ─┐
        call(b) ─┼─ each call restarts the 0.3s timer
        call(c) ─┘
                    ... 0.3s of quiet ...
                    fn(c) runs once ──▶ a, b and c callers all get its outcome

    throttle_async(fn, 1.0)

        call(a) ──▶ fn(a) starts ─────────────── settles
        call(b) ──▶ shares fn(a)   (inside window, fn(a) still running)
        call(c) ──▶ fn(c) starts   (window elapsed, or nothing in flight)

Sync wrappers (:func:`debounce`, :func:`throttle`) do the same for plain
callables whose result nobody waits for: a debounced call is scheduled
on the running loop, a throttled call inside the window is dropped.

Both async wrappers return awaitables synchronously, so the call order
is the order the calls were made, not the order in which their
awaitables happen to be awaited.
"""

from __future__ import annotations

import asyncio
import functools
import time
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

from taskkit._util import call_maybe_async, describe
from taskkit.errors import require
from taskkit.logging import get_logger

logger = get_logger(__name__)

R = TypeVar('R')


class Debounced(Generic[R]):
    """Trailing-edge async debounce of *fn* by *wait* seconds.

    Calling the wrapper returns a future. Every future handed out during
    one quiet period settles with the outcome of the same single
    execution, which uses the arguments of the last call.

    Must be called while an event loop is running.
    """

    def __init__(self, fn: Callable[..., Awaitable[R] | R], wait: float) -> None:
        require(wait >= 0, f'debounce wait must be >= 0, got {wait}')
        self._fn = fn
        self._wait = wait
        self._timer: asyncio.TimerHandle | None = None
        self._waiters: list[asyncio.Future[R]] = []
        self._args: tuple[Any, ...] = ()
        self._kwargs: dict[str, Any] = {}
        self._running: set[asyncio.Task[None]] = set()
        functools.update_wrapper(self, fn)

    @property
    def pending(self) -> bool:
        """Whether an execution is scheduled and waiting for quiet."""
        return self._timer is not None

    def __call__(self, *args: Any, **kwargs: Any) -> asyncio.Future[R]:  # noqa: ANN401 - forwarded to fn
        loop = asyncio.get_running_loop()
        if self._timer is not None:
            self._timer.cancel()
            logger.debug('debounce_rescheduled', operation=describe(self._fn), waiting=len(self._waiters))
        self._args, self._kwargs = args, kwargs
        waiter: asyncio.Future[R] = loop.create_future()
        self._waiters.append(waiter)
        self._timer = loop.call_later(self._wait, self._fire)
        return waiter

    def cancel(self) -> None:
        """Drop the scheduled execution and cancel every waiting caller."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        waiters, self._waiters = self._waiters, []
        for waiter in waiters:
            waiter.cancel()

    def _fire(self) -> None:
        self._timer = None
        waiters, self._waiters = self._waiters, []
        task = asyncio.ensure_future(self._execute(waiters, self._args, self._kwargs))
        self._running.add(task)
        task.add_done_callback(self._running.discard)

    async def _execute(
        self,
        waiters: list[asyncio.Future[R]],
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> None:
        try:
            result = await call_maybe_async(self._fn, *args, **kwargs)
        except asyncio.CancelledError:
            for waiter in waiters:
                waiter.cancel()
            raise
        except BaseException as exc:
            for waiter in waiters:
                if not waiter.done():
                    waiter.set_exception(exc)
            # Exit requests such as KeyboardInterrupt keep propagating.
            if not isinstance(exc, Exception):
                raise
        else:
            for waiter in waiters:
                if not waiter.done():
                    waiter.set_result(result)


class Throttled(Generic[R]):
    """Async throttle of *fn* by *wait* seconds.

    The first call starts an execution immediately. A call made within
    *wait* seconds of the last start, while that execution is still in
    flight, shares its outcome instead of starting another. Otherwise
    the call starts a fresh execution.

    Callers share the execution through :func:`asyncio.shield`, so one
    caller giving up does not cancel it for the others.

    Must be called while an event loop is running.
    """

    def __init__(self, fn: Callable[..., Awaitable[R] | R], wait: float) -> None:
        require(wait >= 0, f'throttle wait must be >= 0, got {wait}')
        self._fn = fn
        self._wait = wait
        self._last_start: float | None = None
        self._in_flight: asyncio.Future[R] | None = None
        functools.update_wrapper(self, fn)

    @property
    def in_flight(self) -> bool:
        """Whether an execution started by this wrapper is still running."""
        return self._in_flight is not None

    def __call__(self, *args: Any, **kwargs: Any) -> asyncio.Future[R]:  # noqa: ANN401 - forwarded to fn
        loop = asyncio.get_running_loop()
        now = loop.time()
        if (
            self._in_flight is not None
            and self._last_start is not None
            and now - self._last_start < self._wait
        ):
            return asyncio.shield(self._in_flight)

        self._last_start = now
        execution: asyncio.Future[R] = asyncio.ensure_future(call_maybe_async(self._fn, *args, **kwargs))
        self._in_flight = execution
        execution.add_done_callback(self._settled)
        return asyncio.shield(execution)

    def _settled(self, execution: asyncio.Future[R]) -> None:
        if self._in_flight is execution:
            self._in_flight = None


def debounce_async(fn: Callable[..., Awaitable[R] | R], wait: float) -> Debounced[R]:
    """Wrap *fn* in a :class:`Debounced`."""
    return Debounced(fn, wait)


def throttle_async(fn: Callable[..., Awaitable[R] | R], wait: float) -> Throttled[R]:
    """Wrap *fn* in a :class:`Throttled`."""
    return Throttled(fn, wait)


def debounce(fn: Callable[..., Any], wait: float) -> Callable[..., None]:
    """Fire-and-forget trailing debounce for a sync callable.

    Each call reschedules *fn* to run *wait* seconds later on the running
    loop with the latest arguments. Must be called from inside a running
    event loop.
    """
    require(wait >= 0, f'debounce wait must be >= 0, got {wait}')
    timer: asyncio.TimerHandle | None = None

    @functools.wraps(fn)
    def debounced(*args: Any, **kwargs: Any) -> None:  # noqa: ANN401 - forwarded to fn
        nonlocal timer
        if timer is not None:
            timer.cancel()
        timer = asyncio.get_running_loop().call_later(wait, functools.partial(fn, *args, **kwargs))

    return debounced


def throttle(fn: Callable[..., Any], wait: float) -> Callable[..., None]:
    """Leading-edge throttle for a sync callable.

    Runs *fn* at once if at least *wait* seconds passed since it last
    ran; otherwise the call is dropped. Works with or without a loop.
    """
    require(wait >= 0, f'throttle wait must be >= 0, got {wait}')
    last_run: float | None = None

    @functools.wraps(fn)
    def throttled(*args: Any, **kwargs: Any) -> None:  # noqa: ANN401 - forwarded to fn
        nonlocal last_run
        now = time.monotonic()
        if last_run is not None and now - last_run < wait:
            return
        last_run = now
        fn(*args, **kwargs)

    return throttled


__all__ = [
    'Debounced',
    'Throttled',
    'debounce',
    'debounce_async',
    'throttle',
    'throttle_async',
]
