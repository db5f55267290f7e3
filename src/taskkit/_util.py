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


"""Helpers shared by the taskkit modules."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar, Union

T = TypeVar('T')

# A zero-argument unit of work: an async function, a callable returning an
# awaitable, or a plain sync callable.
Task = Callable[[], Union[Awaitable[T], T]]  # noqa: UP007 - evaluated at runtime


async def call_maybe_async(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:  # noqa: ANN401 - passthrough
    """Call *fn* and await the result if it is awaitable.

    Lambdas returning coroutines, ``functools.partial`` objects over async
    functions and plain sync callables all work the same way.
    """
    result = fn(*args, **kwargs)
    if inspect.isawaitable(result):
        return await result
    return result


def describe(fn: object) -> str:
    """Short name for *fn* used in log events."""
    return getattr(fn, '__qualname__', None) or getattr(fn, '__name__', None) or type(fn).__name__
