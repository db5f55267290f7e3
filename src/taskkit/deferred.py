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


"""A future that code outside the awaiting task settles."""

from __future__ import annotations

import asyncio
from collections.abc import Generator
from typing import Any, Generic, TypeVar

T = TypeVar('T')


class Deferred(Generic[T]):
    """Wraps an :class:`asyncio.Future` with resolve/reject callbacks.

    Only the first settle counts. Later calls to :meth:`resolve` or
    :meth:`reject` (and settling after the future was cancelled) are
    ignored, so callbacks can be handed to several producers.

    Example::

        deferred = create_deferred()
        loop.call_later(1.0, deferred.resolve, 'ready')
        assert await deferred == 'ready'
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Create the backing future on *loop* (default: the running loop)."""
        self.future: asyncio.Future[T] = (loop or asyncio.get_running_loop()).create_future()

    @property
    def done(self) -> bool:
        """Whether the deferred has been resolved, rejected or cancelled."""
        return self.future.done()

    def resolve(self, value: T) -> bool:
        """Settle with *value*. Returns whether this call settled it."""
        if self.future.done():
            return False
        self.future.set_result(value)
        return True

    def reject(self, exc: BaseException) -> bool:
        """Settle with *exc*. Returns whether this call settled it."""
        if self.future.done():
            return False
        self.future.set_exception(exc)
        return True

    def __await__(self) -> Generator[Any, None, T]:
        return self.future.__await__()


def create_deferred() -> Deferred[Any]:
    """Create a :class:`Deferred` bound to the running loop."""
    return Deferred()


__all__ = [
    'Deferred',
    'create_deferred',
]
