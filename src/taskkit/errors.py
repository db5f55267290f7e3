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


"""Structured errors for taskkit.

Every error raised by taskkit itself carries a ``TK-NAMED-KEY`` code, a
message, and an optional hint. Errors raised by the operations that
taskkit runs are never wrapped: after retries are exhausted (or a retry
predicate declines) the caller sees the operation's own exception
object.

Error kinds::

    ┌─────────────────────────┬──────────────────────────┬──────────────────┐
    │ Class                   │ Code                     │ Also a           │
    ├─────────────────────────┼──────────────────────────┼──────────────────┤
    │ InvalidArgumentError    │ TK-INVALID-ARGUMENT      │ ValueError       │
    │ WaitTimeoutError        │ TK-WAIT-TIMEOUT          │ TimeoutError     │
    │ OperationTimeoutError   │ TK-OPERATION-TIMEOUT     │ TimeoutError     │
    │ TaskKitError            │ TK-CONFIG-*, TK-COMMAND-*│ Exception        │
    └─────────────────────────┴──────────────────────────┴──────────────────┘

Because the timeout errors subclass the builtin :class:`TimeoutError`,
callers can catch them without importing taskkit.

Usage::

    from taskkit.errors import E, TaskKitError

    raise TaskKitError(
        code=E.CONFIG_INVALID_VALUE,
        message="'concurrency' must be >= 1, got 0",
        hint='Set concurrency to a positive integer in taskkit.toml.',
    )
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

from rich.console import Console
from rich.markup import escape as rich_escape


class ErrorCode(str, Enum):
    """All taskkit diagnostic codes."""

    INVALID_ARGUMENT = 'TK-INVALID-ARGUMENT'

    WAIT_TIMEOUT = 'TK-WAIT-TIMEOUT'
    OPERATION_TIMEOUT = 'TK-OPERATION-TIMEOUT'

    CONFIG_NOT_FOUND = 'TK-CONFIG-NOT-FOUND'
    CONFIG_INVALID_KEY = 'TK-CONFIG-INVALID-KEY'
    CONFIG_INVALID_VALUE = 'TK-CONFIG-INVALID-VALUE'

    COMMAND_FAILED = 'TK-COMMAND-FAILED'


E = ErrorCode


@dataclass(frozen=True)
class ErrorInfo:
    """Code, message and hint for one error.

    Attributes:
        code: The ``TK-NAMED-KEY`` error code.
        message: Human-readable description of what went wrong.
        hint: Optional suggestion for how to fix the error.
    """

    code: ErrorCode
    message: str
    hint: str = ''


class TaskKitError(Exception):
    """Base exception for all errors raised by taskkit itself.

    Args:
        code: The error code from :class:`ErrorCode`.
        message: Human-readable description of what went wrong.
        hint: Optional suggestion for how to fix the error.
    """

    def __init__(self, code: ErrorCode, message: str, hint: str = '') -> None:
        """Initialize with an error code, message, and optional hint."""
        self.info = ErrorInfo(code=code, message=message, hint=hint)
        super().__init__(f'[{code.value}] {message}')

    @property
    def code(self) -> ErrorCode:
        """The error code."""
        return self.info.code

    @property
    def hint(self) -> str:
        """Suggestion for fixing this error, or empty string."""
        return self.info.hint


class InvalidArgumentError(TaskKitError, ValueError):
    """A helper was called with a malformed argument (limit, count, delay)."""

    def __init__(self, message: str, hint: str = '') -> None:
        """Initialize with a message; the code is always ``TK-INVALID-ARGUMENT``."""
        super().__init__(E.INVALID_ARGUMENT, message, hint)


class TaskTimeoutError(TaskKitError, TimeoutError):
    """A timing budget elapsed before the awaited work finished."""


class WaitTimeoutError(TaskTimeoutError):
    """:func:`taskkit.waiting.wait_for` gave up on its condition."""

    def __init__(self, timeout: float) -> None:
        """Initialize with the timeout that elapsed, in seconds."""
        self.timeout = timeout
        super().__init__(
            E.WAIT_TIMEOUT,
            f'Condition not met within {timeout:g}s',
            'Increase the timeout or check that the condition can become true.',
        )


class OperationTimeoutError(TaskTimeoutError):
    """:func:`taskkit.timing.with_timeout` cancelled a slow operation."""

    def __init__(self, timeout: float) -> None:
        """Initialize with the timeout that elapsed, in seconds."""
        self.timeout = timeout
        super().__init__(E.OPERATION_TIMEOUT, f'Operation timed out after {timeout:g}s')


def require(condition: bool, message: str, hint: str = '') -> None:
    """Raise :class:`InvalidArgumentError` with *message* unless *condition*."""
    if not condition:
        raise InvalidArgumentError(message, hint)


ERRORS: dict[ErrorCode, ErrorInfo] = {
    E.INVALID_ARGUMENT: ErrorInfo(
        code=E.INVALID_ARGUMENT,
        message='A helper was called with a malformed argument.',
        hint='Concurrency and attempt counts must be >= 1; delays and timeouts must be >= 0.',
    ),
    E.WAIT_TIMEOUT: ErrorInfo(
        code=E.WAIT_TIMEOUT,
        message='A polled condition did not become true before the timeout.',
        hint='Raise the timeout, or check that the condition can ever become true.',
    ),
    E.OPERATION_TIMEOUT: ErrorInfo(
        code=E.OPERATION_TIMEOUT,
        message='An operation did not finish in time and was cancelled.',
        hint='Raise the timeout or make the operation faster.',
    ),
    E.CONFIG_NOT_FOUND: ErrorInfo(
        code=E.CONFIG_NOT_FOUND,
        message='taskkit.toml exists but could not be read.',
        hint='Check the file permissions, or remove the file to use the built-in defaults.',
    ),
    E.CONFIG_INVALID_KEY: ErrorInfo(
        code=E.CONFIG_INVALID_KEY,
        message='taskkit.toml contains an unknown key.',
        hint="Run 'taskkit config' to list the supported keys and their values.",
    ),
    E.CONFIG_INVALID_VALUE: ErrorInfo(
        code=E.CONFIG_INVALID_VALUE,
        message='A configuration value has the wrong type or is out of range.',
        hint='Check taskkit.toml and the TASKKIT_* environment variables.',
    ),
    E.COMMAND_FAILED: ErrorInfo(
        code=E.COMMAND_FAILED,
        message='A command run by taskkit could not be started.',
        hint='Check that the executable exists and is on PATH.',
    ),
}


def explain(code: str) -> str | None:
    """Catalog text for *code*, as printed by ``taskkit explain``.

    Codes are matched case-insensitively, so ``tk-wait-timeout`` works.
    Returns ``None`` for anything that is not a taskkit code.
    """
    try:
        info = ERRORS[ErrorCode(code.strip().upper())]
    except ValueError:
        return None
    text = f'{info.code.value}: {info.message}'
    return f'{text}\n  Hint: {info.hint}' if info.hint else text


def render_error(exc: TaskKitError, *, file: TextIO | None = None) -> None:
    """Render an error compiler-style, colored when *file* is a TTY.

    Output format::

        error[TK-WAIT-TIMEOUT]: Condition not met within 10s
          |
          = hint: Increase the timeout or check that the condition can become true.

    Args:
        exc: The error to render.
        file: Output stream (defaults to ``sys.stderr``).
    """
    out = file or sys.stderr

    if out.isatty():
        console = Console(file=out, highlight=False)
        msg = rich_escape(exc.info.message)
        console.print(f'[bold red]error\\[{exc.code.value}][/bold red][bold]: {msg}[/bold]')
        if exc.hint:
            console.print('  [dim]|[/dim]')
            console.print(f'  [dim]=[/dim] [cyan]hint[/cyan]: {rich_escape(exc.hint)}')
        return

    print(f'error[{exc.code.value}]: {exc.info.message}', file=out)  # noqa: T201 - CLI output
    if exc.hint:
        print('  |', file=out)  # noqa: T201 - CLI output
        print(f'  = hint: {exc.hint}', file=out)  # noqa: T201 - CLI output


__all__ = [
    'E',
    'ERRORS',
    'ErrorCode',
    'ErrorInfo',
    'InvalidArgumentError',
    'OperationTimeoutError',
    'TaskKitError',
    'TaskTimeoutError',
    'WaitTimeoutError',
    'explain',
    'render_error',
    'require',
]
