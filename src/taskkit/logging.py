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


"""Structured logging for taskkit.

taskkit never configures logging on import. The helpers emit debug-level
structlog events under the ``taskkit`` logger hierarchy; they stay
silent until an application (or the ``taskkit`` CLI) calls
:func:`configure_logging`.

Events::

    ┌────────────────────────┬───────────────────┬──────────────────────────┐
    │ Event                  │ Logger            │ Context keys             │
    ├────────────────────────┼───────────────────┼──────────────────────────┤
    │ retry_scheduled        │ taskkit.retry     │ operation, attempt,      │
    │                        │                   │ max_attempts, delay      │
    │ siblings_cancelled     │ taskkit.runner    │ count                    │
    │ debounce_rescheduled   │ taskkit.limiters  │ operation, waiting       │
    │ wait_timed_out         │ taskkit.waiting   │ condition, timeout       │
    │ operation_timed_out    │ taskkit.timing    │ timeout                  │
    │ command_failed         │ taskkit.cli       │ command, returncode      │
    └────────────────────────┴───────────────────┴──────────────────────────┘

``verbose`` lowers only the ``taskkit`` loggers to DEBUG. The root logger
stays at INFO, so asyncio's own debug chatter does not drown out the
retry trace. Output goes to stderr; stdout belongs to the commands that
``taskkit retry`` runs.

Usage::

    from taskkit.logging import configure_logging

    configure_logging(verbose=True)  # show every retry_scheduled event
"""

from __future__ import annotations

import logging
import sys

import structlog

ROOT_LOGGER = 'taskkit'


def _renderer(json_log: bool) -> structlog.types.Processor:
    if json_log:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    json_log: bool = False,
) -> None:
    """Send taskkit events to stderr.

    Calling it again replaces the previous setup.

    Args:
        verbose: Include taskkit's debug events.
        quiet: Warnings and errors only. Overrides *verbose*.
        json_log: One JSON object per line instead of console output.
    """
    logging.basicConfig(
        format='%(message)s',
        stream=sys.stderr,
        level=logging.WARNING if quiet else logging.INFO,
        force=True,
    )
    logging.getLogger(ROOT_LOGGER).setLevel(logging.DEBUG if verbose and not quiet else logging.NOTSET)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt='iso'),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(json_log),
        ],
    )
    for handler in logging.root.handlers:
        handler.setFormatter(formatter)


def get_logger(name: str = ROOT_LOGGER) -> structlog.stdlib.BoundLogger:
    """Logger for one taskkit module; pass ``__name__``."""
    return structlog.get_logger(name)


__all__ = [
    'ROOT_LOGGER',
    'configure_logging',
    'get_logger',
]
