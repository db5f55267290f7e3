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


"""Configuration for taskkit defaults.

Every helper that takes a ``None`` default (concurrency ceiling, attempt
budget, backoff base, poll interval, wait timeout) resolves it from the
active :class:`TaskKitConfig`. The active config is loaded lazily from
an optional ``taskkit.toml`` in the working directory plus ``TASKKIT_*``
environment variables, or installed explicitly with :func:`set_config`.

Resolution order (later wins)::

    TaskKitConfig() defaults
            │
            ▼
    taskkit.toml (flat keys)  ──── unknown key ──▶ TK-CONFIG-INVALID-KEY
            │                                      (with "did you mean?")
            ▼
    TASKKIT_* environment     ──── bad value  ───▶ TK-CONFIG-INVALID-VALUE
            │
            ▼
    validated, frozen TaskKitConfig

Supported keys in ``taskkit.toml``::

    concurrency   = 5      # ceiling for taskkit.runner.concurrent
    max_attempts  = 3      # attempt budget for taskkit.retry
    base_delay    = 1.0    # seconds before the first retry
    poll_interval = 0.1    # seconds between wait_for checks
    wait_timeout  = 10.0   # seconds before wait_for gives up

Usage::

    from taskkit.config import load_config, set_config

    set_config(load_config(Path('/srv/app')))
"""

from __future__ import annotations

import dataclasses
import difflib
import math
import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import tomlkit
import tomlkit.exceptions

from taskkit.errors import E, TaskKitError
from taskkit.logging import get_logger

logger = get_logger(__name__)

CONFIG_FILENAME = 'taskkit.toml'


class EnvVar(str, Enum):
    """Environment variables that override ``taskkit.toml``."""

    CONCURRENCY = 'TASKKIT_CONCURRENCY'
    MAX_ATTEMPTS = 'TASKKIT_MAX_ATTEMPTS'
    BASE_DELAY = 'TASKKIT_BASE_DELAY'
    POLL_INTERVAL = 'TASKKIT_POLL_INTERVAL'
    WAIT_TIMEOUT = 'TASKKIT_WAIT_TIMEOUT'


@dataclass(frozen=True)
class TaskKitConfig:
    """Validated defaults for the taskkit helpers.

    Attributes:
        concurrency: Maximum in-flight tasks for ``concurrent``.
        max_attempts: Attempt budget for ``retry`` and ``retry_on_error``.
        base_delay: Seconds to wait after the first failed attempt.
        poll_interval: Seconds between ``wait_for`` checks.
        wait_timeout: Seconds before ``wait_for`` raises.
        config_path: The ``taskkit.toml`` that was loaded, if any.
    """

    concurrency: int = 5
    max_attempts: int = 3
    base_delay: float = 1.0
    poll_interval: float = 0.1
    wait_timeout: float = 10.0
    config_path: Path | None = None


# key -> (expected type, env var, minimum, minimum is exclusive)
_FIELDS: dict[str, tuple[type, EnvVar, float, bool]] = {
    'concurrency': (int, EnvVar.CONCURRENCY, 1, False),
    'max_attempts': (int, EnvVar.MAX_ATTEMPTS, 1, False),
    'base_delay': (float, EnvVar.BASE_DELAY, 0, False),
    'poll_interval': (float, EnvVar.POLL_INTERVAL, 0, True),
    'wait_timeout': (float, EnvVar.WAIT_TIMEOUT, 0, False),
}

VALID_KEYS: frozenset[str] = frozenset(_FIELDS)


def _check_value(key: str, value: Any, source: str) -> int | float:  # noqa: ANN401 - raw TOML/env value
    """Type- and range-check one value, returning it normalized."""
    expected, _, minimum, exclusive = _FIELDS[key]
    # bool is an int subclass; `concurrency = true` is a mistake, not 1.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TaskKitError(
            code=E.CONFIG_INVALID_VALUE,
            message=f"'{key}' must be {expected.__name__}, got {type(value).__name__}",
            hint=f'Check the value of {key} in {source}.',
        )
    if expected is int and not isinstance(value, int):
        raise TaskKitError(
            code=E.CONFIG_INVALID_VALUE,
            message=f"'{key}' must be int, got float",
            hint=f'Use a whole number for {key} in {source}.',
        )
    if not math.isfinite(value):
        raise TaskKitError(
            code=E.CONFIG_INVALID_VALUE,
            message=f"'{key}' must be a finite number, got {value}",
            hint=f'Fix {key} in {source}.',
        )
    too_small = value <= minimum if exclusive else value < minimum
    if too_small:
        bound = f'> {minimum:g}' if exclusive else f'>= {minimum:g}'
        raise TaskKitError(
            code=E.CONFIG_INVALID_VALUE,
            message=f"'{key}' must be {bound}, got {value}",
            hint=f'Fix {key} in {source}.',
        )
    return expected(value)


def _read_file(config_path: Path) -> dict[str, Any]:
    try:
        text = config_path.read_text(encoding='utf-8')
    except OSError as exc:
        raise TaskKitError(
            code=E.CONFIG_NOT_FOUND,
            message=f'Failed to read {config_path}: {exc}',
        ) from exc

    try:
        doc = tomlkit.parse(text)
    except tomlkit.exceptions.TOMLKitError as exc:
        raise TaskKitError(
            code=E.CONFIG_INVALID_VALUE,
            message=f'Failed to parse {config_path}: {exc}',
        ) from exc

    raw = doc.unwrap()
    for key in raw:
        if key not in VALID_KEYS:
            suggestion = difflib.get_close_matches(key, VALID_KEYS, n=1, cutoff=0.6)
            hint = f"Did you mean '{suggestion[0]}'?" if suggestion else f'Valid keys: {", ".join(sorted(VALID_KEYS))}.'
            raise TaskKitError(
                code=E.CONFIG_INVALID_KEY,
                message=f"Unknown key '{key}' in {CONFIG_FILENAME}",
                hint=hint,
            )
    return {key: _check_value(key, value, CONFIG_FILENAME) for key, value in raw.items()}


def _read_env(environ: Mapping[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for key, (expected, env_var, _, _) in _FIELDS.items():
        text = environ.get(env_var.value)
        if text is None or not text.strip():
            continue
        try:
            parsed = expected(text.strip())
        except ValueError as exc:
            raise TaskKitError(
                code=E.CONFIG_INVALID_VALUE,
                message=f'{env_var.value} must be {expected.__name__}, got {text!r}',
            ) from exc
        values[key] = _check_value(key, parsed, env_var.value)
    return values


def load_config(root: Path | None = None, *, environ: Mapping[str, str] | None = None) -> TaskKitConfig:
    """Load and validate configuration.

    Args:
        root: Directory to look for ``taskkit.toml`` in. Defaults to the
            current working directory. A missing file is not an error.
        environ: Environment mapping to read ``TASKKIT_*`` overrides
            from. Defaults to :data:`os.environ`.

    Returns:
        A validated :class:`TaskKitConfig`.

    Raises:
        TaskKitError: If the file or environment contains invalid config.
    """
    config_path = (root or Path.cwd()) / CONFIG_FILENAME
    values: dict[str, Any] = {}

    if config_path.is_file():
        values.update(_read_file(config_path))
    else:
        logger.debug('no_taskkit_config', path=str(config_path))
        config_path = None

    values.update(_read_env(os.environ if environ is None else environ))
    return TaskKitConfig(**values, config_path=config_path)


_active: TaskKitConfig | None = None


def get_config() -> TaskKitConfig:
    """Return the active config, loading it on first use."""
    global _active
    if _active is None:
        _active = load_config()
    return _active


def set_config(config: TaskKitConfig) -> None:
    """Install *config* as the active config for all helpers."""
    global _active
    _active = config


def reset_config() -> None:
    """Forget the active config so the next lookup reloads it."""
    global _active
    _active = None


def as_dict(config: TaskKitConfig) -> dict[str, Any]:
    """Return *config* as a JSON-friendly dict."""
    data = dataclasses.asdict(config)
    data['config_path'] = str(config.config_path) if config.config_path else None
    return data


__all__ = [
    'CONFIG_FILENAME',
    'VALID_KEYS',
    'EnvVar',
    'TaskKitConfig',
    'as_dict',
    'get_config',
    'load_config',
    'reset_config',
    'set_config',
]
