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


"""taskkit: asyncio helpers for running, retrying, rate limiting and waiting.

Usage::

    from taskkit import concurrent, retry, wait_for

    results = await concurrent([lambda: fetch(1), lambda: fetch(2)], concurrency=2)
    body = await retry(lambda: fetch(3), max_attempts=5, base_delay=0.5)
    await wait_for(lambda: cache.ready, timeout=30)
"""

from taskkit.deferred import Deferred, create_deferred
from taskkit.errors import (
    InvalidArgumentError,
    OperationTimeoutError,
    TaskKitError,
    TaskTimeoutError,
    WaitTimeoutError,
)
from taskkit.limiters import (
    Debounced,
    Throttled,
    debounce,
    debounce_async,
    throttle,
    throttle_async,
)
from taskkit.retry import retry, retry_on_error
from taskkit.runner import concurrent, sequence
from taskkit.timing import Measurement, delay, measure_time, with_timeout
from taskkit.waiting import wait_for

__version__ = '0.1.0'

__all__ = [
    'Debounced',
    'Deferred',
    'InvalidArgumentError',
    'Measurement',
    'OperationTimeoutError',
    'TaskKitError',
    'TaskTimeoutError',
    'Throttled',
    'WaitTimeoutError',
    '__version__',
    'concurrent',
    'create_deferred',
    'debounce',
    'debounce_async',
    'delay',
    'measure_time',
    'retry',
    'retry_on_error',
    'sequence',
    'throttle',
    'throttle_async',
    'wait_for',
    'with_timeout',
]
