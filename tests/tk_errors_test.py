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


"""Tests for taskkit.errors."""

from __future__ import annotations

import dataclasses
import io

import pytest
from taskkit.errors import (
    ERRORS,
    E,
    ErrorCode,
    ErrorInfo,
    InvalidArgumentError,
    OperationTimeoutError,
    TaskKitError,
    TaskTimeoutError,
    WaitTimeoutError,
    explain,
    render_error,
    require,
)


class TestErrorCode:
    """Tests for ErrorCode enum."""

    def test_all_codes_have_tk_prefix(self) -> None:
        """Every error code must start with 'TK-'."""
        for code in ErrorCode:
            assert code.value.startswith('TK-'), f'{code.name} does not start with TK-'

    def test_no_duplicate_values(self) -> None:
        """Error code values must be unique."""
        values = [c.value for c in ErrorCode]
        assert len(values) == len(set(values))

    def test_e_alias(self) -> None:
        """E is an alias for ErrorCode."""
        assert E is ErrorCode
        assert E.WAIT_TIMEOUT is ErrorCode.WAIT_TIMEOUT


class TestErrorInfo:
    """Tests for ErrorInfo dataclass."""

    def test_frozen(self) -> None:
        """ErrorInfo instances are immutable."""
        info = ErrorInfo(code=E.INVALID_ARGUMENT, message='test')
        with pytest.raises(dataclasses.FrozenInstanceError):
            info.message = 'changed'  # type: ignore[misc]

    def test_default_hint(self) -> None:
        """Hint defaults to an empty string."""
        assert ErrorInfo(code=E.INVALID_ARGUMENT, message='test').hint == ''


class TestTaskKitError:
    """Tests for the exception hierarchy."""

    def test_message_includes_code(self) -> None:
        """str() carries the code and the message."""
        err = TaskKitError(code=E.CONFIG_INVALID_KEY, message='bad key', hint='fix it')
        assert str(err) == '[TK-CONFIG-INVALID-KEY] bad key'
        assert err.code is E.CONFIG_INVALID_KEY
        assert err.hint == 'fix it'

    def test_invalid_argument_is_value_error(self) -> None:
        """InvalidArgumentError can be caught as ValueError."""
        err = InvalidArgumentError('concurrency must be >= 1')
        assert isinstance(err, ValueError)
        assert isinstance(err, TaskKitError)
        assert err.code is E.INVALID_ARGUMENT

    @pytest.mark.parametrize(
        ('err', 'code'),
        [
            (WaitTimeoutError(1.5), E.WAIT_TIMEOUT),
            (OperationTimeoutError(2), E.OPERATION_TIMEOUT),
        ],
    )
    def test_timeouts_are_builtin_timeouts(self, err: TaskTimeoutError, code: ErrorCode) -> None:
        """Timeout errors are TimeoutErrors carrying their own code."""
        assert isinstance(err, TimeoutError)
        assert isinstance(err, TaskKitError)
        assert err.code is code
        assert code.value in str(err)

    def test_wait_timeout_message(self) -> None:
        """The message names the timeout."""
        assert 'within 1.5s' in str(WaitTimeoutError(1.5))


class TestRequire:
    """Tests for require()."""

    def test_passes(self) -> None:
        """A true condition does nothing."""
        require(True, 'unused')

    def test_raises(self) -> None:
        """A false condition raises InvalidArgumentError with the message and hint."""
        with pytest.raises(InvalidArgumentError, match='limit must be positive') as excinfo:
            require(False, 'limit must be positive', 'use 1 or more')
        assert excinfo.value.hint == 'use 1 or more'


class TestExplain:
    """Tests for explain()."""

    def test_known_code(self) -> None:
        """A catalogued code gets its message and hint."""
        text = explain('TK-WAIT-TIMEOUT')
        assert text is not None
        assert text.startswith('TK-WAIT-TIMEOUT: ')
        assert 'Hint:' in text

    def test_every_code_is_catalogued(self) -> None:
        """Each error code has a catalog entry under its own code."""
        for code in ErrorCode:
            assert ERRORS[code].code is code
            assert explain(code.value) is not None

    def test_config_not_found(self) -> None:
        """An unreadable config file has its own explanation."""
        text = explain('TK-CONFIG-NOT-FOUND')
        assert text is not None
        assert 'could not be read' in text

    def test_case_insensitive(self) -> None:
        """Lower-case codes are accepted."""
        assert explain(' tk-wait-timeout ') == explain('TK-WAIT-TIMEOUT')

    def test_unknown_code(self) -> None:
        """Unknown codes return None."""
        assert explain('TK-NOPE') is None


class TestRenderError:
    """Tests for render_error()."""

    def test_plain_output(self) -> None:
        """Non-TTY output is plain text with the hint below."""
        out = io.StringIO()
        render_error(TaskKitError(E.CONFIG_INVALID_KEY, "Unknown key 'x'", "Did you mean 'y'?"), file=out)
        assert out.getvalue().splitlines() == [
            "error[TK-CONFIG-INVALID-KEY]: Unknown key 'x'",
            '  |',
            "  = hint: Did you mean 'y'?",
        ]

    def test_plain_output_without_hint(self) -> None:
        """Without a hint only the error line is printed."""
        out = io.StringIO()
        render_error(OperationTimeoutError(3), file=out)
        assert out.getvalue() == 'error[TK-OPERATION-TIMEOUT]: Operation timed out after 3s\n'
