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


"""Tests for the taskkit CLI."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
from taskkit import __version__
from taskkit.cli import build_parser, main


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every command from an empty directory with no TASKKIT_* overrides."""
    monkeypatch.chdir(tmp_path)
    for name in ('CONCURRENCY', 'MAX_ATTEMPTS', 'BASE_DELAY', 'POLL_INTERVAL', 'WAIT_TIMEOUT'):
        monkeypatch.delenv(f'TASKKIT_{name}', raising=False)


def _counting_script(counter: Path, succeed_on: int, fail_code: int = 3) -> list[str]:
    """A Python one-liner that exits non-zero until it has run `succeed_on` times."""
    code = (
        'import pathlib, sys\n'
        f'p = pathlib.Path({str(counter)!r})\n'
        'n = int(p.read_text()) + 1 if p.exists() else 1\n'
        'p.write_text(str(n))\n'
        f'sys.exit(0 if n >= {succeed_on} else {fail_code})\n'
    )
    return [sys.executable, '-c', code]


class TestParser:
    """Tests for build_parser()."""

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        """--version prints the package version."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(['--version'])
        assert __version__ in capsys.readouterr().out

    def test_no_command(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Running without a subcommand prints help and exits 2."""
        assert main([]) == 2
        assert 'please provide a command' in capsys.readouterr().err


class TestExplain:
    """Tests for ``taskkit explain``."""

    def test_known(self, capsys: pytest.CaptureFixture[str]) -> None:
        """A known code is explained."""
        assert main(['explain', 'TK-INVALID-ARGUMENT']) == 0
        assert capsys.readouterr().out.startswith('TK-INVALID-ARGUMENT: ')

    def test_config_not_found(self, capsys: pytest.CaptureFixture[str]) -> None:
        """The unreadable-config code has a real explanation."""
        assert main(['explain', 'TK-CONFIG-NOT-FOUND']) == 0
        assert 'No detailed explanation' not in capsys.readouterr().out

    def test_unknown(self, capsys: pytest.CaptureFixture[str]) -> None:
        """An unknown code exits 1."""
        assert main(['explain', 'TK-WHAT']) == 1
        assert 'Unknown error code' in capsys.readouterr().out


class TestConfig:
    """Tests for ``taskkit config``."""

    def test_json(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """--json prints the effective config as JSON."""
        (tmp_path / 'taskkit.toml').write_text('concurrency = 4\n', encoding='utf-8')
        assert main(['config', '--root', str(tmp_path), '--json']) == 0
        data = json.loads(capsys.readouterr().out)
        assert data['concurrency'] == 4
        assert data['max_attempts'] == 3

    def test_text(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Plain output lists one key per line."""
        assert main(['config']) == 0
        out = capsys.readouterr().out
        assert 'concurrency' in out
        assert 'wait_timeout' in out

    def test_invalid_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """A bad config file is rendered as an error and exits 1."""
        (tmp_path / 'taskkit.toml').write_text('concurency = 4\n', encoding='utf-8')
        assert main(['config']) == 1
        assert 'TK-CONFIG-INVALID-KEY' in capsys.readouterr().err


class TestRetry:
    """Tests for ``taskkit retry``."""

    def test_succeeds_after_failures(self, tmp_path: Path) -> None:
        """A command that fails twice succeeds on the third attempt."""
        counter = tmp_path / 'count'
        argv = ['retry', '--attempts', '3', '--base-delay', '0', '--', *_counting_script(counter, 3)]
        assert main(argv) == 0
        assert counter.read_text() == '3'

    def test_returns_last_exit_code(self, tmp_path: Path) -> None:
        """When every attempt fails, the command's exit code is returned."""
        counter = tmp_path / 'count'
        argv = ['retry', '--attempts', '2', '--base-delay', '0', '--', *_counting_script(counter, 99, 7)]
        assert main(argv) == 7
        assert counter.read_text() == '2'

    def test_missing_executable(self, capsys: pytest.CaptureFixture[str]) -> None:
        """A command that cannot start is reported once, without retrying."""
        assert main(['retry', '--base-delay', '0', '--', 'taskkit-no-such-binary-xyz']) == 1
        assert 'TK-COMMAND-FAILED' in capsys.readouterr().err

    def test_no_command(self, capsys: pytest.CaptureFixture[str]) -> None:
        """retry without a command exits 2."""
        assert main(['retry']) == 2
        assert 'no command given' in capsys.readouterr().err

    def test_invalid_attempts(self, capsys: pytest.CaptureFixture[str]) -> None:
        """A zero attempt budget is rejected."""
        assert main(['retry', '--attempts', '0', '--', sys.executable, '-c', 'pass']) == 1
        assert 'TK-INVALID-ARGUMENT' in capsys.readouterr().err


class TestWait:
    """Tests for ``taskkit wait``."""

    def test_existing_path(self, tmp_path: Path) -> None:
        """An existing path returns immediately."""
        target = tmp_path / 'ready'
        target.touch()
        assert main(['wait', str(target), '--timeout', '1']) == 0

    def test_timeout(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """A path that never appears times out with exit code 1."""
        target = tmp_path / 'never'
        assert main(['wait', str(target), '--interval', '0.01', '--timeout', '0.05']) == 1
        assert 'TK-WAIT-TIMEOUT' in capsys.readouterr().err
