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


"""CLI entry point for taskkit.

Subcommands::

    taskkit explain   Explain an error code
    taskkit config    Show the effective configuration
    taskkit retry     Run a command, retrying non-zero exits with backoff
    taskkit wait      Wait for a path to appear

Usage::

    # Retry a flaky command up to 5 times, 0.5s, 1s, 2s, 4s apart:
    taskkit retry --attempts 5 --base-delay 0.5 -- curl -fsS https://example.com/health

    # Block until a file shows up, at most 60 seconds:
    taskkit wait /tmp/ready --timeout 60
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from rich_argparse import RichHelpFormatter

from taskkit import __version__
from taskkit.config import as_dict, load_config, set_config
from taskkit.errors import E, TaskKitError, explain, render_error
from taskkit.logging import configure_logging, get_logger
from taskkit.retry import retry_on_error
from taskkit.waiting import wait_for

logger = get_logger(__name__)


class _NonZeroExit(Exception):
    """A command run by ``taskkit retry`` exited with a non-zero code."""

    def __init__(self, returncode: int) -> None:
        self.returncode = returncode
        super().__init__(f'command exited with code {returncode}')


def _cmd_explain(args: argparse.Namespace) -> int:
    """Handle the ``explain`` subcommand."""
    result = explain(args.code)
    if result is None:
        print(f'Unknown error code: {args.code}')  # noqa: T201 - CLI output
        return 1
    print(result)  # noqa: T201 - CLI output
    return 0


def _cmd_config(args: argparse.Namespace) -> int:
    """Handle the ``config`` subcommand."""
    config = load_config(args.root)
    data = as_dict(config)
    if args.json:
        print(json.dumps(data, indent=2))  # noqa: T201 - CLI output
        return 0
    width = max(len(key) for key in data)
    for key, value in data.items():
        print(f'{key.ljust(width)} = {value}')  # noqa: T201 - CLI output
    return 0


async def _run_command(command: list[str]) -> int:
    """Run *command* once, raising :class:`_NonZeroExit` on failure."""
    try:
        proc = await asyncio.create_subprocess_exec(*command)
    except OSError as exc:
        raise TaskKitError(
            code=E.COMMAND_FAILED,
            message=f'Could not start {command[0]!r}: {exc.strerror or exc}',
            hint='Check that the executable exists and is on PATH.',
        ) from exc
    returncode = await proc.wait()
    if returncode != 0:
        raise _NonZeroExit(returncode)
    return returncode


async def _cmd_retry(args: argparse.Namespace) -> int:
    """Handle the ``retry`` subcommand."""
    command = list(args.cmd)
    if command and command[0] == '--':
        command = command[1:]
    if not command:
        print('taskkit retry: error: no command given', file=sys.stderr)  # noqa: T201 - CLI output
        return 2

    cfg = load_config()
    set_config(cfg)
    attempts = cfg.max_attempts if args.attempts is None else args.attempts
    base_delay = cfg.base_delay if args.base_delay is None else args.base_delay

    try:
        return await retry_on_error(
            lambda: _run_command(command),
            lambda exc: isinstance(exc, _NonZeroExit),
            max_attempts=attempts,
            base_delay=base_delay,
            max_delay=args.max_delay,
        )
    except _NonZeroExit as exc:
        logger.warning('command_failed', command=command, attempts=attempts, returncode=exc.returncode)
        return exc.returncode


async def _cmd_wait(args: argparse.Namespace) -> int:
    """Handle the ``wait`` subcommand."""
    set_config(load_config())
    target = Path(args.path)
    await wait_for(target.exists, interval=args.interval, timeout=args.timeout)
    logger.info('path_ready', path=str(target))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser.

    Returns:
        Configured :class:`argparse.ArgumentParser`.
    """
    RichHelpFormatter.styles['argparse.groups'] = 'bold yellow'
    parser = argparse.ArgumentParser(
        prog='taskkit',
        description='Asyncio helpers for running, retrying and waiting.',
        formatter_class=RichHelpFormatter,
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--verbose', '-v', action='store_true', help='Show debug events, including each retry.')
    parser.add_argument('--quiet', '-q', action='store_true', help='Only show warnings and errors.')
    parser.add_argument('--json-log', action='store_true', help='Log JSON lines to stderr.')

    subparsers = parser.add_subparsers(dest='command')

    explain_parser = subparsers.add_parser('explain', help='Explain an error code.')
    explain_parser.add_argument('code', help='Error code, e.g. TK-WAIT-TIMEOUT.')

    config_parser = subparsers.add_parser('config', help='Show the effective configuration.')
    config_parser.add_argument(
        '--root',
        type=Path,
        default=None,
        help='Directory containing taskkit.toml (default: current directory).',
    )
    config_parser.add_argument('--json', action='store_true', help='Print JSON.')

    retry_parser = subparsers.add_parser(
        'retry',
        help='Run a command, retrying non-zero exits with exponential backoff.',
    )
    retry_parser.add_argument('--attempts', type=int, default=None, help='Total attempts (default: config).')
    retry_parser.add_argument(
        '--base-delay',
        type=float,
        default=None,
        help='Seconds before the first retry; doubles each time (default: config).',
    )
    retry_parser.add_argument('--max-delay', type=float, default=None, help='Cap on each wait, in seconds.')
    retry_parser.add_argument('cmd', nargs=argparse.REMAINDER, help='Command to run, after --.')

    wait_parser = subparsers.add_parser('wait', help='Wait for a path to exist.')
    wait_parser.add_argument('path', help='File or directory to wait for.')
    wait_parser.add_argument('--interval', type=float, default=None, help='Seconds between checks.')
    wait_parser.add_argument('--timeout', type=float, default=None, help='Seconds before giving up.')

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet, json_log=args.json_log)

    try:
        command = args.command
        if command == 'explain':
            return _cmd_explain(args)
        if command == 'config':
            return _cmd_config(args)
        if command == 'retry':
            return asyncio.run(_cmd_retry(args))
        if command == 'wait':
            return asyncio.run(_cmd_wait(args))

        parser.print_help()
        print(f'\n{parser.prog}: error: please provide a command', file=sys.stderr)  # noqa: T201 - CLI output
        return 2

    except TaskKitError as exc:
        render_error(exc)
        return 1
    except KeyboardInterrupt:
        logger.info('interrupted')
        return 130


def _main() -> None:
    """Wrapper for the ``taskkit`` console script."""
    sys.exit(main())


__all__ = [
    'build_parser',
    'main',
]
