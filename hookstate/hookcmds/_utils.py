# Copyright 2026 Canonical Ltd.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from __future__ import annotations

import dataclasses
import json
import subprocess
from typing import Any, Sequence

from .._private import yaml
from ..errors import DecodeFailure, IoFailure, ParseFailure


class Error(IoFailure):
    """Raised when a hook command exits with a non-zero code."""

    returncode: int
    """Exit status of the child process."""

    cmd: list[str]
    """The full command that was run."""

    stdout: str = ''
    """Stdout output of the child process."""

    stderr: str = ''
    """Stderr output of the child process."""

    def __init__(self, *, returncode: int, cmd: list[str], stdout: str = '', stderr: str = ''):
        self.returncode = returncode
        self.cmd = cmd
        self.stdout = stdout
        self.stderr = stderr
        message = f'command {cmd!r} exited with status {returncode}'
        if stderr and stderr.strip():
            message = f'{message}: {stderr.strip()}'
        super().__init__(message)


@dataclasses.dataclass(frozen=True)
class CommandResult:
    """The outcome of running a hook command with :func:`run_command`."""

    returncode: int
    stdout: bytes
    stderr: bytes

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _argv(name: str, args: Sequence[str], elevated: bool) -> list[str]:
    argv = [name, *args]
    if elevated:
        argv.insert(0, 'sudo')
    return argv


def run_command(name: str, args: Sequence[str] = (), *, elevated: bool = False) -> CommandResult:
    """Run a hook command and capture its output, whatever its exit status.

    Args:
        name: the command to run, resolved through ``PATH``.
        args: the arguments to pass, in order.
        elevated: run the command through ``sudo``.

    Raises:
        IoFailure: if the command could not be started at all.
    """
    argv = _argv(name, args, elevated)
    try:
        result = subprocess.run(argv, capture_output=True, check=False)
    except OSError as e:
        raise IoFailure(f'unable to run {name!r}: {e}') from e
    return CommandResult(returncode=result.returncode, stdout=result.stdout, stderr=result.stderr)


def run(
    *args: str,
    input: str | None = None,
    elevated: bool = False,
) -> str:
    argv = _argv(args[0], args[1:], elevated)
    try:
        result = subprocess.run(
            argv, capture_output=True, check=True, encoding='utf-8', input=input
        )
    except subprocess.CalledProcessError as e:
        raise Error(returncode=e.returncode, cmd=e.cmd, stdout=e.stdout, stderr=e.stderr) from None
    except OSError as e:
        raise IoFailure(f'unable to run {args[0]!r}: {e}') from e
    return result.stdout


def loads(stdout: str) -> Any:
    """Decode the output of a hook command run with ``--format=json``."""
    try:
        return json.loads(stdout)
    except json.JSONDecodeError as e:
        raise DecodeFailure(f'invalid JSON from hook command: {stdout!r}') from e


def yaml_loads(stdout: str) -> Any:
    """Decode the output of a hook command run with ``--format=yaml``."""
    try:
        return yaml.safe_load(stdout)
    except yaml.YAMLError as e:
        raise DecodeFailure(f'invalid YAML from hook command: {stdout!r}') from e


def parse_int(value: str, what: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise ParseFailure(f'invalid {what}: {value!r}') from e


def to_str(value: Any) -> str:
    """Render a scalar config value as the flat string form kept in snapshots."""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return to_str(value)


def optional(stdout: str) -> str | None:
    """Strip plain-text command output, mapping empty output to ``None``."""
    return stdout.strip() or None
