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
import logging
import subprocess
import sys
import warnings
from typing import Any, Generator

import pytest

# Call and Run are heavily based on the mocks of the same names in Jubilant:
# https://github.com/canonical/jubilant/blob/main/tests/unit/mocks.py


@dataclasses.dataclass(frozen=True)
class Call:
    args: tuple[str, ...]
    returncode: int
    stdin: str | None
    stdout: str
    stderr: str


class Run:
    """Mock for subprocess.run.

    When subprocess.run is called, the mock returns a subprocess.CompletedProcess
    instance with data passed to :meth:`handle` for those command-line arguments.
    Or, if returncode is nonzero and ``check`` is set, it raises a
    subprocess.CalledProcessError.

    Output is returned as str when an encoding is requested, and as bytes
    otherwise, like the real subprocess.run.
    """

    def __init__(self):
        self._commands: dict[tuple[str, ...], tuple[int, str, str]] = {}
        self.calls: list[Call] = []

    def handle(self, args: list[str], *, returncode: int = 0, stdout: str = '', stderr: str = ''):
        """Handle specified command-line args with the given return code, stdout, and stderr."""
        self._commands[tuple(args)] = (returncode, stdout, stderr)

    def __call__(
        self,
        args: list[str],
        check: bool = False,
        capture_output: bool = False,
        encoding: str | None = None,
        input: str | None = None,
    ) -> subprocess.CompletedProcess[Any]:
        args_tuple = tuple(args)
        assert capture_output is True
        assert args_tuple in self._commands, f'unhandled command {args}'

        returncode, stdout, stderr = self._commands[args_tuple]
        self.calls.append(
            Call(args=args_tuple, returncode=returncode, stdin=input, stdout=stdout, stderr=stderr)
        )
        out: Any = stdout
        err: Any = stderr
        if encoding is None:
            out = stdout.encode()
            err = stderr.encode()
        if check and returncode != 0:
            raise subprocess.CalledProcessError(
                returncode=returncode,
                cmd=args,
                output=out,
                stderr=err,
            )
        return subprocess.CompletedProcess(
            args=args,
            returncode=returncode,
            stdout=out,
            stderr=err,
        )


@pytest.fixture
def run(monkeypatch: pytest.MonkeyPatch) -> Generator[Run]:
    """Pytest fixture that patches subprocess.run with Run."""
    run_mock = Run()
    monkeypatch.setattr('subprocess.run', run_mock)

    yield run_mock


@pytest.fixture
def root_logger() -> Generator[logging.Logger]:
    """The root logger, with handlers and the excepthook restored afterwards."""
    logger = logging.getLogger()
    handlers = list(logger.handlers)
    level = logger.level
    showwarning = warnings.showwarning
    yield logger
    warnings.showwarning = showwarning
    logger.handlers[:] = handlers
    logger.setLevel(level)
    sys.excepthook = sys.__excepthook__
