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

import io
import logging
import re
import sys
import warnings
from unittest.mock import patch

import pytest

import hookstate.log

from .conftest import Run


class FakeJujuLog:
    def __init__(self):
        self._calls: list[tuple[str, str]] = []

    def calls(self, clear: bool = False):
        calls = self._calls
        if clear:
            self._calls = []
        return calls

    def __call__(self, level: str, message: str):
        for line in hookstate.log.log_split(message):
            self._calls.append((level, line))


@pytest.fixture
def juju_log() -> FakeJujuLog:
    return FakeJujuLog()


class TestLogging:
    @pytest.mark.parametrize(
        'message,result',
        [
            ('critical', ('CRITICAL', 'critical')),
            ('error', ('ERROR', 'error')),
            ('warning', ('WARNING', 'warning')),
            ('info', ('INFO', 'info')),
            ('debug', ('DEBUG', 'debug')),
        ],
    )
    def test_default_logging(
        self,
        juju_log: FakeJujuLog,
        root_logger: logging.Logger,
        message: str,
        result: tuple[str, str],
    ):
        hookstate.log.setup_root_logging(juju_log)
        assert root_logger.level == logging.DEBUG
        assert isinstance(root_logger.handlers[-1], hookstate.log.JujuLogHandler)

        method = getattr(root_logger, message)
        method(message)
        assert juju_log.calls(clear=True) == [result]

    def test_trace_level(self, juju_log: FakeJujuLog, root_logger: logging.Logger):
        hookstate.log.setup_root_logging(juju_log)
        root_logger.setLevel(hookstate.log.TRACE)
        root_logger.log(hookstate.log.TRACE, 'fine detail')
        assert juju_log.calls() == []

        handler = root_logger.handlers[-1]
        handler.setLevel(hookstate.log.TRACE)
        root_logger.log(hookstate.log.TRACE, 'fine detail')
        assert juju_log.calls() == [('TRACE', 'fine detail')]

    def test_handler_filtering(self, juju_log: FakeJujuLog, root_logger: logging.Logger):
        root_logger.setLevel(logging.INFO)
        root_logger.addHandler(hookstate.log.JujuLogHandler(juju_log, logging.WARNING))
        root_logger.info('foo')
        assert juju_log.calls() == []
        root_logger.warning('bar')
        assert juju_log.calls() == [('WARNING', 'bar')]

    def test_no_stderr_without_debug(self, juju_log: FakeJujuLog, root_logger: logging.Logger):
        buffer = io.StringIO()
        with patch('sys.stderr', buffer):
            hookstate.log.setup_root_logging(juju_log, debug=False)
            root_logger.debug('debug message')
            root_logger.warning('warning message')
        assert juju_log.calls() == [
            ('DEBUG', 'debug message'),
            ('WARNING', 'warning message'),
        ]
        assert buffer.getvalue() == ''

    def test_debug_logging(self, juju_log: FakeJujuLog, root_logger: logging.Logger):
        buffer = io.StringIO()
        with patch('sys.stderr', buffer):
            hookstate.log.setup_root_logging(juju_log, debug=True)
            root_logger.debug('debug message')
            root_logger.critical('critical message')
        assert juju_log.calls() == [
            ('DEBUG', 'debug message'),
            ('CRITICAL', 'critical message'),
        ]
        assert re.search(
            r'\d\d\d\d-\d\d-\d\d \d\d:\d\d:\d\d,\d\d\d DEBUG    debug message\n'
            r'\d\d\d\d-\d\d-\d\d \d\d:\d\d:\d\d,\d\d\d CRITICAL critical message\n',
            buffer.getvalue(),
        )

    def test_reduced_logging(self, juju_log: FakeJujuLog, root_logger: logging.Logger):
        hookstate.log.setup_root_logging(juju_log)
        root_logger.setLevel(logging.WARNING)
        root_logger.debug('debug')
        root_logger.info('info')
        root_logger.warning('warning')
        assert juju_log.calls() == [('WARNING', 'warning')]

    def test_long_string_logging(self, juju_log: FakeJujuLog, root_logger: logging.Logger):
        hookstate.log.setup_root_logging(juju_log)
        root_logger.debug('l' * hookstate.log.MAX_LOG_LINE_LEN)
        assert len(juju_log.calls(clear=True)) == 1

        root_logger.debug('l' * (hookstate.log.MAX_LOG_LINE_LEN + 9))
        calls = juju_log.calls()
        assert len(calls) == 3
        assert 'Splitting into multiple chunks' in calls[0][1]
        assert len(calls[1][1]) == hookstate.log.MAX_LOG_LINE_LEN
        assert len(calls[2][1]) == 9

    def test_warnings_are_logged(self, juju_log: FakeJujuLog, root_logger: logging.Logger):
        with warnings.catch_warnings():
            warnings.simplefilter('always')
            # catch_warnings restores showwarning on exit, so install ours inside it.
            hookstate.log.setup_root_logging(juju_log)
            warnings.warn('old API', DeprecationWarning, stacklevel=1)
        [(level, message)] = juju_log.calls()
        assert level == 'WARNING'
        assert 'DeprecationWarning: old API' in message

    def test_excepthook(self, juju_log: FakeJujuLog, root_logger: logging.Logger):
        hookstate.log.setup_root_logging(juju_log)
        try:
            raise RuntimeError('boom')
        except RuntimeError:
            sys.excepthook(*sys.exc_info())  # type: ignore
        [(level, message)] = juju_log.calls()
        assert level == 'ERROR'
        assert 'Uncaught exception while in charm code' in message
        assert 'RuntimeError: boom' in message


def test_juju_log_runs_hook_command(run: Run):
    run.handle(['juju-log', '--log-level', 'INFO', '--', 'hello'])
    hookstate.log.juju_log('INFO', 'hello')
    assert [c.args for c in run.calls] == [('juju-log', '--log-level', 'INFO', '--', 'hello')]


def test_log_split():
    assert list(hookstate.log.log_split('abcde', max_len=2)) == [
        'Log string greater than 2. Splitting into multiple chunks: ',
        'ab',
        'cd',
        'e',
    ]
    assert list(hookstate.log.log_split('ab', max_len=2)) == ['ab']
    assert list(hookstate.log.log_split('')) == []
