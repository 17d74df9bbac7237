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

"""Interface to emit messages to the Juju logging system."""

from __future__ import annotations

import logging
import sys
import types
import typing
import warnings
from collections.abc import Generator

from . import hookcmds

TRACE: typing.Final[int] = 5
"""The TRACE log level, which is lower than DEBUG."""

MAX_LOG_LINE_LEN = 131071  # Max length of strings to pass to subshell.

JujuLog = typing.Callable[[str, str], None]
"""A function that sends ``(level, message)`` to Juju."""


def log_split(message: str, max_len: int = MAX_LOG_LINE_LEN) -> Generator[str, None, None]:
    """Split a message that is too long to safely pass to juju-log into chunks."""
    if len(message) > max_len:
        yield f'Log string greater than {max_len}. Splitting into multiple chunks: '

    while message:
        yield message[:max_len]
        message = message[max_len:]


def juju_log(level: str, message: str) -> None:
    """Pass a log message on to the juju logger."""
    for line in log_split(message):
        hookcmds.juju_log(line, level=typing.cast('hookcmds.LogLevel', level))


class JujuLogHandler(logging.Handler):
    """A handler for sending logs and warnings to Juju via juju-log."""

    def __init__(self, juju_log: JujuLog = juju_log, level: int = logging.DEBUG):
        super().__init__(level)
        self.juju_log = juju_log

    def emit(self, record: logging.LogRecord):
        """Send the specified logging record to Juju.

        This method is not used directly, but by :class:`logging.Handler`
        itself as part of the logging machinery.
        """
        self.juju_log(record.levelname, self.format(record))


def setup_root_logging(juju_log: JujuLog = juju_log, debug: bool = False):
    """Setup Python logging to forward messages to juju-log.

    By default, logging is set to DEBUG level, and messages will be filtered by Juju.
    Charmers can also set their own default log level with::

      logging.getLogger().setLevel(logging.INFO)

    Warnings issued by the warnings module are redirected to the logging system
    and forwarded to juju-log, too.

    Args:
        juju_log: the function used to send each record to Juju.
        debug: if True, write logs to stderr as well as to juju-log.
    """
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)
    logger.addHandler(JujuLogHandler(juju_log))

    # Juju supports logging at TRACE level.
    logging.addLevelName(TRACE, 'TRACE')

    def custom_showwarning(
        message: Warning | str,
        category: type[Warning],
        filename: str,
        lineno: int,
        file: typing.TextIO | None = None,
        line: str | None = None,
    ):
        """Direct the warning to Juju's debug-log, and don't include the code."""
        logger.warning('%s:%s: %s: %s', filename, lineno, category.__name__, message)

    warnings.showwarning = custom_showwarning

    if debug:
        handler = logging.StreamHandler()
        formatter = logging.Formatter('%(asctime)s %(levelname)-8s %(message)s')
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    def except_hook(etype: type[BaseException], value: BaseException, tb: types.TracebackType):
        logger.error('Uncaught exception while in charm code:', exc_info=(etype, value, tb))

    sys.excepthook = except_hook
