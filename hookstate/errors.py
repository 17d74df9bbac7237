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

"""Exceptions raised by hookstate.

Every failure coming from outside the library (SQLite, the filesystem, a hook
command, the environment) is re-raised as exactly one of the classes below,
with the original exception chained as ``__cause__``.
"""

from __future__ import annotations


class Error(Exception):
    """Base class for all exceptions raised by hookstate."""


class IoFailure(Error):  # noqa: N818
    """Raised when reading or writing a file, the database, or a process fails."""


class DecodeFailure(Error):  # noqa: N818
    """Raised when stored or received data is not valid JSON, or has the wrong shape."""


class ParseFailure(Error):  # noqa: N818
    """Raised when a numeric or textual field in hook command output is malformed."""


class EnvironmentMissing(Error):  # noqa: N818
    """Raised when a required environment variable is not set."""

    def __init__(self, name: str):
        super().__init__(f'missing required environment variable: {name}')
        self.name = name


class UnknownHook(Error):  # noqa: N818
    """Raised by :func:`hookstate.process_hooks` when no hook is registered for the event."""

    def __init__(self, name: str):
        super().__init__(f'unknown callback for hook {name!r}')
        self.name = name


class CallbackFailure(Error):  # noqa: N818
    """Raised by charm code to report that a hook callback failed.

    The dispatcher does not look inside this exception: it is propagated
    unchanged to the process boundary, where the message is logged.
    """
