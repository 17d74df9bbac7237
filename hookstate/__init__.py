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

"""Helpers for writing Juju charms as plain hook functions.

- :class:`~hookstate.unitdata.Storage`, a key-value store for local unit
  state that persists between hooks, with an optional per-hook history of
  changes.
- :class:`~hookstate.dispatch.Registry` and :func:`~hookstate.dispatch.main`,
  to route the hook Juju is running to the function registered for it.
- :class:`~hookstate.config.ConfigSnapshot`, to find out which configuration
  options changed since the previous hook.
- :mod:`hookstate.hookcmds`, thin wrappers around the Juju hook commands.
"""

from __future__ import annotations

# The "from .X import Y" imports below don't explicitly tell Pyright (or MyPy)
# that those symbols are part of the public API, so we have to add __all__.
__all__ = [  # noqa: RUF022 `__all__` is not sorted
    '__version__',
    'hookcmds',
    # From config.py
    'ConfigSnapshot',
    # From dispatch.py
    'Hook',
    'Registry',
    'hook_name',
    'main',
    'process_hooks',
    # From errors.py
    'CallbackFailure',
    'DecodeFailure',
    'EnvironmentMissing',
    'Error',
    'IoFailure',
    'ParseFailure',
    'UnknownHook',
    # From hookcontext.py
    'HookContext',
    # From unitdata.py
    'HistoryEntry',
    'Revision',
    'Storage',
]

from . import hookcmds
from .config import ConfigSnapshot
from .dispatch import Hook, Registry, hook_name, main, process_hooks
from .errors import (
    CallbackFailure,
    DecodeFailure,
    EnvironmentMissing,
    Error,
    IoFailure,
    ParseFailure,
    UnknownHook,
)
from .hookcontext import HookContext
from .unitdata import HistoryEntry, Revision, Storage
from .version import version as _version

__version__: str = _version
