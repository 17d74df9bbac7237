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

from collections.abc import Mapping
from typing import overload

from ._utils import loads, run


def is_leader() -> bool:
    """Obtain the current leadership status for the unit the charm code is executing on.

    The value is not cached. It is accurate for 30s from the time the method is
    successfully called.

    For more details, see:
    `Juju | Hook commands | is-leader <https://documentation.ubuntu.com/juju/3.6/reference/hook-command/list-of-hook-commands/is-leader/>`_
    """
    stdout = run('is-leader', '--format=json')
    result: bool = loads(stdout)
    return result


@overload
def leader_get(key: str) -> str | None: ...
@overload
def leader_get(key: None = None) -> dict[str, str]: ...
def leader_get(key: str | None = None) -> dict[str, str] | str | None:
    """Get leadership settings.

    Args:
        key: The setting to retrieve, or ``None`` to retrieve all of them.
    """
    stdout = run('leader-get', '--format=json', key if key is not None else '-')
    result = loads(stdout)
    if key is not None:
        return result or None
    return result or {}


def leader_set(settings: Mapping[str, str]):
    """Set leadership settings. Only the leader may call this.

    Setting a key to the empty string removes it.
    """
    run('leader-set', *(f'{k}={v}' for k, v in settings.items()))
