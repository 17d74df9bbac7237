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

from ._utils import loads, optional_str, run, to_str, yaml_loads


def config_get(key: str) -> str | None:
    """Retrieve a single application configuration value.

    Non-string values are returned in their JSON text form (``true``, ``10``),
    and an unset option with no default is ``None``.

    For more details, see:
    `Juju | Hook commands | config-get <https://documentation.ubuntu.com/juju/3.6/reference/hook-command/list-of-hook-commands/config-get/>`_

    Args:
        key: The configuration option to retrieve.
    """
    stdout = run('config-get', '--format=json', key)
    return optional_str(loads(stdout))


def config_get_all() -> dict[str, str]:
    """Retrieve every application configuration value that has a value.

    ``--all`` makes Juju include unset options as nulls; those are left out
    of the result.
    """
    stdout = run('config-get', '--all', '--format=yaml')
    result = yaml_loads(stdout) or {}
    return {str(k): to_str(v) for k, v in result.items() if v is not None}
