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

from typing import Literal

from ._utils import loads, run

SettableStatusName = Literal['active', 'blocked', 'maintenance', 'waiting']


def status_get() -> str:
    """Get the workload status of this unit, such as ``'active'``.

    For more details, see:
    `Juju | Hook commands | status-get <https://documentation.ubuntu.com/juju/3.6/reference/hook-command/list-of-hook-commands/status-get/>`_
    """
    stdout = run('status-get', '--format=json')
    result: str = loads(stdout)
    return result


def status_set(status: SettableStatusName, message: str | None = None, *, app: bool = False):
    """Set a status of a unit or an application.

    For more details, see:
    `Juju | Hook commands | status-set <https://documentation.ubuntu.com/juju/3.6/reference/hook-command/list-of-hook-commands/status-set/>`_

    Args:
        status: The status to set.
        message: A message to include in the status.
        app: If ``True``, set this status for the application to which the unit belongs.
    """
    args = [f'--application={app}', status]
    if message is not None:
        # The '--' allows messages that start with a hyphen.
        args.extend(['--', message])
    run('status-set', *args)


def application_version_set(version: str):
    """Specify which version of the application is deployed.

    Args:
        version: the version of the application software the unit is running,
            such as a package version or a Git hash.
    """
    # The '--' allows versions that start with a hyphen.
    run('application-version-set', '--', version)
