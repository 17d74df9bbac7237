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

import ipaddress
from collections.abc import Mapping
from typing import Literal

from ..errors import ParseFailure
from ._utils import Error, loads, optional, run, run_command


def unit_get(
    setting: Literal['private-address', 'public-address'],
) -> ipaddress.IPv4Address | ipaddress.IPv6Address:
    """Get the private or public address of this unit.

    Raises:
        ParseFailure: if Juju reports something that is not an IP address.
    """
    stdout = run('unit-get', setting)
    try:
        return ipaddress.ip_address(stdout.strip())
    except ValueError as e:
        raise ParseFailure(f'invalid {setting}: {stdout.strip()!r}') from e


def add_metric(metrics: Mapping[str, str | int | float]):
    """Record metrics. Only valid in the collect-metrics hook."""
    run('add-metric', *(f'{k}={v}' for k, v in metrics.items()))


def storage_get(attribute: str = 'location', *, id: str | None = None) -> str | None:
    """Get an attribute of a storage instance, such as where it is mounted.

    Args:
        attribute: the attribute to retrieve.
        id: The storage ID, such as ``data/0``, or ``None`` for the storage
            that triggered the current hook.
    """
    args: list[str] = []
    if id is not None:
        args.extend(['-s', id])
    args.append(attribute)
    return optional(run('storage-get', *args))


def storage_list(name: str | None = None) -> list[str]:
    """List storage IDs attached to the unit.

    Args:
        name: Only list storage with this name.
    """
    args = ['--format=json']
    if name is not None:
        args.append(name)
    result: list[str] = loads(run('storage-list', *args)) or []
    return result


def juju_reboot(*, now: bool = False):
    """Ask Juju to reboot the host machine once the hook completes.

    The command needs root, so it is run elevated.

    Args:
        now: Reboot immediately, killing the invoking process.
    """
    args = ['--now'] if now else []
    result = run_command('juju-reboot', args, elevated=True)
    if not result.ok:
        raise Error(
            returncode=result.returncode,
            cmd=['sudo', 'juju-reboot', *args],
            stdout=result.stdout.decode('utf-8', errors='replace'),
            stderr=result.stderr.decode('utf-8', errors='replace'),
        )
