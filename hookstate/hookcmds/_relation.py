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

from ._utils import loads, parse_int, run


def _relation_id(value: str) -> int:
    # Juju reports relation IDs as '<endpoint>:<id>'.
    _, sep, id_ = value.rpartition(':')
    if not sep:
        return parse_int(value, 'relation ID')
    return parse_int(id_, 'relation ID')


def relation_ids(name: str) -> list[int]:
    """List the numeric IDs of all relations on the given endpoint.

    Args:
        name: the endpoint name.
    """
    stdout = run('relation-ids', name, '--format=json')
    result: list[str] = loads(stdout) or []
    return [_relation_id(r) for r in result]


def relation_list(id: int | None = None) -> list[str]:
    """List the remote units participating in a relation.

    Args:
        id: The ID of the relation, or ``None`` for the relation that
            triggered the current hook.
    """
    args = ['--format=json']
    if id is not None:
        args.extend(['-r', str(id)])
    stdout = run('relation-list', *args)
    result: list[str] = loads(stdout) or []
    return result


@overload
def relation_get(id: int | None = None, *, unit: str | None = None) -> dict[str, str]: ...
@overload
def relation_get(id: int | None = None, *, key: str, unit: str | None = None) -> str | None: ...
def relation_get(
    id: int | None = None,
    *,
    key: str | None = None,
    unit: str | None = None,
) -> dict[str, str] | str | None:
    """Get relation settings.

    Args:
        id: The ID of the relation, or ``None`` for the relation that
            triggered the current hook.
        key: The specific key to get, or ``None`` to get all data.
        unit: The unit to get data for, or ``None`` for the remote unit that
            triggered the current hook.
    """
    if key == '-':
        raise ValueError('To get all keys, pass None for the key argument; "-" is not supported.')
    args = ['--format=json']
    if id is not None:
        args.extend(['-r', str(id)])
    if unit:
        # The key must come before the unit; '-' means all keys.
        args.extend([key or '-', unit])
    elif key:
        args.append(key)
    result = loads(run('relation-get', *args))
    if key is not None:
        return result or None
    return result or {}


def relation_set(data: Mapping[str, str], id: int | None = None):
    """Set relation settings. Setting a key to the empty string deletes it.

    Args:
        data: The relation data to set.
        id: The ID of the relation, or ``None`` for the relation that
            triggered the current hook.
    """
    args: list[str] = []
    if id is not None:
        args.extend(['-r', str(id)])
    args.extend(f'{k}={v}' for k, v in data.items())
    run('relation-set', *args)
