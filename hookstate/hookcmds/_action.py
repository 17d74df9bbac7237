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
from typing import Any

from ._utils import run, yaml_loads


def format_result_dict(
    input: Mapping[str, Any],
    parent_key: str | None = None,
    output: dict[str, str] | None = None,
) -> dict[str, str]:
    """Turn a nested dictionary into a flattened dictionary, using '.' as a key separator.

    Example::

        >>> format_result_dict({'a': {'b': 1, 'c': 2}})
        {'a.b': 1, 'a.c': 2}

    Raises:
        ValueError: if the dict mixes dotted and nested keys that expand to the
            same key, for example ``{'a': {'b': 1}, 'a.b': 2}``.
    """
    output_: dict[str, str] = output or {}

    for key, value in input.items():
        if parent_key:
            key = f'{parent_key}.{key}'

        if isinstance(value, Mapping):
            output_ = format_result_dict(value, key, output_)
        elif key in output_:
            raise ValueError(
                f"duplicate key detected in dictionary passed to 'action-set': {key!r}"
            )
        else:
            output_[key] = value

    return output_


def action_get(key: str | None = None) -> Any:
    """Get action parameters.

    With a ``key``, return only that parameter (dotted keys recurse into the
    parameter map); otherwise return all of them as a dict. ``action-get``
    prints YAML by default, and that is what is parsed here.

    Args:
        key: The key of the action parameter to retrieve.
    """
    args = ['--format=yaml']
    if key is not None:
        args.append(key)
    stdout = run('action-get', *args)
    result = yaml_loads(stdout)
    if key is None:
        return result or {}
    return result


def action_set(results: Mapping[str, Any]):
    """Set action results, flattening nested mappings into dotted keys."""
    flat_results = format_result_dict(results)
    run('action-set', *[f'{k}={v}' for k, v in flat_results.items()])


def action_fail(message: str | None = None):
    """Set action fail status with message.

    Args:
        message: the failure error message. Juju will provide a default message
            if one is not provided.
    """
    args: list[str] = []
    if message is not None:
        # The '--' allows messages that start with a hyphen.
        args.extend(['--', message])
    run('action-fail', *args)
