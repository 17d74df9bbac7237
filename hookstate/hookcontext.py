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

"""A helper to work with the context Juju provides to a hook."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from pathlib import Path

from .errors import EnvironmentMissing, ParseFailure

UNIT_STATE_FILE = '.unit-state.db'


def require(environ: Mapping[str, str], name: str) -> str:
    """Return the value of an environment variable that must be set.

    Raises:
        EnvironmentMissing: if ``name`` is unset or empty.
    """
    value = environ.get(name)
    if not value:
        raise EnvironmentMissing(name)
    return value


def _relation_id(value: str) -> int:
    try:
        return int(value.split(':')[-1])
    except ValueError as e:
        raise ParseFailure(f'invalid JUJU_RELATION_ID: {value!r}') from e


@dataclasses.dataclass(frozen=True)
class HookContext:
    """The context of the current hook invocation.

    Juju provides the context in the form of environment variables. Rather
    than reading the environment at arbitrary points, build a ``HookContext``
    once with :meth:`from_environ` and pass it where it is needed. The
    environment itself is never modified.
    """

    hook_name: str = ''
    """The name of the hook, such as 'install' (from ``JUJU_HOOK_NAME``).

    This is the empty string for actions, and with older Juju versions.
    """

    dispatch_path: str = ''
    """The dispatch path, such as 'hooks/install' (from ``JUJU_DISPATCH_PATH``)."""

    charm_dir: Path | None = None
    """The directory holding the charm (from ``CHARM_DIR`` or ``JUJU_CHARM_DIR``)."""

    unit_state_db: Path | None = None
    """An explicit location for the unit's key-value store (from ``UNIT_STATE_DB``)."""

    unit_name: str = ''
    """The name of the unit, such as 'myapp/0' (from ``JUJU_UNIT_NAME``)."""

    model_name: str = ''
    """The name of the model (from ``JUJU_MODEL_NAME``)."""

    availability_zone: str | None = None
    """The availability zone (from ``JUJU_AVAILABILITY_ZONE``)."""

    action_name: str | None = None
    """The action's name, for action hooks (from ``JUJU_ACTION_NAME``)."""

    relation_name: str | None = None
    """The name of the relation, for relation hooks (from ``JUJU_RELATION``)."""

    relation_id: int | None = None
    """The id of the relation, for relation hooks.

    For example 1 if ``JUJU_RELATION_ID`` is 'database:1'.
    """

    remote_unit_name: str | None = None
    """The remote unit, for relation hooks (from ``JUJU_REMOTE_UNIT``)."""

    debug: bool = False
    """If true, write logs to stderr as well as to juju-log (from ``JUJU_DEBUG``)."""

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> HookContext:
        """Create a ``HookContext`` from the environment.

        If environ is ``None``, ``os.environ`` will be used.

        Raises:
            ParseFailure: if ``JUJU_RELATION_ID`` is malformed.
        """
        if environ is None:
            environ = os.environ
        charm_dir = environ.get('CHARM_DIR') or environ.get('JUJU_CHARM_DIR')
        return cls(
            hook_name=environ.get('JUJU_HOOK_NAME', ''),
            dispatch_path=environ.get('JUJU_DISPATCH_PATH', ''),
            charm_dir=Path(charm_dir) if charm_dir else None,
            unit_state_db=(
                Path(environ['UNIT_STATE_DB']) if environ.get('UNIT_STATE_DB') else None
            ),
            unit_name=environ.get('JUJU_UNIT_NAME', ''),
            model_name=environ.get('JUJU_MODEL_NAME', ''),
            availability_zone=environ.get('JUJU_AVAILABILITY_ZONE') or None,
            action_name=environ.get('JUJU_ACTION_NAME') or None,
            relation_name=environ.get('JUJU_RELATION') or None,
            relation_id=(
                _relation_id(environ['JUJU_RELATION_ID'])
                if environ.get('JUJU_RELATION_ID')
                else None
            ),
            remote_unit_name=environ.get('JUJU_REMOTE_UNIT') or None,
            debug='JUJU_DEBUG' in environ,
        )

    def state_path(self) -> Path:
        """Where the unit's key-value store lives.

        ``UNIT_STATE_DB`` wins; otherwise the store is ``.unit-state.db`` in the
        charm directory.

        Raises:
            EnvironmentMissing: if neither location is known.
        """
        if self.unit_state_db is not None:
            return self.unit_state_db
        if self.charm_dir is None:
            raise EnvironmentMissing('CHARM_DIR')
        return self.charm_dir / UNIT_STATE_FILE
