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

"""Track which configuration options changed since the previous hook."""

from __future__ import annotations

import json
import logging
import pathlib
from collections.abc import Mapping
from typing import Any, Protocol

from . import hookcmds
from .errors import DecodeFailure, Error, IoFailure
from .hookcontext import HookContext

logger = logging.getLogger(__name__)

SNAPSHOT_FILE = '.juju-persistent-config'


class ConfigBackend(Protocol):
    """Where current configuration values come from."""

    def get(self, key: str) -> str | None: ...

    def get_all(self) -> dict[str, str]: ...


class _HookCommandBackend:
    """Reads configuration through the config-get hook command."""

    def get(self, key: str) -> str | None:
        return hookcmds.config_get(key)

    def get_all(self) -> dict[str, str]:
        return hookcmds.config_get_all()


def _default_path(environ: Mapping[str, str] | None) -> pathlib.Path:
    charm_dir = HookContext.from_environ(environ).charm_dir
    if charm_dir is None:
        return pathlib.Path(SNAPSHOT_FILE)
    return charm_dir / SNAPSHOT_FILE


class ConfigSnapshot:
    """The charm's configuration, as seen by the previous hook.

    On construction the values saved by the previous hook are loaded from
    disk; if there are none (the first hook to run), every current value is
    pulled from Juju instead. :meth:`close` saves the current values, so they
    are the previous values for the next hook. Use the snapshot as a context
    manager so that happens however the hook exits::

        with ConfigSnapshot() as config:
            if config.changed('port'):
                reconfigure(config.get('port'))

    Args:
        path: the snapshot file. Defaults to ``.juju-persistent-config`` in the
            charm directory.
        backend: where current values are read from. Defaults to the
            config-get hook command.
        environ: the environment to find the charm directory in.

    Raises:
        IoFailure: if the snapshot file exists but cannot be read.
        DecodeFailure: if the snapshot file is not a JSON object of strings.
    """

    def __init__(
        self,
        path: pathlib.Path | str | None = None,
        *,
        backend: ConfigBackend | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self.path = pathlib.Path(path) if path is not None else _default_path(environ)
        self._backend: ConfigBackend = backend or _HookCommandBackend()
        self.values: dict[str, str] = self._load()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            logger.debug('No config snapshot at %s, loading current config.', self.path)
            return dict(self._backend.get_all())
        try:
            content = self.path.read_text(encoding='utf-8')
        except OSError as e:
            raise IoFailure(f'unable to read config snapshot {str(self.path)!r}') from e
        try:
            values: Any = json.loads(content)
        except json.JSONDecodeError as e:
            raise DecodeFailure(f'config snapshot {str(self.path)!r} is not valid JSON') from e
        if not isinstance(values, dict) or not all(
            isinstance(v, str) for v in values.values()  # type: ignore
        ):
            raise DecodeFailure(
                f'config snapshot {str(self.path)!r} is not a mapping of strings'
            )
        return values  # type: ignore

    def get(self, key: str) -> str | None:
        """Return the current value for this key, or ``None`` if it is unset."""
        return self._backend.get(key)

    def changed(self, key: str) -> bool:
        """Return True if the current value for this key differs from the previous value.

        A key with no previous value, or with no current value, counts as changed.
        """
        previous = self.values.get(key)
        if previous is None:
            return True
        current = self._backend.get(key)
        if current is None:
            return True
        return current != previous

    def previous(self, key: str) -> str | None:
        """Return the previous value for this key, or ``None`` if there is no previous value."""
        return self.values.get(key)

    def save(self) -> None:
        """Write the snapshot to disk, replacing what was there.

        Raises:
            IoFailure: if the file cannot be written.
        """
        content = json.dumps(self.values)
        try:
            self.path.write_text(content, encoding='utf-8')
        except OSError as e:
            raise IoFailure(f'unable to write config snapshot {str(self.path)!r}') from e
        logger.debug('%s saved. Wrote %d bytes.', self.path, len(content))

    def close(self) -> None:
        """Save the current configuration as the previous values for the next hook.

        This is called at the end of the hook, after its outcome is decided, so
        failures are logged rather than raised.
        """
        try:
            self.values = dict(self._backend.get_all())
        except Error as e:
            logger.error('Unable to read current config, keeping previous values: %s', e)
        try:
            self.save()
        except Error as e:
            logger.error('Unable to save config snapshot %s: %s', self.path, e)

    def __enter__(self) -> ConfigSnapshot:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
