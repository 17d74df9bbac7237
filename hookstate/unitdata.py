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

"""Simple key-value database for local unit state within charms.

Values are automatically JSON encoded and decoded. The database lives in a
single SQLite file next to the charm and survives between hook invocations::

    db = unitdata.Storage()
    db.set('port', 8080)
    assert db.get('port') == 8080

Changes can optionally be tracked per hook execution. Inside a
:meth:`Storage.hook_scope`, every write is also recorded against a revision
identifying the hook, so the history of a key can be inspected later with
:meth:`Storage.gethistory`::

    with db.hook_scope('config-changed'):
        db.set('port', 8081)

    for entry in db.gethistory('port'):
        print(entry.revision, entry.hook, entry.data)
"""

from __future__ import annotations

import contextlib
import dataclasses
import datetime
import json
import logging
import os
import pathlib
import sqlite3
import stat
import sys
from collections.abc import Collection, Generator, Iterator, Mapping
from typing import Any

from .errors import DecodeFailure, IoFailure
from .hookcontext import HookContext

logger = logging.getLogger(__name__)

DELETED = 'DELETED'
"""The payload recorded in the revision history when a key is removed."""

_SCHEMA = (
    'CREATE TABLE IF NOT EXISTS kv (key TEXT, data TEXT, PRIMARY KEY (key))',
    """
    CREATE TABLE IF NOT EXISTS kv_revisions (
      key TEXT,
      revision INTEGER,
      data TEXT,
      PRIMARY KEY (key, revision))
    """,
    """
    CREATE TABLE IF NOT EXISTS hooks (
      version INTEGER PRIMARY KEY AUTOINCREMENT,
      hook TEXT,
      date TEXT)
    """,
)


@dataclasses.dataclass(frozen=True)
class Revision:
    """The revision a store is recording writes against, inside a hook scope."""

    version: int
    hook: str
    date: datetime.datetime


@dataclasses.dataclass(frozen=True)
class HistoryEntry:
    """One change to a key, as recorded by a hook scope."""

    revision: int
    key: str
    data: Any
    """The value the key had at the end of the revision, or ``'DELETED'``."""
    hook: str
    date: datetime.datetime


def _encode(value: Any) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError) as e:
        raise DecodeFailure(f'value is not JSON serializable: {value!r}') from e


def _decode(key: str, data: str) -> Any:
    try:
        return json.loads(data)
    except json.JSONDecodeError as e:
        raise DecodeFailure(f'stored value for {key!r} is not valid JSON') from e


def _prefix_clause(prefix: str) -> tuple[str, tuple[Any, ...]]:
    # LIKE would treat '%' and '_' in the prefix as wildcards and ignore case.
    return 'substr(key, 1, ?) = ?', (len(prefix), prefix)


class Storage:
    """A connection to the unit's key-value data.

    Args:
        path: the SQLite file to use, created if it does not exist. If not
            given, the location is taken from the environment: ``UNIT_STATE_DB``,
            otherwise ``.unit-state.db`` in ``CHARM_DIR``.
        environ: the environment to read the default location from, instead
            of ``os.environ``.

    Raises:
        EnvironmentMissing: if no path is given and the environment names none.
        IoFailure: if the database cannot be opened or initialised.
    """

    DB_LOCK_TIMEOUT = datetime.timedelta(hours=1)

    def __init__(
        self,
        path: pathlib.Path | str | None = None,
        *,
        environ: Mapping[str, str] | None = None,
    ):
        if path is None:
            path = HookContext.from_environ(environ).state_path()
        self.path = str(path)
        self._revision: Revision | None = None

        if self.path != ':memory:':
            if not os.path.exists(self.path):
                logger.debug('Initializing unit state database: %s.', self.path)
            self._ensure_db_permissions(self.path)
        try:
            # isolation_level=None disables the implicit transaction handling of
            # the sqlite3 module; transactions are opened explicitly instead.
            self._db = sqlite3.connect(
                self.path, isolation_level=None, timeout=self.DB_LOCK_TIMEOUT.total_seconds()
            )
            self._setup()
        except sqlite3.Error as e:
            raise IoFailure(f'unable to open unit state database {self.path!r}: {e}') from e

    def _ensure_db_permissions(self, filename: str):
        """Make sure that the DB file has appropriately secure permissions."""
        mode = stat.S_IRUSR | stat.S_IWUSR
        if os.path.exists(filename):
            try:
                os.chmod(filename, mode)
            except OSError as e:
                raise IoFailure(f'Unable to adjust access permission of {filename!r}') from e
            return

        try:
            fd = os.open(filename, os.O_CREAT | os.O_EXCL, mode=mode)
        except OSError as e:
            raise IoFailure(f'Unable to adjust access permission of {filename!r}') from e
        os.close(fd)

    def _setup(self):
        with self._transaction():
            for statement in _SCHEMA:
                self._db.execute(statement)

    @contextlib.contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        """Run the enclosed statements as one transaction, mapping errors to IoFailure."""
        if self._db.in_transaction:
            # Already inside an outer transaction, which will commit or roll back.
            yield self._db
            return
        try:
            self._db.execute('BEGIN')
            try:
                yield self._db
            except BaseException:
                self._db.rollback()
                raise
            self._db.commit()
        except sqlite3.Error as e:
            raise IoFailure(f'unit state database error: {e}') from e

    @property
    def revision(self) -> Revision | None:
        """The revision writes are being recorded against, or ``None`` outside a hook scope."""
        return self._revision

    def close(self) -> None:
        """Flush any pending changes and close the database."""
        self.flush()
        self._db.close()

    def flush(self) -> None:
        """Commit any pending changes to disk."""
        try:
            self._db.commit()
        except sqlite3.Error as e:
            raise IoFailure(f'unable to flush unit state database: {e}') from e

    def __enter__(self) -> Storage:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def get(
        self,
        key: str,
        default: Any = None,
        *,
        expected: type | tuple[type, ...] | None = None,
    ) -> Any:
        """Get the value of a key, or ``default`` if it is not set.

        Args:
            key: the key to look up.
            default: returned when the key is not in the database.
            expected: if given, the type (or tuple of types) the stored value
                must decode to.

        Raises:
            DecodeFailure: if the stored value is not valid JSON, or is not an
                instance of ``expected``.
        """
        with self._transaction() as db:
            row = db.execute('SELECT data FROM kv WHERE key=?', (key,)).fetchone()
        if row is None:
            return default
        value = _decode(key, row[0])
        if expected is not None and not isinstance(value, expected):
            raise DecodeFailure(
                f'stored value for {key!r} is {type(value).__name__}, not {expected!r}'
            )
        return value

    def getrange(self, key_prefix: str, strip: bool = False) -> dict[str, Any]:
        """Get all the keys that start with a common prefix, with their values.

        Args:
            key_prefix: the common prefix. The empty string matches every key.
            strip: remove the prefix from the keys in the result.
        """
        clause, params = _prefix_clause(key_prefix)
        with self._transaction() as db:
            rows = db.execute(f'SELECT key, data FROM kv WHERE {clause}', params).fetchall()
        result: dict[str, Any] = {}
        for key, data in rows:
            if strip:
                result[key[len(key_prefix) :]] = _decode(key, data)
            else:
                result[key] = _decode(key, data)
        return result

    def set(self, key: str, value: Any) -> None:
        """Set the value of a key.

        Inside a hook scope the value is also recorded against the current
        revision; setting the same key twice in one revision keeps only the
        latest value.

        Raises:
            DecodeFailure: if the value cannot be encoded as JSON.
        """
        data = _encode(value)
        with self._transaction():
            self._set(key, data)

    def _set(self, key: str, data: str) -> None:
        self._db.execute('REPLACE INTO kv (key, data) VALUES (?, ?)', (key, data))
        if self._revision is not None:
            self._db.execute(
                'REPLACE INTO kv_revisions (key, revision, data) VALUES (?, ?, ?)',
                (key, self._revision.version, data),
            )

    def update(self, mapping: Mapping[str, Any], prefix: str | None = None) -> None:
        """Set the values of multiple keys at once, in a single transaction.

        Args:
            mapping: the keys and values to set.
            prefix: prepended to each key before it is set.
        """
        prefix = prefix or ''
        encoded = {f'{prefix}{k}': _encode(v) for k, v in mapping.items()}
        with self._transaction():
            for key, data in encoded.items():
                self._set(key, data)

    def unset(self, key: str) -> None:
        """Remove a key from the database entirely. Removing a missing key is a no-op."""
        with self._transaction() as db:
            cursor = db.execute('DELETE FROM kv WHERE key=?', (key,))
            if self._revision is not None and cursor.rowcount > 0:
                self._record_deleted([key])

    def unsetrange(
        self,
        keys: Collection[str] | None = None,
        prefix: str | None = None,
    ) -> int:
        """Remove a set of keys, or all the keys that share a prefix.

        Args:
            keys: the exact keys to remove. If given, ``prefix`` is ignored.
            prefix: if ``keys`` is not given, remove every key starting with
                this prefix. ``None`` or the empty string removes every key.

        Returns:
            The number of keys actually removed.
        """
        with self._transaction() as db:
            if keys is not None:
                keys = list(keys)
                if not keys:
                    return 0
                placeholders = ', '.join('?' * len(keys))
                cursor = db.execute(f'DELETE FROM kv WHERE key IN ({placeholders})', keys)
                deleted = cursor.rowcount
                if self._revision is not None and deleted > 0:
                    self._record_deleted(keys)
            else:
                prefix = prefix or ''
                clause, params = _prefix_clause(prefix)
                cursor = db.execute(f'DELETE FROM kv WHERE {clause}', params)
                deleted = cursor.rowcount
                if self._revision is not None and deleted > 0:
                    self._record_deleted([f'{prefix}%'])
        logger.debug('Removed %d keys from unit state.', deleted)
        return deleted

    def _record_deleted(self, keys: list[str]) -> None:
        assert self._revision is not None
        data = json.dumps(DELETED)
        self._db.executemany(
            'REPLACE INTO kv_revisions (key, revision, data) VALUES (?, ?, ?)',
            [(key, self._revision.version, data) for key in keys],
        )

    def gethistory(self, key: str) -> list[HistoryEntry]:
        """Get every recorded change to a key, oldest first.

        Only changes made inside a :meth:`hook_scope` are recorded.
        """
        with self._transaction() as db:
            rows = db.execute(
                """
                SELECT kv.revision, kv.key, kv.data, h.hook, h.date
                  FROM kv_revisions kv, hooks h
                 WHERE kv.key=?
                   AND kv.revision = h.version
                 ORDER BY kv.revision
                """,
                (key,),
            ).fetchall()
        return [
            HistoryEntry(
                revision=revision,
                key=key,
                data=_decode(key, data),
                hook=hook,
                date=datetime.datetime.fromisoformat(date),
            )
            for revision, key, data, hook, date in rows
        ]

    @contextlib.contextmanager
    def hook_scope(self, name: str | None = None) -> Generator[int, None, None]:
        """Record all writes in the enclosed block against a new revision.

        A hook execution record is created with the current time, and its
        identifier is yielded. Only one scope may be open at a time.

        Args:
            name: the name to record for the hook. Defaults to the name the
                program was invoked as.

        Raises:
            RuntimeError: if a hook scope is already open on this store.
        """
        if self._revision is not None:
            raise RuntimeError(
                f'hook scope already open for {self._revision.hook!r} '
                f'(revision {self._revision.version})'
            )
        if name is None:
            name = os.path.basename(sys.argv[0])
        date = datetime.datetime.now(datetime.timezone.utc)
        with self._transaction() as db:
            cursor = db.execute(
                'INSERT INTO hooks (hook, date) VALUES (?, ?)', (name, date.isoformat())
            )
        version = cursor.lastrowid
        assert version is not None
        self._revision = Revision(version=version, hook=name, date=date)
        logger.debug('Recording unit state changes for %s as revision %d.', name, version)
        try:
            yield version
        finally:
            self._revision = None
