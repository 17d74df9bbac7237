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

import json
import logging
import pathlib

import pytest

from hookstate import ConfigSnapshot, DecodeFailure, IoFailure
from hookstate.hookcmds import Error

from .conftest import Run


class FakeConfig:
    """A config backend holding the charm's current configuration in memory."""

    def __init__(self, values: dict[str, str] | None = None):
        self.values = dict(values or {})
        self.get_all_calls = 0
        self.fail = False

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def get_all(self) -> dict[str, str]:
        self.get_all_calls += 1
        if self.fail:
            raise Error(returncode=1, cmd=['config-get', '--all'], stderr='not in a hook')
        return dict(self.values)


@pytest.fixture
def path(tmp_path: pathlib.Path) -> pathlib.Path:
    return tmp_path / '.juju-persistent-config'


class TestLoad:
    def test_first_run_pulls_current_config(self, path: pathlib.Path):
        backend = FakeConfig({'size': '10'})
        snapshot = ConfigSnapshot(path, backend=backend)
        assert snapshot.values == {'size': '10'}
        assert backend.get_all_calls == 1
        assert not snapshot.changed('size')

    def test_loads_previous_values(self, path: pathlib.Path):
        path.write_text(json.dumps({'size': '10'}))
        backend = FakeConfig({'size': '20'})
        snapshot = ConfigSnapshot(path, backend=backend)
        assert snapshot.values == {'size': '10'}
        assert backend.get_all_calls == 0

    def test_malformed_file(self, path: pathlib.Path):
        path.write_text('{"size": ')
        with pytest.raises(DecodeFailure):
            ConfigSnapshot(path, backend=FakeConfig())

    @pytest.mark.parametrize('content', ['["size"]', '{"size": 10}', '"size"'])
    def test_wrong_shape(self, path: pathlib.Path, content: str):
        path.write_text(content)
        with pytest.raises(DecodeFailure):
            ConfigSnapshot(path, backend=FakeConfig())

    def test_unreadable_file(self, tmp_path: pathlib.Path):
        # A directory exists but cannot be read as a file.
        with pytest.raises(IoFailure):
            ConfigSnapshot(tmp_path, backend=FakeConfig())

    def test_default_path_in_charm_dir(self, tmp_path: pathlib.Path):
        snapshot = ConfigSnapshot(backend=FakeConfig(), environ={'CHARM_DIR': str(tmp_path)})
        assert snapshot.path == tmp_path / '.juju-persistent-config'

    def test_default_path_without_charm_dir(self):
        snapshot = ConfigSnapshot(backend=FakeConfig(), environ={})
        assert snapshot.path == pathlib.Path('.juju-persistent-config')


class TestChanges:
    @pytest.fixture
    def backend(self) -> FakeConfig:
        return FakeConfig({'size': '10'})

    @pytest.fixture
    def snapshot(self, path: pathlib.Path, backend: FakeConfig) -> ConfigSnapshot:
        path.write_text(json.dumps({'size': '10'}))
        return ConfigSnapshot(path, backend=backend)

    def test_unchanged(self, snapshot: ConfigSnapshot):
        assert not snapshot.changed('size')

    def test_changed(self, snapshot: ConfigSnapshot, backend: FakeConfig):
        backend.values['size'] = '20'
        assert snapshot.changed('size')
        assert snapshot.previous('size') == '10'
        assert snapshot.get('size') == '20'

    def test_new_key_always_changed(self, snapshot: ConfigSnapshot, backend: FakeConfig):
        backend.values['new_key'] = 'x'
        assert snapshot.changed('new_key')
        assert snapshot.changed('never-set')

    def test_unset_key_changed(self, snapshot: ConfigSnapshot, backend: FakeConfig):
        del backend.values['size']
        assert snapshot.changed('size')
        assert snapshot.get('size') is None

    def test_previous_missing(self, snapshot: ConfigSnapshot):
        assert snapshot.previous('nope') is None

    def test_previous_has_no_side_effects(self, snapshot: ConfigSnapshot, path: pathlib.Path):
        before = path.read_text()
        snapshot.previous('size')
        assert path.read_text() == before
        assert snapshot.values == {'size': '10'}


class TestDispose:
    def test_current_values_become_previous(self, path: pathlib.Path):
        backend = FakeConfig({'size': '10'})
        with ConfigSnapshot(path, backend=backend):
            pass
        assert json.loads(path.read_text()) == {'size': '10'}

        backend.values['size'] = '20'
        with ConfigSnapshot(path, backend=backend) as snapshot:
            assert snapshot.changed('size')
            assert snapshot.previous('size') == '10'
        assert json.loads(path.read_text()) == {'size': '20'}

        with ConfigSnapshot(path, backend=backend) as snapshot:
            assert not snapshot.changed('size')

    def test_written_when_hook_fails(self, path: pathlib.Path):
        backend = FakeConfig({'size': '10'})
        with pytest.raises(RuntimeError):
            with ConfigSnapshot(path, backend=backend):
                raise RuntimeError('hook failed')
        assert json.loads(path.read_text()) == {'size': '10'}

    def test_overwrites_file(self, path: pathlib.Path):
        path.write_text(json.dumps({'old': 'value', 'size': '5'}))
        backend = FakeConfig({'size': '10'})
        ConfigSnapshot(path, backend=backend).close()
        assert json.loads(path.read_text()) == {'size': '10'}

    def test_read_failure_keeps_previous_values(
        self, path: pathlib.Path, caplog: pytest.LogCaptureFixture
    ):
        path.write_text(json.dumps({'size': '5'}))
        backend = FakeConfig({'size': '10'})
        snapshot = ConfigSnapshot(path, backend=backend)
        backend.fail = True
        with caplog.at_level(logging.ERROR):
            snapshot.close()
        assert json.loads(path.read_text()) == {'size': '5'}
        assert 'Unable to read current config' in caplog.text

    def test_write_failure_is_logged(
        self, tmp_path: pathlib.Path, caplog: pytest.LogCaptureFixture
    ):
        path = tmp_path / 'missing-dir' / '.juju-persistent-config'
        snapshot = ConfigSnapshot(path, backend=FakeConfig({'size': '10'}))
        with caplog.at_level(logging.ERROR):
            snapshot.close()
        assert not path.exists()
        assert 'Unable to save config snapshot' in caplog.text

    def test_save_raises(self, tmp_path: pathlib.Path):
        path = tmp_path / 'missing-dir' / '.juju-persistent-config'
        snapshot = ConfigSnapshot(path, backend=FakeConfig())
        with pytest.raises(IoFailure):
            snapshot.save()


def test_hook_command_backend(run: Run, path: pathlib.Path):
    run.handle(['config-get', '--all', '--format=yaml'], stdout='size: 10\nname: foo\nunset: null\n')
    run.handle(['config-get', '--format=json', 'size'], stdout='20\n')
    with ConfigSnapshot(path) as snapshot:
        assert snapshot.values == {'size': '10', 'name': 'foo'}
        assert snapshot.changed('size')
    assert json.loads(path.read_text()) == {'size': '10', 'name': 'foo'}
