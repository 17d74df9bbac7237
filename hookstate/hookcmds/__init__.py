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

"""Low-level access to the Juju hook commands.

Each function builds an argument list, runs one hook command, and parses its
output. :func:`run_command` is the underlying executor: it runs any command,
optionally elevated through ``sudo``, and reports the exit status along with
the raw output.

See `Juju | Hook command list <https://documentation.ubuntu.com/juju/3.6/reference/hook-command/list-of-hook-commands/>`_
for a list of all Juju hook commands.
"""

from __future__ import annotations

from ._action import action_fail, action_get, action_set
from ._config import config_get, config_get_all
from ._leader import is_leader, leader_get, leader_set
from ._log import LogLevel, juju_log
from ._other import add_metric, juju_reboot, storage_get, storage_list, unit_get
from ._port import Protocol, close_port, open_port
from ._relation import relation_get, relation_ids, relation_list, relation_set
from ._status import SettableStatusName, application_version_set, status_get, status_set
from ._utils import CommandResult, Error, run, run_command

__all__ = [
    'CommandResult',
    'Error',
    'LogLevel',
    'Protocol',
    'SettableStatusName',
    'action_fail',
    'action_get',
    'action_set',
    'add_metric',
    'application_version_set',
    'close_port',
    'config_get',
    'config_get_all',
    'is_leader',
    'juju_log',
    'juju_reboot',
    'leader_get',
    'leader_set',
    'open_port',
    'relation_get',
    'relation_ids',
    'relation_list',
    'relation_set',
    'run',
    'run_command',
    'status_get',
    'status_set',
    'storage_get',
    'storage_list',
    'unit_get',
]
