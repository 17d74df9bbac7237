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

from ._utils import run

Protocol = Literal['tcp', 'udp']


def open_port(port: int, protocol: Protocol = 'tcp'):
    """Register a request to open a port on the unit."""
    run('open-port', f'{port}/{protocol}')


def close_port(port: int, protocol: Protocol = 'tcp'):
    """Register a request to close a port on the unit."""
    run('close-port', f'{port}/{protocol}')
