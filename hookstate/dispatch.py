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

"""Route the hook Juju is running to the function registered for it.

A charm built on hookstate installs a single executable and links each hook
name to it (for example ``hooks/config-changed -> ../src/charm.py``). The
executable registers one callback per hook and hands over to :func:`main`::

    registry = Registry()

    @registry.hook('config-changed')
    def config_changed():
        hookcmds.status_set('active')

    if __name__ == '__main__':
        sys.exit(main(registry))
"""

from __future__ import annotations

import dataclasses
import logging
import os
import pathlib
import sys
from collections.abc import Iterator, Mapping, Sequence
from typing import Any, Callable, TypeVar

from .errors import Error, UnknownHook
from .hookcontext import HookContext
from .log import setup_root_logging
from .unitdata import Storage
from .version import version

logger = logging.getLogger(__name__)

_F = TypeVar('_F', bound=Callable[[], Any])


@dataclasses.dataclass(frozen=True)
class Hook:
    """A callback to run when Juju runs the hook called ``name``.

    The callback takes no arguments. It reports failure by raising (typically
    :class:`hookstate.CallbackFailure`); whatever it returns is passed back
    unchanged by :func:`process_hooks`.
    """

    name: str
    callback: Callable[[], Any]


class Registry(Sequence[Hook]):
    """An ordered collection of hooks, filled in with the :meth:`hook` decorator."""

    def __init__(self, hooks: Sequence[Hook] = ()):
        self._hooks: list[Hook] = list(hooks)

    def hook(self, name: str) -> Callable[[_F], _F]:
        """Register the decorated function as the callback for the hook ``name``."""

        def decorator(callback: _F) -> _F:
            self._hooks.append(Hook(name, callback))
            return callback

        return decorator

    def __getitem__(self, index: Any) -> Any:
        return self._hooks[index]

    def __len__(self) -> int:
        return len(self._hooks)

    def __iter__(self) -> Iterator[Hook]:
        return iter(self._hooks)

    def __repr__(self) -> str:
        return f'{type(self).__name__}({[h.name for h in self._hooks]!r})'


def hook_name(context: HookContext) -> str:
    """Work out which hook Juju is running.

    Juju 3 provides ``JUJU_HOOK_NAME``; older versions only provide
    ``JUJU_DISPATCH_PATH`` (such as 'hooks/install'), and the oldest call the
    hook executable directly, so the program's own name is the hook name.
    """
    if context.hook_name:
        return context.hook_name
    if context.dispatch_path:
        return pathlib.PurePosixPath(context.dispatch_path).name
    return os.path.basename(sys.argv[0])


def _find(registry: Sequence[Hook], name: str, substring_match: bool) -> Hook | None:
    for hook in registry:
        if hook.name == name:
            return hook
    if substring_match:
        for hook in registry:
            if hook.name and hook.name in name:
                logger.warning(
                    'Hook %r matched registered hook %r by substring only.', name, hook.name
                )
                return hook
    return None


def process_hooks(
    registry: Sequence[Hook],
    context: HookContext | None = None,
    *,
    substring_match: bool = False,
) -> Any:
    """Run the callback registered for the current hook, exactly once.

    Args:
        registry: the hooks, searched in order; the first with a matching
            name wins.
        context: the invocation context. Defaults to one built from the
            environment.
        substring_match: also accept a registered name contained in the hook
            name, if nothing matches exactly. Older charms relied on this, but
            it is ambiguous ('install' is contained in 're-install').

    Returns:
        Whatever the callback returns. Exceptions it raises propagate unchanged.

    Raises:
        UnknownHook: if no hook in the registry matches.
    """
    if context is None:
        context = HookContext.from_environ()
    name = hook_name(context)
    hook = _find(registry, name, substring_match)
    if hook is None:
        raise UnknownHook(name)
    logger.debug('Running hook %s.', hook.name)
    return hook.callback()


def _close_storage(storage: Storage):
    try:
        storage.close()
    except Error as e:
        logger.error('Unable to close unit state database: %s', e)


def main(
    registry: Sequence[Hook],
    *,
    storage: Storage | None = None,
    environ: Mapping[str, str] | None = None,
    substring_match: bool = False,
) -> int:
    """Set up logging, dispatch the current hook, and report the outcome.

    If ``storage`` is given, the callback runs inside a hook scope of that
    store, so its changes are recorded in the store's history, and the store
    is closed afterwards.

    Returns:
        The exit status for the process: 0 if the hook ran successfully, 1
        if it failed or no hook is registered for it. The failure itself is
        logged, never raised.
    """
    try:
        context = HookContext.from_environ(environ)
        setup_root_logging(debug=context.debug)
        logger.debug('hookstate %s up and running.', version)
        name = hook_name(context)
        if storage is not None:
            with storage.hook_scope(name):
                process_hooks(registry, context, substring_match=substring_match)
        else:
            process_hooks(registry, context, substring_match=substring_match)
    except UnknownHook as e:
        logger.warning('Hook failed with error: %s', e)
        return 1
    except Exception:
        logger.exception('Hook failed with error:')
        return 1
    finally:
        if storage is not None:
            _close_storage(storage)
    logger.debug('Hook call was successful!')
    return 0
