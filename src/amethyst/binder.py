"""Binding of subjects' callbacks and APIs to a host.

A host is any mutable object. Mapping hosts receive a subject's API as an
item, all other hosts as an attribute, named after the subject.
"""

import inspect
import logging
from collections.abc import MutableMapping
from types import MethodType
from typing import Any, Callable, Optional

from amethyst.domain import ApiShape, BoundApi, NamedApi, SingleApi, is_bindable
from amethyst.hooks import HookDispatcher
from amethyst.resolver import LoadPlan

__all__ = ["ContextBinder", "attach", "bind_api", "bind_to"]

logger = logging.getLogger(__name__)


def bind_to(func: Callable, host: Any) -> Callable:
    """Bind ``func`` to ``host``, which is passed as its first argument on every call.

    The binding is fixed: replacing the host's attribute later does not change
    the receiver of an already bound function. Methods already bound to some
    other object, such as ``counter.increment`` or ``[].append``, keep their own
    receiver and are returned unchanged.
    """
    if _is_bound(func):
        return func
    return MethodType(func, host)


def _is_bound(func: Callable) -> bool:
    if inspect.ismethod(func):
        return True
    # Builtin functions report their module as __self__.
    receiver = getattr(func, "__self__", None)
    return inspect.isbuiltin(func) and receiver is not None and not inspect.ismodule(receiver)


def bind_api(api: ApiShape, host: Any) -> Optional[Any]:
    """Bind an API to a host.

    Returns:
        The bound callable for a single-callable API, a :class:`BoundApi`
        for a mapping API, or ``None`` when the subject has no API.
    """
    if isinstance(api, SingleApi):
        return bind_to(api.func, host)
    if isinstance(api, NamedApi):
        return BoundApi(
            {
                key: bind_to(value, host) if is_bindable(value) else value
                for key, value in api.members.items()
            }
        )
    return None


def attach(host: Any, name: str, value: Any) -> None:
    if isinstance(host, MutableMapping):
        host[name] = value
    else:
        setattr(host, name, value)


class ContextBinder:
    """Load planned subjects into a host."""

    def __init__(self, hooks: HookDispatcher):
        self._hooks = hooks

    def bind(self, host: Any, plan: LoadPlan) -> Any:
        """Load a planned subject, dependencies first, into ``host``.

        Each dependency is fully loaded before the next one starts, and all of
        them before the subject's own ``loaded`` callback runs. The subject's
        API replaces any API already attached under its name; ``unloaded`` is
        not called first.

        Args:
            host: The object to load the subject into.
            plan: The resolved subject, with its ``loaded`` arguments.

        Returns:
            The subject's handle: the value returned by ``loaded``, or ``None``
            when the subject has no ``loaded`` callback.
        """
        for dependency in plan.dependencies:
            self.bind(host, dependency)

        definition = plan.definition
        self._hooks.dispatch("before", "load", host, definition.name, plan.args)

        handle = None
        if definition.loaded is not None:
            handle = bind_to(definition.loaded, host)(*plan.args)

        api = bind_api(definition.api, host)
        if api is not None:
            attach(host, definition.name, api)

        logger.debug("Loaded subject %r into %r", definition.name, host)
        self._hooks.dispatch("after", "load", host, definition.name, handle)
        return handle
