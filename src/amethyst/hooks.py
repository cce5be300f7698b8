"""Observer hooks run around saving and loading subjects.

Hooks are called synchronously, in the order they were added. They observe
only: the one way a hook affects the operation it observes is by raising,
which aborts that operation and propagates to its caller.

Save hooks are called with ``(name, options)``. Load hooks are called with
``(host, name, args)`` before a subject is loaded and ``(host, name, handle)``
after, once for every subject loaded, nested dependencies included.
"""

import logging
from collections import defaultdict
from typing import Any, Callable, Literal

from amethyst.errors import NotCallableError

__all__ = ["HookDispatcher", "HookRegistrar", "Moment", "Phase"]

logger = logging.getLogger(__name__)

Moment = Literal["before", "after"]
Phase = Literal["save", "load"]

_MOMENTS = ("before", "after")
_PHASES = ("save", "load")


class HookDispatcher:
    """Ordered lists of hooks, one per moment and phase."""

    def __init__(self):
        self._hooks: dict[tuple[str, str], list[Callable]] = defaultdict(list)

    def add(self, moment: Moment, phase: Phase, hook: Callable) -> Callable:
        """Add a hook to the end of the list for ``moment`` and ``phase``.

        Returns:
            The hook itself, so this can back a decorator.

        Raises:
            NotCallableError: If ``hook`` is not callable.
        """
        if moment not in _MOMENTS or phase not in _PHASES:
            raise ValueError(f"Unknown hook point {moment}.{phase}")
        if not callable(hook):
            raise NotCallableError(f"Hooks must be callable, not {hook!r}")

        self._hooks[(moment, phase)].append(hook)
        logger.debug("Added %s.%s hook %r", moment, phase, hook)
        return hook

    def hooks(self, moment: Moment, phase: Phase) -> list[Callable]:
        return list(self._hooks[(moment, phase)])

    def dispatch(self, moment: Moment, phase: Phase, *args: Any) -> None:
        # Hooks added by a running hook take effect from the next dispatch.
        for hook in self.hooks(moment, phase):
            hook(*args)


class HookRegistrar:
    """The ``before`` or ``after`` namespace of a loader.

    Example:
        >>> @loader.before.save
        ... def announce(name, options):
        ...     print(f"saving {name}")
    """

    def __init__(self, dispatcher: HookDispatcher, moment: Moment):
        self._dispatcher = dispatcher
        self._moment = moment

    def save(self, hook: Callable) -> Callable:
        return self._dispatcher.add(self._moment, "save", hook)

    def load(self, hook: Callable) -> Callable:
        return self._dispatcher.add(self._moment, "load", hook)
