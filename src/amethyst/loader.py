"""High level entry points for saving subjects and loading them into hosts."""

import logging
from collections.abc import Mapping
from pprint import pformat
from typing import Any, Callable, Optional

from amethyst.binder import ContextBinder, bind_to
from amethyst.domain import DependencyRef
from amethyst.hooks import HookDispatcher, HookRegistrar
from amethyst.registry import SubjectRegistry, inferred_name
from amethyst.resolver import DependencyResolver

__all__ = ["Loader"]

logger = logging.getLogger(__name__)


class Loader:
    """Saves subjects to a registry and loads them into hosts.

    Args:
        registry: The registry to save subjects to. A new, empty one by default.
        hooks: The hook dispatcher to notify. A new one by default.
        detect_cycles: Whether to raise :class:`~amethyst.errors.DependencyCycleError`
            on cyclic dependencies, rather than recursing until a :class:`RecursionError`.

    Example:
        >>> loader = Loader()
        >>> loader.save({"name": "greeter", "options": {"api": lambda self: f"Hi {self.name}"}})
        >>> person = SimpleNamespace(name="Martha")
        >>> loader.load(person, "greeter")
        [None]
        >>> person.greeter()
        'Hi Martha'
    """

    def __init__(
        self,
        registry: Optional[SubjectRegistry] = None,
        hooks: Optional[HookDispatcher] = None,
        detect_cycles: bool = False,
    ):
        self.registry = registry if registry is not None else SubjectRegistry()
        self.hooks = hooks if hooks is not None else HookDispatcher()
        self.before = HookRegistrar(self.hooks, "before")
        self.after = HookRegistrar(self.hooks, "after")
        self._resolver = DependencyResolver(self.registry, detect_cycles)
        self._binder = ContextBinder(self.hooks)

    def save(self, *subjects: Any) -> None:
        """Register subjects, running save hooks around each one.

        Each subject is a mapping with ``name`` and ``options`` keys, or any
        object with ``name`` and ``options`` attributes. Subjects are saved in
        the order given; a failure stops the remaining ones from being saved,
        but those already saved stay registered.

        Raises:
            MissingNameError: If a subject has no name.
            InvalidDefinitionError: If a subject's options are not a well-formed mapping.
            DuplicateNameError: If a subject's name is already registered.
        """
        for subject in subjects:
            name, options = _name_and_options(subject)
            self.registry.validate(name, options)
            self.hooks.dispatch("before", "save", name, options)
            self.registry.register(name, options)
            self.hooks.dispatch("after", "save", name, options)

    def load(self, host: Any, *refs: Any) -> list:
        """Load subjects into a host.

        Every reference is resolved, with its nested dependencies, before
        anything is loaded. Subjects are then loaded in the order given, so a
        subject saved by a ``loaded`` callback cannot be named by a later ref
        of the same call.

        Args:
            host: Any mutable object. It becomes the receiver of the subjects'
                callbacks and API functions.
            *refs: Subject names, or ``[name, args]`` pairs whose ``args`` are
                passed to the subject's ``loaded`` callback.

        Returns:
            One handle per reference: the value its ``loaded`` callback returned,
            or ``None`` if it has none. Handles of nested dependencies are not included.

        Raises:
            NotFoundError: If a subject, or one of its dependencies, is not registered.
        """
        plans = [self._resolver.resolve(DependencyRef.from_value(ref)) for ref in refs]
        return [self._binder.bind(host, plan) for plan in plans]

    def unload(self, host: Any, name: str) -> None:
        """Run a subject's ``unloaded`` callback with ``host`` as its receiver.

        The API attached to the host by :meth:`load` is left where it is.

        Raises:
            NotFoundError: If no subject of that name was registered.
        """
        definition = self.registry.definition(name)
        if definition.unloaded is not None:
            bind_to(definition.unloaded, host)()
        logger.debug("Unloaded subject %r from %r", name, host)

    def view(self) -> None:
        """Log the contents of the registry."""
        logger.info(
            "%d registered subject(s):\n%s",
            len(self.registry),
            pformat(dict(self.registry.items())),
        )

    def subject(self, name: Optional[str] = None) -> Callable:
        """Decorator to save the options returned by a factory function.

        The factory is called once, when decorated. Its local variables are
        shared by every load of the subject, into every host.

        Args:
            name: Optional subject name; defaults to the function name with any
                'make_' prefix removed.

        Example:
            @loader.subject()
            def make_counter():
                total = {"loads": 0}

                def loaded(self):
                    total["loads"] += 1
                    return total["loads"]

                return {"loaded": loaded}
        """

        def decorator(factory: Callable) -> Callable:
            self.save({"name": name or inferred_name(factory), "options": factory()})
            return factory

        return decorator


def _name_and_options(subject: Any) -> tuple[Any, Any]:
    if isinstance(subject, Mapping):
        return subject.get("name"), subject.get("options")
    return getattr(subject, "name", None), getattr(subject, "options", None)
