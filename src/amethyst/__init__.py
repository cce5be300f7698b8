"""Amethyst runtime composition library.

Amethyst composes behaviour into objects at runtime, without inheritance.
Reusable behaviour is saved once, by name, as a *subject*: an optional
``loaded`` callback, an optional ``unloaded`` callback, an optional public
``api``, and optional nested ``subjects`` it depends on. Loading a subject into
a host binds its callbacks and API functions to that host and attaches the
API to the host under the subject's name.

Key Features:
    - Any object can host any number of subjects
    - One subject can be loaded into many hosts, each bound independently
    - Nested subjects are loaded before the subjects that depend on them
    - Save and load hooks for observing the registry and hosts

Basic Usage:
    >>> import amethyst
    >>>
    >>> amethyst.save({
    ...     "name": "counter",
    ...     "options": {
    ...         "loaded": lambda self: setattr(self, "n", getattr(self, "n", 0) + 1),
    ...         "api": {"get": lambda self: self.n},
    ...     },
    ... })
    >>> amethyst.load(widget, "counter")
    [None]
    >>> widget.counter.get()
    1

The module-level functions use a single process-wide :class:`Loader`,
``default_loader``, whose registry lives as long as the process. Create a
separate :class:`Loader` to keep a registry of your own.

The library consists of several modules:
    - registry: Subject registration and lookup
    - hooks: Save and load observer hooks
    - resolver: Resolution of nested subject dependencies
    - binder: Binding subjects to hosts
    - loader: The Loader entry point
    - domain: Canonical subject shapes
    - errors: Library-specific exceptions
"""

from amethyst.domain import BoundApi, DependencyRef, Subject, SubjectDefinition
from amethyst.errors import (
    DependencyCycleError,
    DuplicateNameError,
    InvalidDefinitionError,
    MissingNameError,
    NotCallableError,
    NotFoundError,
    SubjectError,
)
from amethyst.hooks import HookDispatcher
from amethyst.loader import Loader
from amethyst.registry import SubjectRegistry

__all__ = [
    "BoundApi",
    "DependencyRef",
    "Subject",
    "SubjectDefinition",
    "SubjectError",
    "MissingNameError",
    "InvalidDefinitionError",
    "DuplicateNameError",
    "NotFoundError",
    "NotCallableError",
    "DependencyCycleError",
    "HookDispatcher",
    "Loader",
    "SubjectRegistry",
    "default_loader",
    "save",
    "load",
    "unload",
    "view",
    "subject",
    "before",
    "after",
]

default_loader = Loader()

save = default_loader.save
load = default_loader.load
unload = default_loader.unload
view = default_loader.view
subject = default_loader.subject
before = default_loader.before
after = default_loader.after
