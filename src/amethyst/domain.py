"""Domain models used throughout the library.

Subject options are saved verbatim as whatever mapping the caller supplied.
Everything downstream of the registry works on the canonical shapes defined
here instead, produced by :meth:`SubjectDefinition.from_options`.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional, Union

from amethyst.errors import InvalidDefinitionError

__all__ = [
    "Subject",
    "DependencyRef",
    "SingleApi",
    "NamedApi",
    "NoApi",
    "NO_API",
    "ApiShape",
    "SubjectDefinition",
    "BoundApi",
    "is_bindable",
]


@dataclass(frozen=True)
class Subject:
    """A named set of subject options, as accepted by ``Loader.save``.

    Attributes:
        name: The unique name the subject is registered under.
        options: The subject's options mapping (``loaded``, ``unloaded``, ``api``, ``subjects``).
    """

    name: str
    options: Mapping[str, Any]


@dataclass(frozen=True)
class DependencyRef:
    """A reference to a subject to be loaded into a host.

    Attributes:
        name: The registered name of the subject.
        args: Positional arguments passed to the subject's ``loaded`` callback.
    """

    name: str
    args: tuple

    @staticmethod
    def from_value(value: Any) -> "DependencyRef":
        """Normalize a bare name or a ``[name, args]`` pair.

        ``args`` is spread into the ``loaded`` call when it is a list or tuple,
        and passed as a single argument otherwise.

        Example:
            >>> DependencyRef.from_value("counter")
            DependencyRef(name='counter', args=())
            >>> DependencyRef.from_value(["counter", [1, 2]])
            DependencyRef(name='counter', args=(1, 2))
            >>> DependencyRef.from_value(("greeter", "Hello"))
            DependencyRef(name='greeter', args=('Hello',))
        """
        if isinstance(value, str):
            return DependencyRef(value, ())

        if (
            isinstance(value, (list, tuple))
            and 1 <= len(value) <= 2
            and isinstance(value[0], str)
        ):
            args = value[1] if len(value) == 2 else ()
            return DependencyRef(value[0], _as_args(args))

        raise InvalidDefinitionError(
            f"Subject reference {value!r} must be a name or a [name, args] pair"
        )


def _as_args(args: Any) -> tuple:
    if isinstance(args, (list, tuple)):
        return tuple(args)
    return (args,)


@dataclass(frozen=True)
class SingleApi:
    """An API consisting of one callable, attached to the host as-is once bound."""

    func: Callable


@dataclass(frozen=True)
class NamedApi:
    """An API given as a mapping; callable members are bound, the rest copied by reference."""

    members: Mapping[str, Any]


@dataclass(frozen=True)
class NoApi:
    """Marker for load-only subjects, which attach nothing to the host."""


NO_API = NoApi()

ApiShape = Union[SingleApi, NamedApi, NoApi]


@dataclass(frozen=True)
class SubjectDefinition:
    """The canonical form of a saved subject.

    Attributes:
        name: The registered subject name.
        loaded: Callback run on every load, bound to the host; returns the load's handle.
        unloaded: Callback run by ``unload``, bound to the host.
        api: The subject's public API shape.
        dependencies: References to the nested subjects loaded first, in declaration order.
        options: The options mapping exactly as saved.
    """

    name: str
    loaded: Optional[Callable]
    unloaded: Optional[Callable]
    api: ApiShape
    dependencies: tuple[DependencyRef, ...]
    options: Mapping[str, Any]

    @staticmethod
    def from_options(name: str, options: Any) -> "SubjectDefinition":
        """Validate a subject's options and normalize them into a definition.

        Raises:
            InvalidDefinitionError: If the options are not a mapping, or any of
                the known keys holds a value of the wrong shape.
        """
        if not isinstance(options, Mapping):
            raise InvalidDefinitionError(
                f"Options of subject {name!r} must be a mapping, "
                f"not {type(options).__name__}"
            )

        return SubjectDefinition(
            name,
            _callback(name, options, "loaded"),
            _callback(name, options, "unloaded"),
            _api_shape(name, options.get("api")),
            _dependencies(name, options.get("subjects")),
            options,
        )


def is_bindable(value: Any) -> bool:
    """Whether an API member should be bound to the host rather than copied.

    Classes are callable but are copied by reference, like any other value.
    """
    return callable(value) and not isinstance(value, type)


def _callback(name: str, options: Mapping[str, Any], key: str) -> Optional[Callable]:
    callback = options.get(key)
    if callback is not None and not callable(callback):
        raise InvalidDefinitionError(
            f"The {key!r} option of subject {name!r} must be callable"
        )
    return callback


def _api_shape(name: str, api: Any) -> ApiShape:
    if api is None:
        return NO_API
    if isinstance(api, Mapping):
        return NamedApi(api)
    if callable(api):
        return SingleApi(api)
    raise InvalidDefinitionError(
        f"The 'api' option of subject {name!r} must be a callable or a mapping"
    )


def _dependencies(name: str, subjects: Any) -> tuple[DependencyRef, ...]:
    """Normalize the ``subjects`` option.

    Each key names a nested subject to load. Its value is ``None``, the same
    name again, or a ``[name, args]`` pair supplying the ``loaded`` arguments.
    """
    if subjects is None:
        return ()
    if not isinstance(subjects, Mapping):
        raise InvalidDefinitionError(
            f"Subjects {subjects!r} to be loaded into {name!r} must be a mapping"
        )

    dependencies = []
    for key, value in subjects.items():
        if not isinstance(key, str):
            raise InvalidDefinitionError(
                f"Dependency {key!r} of subject {name!r} must be named by a string"
            )
        if value is None:
            dependencies.append(DependencyRef(key, ()))
            continue

        try:
            dependency = DependencyRef.from_value(value)
        except InvalidDefinitionError as e:
            raise InvalidDefinitionError(
                f"Dependency {key!r} of subject {name!r} is invalid: {e}"
            ) from e

        if dependency.name != key:
            raise InvalidDefinitionError(
                f"Dependency {key!r} of subject {name!r} names a different "
                f"subject, {dependency.name!r}"
            )
        dependencies.append(dependency)
    return tuple(dependencies)


class BoundApi:
    """Namespace holding a subject's API after it has been bound to a host.

    Members are readable both as attributes and as items, so API members may
    be named like mapping methods (``get``, ``keys``) without being shadowed.

    Example:
        >>> api = BoundApi({"greeting": "hello"})
        >>> api.greeting, api["greeting"]
        ('hello', 'hello')
    """

    def __init__(self, members: dict[str, Any]):
        self.__dict__.update(members)

    def __getitem__(self, key: str) -> Any:
        return self.__dict__[key]

    def __contains__(self, key: object) -> bool:
        return key in self.__dict__

    def __iter__(self) -> Iterator[str]:
        return iter(self.__dict__)

    def __len__(self) -> int:
        return len(self.__dict__)

    def __repr__(self) -> str:
        members = ", ".join(f"{key}={value!r}" for key, value in self.__dict__.items())
        return f"{type(self).__name__}({members})"
