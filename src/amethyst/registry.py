"""Registration and lookup of subjects."""

import logging
from typing import Any, Callable, Iterator, Mapping

from amethyst.domain import SubjectDefinition
from amethyst.errors import (
    DuplicateNameError,
    InvalidDefinitionError,
    MissingNameError,
    NotFoundError,
)

__all__ = ["SubjectRegistry", "inferred_name"]

logger = logging.getLogger(__name__)


def inferred_name(factory: Callable) -> str:
    """Derive a subject name from a factory function's name, removing any 'make_' prefix.

    Example:
        >>> inferred_name(make_counter)  # Returns "counter"
        >>> inferred_name(draggable)     # Returns "draggable"
    """
    if factory.__name__.startswith("make_"):
        return factory.__name__[5:]
    else:
        return factory.__name__


class SubjectRegistry:
    """Append-only store of subject options, keyed by subject name.

    Options are stored exactly as given, without copying, so later mutation of
    the caller's mapping is seen by every subsequent load. Nothing is ever
    removed or replaced.
    """

    def __init__(self):
        self._subjects: dict[str, Mapping[str, Any]] = {}

    def validate(self, name: Any, options: Any) -> SubjectDefinition:
        """Check that a subject could be registered, without registering it.

        Args:
            name: The name the subject is to be registered under.
            options: The subject's options mapping.

        Returns:
            The normalized :class:`SubjectDefinition`.

        Raises:
            MissingNameError: If ``name`` is ``None`` or empty.
            InvalidDefinitionError: If ``name`` is not a string, or ``options``
                is not a well-formed mapping.
            DuplicateNameError: If ``name`` is already registered.
        """
        if name is None or name == "":
            raise MissingNameError("Subject has no name")
        if not isinstance(name, str):
            raise InvalidDefinitionError(
                f"Subject name {name!r} must be a string, not {type(name).__name__}"
            )

        definition = SubjectDefinition.from_options(name, options)

        if name in self._subjects:
            raise DuplicateNameError(
                f"A subject named {name!r} already exists. "
                "Please give your subjects unique names."
            )
        return definition

    def register(self, name: str, options: Mapping[str, Any]) -> SubjectDefinition:
        """Register a subject's options under a unique name.

        Raises:
            The same errors as :meth:`validate`.
        """
        definition = self.validate(name, options)
        self._subjects[name] = options
        logger.debug("Registered subject %r", name)
        return definition

    def lookup(self, name: str) -> Mapping[str, Any]:
        """Return the options saved under ``name``.

        Raises:
            NotFoundError: If no subject of that name was registered.
        """
        try:
            return self._subjects[name]
        except (KeyError, TypeError):
            raise NotFoundError(f"Subject {name!r} not found") from None

    def definition(self, name: str) -> SubjectDefinition:
        """Look up a subject and normalize its current options."""
        return SubjectDefinition.from_options(name, self.lookup(name))

    def names(self) -> list[str]:
        return list(self._subjects)

    def items(self) -> Iterator[tuple[str, Mapping[str, Any]]]:
        return iter(self._subjects.items())

    def __contains__(self, name: object) -> bool:
        try:
            return name in self._subjects
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self._subjects)
