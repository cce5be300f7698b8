"""Exceptions raised by the subject registry and loader."""

__all__ = [
    "SubjectError",
    "MissingNameError",
    "InvalidDefinitionError",
    "DuplicateNameError",
    "NotFoundError",
    "NotCallableError",
    "DependencyCycleError",
]


class SubjectError(Exception):
    """Base class for all errors raised while saving or loading subjects."""

    pass


class MissingNameError(SubjectError, ValueError):
    """Raised when a subject is saved without a name."""

    pass


class InvalidDefinitionError(SubjectError, TypeError):
    """Raised when a subject's options are not a mapping, or are malformed."""

    pass


class DuplicateNameError(SubjectError, ValueError):
    """Raised when a subject is saved under a name that is already registered."""

    pass


class NotFoundError(SubjectError, LookupError):
    """Raised when loading or unloading a subject that was never saved."""

    pass


class NotCallableError(SubjectError, TypeError):
    """Raised when a hook is registered that is not callable."""

    pass


class DependencyCycleError(SubjectError):
    """Raised when cycle detection is enabled and a subject depends on itself."""

    pass
