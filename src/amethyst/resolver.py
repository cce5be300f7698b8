"""Resolution of a subject and its nested dependencies into a load plan.

Resolution looks up every subject in the dependency tree before anything is
loaded, so an unknown name anywhere in the tree fails with the host still
untouched.

Dependency graphs must be acyclic. By default no check is made, and a cycle
recurses until Python raises :class:`RecursionError`. A resolver created with
``detect_cycles=True`` tracks the path being resolved and raises
:class:`~amethyst.errors.DependencyCycleError` instead.
"""

import logging
from dataclasses import dataclass

from amethyst.domain import DependencyRef, SubjectDefinition
from amethyst.errors import DependencyCycleError, NotFoundError
from amethyst.registry import SubjectRegistry

__all__ = ["LoadPlan", "DependencyResolver"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadPlan:
    """A subject ready to be loaded, with its dependencies' plans.

    Attributes:
        definition: The subject's definition, as it stood when resolved.
        args: Arguments for the subject's ``loaded`` callback.
        dependencies: Plans for the nested subjects, in declaration order.
    """

    definition: SubjectDefinition
    args: tuple
    dependencies: tuple["LoadPlan", ...]

    @property
    def name(self) -> str:
        return self.definition.name


class DependencyResolver:
    def __init__(self, registry: SubjectRegistry, detect_cycles: bool = False):
        self._registry = registry
        self._detect_cycles = detect_cycles

    def resolve(self, ref: DependencyRef) -> LoadPlan:
        """Resolve a subject reference and all of its nested dependencies.

        Raises:
            NotFoundError: If the subject, or any subject it depends on, is not registered.
            InvalidDefinitionError: If a subject's options have become malformed since saving.
            DependencyCycleError: If cycle detection is enabled and a cycle is found.
        """
        return self._resolve(ref, ())

    def _resolve(self, ref: DependencyRef, path: tuple[str, ...]) -> LoadPlan:
        if self._detect_cycles and ref.name in path:
            cycle = path[path.index(ref.name):] + (ref.name,)
            raise DependencyCycleError(
                f"Dependency cycle detected: {' -> '.join(cycle)}"
            )

        definition = self._registry.definition(ref.name)
        path = path + (ref.name,)

        dependencies = []
        for dependency in definition.dependencies:
            if dependency.name not in self._registry:
                raise NotFoundError(
                    f"Subject {dependency.name!r} required by {ref.name!r} not found"
                )
            logger.debug("Resolving dependency %r of %r", dependency.name, ref.name)
            dependencies.append(self._resolve(dependency, path))

        return LoadPlan(definition, ref.args, tuple(dependencies))
