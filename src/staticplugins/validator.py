"""Class-level conflict checks over a resolved set of plugins.

These checks run once the precedence order is known: a mixin may only extend a
class whose base it can reach through its own dependencies, and every class
has at most one base provider. All problems are collected rather than
stopping at the first.
"""

import logging
from typing import Sequence, Union

from staticplugins.domain import Plugin
from staticplugins.errors import DuplicateBaseProvider, UnresolvedBaseReference
from staticplugins.graph import DependencyGraph

__all__ = ["ConflictValidator", "ConflictProblem"]

logger = logging.getLogger(__name__)

ConflictProblem = Union[DuplicateBaseProvider, UnresolvedBaseReference]


class ConflictValidator:
    """Validate the classes provided and extended by a set of plugins.

    Args:
        graph: Dependency graph used to decide which plugins each plugin can reach.
    """

    def __init__(self, graph: DependencyGraph):
        self._graph = graph

    def validate(self, plugins: Sequence[Plugin]) -> list[ConflictProblem]:
        """Check base provider uniqueness and mixin reference integrity.

        Args:
            plugins: The plugins to check, lowest to highest precedence.

        Returns:
            Every problem found, ordered by plugin position and then class name.
        """
        providers = self._providers_by_class(plugins)
        problems: list[ConflictProblem] = []

        for plugin in plugins:
            for class_name in sorted(plugin.provides):
                first = providers[class_name][0]
                if first != plugin.name:
                    problems.append(DuplicateBaseProvider(class_name, first, plugin.name))

            reachable = self._graph.ancestors(plugin.name)
            for class_name in sorted(plugin.extends):
                if not any(provider in reachable for provider in providers.get(class_name, ())):
                    problems.append(UnresolvedBaseReference(plugin.name, class_name))

        if problems:
            logger.debug("Conflict validation found %d problems", len(problems))
        return problems

    @staticmethod
    def _providers_by_class(plugins: Sequence[Plugin]) -> dict[str, list[str]]:
        providers: dict[str, list[str]] = {}
        for plugin in plugins:
            for class_name in plugin.provides:
                providers.setdefault(class_name, []).append(plugin.name)
        return providers
