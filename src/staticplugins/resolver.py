"""Precedence ordering of an application's plugins.

An application either lists its plugins in the order the author intends, in
which case that order is checked against the dependency graph, or asks for the
order to be derived, in which case a canonical topological order is computed.
A hand-authored order that breaks a dependency is reported, never repaired.
"""

import logging
from typing import Mapping, Optional

from staticplugins.domain import Application, Plugin, PrecedenceChain
from staticplugins.errors import OrderViolation
from staticplugins.graph import DependencyGraph

__all__ = ["OrderResolver"]

logger = logging.getLogger(__name__)


class OrderResolver:
    """Resolve an application's plugins into a :class:`PrecedenceChain`.

    Args:
        graph: Acyclic dependency graph covering the application's plugins.
        plugins_by_name: All loaded plugins keyed by name. Their iteration
            order is the declaration order used to break ties when deriving
            an order.
    """

    def __init__(self, graph: DependencyGraph, plugins_by_name: Mapping[str, Plugin]):
        self._graph = graph
        self._plugins_by_name = plugins_by_name
        self._declaration_index = {name: index for index, name in enumerate(plugins_by_name)}

    def check_order(
        self, application: Application, allow_excluded: bool = False
    ) -> list[OrderViolation]:
        """Check that every plugin is listed after all of its direct dependencies.

        The list is scanned left to right and each plugin's dependencies in
        declaration order, so the first violation returned is the first
        offending pair found.

        Args:
            application: The application whose plugin order is checked.
            allow_excluded: If True, a dependency that is loaded but not listed
                by the application is not itself reported. The listed plugins
                it depends on, directly or transitively, must still come
                before the plugin depending on it.

        Returns:
            All violations found, in scan order.
        """
        positions = {name: index for index, name in enumerate(application.plugins)}
        violations = []

        for index, name in enumerate(application.plugins):
            offending: list[str] = []
            for dependency in self._graph.dependencies_of(name):
                position = positions.get(dependency)
                if position is None and allow_excluded:
                    logger.warning(
                        "Plugin '%s' depends on '%s', which application '%s' does not include",
                        name,
                        dependency,
                        application.name,
                    )
                    offending.extend(
                        ancestor
                        for ancestor in sorted(
                            self._graph.ancestors(dependency) & positions.keys(),
                            key=positions.__getitem__,
                        )
                        if positions[ancestor] > index
                    )
                elif position is None or position > index:
                    offending.append(dependency)

            reported: set[str] = set()
            for dependency in offending:
                if dependency not in reported:
                    reported.add(dependency)
                    violations.append(OrderViolation(name, dependency))

        return violations

    def derive_order(self, application: Application, allow_excluded: bool = False) -> list[str]:
        """Compute a canonical order for the application's plugins.

        When several plugins are ready at once, the one declared first in the
        loaded descriptor set comes first, so the same input always yields the
        same order.

        Args:
            application: The application whose plugins are ordered.
            allow_excluded: If True, only the plugins the application lists are
                ordered; otherwise their missing dependencies are pulled in too.

        Returns:
            Plugin names from lowest to highest precedence.
        """
        only = set(application.plugins) if allow_excluded else None
        order = list(self._graph.traverse(self._declaration_index.__getitem__, only))
        logger.debug("Derived order for '%s': %s", application.name, order)
        return order

    def resolve(
        self, application: Application, derive: bool = False, allow_excluded: bool = False
    ) -> tuple[Optional[PrecedenceChain], list[OrderViolation]]:
        """Produce the application's precedence chain.

        Returns:
            The chain and an empty list, or None and the order violations that
            prevent the authored order from being used.
        """
        if derive:
            names = self.derive_order(application, allow_excluded)
            return self._chain(names, derived=True), []

        violations = self.check_order(application, allow_excluded)
        if violations:
            return None, violations
        return self._chain(application.plugins, derived=False), []

    def _chain(self, names, derived: bool) -> PrecedenceChain:
        return PrecedenceChain(tuple(self._plugins_by_name[name] for name in names), derived)
