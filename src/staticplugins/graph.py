"""Dependency graph construction and cycle detection.

The graph maps each plugin reachable from an application to the plugins it
directly depends on. It is built once per resolution run and never shared
between runs.
"""

import heapq
import logging
from collections import deque
from typing import Callable, Iterable, Iterator, Mapping, Optional

from staticplugins.domain import Application, Plugin
from staticplugins.errors import (
    CyclicDependency,
    ResolutionError,
    UnknownDependency,
    UnknownPluginInApplication,
)

__all__ = ["DependencyGraph", "build_dependency_graph", "find_cycle", "check_acyclic"]

logger = logging.getLogger(__name__)


class DependencyGraph:
    """
    Directed graph of plugin dependencies.

    Each node is a plugin name and each edge points from a plugin to one of its
    direct dependencies. Nodes are kept in the order they were added, and each
    node's dependencies in the order the plugin author declared them.
    """

    def __init__(self):
        self._dependencies: dict[str, tuple[str, ...]] = {}

    def add_dependencies(self, dependee: str, dependencies: Iterable[str]):
        """
        Add a node and its direct dependencies to the graph.

        Args:
            dependee: The plugin name whose dependencies are being registered.
            dependencies: The names of the plugins this dependee depends on.
        """
        self._dependencies[dependee] = self._dependencies.get(dependee, ()) + tuple(
            dependency
            for dependency in dependencies
            if dependency not in self._dependencies.get(dependee, ())
        )

    def dependencies_of(self, name: str) -> tuple[str, ...]:
        return self._dependencies.get(name, ())

    def dependents_of(self, name: str) -> list[str]:
        return [
            dependee
            for dependee, dependencies in self._dependencies.items()
            if name in dependencies
        ]

    def ancestors(self, name: str) -> set[str]:
        """All plugins the given plugin depends on, directly or transitively."""
        found: set[str] = set()
        pending = deque(self.dependencies_of(name))
        while pending:
            dependency = pending.popleft()
            if dependency in found:
                continue
            found.add(dependency)
            pending.extend(self.dependencies_of(dependency))
        return found

    def traverse(
        self, rank: Callable[[str], int], only: Optional[set[str]] = None
    ) -> Iterator[str]:
        """
        Perform a topological traversal of the dependency graph.

        Among the nodes whose dependencies have all been yielded, the one with
        the lowest rank is yielded next, so the traversal is deterministic.

        Args:
            rank: Ordering key used to break ties between ready nodes.
            only: If given, restrict the traversal to these nodes. A node then
                waits for every selected node it reaches, including through
                nodes outside the selection.

        Yields:
            Plugin names in an order where all dependencies of each node
            are yielded before the node itself.

        Raises:
            ResolutionError: If a cycle prevents the traversal from completing.
        """
        nodes = [name for name in self._dependencies if only is None or name in only]
        node_set = set(nodes)
        remaining = {name: self.ancestors(name) & node_set for name in nodes}
        ready = [(rank(name), name) for name, dependencies in remaining.items() if not dependencies]
        heapq.heapify(ready)

        while ready:
            _, next_item = heapq.heappop(ready)
            yield next_item
            del remaining[next_item]

            for dependee, dependencies in remaining.items():
                if next_item in dependencies:
                    dependencies.discard(next_item)
                    if not dependencies:
                        heapq.heappush(ready, (rank(dependee), dependee))

        if remaining:
            check_acyclic(self, list(remaining))
            raise ResolutionError(
                (CyclicDependency(tuple(sorted(remaining, key=rank))),)
            )

    def __contains__(self, name: str) -> bool:
        return name in self._dependencies

    def __iter__(self) -> Iterator[str]:
        return iter(self._dependencies)

    def __len__(self) -> int:
        return len(self._dependencies)

    def __repr__(self) -> str:
        return f"DependencyGraph({self._dependencies!r})"


def build_dependency_graph(
    plugins_by_name: Mapping[str, Plugin], application: Application
) -> DependencyGraph:
    """
    Construct the dependency graph of every plugin an application needs.

    The graph covers the plugins listed by the application and, transitively,
    everything they depend on.

    Args:
        plugins_by_name: All loaded plugin descriptors, keyed by name.
        application: The application whose plugins are being resolved.

    Returns:
        A dependency graph mapping plugin names to the names of their direct dependencies.

    Raises:
        ResolutionError: With an ``UnknownPluginInApplication`` problem if the
            application lists a plugin that was never loaded, or an
            ``UnknownDependency`` problem if a plugin depends on one.
    """
    for name in application.plugins:
        if name not in plugins_by_name:
            raise ResolutionError((UnknownPluginInApplication(application.name, name),))

    graph = DependencyGraph()
    pending = deque(application.plugins)
    while pending:
        name = pending.popleft()
        if name in graph:
            continue

        plugin = plugins_by_name[name]
        for dependency in plugin.dependencies:
            if dependency not in plugins_by_name:
                raise ResolutionError((UnknownDependency(name, dependency),))

        graph.add_dependencies(name, plugin.dependencies)
        pending.extend(dependency for dependency in plugin.dependencies if dependency not in graph)

    logger.debug("Built dependency graph for '%s' with %d plugins", application.name, len(graph))
    return graph


def find_cycle(graph: DependencyGraph, roots: Optional[Iterable[str]] = None) -> Optional[tuple[str, ...]]:
    """
    Find the first dependency cycle reachable from the given roots.

    Roots are visited in the order given (all graph nodes in insertion order if
    omitted) and each node's dependencies in declaration order, so the same
    graph always yields the same cycle.

    Returns:
        The cycle as a path whose first and last entries are the same plugin,
        e.g. ``("A", "B", "A")``, or None if no cycle is reachable.
    """
    finished: set[str] = set()

    for root in graph if roots is None else roots:
        if root in finished:
            continue

        stack = [root]
        stack_positions = {root: 0}
        children = [iter(graph.dependencies_of(root))]

        while children:
            child = next(children[-1], None)
            if child is None:
                done = stack.pop()
                children.pop()
                del stack_positions[done]
                finished.add(done)
                continue

            if child in stack_positions:
                return tuple(stack[stack_positions[child]:]) + (child,)
            if child in finished:
                continue

            stack_positions[child] = len(stack)
            stack.append(child)
            children.append(iter(graph.dependencies_of(child)))

    return None


def check_acyclic(graph: DependencyGraph, roots: Optional[Iterable[str]] = None):
    """
    Verify that no dependency cycle is reachable from the roots.

    Raises:
        ResolutionError: With a ``CyclicDependency`` problem naming the first cycle found.
    """
    cycle = find_cycle(graph, roots)
    if cycle is not None:
        logger.debug("Dependency cycle found: %s", cycle)
        raise ResolutionError((CyclicDependency(cycle),))
