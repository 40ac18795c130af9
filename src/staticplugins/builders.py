"""High level entry points for resolving applications."""

import logging
from dataclasses import dataclass
from typing import Optional

from staticplugins.composition import CompositionEmitter
from staticplugins.domain import Application, CompositionPlan, PrecedenceChain
from staticplugins.errors import ValidationReport
from staticplugins.graph import DependencyGraph, build_dependency_graph, check_acyclic
from staticplugins.registry import PluginRegistry
from staticplugins.resolver import OrderResolver
from staticplugins.validator import ConflictValidator

__all__ = ["Resolution", "resolve", "make_chain", "make_plan"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one application against a registry."""

    application: Application
    """The application that was resolved."""

    graph: DependencyGraph
    """Dependency graph of the application's plugins."""

    chain: Optional[PrecedenceChain]
    """The precedence chain, or None if the authored order is invalid."""

    report: ValidationReport
    """Order and conflict problems found during resolution."""

    @property
    def ok(self) -> bool:
        return self.chain is not None and self.report.ok

    def emitter(self) -> CompositionEmitter:
        """Return a :class:`CompositionEmitter` over the validated chain.

        Raises:
            ResolutionError: If the resolution has problems.
        """
        self.report.raise_for_problems()
        return CompositionEmitter(self.chain)

    def plan(self, class_name: str) -> CompositionPlan:
        return self.emitter().plan(class_name)


def resolve(
    registry: PluginRegistry,
    application: Application,
    derive_order: bool = False,
    allow_excluded: bool = False,
) -> Resolution:
    """Resolve an application's plugins into a precedence chain and validation report.

    The dependency graph is built and checked for cycles first; problems found
    there stop resolution immediately. Order and conflict problems are
    collected together into the returned report.

    Args:
        registry: Registry holding every loaded plugin descriptor.
        application: The application to resolve.
        derive_order: If True, compute the precedence order instead of checking
            the order the application lists its plugins in.
        allow_excluded: If True, dependencies that are loaded but left out of
            the application are skipped instead of reported.

    Returns:
        The :class:`Resolution`.

    Raises:
        ResolutionError: If the application or a plugin references an unknown
            plugin, or the dependency graph contains a cycle.

    Example:
        >>> resolution = resolve(registry, Application("app", ["with_users", "with_dob"]))
        >>> resolution.chain.names
        ['with_users', 'with_dob']
    """
    plugins_by_name = registry.plugins_by_name
    graph = build_dependency_graph(plugins_by_name, application)
    check_acyclic(graph, application.plugins)

    chain, violations = OrderResolver(graph, plugins_by_name).resolve(
        application, derive_order, allow_excluded
    )

    plugins = (
        chain.plugins
        if chain is not None
        else tuple(plugins_by_name[name] for name in application.plugins)
    )
    conflicts = ConflictValidator(graph).validate(plugins)

    report = ValidationReport(tuple(violations) + tuple(conflicts))
    if report.ok:
        logger.info("Resolved application '%s': %s", application.name, chain.names)
    else:
        logger.info(
            "Application '%s' has %d resolution problems", application.name, len(report)
        )

    return Resolution(application, graph, chain, report)


def make_chain(
    registry: PluginRegistry,
    application: Application,
    derive_order: bool = False,
    allow_excluded: bool = False,
) -> PrecedenceChain:
    """Resolve an application and return its validated :class:`PrecedenceChain`.

    Raises:
        ResolutionError: If resolution fails or finds any order or conflict problems.
    """
    resolution = resolve(registry, application, derive_order, allow_excluded)
    resolution.report.raise_for_problems()
    return resolution.chain


def make_plan(
    registry: PluginRegistry,
    application: Application,
    class_name: str,
    derive_order: bool = False,
    allow_excluded: bool = False,
) -> CompositionPlan:
    """Resolve an application and return the composition plan for one class.

    Raises:
        ResolutionError: If resolution fails or finds any order or conflict problems.
    """
    chain = make_chain(registry, application, derive_order, allow_excluded)
    return CompositionEmitter(chain).plan(class_name)
