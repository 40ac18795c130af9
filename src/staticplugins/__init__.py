"""Static plugin precedence resolution.

Applications following the static plugin convention are assembled from
plugins, each of which supplies base classes or extends other plugins' classes
with mixins. The order of an application's plugins determines which
contributor overrides which, and plugin dependencies constrain that order.

This package resolves an application's plugins, held in memory, into a
precedence chain, validates it, and computes for each composed class the
ordered list of contributors a code generator declares it from. It neither
reads manifests from disk nor writes source code.

Key Features:
    - Immutable plugin and application descriptors
    - Dependency graphs with deterministic cycle reporting
    - Checking of authored plugin orders, or derivation of a canonical one
    - Collected reports of order and class conflict problems
    - Composition plans listing contributors highest precedence first

Basic Usage:
    >>> from staticplugins.registry import PluginRegistry
    >>> from staticplugins.domain import Application
    >>> from staticplugins.builders import make_plan
    >>>
    >>> registry = PluginRegistry()
    >>> registry.declare("with_users", provides=["User"])
    >>> registry.declare("with_dob", ["with_users"], extends=["User"])
    >>>
    >>> app = Application("app", ["with_users", "with_dob"])
    >>> make_plan(registry, app, "User").contributors
    ['with_dob', 'with_users']

The package consists of several core modules:
    - registry: Registration of loaded plugin descriptors
    - builders: High-level resolution functions
    - graph: Dependency graph construction and cycle detection
    - resolver: Checking and derivation of precedence order
    - validator: Base provider and mixin reference checks
    - composition: Composition plans for composed classes
    - descriptors: Conversion of parsed manifests into descriptors
    - naming: Identifier conventions of plugin source trees
    - domain: Core domain models (Plugin, Application, PrecedenceChain, CompositionPlan)
    - errors: Exceptions and problem records
"""
