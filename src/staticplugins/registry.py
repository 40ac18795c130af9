"""Registration of loaded plugin descriptors."""

import logging
from typing import Any, Iterable, Mapping, Optional

from staticplugins.descriptors import plugin_from_mapping
from staticplugins.domain import Plugin
from staticplugins.errors import DescriptorError

__all__ = ["PluginRegistry"]

logger = logging.getLogger(__name__)


class PluginRegistry:
    """Registry of loaded plugin descriptors.

    The registry remembers the order in which plugins were registered. That
    declaration order is the tie-break used when the engine derives a
    precedence order itself, so registering the same descriptors in the same
    order always yields the same result.

    Example:
        >>> registry = PluginRegistry()
        >>> registry.declare("with_users", provides=["User"])
        >>> registry.declare("with_dob", ["with_users"], extends=["User"])
        >>> registry.names
        ['with_users', 'with_dob']
    """

    def __init__(self, plugins: Iterable[Plugin] = ()):
        self._plugins: dict[str, Plugin] = {}
        for plugin in plugins:
            self.register(plugin)

    def register(self, plugin: Plugin) -> Plugin:
        """Register a plugin descriptor.

        Args:
            plugin: The descriptor to register.

        Returns:
            The registered descriptor.

        Raises:
            DescriptorError: If a plugin with the same name is already registered.
        """
        if plugin.name in self._plugins:
            raise DescriptorError(
                f"Duplicate plugin name '{plugin.name}' "
                f"for plugins {self.names}"
            )
        self._plugins[plugin.name] = plugin
        logger.debug("Plugin registered: %s (depends on %s)", plugin.name, list(plugin.dependencies))
        return plugin

    def declare(
        self,
        name: str,
        dependencies: Iterable[str] = (),
        provides: Iterable[str] = (),
        extends: Iterable[str] = (),
        interfaces: Iterable[str] = (),
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Plugin:
        """Construct and register a plugin descriptor in one step."""
        return self.register(
            Plugin(
                name,
                tuple(dependencies),
                frozenset(provides),
                frozenset(extends),
                frozenset(interfaces),
                metadata or {},
            )
        )

    def load(self, manifests: Iterable[Mapping[str, Any]], strict: bool = True) -> list[Plugin]:
        """Register a plugin for each parsed manifest, in the order given.

        Raises:
            DescriptorError: If a manifest is malformed or names a registered plugin.
        """
        return [self.register(plugin_from_mapping(manifest, strict)) for manifest in manifests]

    @property
    def names(self) -> list[str]:
        return list(self._plugins)

    @property
    def plugins_by_name(self) -> Mapping[str, Plugin]:
        """Registered plugins keyed by name, in declaration order."""
        return dict(self._plugins)

    def registered_plugins(self, names: Optional[Iterable[str]] = None) -> list[Plugin]:
        """Retrieve plugins in declaration order, optionally restricted to some names.

        Args:
            names: Names to select. If None, returns all plugins.
        """
        if names is None:
            return list(self._plugins.values())
        selected = set(names)
        return [plugin for plugin in self._plugins.values() if plugin.name in selected]

    def __getitem__(self, name: str) -> Plugin:
        return self._plugins[name]

    def __contains__(self, name: str) -> bool:
        return name in self._plugins

    def __len__(self) -> int:
        return len(self._plugins)
