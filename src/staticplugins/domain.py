"""Domain models used throughout the engine."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Optional

from staticplugins.errors import DescriptorError

__all__ = ["Plugin", "Application", "PrecedenceChain", "CompositionPlan"]


@dataclass(frozen=True)
class Plugin:
    """Descriptor for a static plugin.

    Attributes:
        name: Unique name of the plugin, e.g. ``with_users``.
        dependencies: Names of the plugins this plugin depends on, lowest to
            highest precedence as declared by the plugin author.
        provides: Class names for which this plugin supplies the base implementation.
        extends: Class names this plugin extends with a mixin.
        interfaces: Class names for which this plugin contributes an interface.
        metadata: Arbitrary metadata carried over from the manifest.

    Example:
        >>> Plugin("with_dob", ["with_users"], extends={"User"})

    Raises:
        DescriptorError: If the plugin both provides and extends the same class,
            or its dependency list is malformed.
    """

    name: str
    dependencies: tuple[str, ...] = ()
    provides: frozenset[str] = frozenset()
    extends: frozenset[str] = frozenset()
    interfaces: frozenset[str] = frozenset()
    metadata: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise DescriptorError(f"Plugin name must be a non-empty string, got {self.name!r}")
        for field_name in ("dependencies", "provides", "extends", "interfaces"):
            _reject_bare_string(self, field_name)

        object.__setattr__(self, "dependencies", tuple(self.dependencies))
        object.__setattr__(self, "provides", frozenset(self.provides))
        object.__setattr__(self, "extends", frozenset(self.extends))
        object.__setattr__(self, "interfaces", frozenset(self.interfaces))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

        if self.name in self.dependencies:
            raise DescriptorError(f"Plugin '{self.name}' depends on itself")

        duplicates = _duplicates(self.dependencies)
        if duplicates:
            raise DescriptorError(
                f"Plugin '{self.name}' declares duplicate dependencies {duplicates}"
            )

        both = self.provides & self.extends
        if both:
            raise DescriptorError(
                f"Plugin '{self.name}' both provides and extends {sorted(both)}"
            )

    def contributes_to(self, class_name: str) -> bool:
        return (
            class_name in self.provides
            or class_name in self.extends
            or class_name in self.interfaces
        )


@dataclass(frozen=True)
class Application:
    """Descriptor for an application assembled from plugins.

    Attributes:
        name: Name of the application.
        plugins: Plugin names, lowest to highest intended precedence.
    """

    name: str
    plugins: tuple[str, ...] = ()

    def __post_init__(self):
        _reject_bare_string(self, "plugins")
        object.__setattr__(self, "plugins", tuple(self.plugins))
        duplicates = _duplicates(self.plugins)
        if duplicates:
            raise DescriptorError(
                f"Application '{self.name}' lists plugins more than once: {duplicates}"
            )


@dataclass(frozen=True)
class PrecedenceChain:
    """Plugins ordered from lowest to highest precedence.

    Every plugin appears after all of its (transitive) dependencies.
    """

    plugins: tuple[Plugin, ...]
    derived: bool = False
    """True if the order was computed by the engine rather than authored."""

    @property
    def names(self) -> list[str]:
        return [plugin.name for plugin in self.plugins]

    def index_of(self, name: str) -> int:
        for index, plugin in enumerate(self.plugins):
            if plugin.name == name:
                return index
        raise KeyError(name)

    def get(self, name: str) -> Optional[Plugin]:
        return next((plugin for plugin in self.plugins if plugin.name == name), None)

    def __iter__(self) -> Iterator[Plugin]:
        return iter(self.plugins)

    def __len__(self) -> int:
        return len(self.plugins)

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None


@dataclass(frozen=True)
class CompositionPlan:
    """The plugins contributing to one composed class.

    Attributes:
        class_name: The composed class.
        base: Name of the plugin providing the base implementation, if any.
        mixins: Names of the plugins extending the class, lowest precedence first.
        interfaces: Names of the plugins declaring an interface for the class,
            lowest precedence first.
    """

    class_name: str
    base: Optional[str]
    mixins: tuple[str, ...]
    interfaces: tuple[str, ...] = ()

    @property
    def contributors(self) -> list[str]:
        """Highest precedence first, base provider last."""
        contributors = list(reversed(self.mixins))
        if self.base is not None:
            contributors.append(self.base)
        return contributors

    @property
    def ascending(self) -> list[str]:
        """Base provider first, then mixins from lowest to highest precedence."""
        return list(reversed(self.contributors))

    def __bool__(self) -> bool:
        return self.base is not None or len(self.mixins) > 0 or len(self.interfaces) > 0


def _reject_bare_string(descriptor, field_name: str):
    if isinstance(getattr(descriptor, field_name), (str, bytes)):
        raise DescriptorError(
            f"'{descriptor.name}' field '{field_name}' must be a collection of names, not a string"
        )


def _duplicates(names: Iterable[str]) -> list[str]:
    seen = set()
    duplicates = []
    for name in names:
        if name in seen and name not in duplicates:
            duplicates.append(name)
        seen.add(name)
    return duplicates
