"""Identifier conventions used by static plugin source trees.

The engine never touches the file system, but plugin trees follow naming
conventions that callers need to turn resolution results into identifiers:

    - plugin folders may carry a numeric prefix fixing their order,
      e.g. ``010_with_users``
    - plugin names conventionally start with ``with_``
    - base classes live under ``base/``, mixins under ``mixins/`` with a
      ``Mixin`` suffix, and references to other plugins' classes under
      ``external/``
    - interfaces carry an ``Interface`` suffix and are imported under the
      ``ImplementsInterface`` alias
"""

import re
from typing import Iterable, Optional

from staticplugins.domain import Application, CompositionPlan
from staticplugins.errors import DescriptorError

__all__ = [
    "WITH_PREFIX",
    "MIXIN_SUFFIX",
    "INTERFACE_SUFFIX",
    "IMPLEMENTS_ALIAS",
    "BASE_DIR",
    "MIXINS_DIR",
    "EXTERNAL_DIR",
    "split_order_prefix",
    "application_from_folders",
    "has_with_prefix",
    "plugin_alias",
    "mixin_name",
    "interface_name",
    "contributor_path",
    "external_path",
    "plan_paths",
    "interface_paths",
]

WITH_PREFIX = "with_"
MIXIN_SUFFIX = "Mixin"
INTERFACE_SUFFIX = "Interface"
IMPLEMENTS_ALIAS = "ImplementsInterface"

BASE_DIR = "base"
MIXINS_DIR = "mixins"
EXTERNAL_DIR = "external"

_ORDER_PREFIX = re.compile(r"^(\d+)[_-](.+)$")


def split_order_prefix(folder_name: str) -> tuple[Optional[int], str]:
    """Split a plugin folder name into its numeric order prefix and plugin name.

    Example:
        >>> split_order_prefix("010_with_users")  # Returns (10, "with_users")
        >>> split_order_prefix("with_users")      # Returns (None, "with_users")
    """
    match = _ORDER_PREFIX.match(folder_name)
    if not match:
        return None, folder_name
    return int(match.group(1)), match.group(2)


def application_from_folders(name: str, folder_names: Iterable[str]) -> Application:
    """Build an :class:`Application` from plugin folder names.

    Folders are ordered by numeric prefix; folders without a prefix follow the
    prefixed ones. Ties keep the order in which the folders were given.

    Raises:
        DescriptorError: If two folders carry the same order prefix, or two
            folders name the same plugin.
    """
    entries = []
    seen_prefixes: dict[int, str] = {}
    for position, folder_name in enumerate(folder_names):
        prefix, plugin_name = split_order_prefix(folder_name)
        if prefix is not None:
            if prefix in seen_prefixes:
                raise DescriptorError(
                    f"Folders '{seen_prefixes[prefix]}' and '{folder_name}' "
                    f"share order prefix {prefix}"
                )
            seen_prefixes[prefix] = folder_name
        entries.append((prefix is None, prefix or 0, position, plugin_name))

    return Application(name, [plugin_name for *_, plugin_name in sorted(entries)])


def has_with_prefix(plugin_name: str) -> bool:
    return plugin_name.startswith(WITH_PREFIX) and len(plugin_name) > len(WITH_PREFIX)


def plugin_alias(plugin_name: str) -> str:
    """Convert a snake_case plugin name to the CamelCase alias used in imports.

    Example:
        >>> plugin_alias("with_users")  # Returns "WithUsers"
    """
    return "".join(part[:1].upper() + part[1:] for part in plugin_name.split("_") if part)


def mixin_name(class_name: str) -> str:
    return class_name + MIXIN_SUFFIX


def interface_name(class_name: str) -> str:
    return class_name + INTERFACE_SUFFIX


def contributor_path(plugin_name: str, class_name: str, is_base: bool) -> str:
    """Identify the declaration a plugin contributes to a composed class.

    Example:
        >>> contributor_path("with_users", "User", True)  # "with_users/base/User"
        >>> contributor_path("with_age", "User", False)   # "with_age/mixins/UserMixin"
    """
    if is_base:
        return f"{plugin_name}/{BASE_DIR}/{class_name}"
    return f"{plugin_name}/{MIXINS_DIR}/{mixin_name(class_name)}"


def external_path(plugin_name: str, class_name: str) -> str:
    return f"{plugin_name}/{EXTERNAL_DIR}/{class_name}"


def plan_paths(plan: CompositionPlan) -> list[str]:
    """Contributor declarations for a plan, highest precedence first, base last."""
    return [
        contributor_path(plugin_name, plan.class_name, plugin_name == plan.base)
        for plugin_name in plan.contributors
    ]


def interface_paths(plan: CompositionPlan) -> list[str]:
    """Interface declarations for a plan, highest precedence first.

    Each is imported by the composed class under :data:`IMPLEMENTS_ALIAS`.

    Example:
        >>> interface_paths(plan)  # ["with_users/UserInterface"]
    """
    return [
        f"{plugin_name}/{interface_name(plan.class_name)}"
        for plugin_name in reversed(plan.interfaces)
    ]
