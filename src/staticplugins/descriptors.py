"""Conversion of already-parsed manifests into descriptors.

Manifests are read from disk by the caller (any key/value format will do);
this module validates the resulting mappings against pydantic models and
builds :class:`~staticplugins.domain.Plugin` and
:class:`~staticplugins.domain.Application` values from them.
"""

from typing import Annotated, Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from staticplugins.domain import Application, Plugin
from staticplugins.errors import DescriptorError

__all__ = [
    "PluginManifest",
    "ApplicationManifest",
    "plugin_from_mapping",
    "application_from_mapping",
]

Name = Annotated[str, Field(min_length=1)]


class PluginManifest(BaseModel):
    """Manifest describing a static plugin."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: Name
    dependencies: list[Name] = Field(
        default_factory=list,
        description="Plugins this plugin depends on, lowest to highest precedence",
    )
    provides: list[Name] = Field(default_factory=list, description="Classes whose base this plugin supplies")
    extends: list[Name] = Field(default_factory=list, description="Classes this plugin extends with a mixin")
    interfaces: list[Name] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)

    def to_plugin(self) -> Plugin:
        return Plugin(
            self.name,
            tuple(self.dependencies),
            frozenset(self.provides),
            frozenset(self.extends),
            frozenset(self.interfaces),
            self.metadata,
        )


class ApplicationManifest(BaseModel):
    """Manifest describing an application."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: Name
    plugins: list[Name] = Field(
        default_factory=list,
        description="Plugin names, lowest to highest intended precedence",
    )

    def to_application(self) -> Application:
        return Application(self.name, tuple(self.plugins))


def plugin_from_mapping(manifest: Mapping[str, Any], strict: bool = True) -> Plugin:
    """Build a :class:`Plugin` from a parsed plugin manifest.

    Args:
        manifest: Mapping with a ``name`` and optional ``dependencies``,
            ``provides``, ``extends``, ``interfaces`` and ``metadata`` entries.
        strict: If True (default), unknown keys are rejected; otherwise they
            are ignored.

    Returns:
        The plugin descriptor.

    Raises:
        DescriptorError: If the manifest does not match :class:`PluginManifest`,
            or the plugin breaks a descriptor invariant.

    Example:
        >>> plugin_from_mapping({"name": "with_dob", "dependencies": ["with_users"]})
    """
    return _validate(PluginManifest, manifest, strict, "plugin").to_plugin()


def application_from_mapping(manifest: Mapping[str, Any], strict: bool = True) -> Application:
    """Build an :class:`Application` from a parsed application manifest.

    Raises:
        DescriptorError: If the manifest is malformed or lists a plugin twice.
    """
    return _validate(ApplicationManifest, manifest, strict, "application").to_application()


def _validate(model: type[BaseModel], manifest, strict: bool, what: str):
    if not isinstance(manifest, Mapping):
        raise DescriptorError(
            f"{what.capitalize()} manifest must be a mapping, got {type(manifest).__name__}"
        )
    if not strict:
        manifest = {key: value for key, value in manifest.items() if key in model.model_fields}
    try:
        return model.model_validate(manifest)
    except ValidationError as e:
        raise DescriptorError(f"Invalid {what} manifest: {e}") from e
