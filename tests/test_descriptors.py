import pytest
from pydantic import ValidationError

from staticplugins.descriptors import (
    ApplicationManifest,
    PluginManifest,
    application_from_mapping,
    plugin_from_mapping,
)
from staticplugins.domain import Application, Plugin
from staticplugins.errors import DescriptorError


def test_plugin_from_minimal_manifest():
    assert plugin_from_mapping({"name": "with_users"}) == Plugin("with_users")


def test_plugin_from_full_manifest():
    plugin = plugin_from_mapping(
        {
            "name": "with_age",
            "dependencies": ["with_users", "with_dob"],
            "extends": ["User"],
            "interfaces": ["User"],
            "metadata": {"description": "Adds age"},
        }
    )

    assert plugin.dependencies == ("with_users", "with_dob")
    assert plugin.extends == frozenset({"User"})
    assert plugin.interfaces == frozenset({"User"})
    assert plugin.metadata["description"] == "Adds age"


def test_plugin_manifest_rejects_unknown_keys():
    with pytest.raises(DescriptorError, match="Extra inputs are not permitted"):
        plugin_from_mapping({"name": "with_users", "version": "1.0"})


def test_plugin_manifest_tolerates_unknown_keys_when_lenient():
    assert plugin_from_mapping({"name": "with_users", "version": "1.0"}, strict=False).name == "with_users"


@pytest.mark.parametrize(
    "manifest",
    [
        {},
        {"name": ""},
        {"name": 3},
        {"name": "with_dob", "dependencies": "with_users"},
        {"name": "with_dob", "dependencies": [None]},
        {"name": "with_dob", "metadata": ["a"]},
    ],
)
def test_malformed_plugin_manifest_is_rejected(manifest):
    with pytest.raises(DescriptorError):
        plugin_from_mapping(manifest)


def test_non_mapping_manifest_is_rejected():
    with pytest.raises(DescriptorError, match="must be a mapping"):
        plugin_from_mapping(["with_users"])


def test_manifest_breaking_exclusivity_is_rejected():
    with pytest.raises(DescriptorError, match="both provides and extends"):
        plugin_from_mapping({"name": "with_roles", "provides": ["Role"], "extends": ["Role"]})


def test_application_from_manifest():
    assert application_from_mapping(
        {"name": "app", "plugins": ["with_users", "with_dob"]}
    ) == Application("app", ("with_users", "with_dob"))


def test_application_manifest_rejects_duplicates():
    with pytest.raises(DescriptorError, match="more than once"):
        application_from_mapping({"name": "app", "plugins": ["with_users", "with_users"]})


def test_manifest_models_can_be_used_directly():
    manifest = PluginManifest(name="with_dob", dependencies=["with_users"], extends=["User"])

    assert manifest.to_plugin() == Plugin("with_dob", ("with_users",), extends=frozenset({"User"}))
    assert ApplicationManifest(name="app").to_application() == Application("app")


def test_validation_error_is_reported_as_descriptor_error():
    with pytest.raises(DescriptorError, match="Invalid application manifest") as raised:
        application_from_mapping({"name": "app", "plugins": "with_users"})

    assert isinstance(raised.value.__cause__, ValidationError)
