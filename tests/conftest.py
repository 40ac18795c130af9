import pytest

from staticplugins.registry import PluginRegistry


@pytest.fixture
def registry() -> PluginRegistry:
    registry = PluginRegistry()
    registry.declare("with_users", provides=["User"])
    registry.declare("with_dob", ["with_users"], extends=["User"])
    registry.declare("with_age", ["with_users", "with_dob"], extends=["User"])
    return registry
