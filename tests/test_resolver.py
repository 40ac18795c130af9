import pytest

from staticplugins.domain import Application
from staticplugins.errors import OrderViolation
from staticplugins.graph import build_dependency_graph
from staticplugins.registry import PluginRegistry
from staticplugins.resolver import OrderResolver


def resolver_for(registry: PluginRegistry, application: Application) -> OrderResolver:
    graph = build_dependency_graph(registry.plugins_by_name, application)
    return OrderResolver(graph, registry.plugins_by_name)


def test_authored_order_is_kept(registry):
    application = Application("app", ["with_users", "with_dob", "with_age"])

    chain, violations = resolver_for(registry, application).resolve(application)

    assert violations == []
    assert chain.names == ["with_users", "with_dob", "with_age"]
    assert not chain.derived


def test_dependency_listed_later_is_a_violation(registry):
    application = Application("app", ["with_dob", "with_users", "with_age"])

    chain, violations = resolver_for(registry, application).resolve(application)

    assert chain is None
    assert violations == [OrderViolation("with_dob", "with_users")]


def test_all_violations_are_reported_in_scan_order(registry):
    application = Application("app", ["with_age", "with_dob", "with_users"])

    violations = resolver_for(registry, application).check_order(application)

    assert violations == [
        OrderViolation("with_age", "with_users"),
        OrderViolation("with_age", "with_dob"),
        OrderViolation("with_dob", "with_users"),
    ]


def test_excluded_dependency_is_a_violation_by_default(registry):
    application = Application("app", ["with_dob", "with_age"])

    violations = resolver_for(registry, application).check_order(application)

    assert violations == [
        OrderViolation("with_dob", "with_users"),
        OrderViolation("with_age", "with_users"),
    ]


def test_excluded_dependency_can_be_allowed(registry, caplog):
    application = Application("app", ["with_dob", "with_age"])

    chain, violations = resolver_for(registry, application).resolve(
        application, allow_excluded=True
    )

    assert violations == []
    assert chain.names == ["with_dob", "with_age"]
    assert "does not include" in caplog.text


def test_derived_order_respects_dependencies(registry):
    application = Application("app", ["with_age", "with_dob", "with_users"])

    chain, violations = resolver_for(registry, application).resolve(application, derive=True)

    assert violations == []
    assert chain.names == ["with_users", "with_dob", "with_age"]
    assert chain.derived


def test_derived_order_pulls_in_missing_dependencies(registry):
    application = Application("app", ["with_age"])

    order = resolver_for(registry, application).derive_order(application)

    assert order == ["with_users", "with_dob", "with_age"]


def test_derived_order_breaks_ties_by_declaration_order():
    registry = PluginRegistry()
    registry.declare("with_users", provides=["User"])
    registry.declare("with_roles", provides=["Role"])
    registry.declare("with_accounts", ["with_users"], provides=["Account"])
    registry.declare("with_audit")
    application = Application("app", ["with_audit", "with_accounts", "with_roles", "with_users"])

    order = resolver_for(registry, application).derive_order(application)

    assert order == ["with_users", "with_roles", "with_accounts", "with_audit"]


def test_derived_order_is_deterministic():
    def build():
        registry = PluginRegistry()
        for name, dependencies in [
            ("e", ["b", "c"]),
            ("a", []),
            ("b", ["a"]),
            ("c", ["a"]),
            ("d", []),
        ]:
            registry.declare(name, dependencies)
        application = Application("app", ["e", "d"])
        return resolver_for(registry, application).derive_order(application)

    assert build() == build() == ["a", "b", "c", "e", "d"]


@pytest.fixture
def admin_registry() -> PluginRegistry:
    registry = PluginRegistry()
    registry.declare("with_admin", ["with_roles"])
    registry.declare("with_users")
    registry.declare("with_roles", ["with_users"])
    return registry


def test_order_through_excluded_plugin_is_checked(admin_registry):
    application = Application("app", ["with_admin", "with_users"])

    chain, violations = resolver_for(admin_registry, application).resolve(
        application, allow_excluded=True
    )

    assert chain is None
    assert violations == [OrderViolation("with_admin", "with_users")]


def test_order_through_excluded_plugin_is_accepted_when_respected(admin_registry):
    application = Application("app", ["with_users", "with_admin"])

    chain, violations = resolver_for(admin_registry, application).resolve(
        application, allow_excluded=True
    )

    assert violations == []
    assert chain.names == ["with_users", "with_admin"]


def test_violation_through_excluded_plugin_is_reported_once():
    registry = PluginRegistry()
    registry.declare("with_users")
    registry.declare("with_roles", ["with_users"])
    registry.declare("with_admin", ["with_roles", "with_users"])
    application = Application("app", ["with_admin", "with_users"])

    violations = resolver_for(registry, application).check_order(application, allow_excluded=True)

    assert violations == [OrderViolation("with_admin", "with_users")]


def test_derived_order_through_excluded_plugin_keeps_precedence(admin_registry):
    application = Application("app", ["with_admin", "with_users"])

    chain, violations = resolver_for(admin_registry, application).resolve(
        application, derive=True, allow_excluded=True
    )

    assert violations == []
    assert chain.names == ["with_users", "with_admin"]
