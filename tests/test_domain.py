import pytest

from staticplugins.domain import Application, CompositionPlan, Plugin, PrecedenceChain
from staticplugins.errors import DescriptorError


def test_plugin_normalises_collections():
    plugin = Plugin("with_dob", ["with_users"], {"Dob"}, ["User"])

    assert plugin.dependencies == ("with_users",)
    assert plugin.provides == frozenset({"Dob"})
    assert plugin.extends == frozenset({"User"})
    assert plugin.contributes_to("User")
    assert not plugin.contributes_to("Role")


def test_plugin_cannot_provide_and_extend_same_class():
    with pytest.raises(DescriptorError, match="both provides and extends"):
        Plugin("with_roles", provides={"Role"}, extends={"Role"})


def test_plugin_cannot_depend_on_itself():
    with pytest.raises(DescriptorError, match="depends on itself"):
        Plugin("with_users", ["with_users"])


def test_plugin_rejects_duplicate_dependencies():
    with pytest.raises(DescriptorError, match="duplicate dependencies"):
        Plugin("with_age", ["with_users", "with_users"])


def test_plugin_requires_a_name():
    with pytest.raises(DescriptorError, match="non-empty string"):
        Plugin("")


def test_plugin_metadata_is_read_only():
    plugin = Plugin("with_users", metadata={"author": "Arthur"})

    with pytest.raises(TypeError):
        plugin.metadata["author"] = "Martha"


def test_plugins_are_hashable():
    assert len({Plugin("a"), Plugin("a"), Plugin("b")}) == 2


def test_application_rejects_duplicate_plugins():
    with pytest.raises(DescriptorError, match="more than once"):
        Application("app", ["with_users", "with_dob", "with_users"])


def test_precedence_chain_lookup():
    users, dob = Plugin("with_users"), Plugin("with_dob", ["with_users"])
    chain = PrecedenceChain((users, dob))

    assert chain.names == ["with_users", "with_dob"]
    assert chain.index_of("with_dob") == 1
    assert chain.get("with_users") is users
    assert "with_dob" in chain
    assert "with_age" not in chain
    assert len(chain) == 2
    with pytest.raises(KeyError):
        chain.index_of("with_age")


def test_composition_plan_orders_contributors():
    plan = CompositionPlan("User", "with_users", ("with_dob", "with_age"))

    assert plan.contributors == ["with_age", "with_dob", "with_users"]
    assert plan.ascending == ["with_users", "with_dob", "with_age"]
    assert plan


def test_empty_composition_plan_is_falsy():
    plan = CompositionPlan("Role", None, ())

    assert plan.contributors == []
    assert not plan


@pytest.mark.parametrize("field_name", ["dependencies", "provides", "extends", "interfaces"])
def test_plugin_rejects_bare_string_collections(field_name):
    with pytest.raises(DescriptorError, match=f"'{field_name}' must be a collection of names"):
        Plugin("with_dob", **{field_name: "with_users"})


def test_application_rejects_bare_string_plugin_list():
    with pytest.raises(DescriptorError, match="'plugins' must be a collection of names"):
        Application("app", "with_users")


def test_composition_plan_with_only_interfaces_is_truthy():
    assert CompositionPlan("User", None, (), ("with_users",))
