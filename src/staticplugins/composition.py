"""Composition plans for the classes assembled from a precedence chain.

A composed class is declared from its contributors, most specific override
first and foundational base last. This module works out that list; turning it
into source text is left to the code generator.
"""

from staticplugins.domain import CompositionPlan, PrecedenceChain

__all__ = ["CompositionEmitter"]


class CompositionEmitter:
    """Build :class:`CompositionPlan` objects from a validated chain.

    Plans are recomputed on every call.
    """

    def __init__(self, chain: PrecedenceChain):
        self._chain = chain

    def plan(self, class_name: str) -> CompositionPlan:
        """Collect the base provider and mixins of a class from the chain.

        Args:
            class_name: The composed class.

        Returns:
            The class's composition plan; empty if no plugin in the chain
            provides or extends the class.
        """
        base = next(
            (plugin.name for plugin in self._chain if class_name in plugin.provides), None
        )
        mixins = tuple(plugin.name for plugin in self._chain if class_name in plugin.extends)
        interfaces = tuple(
            plugin.name for plugin in self._chain if class_name in plugin.interfaces
        )
        return CompositionPlan(class_name, base, mixins, interfaces)

    def contributors(self, class_name: str) -> list[str]:
        """Plugins contributing to a class, highest precedence first and base provider last.

        Example:
            >>> emitter.contributors("User")  # ["with_age", "with_dob", "with_users"]
        """
        return self.plan(class_name).contributors

    def class_names(self) -> list[str]:
        """Every class the chain touches, in order of first appearance."""
        names: list[str] = []
        for plugin in self._chain:
            for class_name in sorted(plugin.provides | plugin.extends | plugin.interfaces):
                if class_name not in names:
                    names.append(class_name)
        return names

    def plans(self) -> list[CompositionPlan]:
        return [self.plan(class_name) for class_name in self.class_names()]
