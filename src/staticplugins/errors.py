"""Exceptions and problem records raised or reported during resolution.

Problems are plain value records describing what is wrong with a descriptor
set. Structural problems (unknown plugins, cycles) halt resolution and are
raised inside a :class:`ResolutionError`; order and conflict problems are
collected into a :class:`ValidationReport` so that they can all be fixed in
one pass.
"""

from dataclasses import dataclass
from typing import ClassVar, Iterator

__all__ = [
    "StaticPluginError",
    "DescriptorError",
    "ResolutionError",
    "Problem",
    "UnknownDependency",
    "UnknownPluginInApplication",
    "CyclicDependency",
    "OrderViolation",
    "DuplicateBaseProvider",
    "UnresolvedBaseReference",
    "ValidationReport",
]


class StaticPluginError(Exception):
    """Base class for all errors raised by the engine."""

    pass


class DescriptorError(StaticPluginError):
    """Raised when a plugin or application descriptor is malformed."""

    pass


class ResolutionError(StaticPluginError):
    """Raised when a descriptor set cannot be resolved into a precedence chain.

    Attributes:
        problems: The problems that caused resolution to fail.
    """

    def __init__(self, problems: "tuple[Problem, ...]"):
        self.problems = tuple(problems)
        super().__init__("; ".join(problem.message for problem in self.problems))


@dataclass(frozen=True)
class Problem:
    """A single typed problem found while resolving a descriptor set."""

    kind: ClassVar[str] = "Problem"

    @property
    def message(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class UnknownDependency(Problem):
    plugin: str
    missing: str

    kind: ClassVar[str] = "UnknownDependency"

    @property
    def message(self) -> str:
        return f"Plugin '{self.plugin}' depends on unknown plugin '{self.missing}'"


@dataclass(frozen=True)
class UnknownPluginInApplication(Problem):
    application: str
    plugin: str

    kind: ClassVar[str] = "UnknownPluginInApplication"

    @property
    def message(self) -> str:
        return f"Application '{self.application}' references unknown plugin '{self.plugin}'"


@dataclass(frozen=True)
class CyclicDependency(Problem):
    """A dependency cycle; the path starts and ends with the same plugin."""

    path: tuple[str, ...]

    kind: ClassVar[str] = "CyclicDependency"

    @property
    def message(self) -> str:
        return f"Cyclic dependency: {' -> '.join(self.path)}"


@dataclass(frozen=True)
class OrderViolation(Problem):
    plugin: str
    dependency: str

    kind: ClassVar[str] = "OrderViolation"

    @property
    def message(self) -> str:
        return (
            f"Plugin '{self.plugin}' must be listed after its dependency "
            f"'{self.dependency}'"
        )


@dataclass(frozen=True)
class DuplicateBaseProvider(Problem):
    class_name: str
    first: str
    second: str

    kind: ClassVar[str] = "DuplicateBaseProvider"

    @property
    def message(self) -> str:
        return (
            f"Class '{self.class_name}' has more than one base provider: "
            f"'{self.first}' and '{self.second}'"
        )


@dataclass(frozen=True)
class UnresolvedBaseReference(Problem):
    plugin: str
    class_name: str

    kind: ClassVar[str] = "UnresolvedBaseReference"

    @property
    def message(self) -> str:
        return (
            f"Plugin '{self.plugin}' extends '{self.class_name}' but does not "
            "depend on a plugin providing its base"
        )


@dataclass(frozen=True)
class ValidationReport:
    """Problems collected by the order and conflict checks of one run."""

    problems: tuple[Problem, ...] = ()

    @property
    def ok(self) -> bool:
        return len(self.problems) == 0

    def of_kind(self, problem_type: type) -> list[Problem]:
        return [problem for problem in self.problems if isinstance(problem, problem_type)]

    def raise_for_problems(self):
        """Raise a :class:`ResolutionError` if the report holds any problems."""
        if self.problems:
            raise ResolutionError(self.problems)

    def __iter__(self) -> Iterator[Problem]:
        return iter(self.problems)

    def __len__(self) -> int:
        return len(self.problems)
