"""Project graph data model: projects, typed dependency edges, and the graph container."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

# Registry packages live in the same node namespace under this prefix.
EXTERNAL_PREFIX = "npm:"


class DependencyType(enum.Enum):
    """Kind of dependency edge between two projects."""

    STATIC = "static"
    DYNAMIC = "dynamic"
    IMPLICIT = "implicit"


def is_external(name: str) -> bool:
    """Return True if *name* refers to an external registry package."""
    return name.startswith(EXTERNAL_PREFIX)


@dataclass(frozen=True)
class Project:
    """A named unit of code in the workspace."""

    name: str
    tags: frozenset[str] = frozenset()
    files: tuple[str, ...] = ()
    root: str = ""


@dataclass(frozen=True)
class Dependency:
    """A directed edge: *source* references code from *target*."""

    source: str
    target: str
    type: DependencyType = DependencyType.STATIC


class ProjectGraph:
    """Projects keyed by name plus ordered outgoing edges per project.

    Graphs compare by identity.  ``nodes`` and ``dependencies`` are read-only
    views; structural changes go through :meth:`add_project` and
    :meth:`add_dependency`, which bump ``version`` so derived data can tell
    a mutated graph from the one it was built on.
    """

    def __init__(self) -> None:
        self._nodes: dict[str, Project] = {}
        self._dependencies: dict[str, tuple[Dependency, ...]] = {}
        self.version = 0

    def __repr__(self) -> str:
        return (
            f"ProjectGraph(projects={len(self._nodes)}, "
            f"dependencies={sum(map(len, self._dependencies.values()))}, "
            f"version={self.version})"
        )

    @property
    def nodes(self) -> Mapping[str, Project]:
        return MappingProxyType(self._nodes)

    @property
    def dependencies(self) -> Mapping[str, tuple[Dependency, ...]]:
        return MappingProxyType(self._dependencies)

    def add_project(self, project: Project) -> None:
        self._nodes[project.name] = project
        self.version += 1

    def add_dependency(
        self,
        source: str,
        target: str,
        dep_type: DependencyType | str = DependencyType.STATIC,
    ) -> Dependency:
        dep = Dependency(source=source, target=target, type=DependencyType(dep_type))
        self._dependencies[source] = (*self._dependencies.get(source, ()), dep)
        self.version += 1
        return dep

    def dependencies_of(self, name: str) -> tuple[Dependency, ...]:
        """Return outgoing edges of *name* in declaration order (empty if none)."""
        return self._dependencies.get(name, ())

    def project_names(self) -> list[str]:
        """Return names of all non-external projects in insertion order."""
        return [name for name in self._nodes if not is_external(name)]
