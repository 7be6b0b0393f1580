"""Shared test fixtures for boundgraph."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from boundgraph.graph.model import DependencyType, Project, ProjectGraph
from boundgraph.graph.reachability import ReachabilityCache

if TYPE_CHECKING:
    from pathlib import Path


def make_graph(
    edges: list[tuple[str, str]] | list[tuple[str, str, str]],
    *,
    nodes: list[str] | None = None,
    tags: dict[str, list[str]] | None = None,
) -> ProjectGraph:
    """Build a graph from ``(source, target[, type])`` tuples.

    Every name mentioned in *edges* or *nodes* becomes a project, except
    external ``npm:`` names which only appear as edge targets.
    """
    tags = tags or {}
    graph = ProjectGraph()
    names: list[str] = list(nodes or [])
    for edge in edges:
        for name in edge[:2]:
            if name not in names and not name.startswith("npm:"):
                names.append(name)
    for name in names:
        graph.add_project(Project(name=name, tags=frozenset(tags.get(name, []))))
    for edge in edges:
        dep_type = edge[2] if len(edge) == 3 else DependencyType.STATIC.value  # type: ignore[misc]
        graph.add_dependency(edge[0], edge[1], dep_type)
    return graph


@pytest.fixture()
def cache() -> ReachabilityCache:
    """Provide a private reachability cache so tests do not share state."""
    return ReachabilityCache()


@pytest.fixture()
def workspace_graph() -> ProjectGraph:
    """A small workspace: an app, two features, a ui lib, a util lib, a data lib."""
    graph = ProjectGraph()
    graph.add_project(
        Project(
            name="shop",
            tags=frozenset({"type:app"}),
            files=("apps/shop/src/main.ts",),
            root="apps/shop",
        )
    )
    graph.add_project(
        Project(
            name="feature-cart",
            tags=frozenset({"type:feature"}),
            files=(
                "libs/feature-cart/src/index.ts",
                "libs/feature-cart/src/lib/cart.ts",
            ),
            root="libs/feature-cart",
        )
    )
    graph.add_project(
        Project(
            name="feature-orders",
            tags=frozenset({"type:feature"}),
            files=("libs/feature-orders/src/index.ts",),
            root="libs/feature-orders",
        )
    )
    graph.add_project(
        Project(
            name="ui",
            tags=frozenset({"type:ui"}),
            files=("libs/ui/src/index.ts", "libs/ui/src/button.tsx"),
            root="libs/ui",
        )
    )
    graph.add_project(
        Project(
            name="util",
            tags=frozenset({"type:util"}),
            files=("libs/util/index.ts",),
            root="libs/util",
        )
    )
    graph.add_project(
        Project(
            name="data",
            tags=frozenset({"type:data"}),
            files=("libs/data/src/index.ts",),
            root="libs/data",
        )
    )
    graph.add_dependency("shop", "feature-cart")
    graph.add_dependency("shop", "feature-orders", DependencyType.DYNAMIC)
    graph.add_dependency("feature-cart", "ui")
    graph.add_dependency("feature-cart", "util")
    graph.add_dependency("feature-orders", "data")
    graph.add_dependency("feature-orders", "feature-cart")
    graph.add_dependency("data", "npm:rxjs")
    return graph


@pytest.fixture()
def graph_file(tmp_path: Path) -> Path:
    """Write a YAML description of a three-project graph."""
    path = tmp_path / "graph.yml"
    path.write_text(
        "projects:\n"
        "  - name: feature-a\n"
        "    root: libs/feature-a\n"
        "    tags: ['type:feature']\n"
        "    files: [libs/feature-a/src/index.ts]\n"
        "  - name: feature-b\n"
        "    root: libs/feature-b\n"
        "    tags: ['type:feature']\n"
        "    files: [libs/feature-b/src/index.ts]\n"
        "  - name: data\n"
        "    root: libs/data\n"
        "    tags: ['type:data']\n"
        "    files: [libs/data/src/index.ts]\n"
        "dependencies:\n"
        "  - {source: feature-b, target: feature-a, type: static}\n"
        "  - {source: feature-a, target: data, type: dynamic}\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def config_file(tmp_path: Path) -> Path:
    """Write a boundaries.yml restricting features to ui and util projects."""
    path = tmp_path / "boundaries.yml"
    path.write_text(
        "version: 1\n"
        "allow:\n"
        "  - 'libs/shared/**'\n"
        "depConstraints:\n"
        "  - sourceTag: 'type:feature'\n"
        "    onlyDependOnLibsWithTags: ['type:ui', 'type:util', 'type:feature']\n",
        encoding="utf-8",
    )
    return path
