"""Detect dependencies that exist only through lazily loaded (dynamic) edges."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from boundgraph.graph.model import DependencyType
from boundgraph.graph.reachability import reaches

if TYPE_CHECKING:
    from boundgraph.graph.model import ProjectGraph
    from boundgraph.graph.reachability import ReachabilityCache


def only_reaches_through_dynamic_edges(
    graph: ProjectGraph,
    source: str,
    target: str,
    visited: Iterable[str] = (),
) -> bool:
    """Return True if *target* is reachable from *source* along dynamic edges alone.

    Projects listed in *visited* are never expanded; if *source* itself is
    among them the answer is False.  Uses an explicit worklist, so deep
    chains do not hit the recursion limit.
    """
    blocked = set(visited)
    if source in blocked:
        return False

    stack = [source]
    while stack:
        current = stack.pop()
        if current in blocked:
            continue
        blocked.add(current)
        for dep in graph.dependencies_of(current):
            if dep.type is not DependencyType.DYNAMIC:
                continue
            if dep.target == target:
                return True
            stack.append(dep.target)
    return False


def has_direct_eager_edge(graph: ProjectGraph, source: str, target: str) -> bool:
    """Return True if *source* declares a non-dynamic edge straight to *target*."""
    return any(
        dep.target == target and dep.type is not DependencyType.DYNAMIC
        for dep in graph.dependencies_of(source)
    )


def has_eager_route(
    graph: ProjectGraph,
    source: str,
    target: str,
    *,
    cache: ReachabilityCache | None = None,
) -> bool:
    """Return True if some route from *source* to *target* uses a non-dynamic edge.

    An eager edge ``u -> v`` lies on such a route when *source* reaches ``u``
    and ``v`` reaches *target*.
    """
    for name, deps in graph.dependencies.items():
        if not reaches(graph, source, name, cache=cache):
            continue
        for dep in deps:
            if dep.type is DependencyType.DYNAMIC:
                continue
            if dep.target == target or reaches(graph, dep.target, target, cache=cache):
                return True
    return False


def only_loads_lazily(
    graph: ProjectGraph,
    source: str,
    target: str,
    *,
    cache: ReachabilityCache | None = None,
) -> bool:
    """Return True if *source* depends on *target* only through lazy loading.

    Requires a dynamic-only route and no route that uses an eager edge,
    direct or transitive.
    """
    if has_direct_eager_edge(graph, source, target):
        return False
    if not only_reaches_through_dynamic_edges(graph, source, target):
        return False
    return not has_eager_route(graph, source, target, cache=cache)
