"""Reachability over the project graph: transitive closure, cache, and path reconstruction."""

from __future__ import annotations

import logging
import threading
import weakref
from collections import OrderedDict
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from boundgraph.graph.model import Project, ProjectGraph

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Graph index
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GraphIndex:
    """Dense-index view of a graph with its transitive closure.

    ``matrix[i][j] == 1`` means project ``i`` reaches project ``j`` through
    zero or more edges.  Only valid for the graph (and graph version) it was
    built from.
    """

    name_to_index: dict[str, int]
    index_to_name: tuple[str, ...]
    adjacency: tuple[tuple[int, ...], ...]
    matrix: tuple[list[int], ...]

    def reaches(self, source: int, target: int) -> bool:
        return self.matrix[source][target] == 1


def build_graph_index(graph: ProjectGraph) -> GraphIndex:
    """Index every non-external project and compute the reachability matrix.

    Edges whose source or target is not an indexed project (external
    packages, dangling names) are dropped.  The closure is computed with one
    depth-first traversal per project; the ``matrix[i][j] == 0`` guard keeps
    cyclic graphs from looping.
    """
    names = graph.project_names()
    name_to_index = {name: idx for idx, name in enumerate(names)}
    count = len(names)

    adjacency: list[list[int]] = [[] for _ in range(count)]
    for proj, deps in graph.dependencies.items():
        u = name_to_index.get(proj)
        if u is None:
            continue
        for dep in deps:
            v = name_to_index.get(dep.target)
            if v is not None:
                adjacency[u].append(v)

    matrix: list[list[int]] = [[0] * count for _ in range(count)]
    for start in range(count):
        row = matrix[start]
        stack = [start]
        row[start] = 1
        while stack:
            current = stack.pop()
            for adj in adjacency[current]:
                if row[adj] == 0:
                    row[adj] = 1
                    stack.append(adj)

    return GraphIndex(
        name_to_index=name_to_index,
        index_to_name=tuple(names),
        adjacency=tuple(tuple(a) for a in adjacency),
        matrix=tuple(matrix),
    )


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------

# Cache key: (id(graph), graph.version)
_CacheKey = tuple[int, int]


class ReachabilityCache:
    """Thread-safe cache of :class:`GraphIndex` objects keyed by graph identity.

    Entries are keyed by ``(id(graph), graph.version)`` and hold a weak
    reference to the graph, so a recycled ``id`` never returns a stale index
    and a mutated graph forces a rebuild.  With the default ``maxsize=1``
    the cache holds a single graph at a time; larger sizes evict the least
    recently used graph.
    """

    def __init__(self, maxsize: int = 1) -> None:
        if maxsize < 1:
            msg = f"maxsize must be at least 1, got {maxsize}"
            raise ValueError(msg)
        self.maxsize = maxsize
        self.rebuilds = 0
        self._entries: OrderedDict[_CacheKey, tuple[weakref.ref[ProjectGraph], GraphIndex]] = (
            OrderedDict()
        )
        self._lock = threading.Lock()

    def get(self, graph: ProjectGraph) -> GraphIndex:
        """Return the index for *graph*, building it on a miss."""
        key: _CacheKey = (id(graph), graph.version)
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry[0]() is graph:
                self._entries.move_to_end(key)
                return entry[1]

            index = build_graph_index(graph)
            self.rebuilds += 1
            self._entries[key] = (weakref.ref(graph), index)
            self._entries.move_to_end(key)
            while len(self._entries) > self.maxsize:
                self._entries.popitem(last=False)
            logger.debug(
                "Built reachability index for %d projects (rebuild #%d)",
                len(index.index_to_name),
                self.rebuilds,
            )
            return index

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


_default_cache = ReachabilityCache()


def default_cache() -> ReachabilityCache:
    """Return the process-wide cache used when callers do not pass one."""
    return _default_cache


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def reaches(
    graph: ProjectGraph,
    source: str,
    target: str,
    *,
    cache: ReachabilityCache | None = None,
) -> bool:
    """Return True if *source* reaches *target* through zero or more edges.

    Unknown or external names never reach anything.
    """
    index = (cache or _default_cache).get(graph)
    src = index.name_to_index.get(source)
    dest = index.name_to_index.get(target)
    if src is None or dest is None:
        return False
    return index.reaches(src, dest)


def find_path(
    graph: ProjectGraph,
    source: str,
    target: str,
    *,
    cache: ReachabilityCache | None = None,
) -> list[str]:
    """Return one dependency walk from *source* to *target*, both inclusive.

    At every step the first declared edge whose endpoint still reaches
    *target* is followed, so the walk is reproducible but not necessarily
    the shortest.  Projects already visited are not entered twice, which
    keeps cyclic graphs from looping; on acyclic graphs this never
    triggers a backtrack.

    Returns an empty list when *source* equals *target*, when either name
    is not an indexed project, or when no path exists.
    """
    if source == target:
        return []

    index = (cache or _default_cache).get(graph)
    src = index.name_to_index.get(source)
    dest = index.name_to_index.get(target)
    if src is None or dest is None or not index.reaches(src, dest):
        return []

    matrix = index.matrix
    path = [src]
    visited = {src}
    frontier = [iter(index.adjacency[src])]
    while frontier and path[-1] != dest:
        for adj in frontier[-1]:
            if adj not in visited and matrix[adj][dest] == 1:
                visited.add(adj)
                path.append(adj)
                frontier.append(iter(index.adjacency[adj]))
                break
        else:
            frontier.pop()
            path.pop()

    if not path:
        return []
    return [index.index_to_name[i] for i in path]


def check_circular_path(
    graph: ProjectGraph,
    source_project: Project,
    target_project: Project,
    *,
    cache: ReachabilityCache | None = None,
) -> list[str]:
    """Return the chain by which *target_project* already reaches *source_project*.

    A non-empty result means an edge ``source -> target`` would close a
    cycle.  Targets that are not nodes of *graph* yield an empty list.
    """
    if target_project.name not in graph.nodes:
        return []
    return find_path(graph, target_project.name, source_project.name, cache=cache)
