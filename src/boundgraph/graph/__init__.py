"""Graph domain — data model, YAML loader, reachability, lazy-edge filtering."""

from boundgraph.graph.lazy_edges import (
    has_direct_eager_edge,
    has_eager_route,
    only_loads_lazily,
    only_reaches_through_dynamic_edges,
)
from boundgraph.graph.loader import (
    GraphLoadResult,
    ParsedFile,
    build_graph,
    load_graph,
    parse_graph_file,
)
from boundgraph.graph.model import (
    EXTERNAL_PREFIX,
    Dependency,
    DependencyType,
    Project,
    ProjectGraph,
    is_external,
)
from boundgraph.graph.reachability import (
    GraphIndex,
    ReachabilityCache,
    build_graph_index,
    check_circular_path,
    default_cache,
    find_path,
    reaches,
)

__all__ = [
    "EXTERNAL_PREFIX",
    "Dependency",
    "DependencyType",
    "GraphIndex",
    "GraphLoadResult",
    "ParsedFile",
    "Project",
    "ProjectGraph",
    "ReachabilityCache",
    "build_graph",
    "build_graph_index",
    "check_circular_path",
    "default_cache",
    "find_path",
    "has_direct_eager_edge",
    "has_eager_route",
    "is_external",
    "load_graph",
    "only_loads_lazily",
    "only_reaches_through_dynamic_edges",
    "parse_graph_file",
    "reaches",
]
