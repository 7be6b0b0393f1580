"""YAML graph reader.

Reads an already-built project graph description (``projects`` and
``dependencies`` lists) and turns it into a :class:`ProjectGraph`.
Validates name uniqueness and edge integrity; problems are collected on the
result instead of aborting the load.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import yaml

from boundgraph.graph.model import DependencyType, Project, ProjectGraph, is_external

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

_VALID_DEPENDENCY_TYPES = frozenset(t.value for t in DependencyType)


@dataclass
class ParsedFile:
    """Raw entries of a single YAML graph file."""

    projects: list[dict[str, Any]] = field(default_factory=list)
    dependencies: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class GraphLoadResult:
    """The loaded graph plus diagnostics."""

    graph: ProjectGraph = field(default_factory=ProjectGraph)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def parse_graph_file(path: Path) -> ParsedFile:
    """Parse a YAML graph file into raw project and dependency entries."""
    text = path.read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    if data is None:
        return ParsedFile()
    if not isinstance(data, dict):
        msg = f"{path.name}: graph file must be a YAML mapping"
        raise ValueError(msg)

    projects = data.get("projects") or []
    dependencies = data.get("dependencies") or []
    if not isinstance(projects, list):
        msg = f"{path.name}: 'projects' must be a list"
        raise ValueError(msg)
    if not isinstance(dependencies, list):
        msg = f"{path.name}: 'dependencies' must be a list"
        raise ValueError(msg)
    return ParsedFile(projects=projects, dependencies=dependencies)


def _as_str_list(value: object) -> list[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return [str(v) for v in value]
    return [str(value)]


def build_graph(parsed: ParsedFile) -> GraphLoadResult:
    """Build a :class:`ProjectGraph` from parsed entries.

    Two passes: projects first (collecting names), then dependencies,
    skipping edges whose source is unknown or whose target is neither a
    project nor an external package.
    """
    result = GraphLoadResult()
    graph = result.graph

    # --- Pass 1: projects ---
    for entry in parsed.projects:
        if not isinstance(entry, dict):
            result.errors.append(f"Project entry must be a mapping, got {entry!r}")
            continue
        name = str(entry.get("name") or "")
        if not name:
            result.errors.append("Project missing name, skipped")
            continue
        if name in graph.nodes:
            result.errors.append(f"Duplicate project name '{name}', skipped")
            continue
        graph.add_project(
            Project(
                name=name,
                tags=frozenset(_as_str_list(entry.get("tags"))),
                files=tuple(_as_str_list(entry.get("files"))),
                root=str(entry.get("root") or ""),
            )
        )

    # --- Pass 2: dependencies ---
    for entry in parsed.dependencies:
        if not isinstance(entry, dict):
            result.errors.append(f"Dependency entry must be a mapping, got {entry!r}")
            continue
        source = str(entry.get("source") or "")
        target = str(entry.get("target") or "")
        dep_type = str(entry.get("type") or DependencyType.STATIC.value)

        if dep_type not in _VALID_DEPENDENCY_TYPES:
            result.errors.append(
                f"Dependency '{source}' -> '{target}' has invalid type '{dep_type}', "
                f"must be one of {sorted(_VALID_DEPENDENCY_TYPES)}"
            )
            continue
        if source not in graph.nodes:
            result.warnings.append(f"Dependency source '{source}' not found in graph, skipped")
            continue
        if target not in graph.nodes and not is_external(target):
            result.warnings.append(f"Dependency target '{target}' not found in graph, skipped")
            continue
        graph.add_dependency(source, target, dep_type)

    for warning in result.warnings:
        logger.warning(warning)
    return result


def load_graph(path: Path) -> GraphLoadResult:
    """Read *path* and build the project graph it describes."""
    return build_graph(parse_graph_file(path))
