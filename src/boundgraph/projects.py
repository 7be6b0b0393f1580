"""Resolve files and import specifiers to the projects that own them."""

from __future__ import annotations

import os
import re
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Mapping

    from boundgraph.graph.model import Project, ProjectGraph

_EXTENSION_RE = re.compile(r"\.[^/.]+$")
_DRIVE_LETTER_RE = re.compile(r"^[A-Z]:")

# Workspace-root prefixes that address another project's sources directly.
_CROSS_PROJECT_PREFIXES: tuple[str, ...] = ("libs/", "/libs/", "apps/", "/apps/")


class ImportResolver(Protocol):
    """Maps a non-relative import specifier to the name of the project providing it."""

    def find_project_with_import(
        self, specifier: str, file_path: str, scope: str
    ) -> str | None: ...


class MappingImportResolver:
    """Resolve specifiers through a static ``prefix -> project name`` table.

    A prefix matches the specifier itself or any specifier continuing it
    with ``/``.  The longest matching prefix wins.  *scope*, when given to
    :meth:`find_project_with_import`, is tried as ``@scope/`` in front of
    bare project names.
    """

    def __init__(self, mapping: Mapping[str, str]) -> None:
        self._prefixes = sorted(mapping.items(), key=lambda item: len(item[0]), reverse=True)

    def find_project_with_import(self, specifier: str, file_path: str, scope: str) -> str | None:
        for prefix, project in self._prefixes:
            if specifier == prefix or specifier.startswith(prefix.rstrip("/") + "/"):
                return project
        if scope:
            scoped = f"@{scope}/"
            if specifier.startswith(scoped):
                return specifier[len(scoped) :].split("/", 1)[0] or None
        return None


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def remove_ext(file: str) -> str:
    """Strip the extension of the last path segment (``a/b.spec.ts`` -> ``a/b.spec``)."""
    return _EXTENSION_RE.sub("", file)


def normalize_path(os_specific_path: str) -> str:
    """Drop a Windows drive letter and use forward slashes."""
    return _DRIVE_LETTER_RE.sub("", os_specific_path).replace(os.sep, "/")


def is_relative(specifier: str) -> bool:
    return specifier.startswith(".")


def _workspace_relative(absolute: str, project_path: str) -> str:
    root = normalize_path(os.path.abspath(project_path)).rstrip("/")
    return absolute[len(root) + 1 :]


def get_source_file_path(source_file_name: str, project_path: str) -> str:
    """Return *source_file_name* relative to the workspace root at *project_path*."""
    return _workspace_relative(normalize_path(os.path.normpath(source_file_name)), project_path)


# ---------------------------------------------------------------------------
# Project lookup
# ---------------------------------------------------------------------------


def _contains_file(files: tuple[str, ...], target_file_without_extension: str) -> bool:
    return any(remove_ext(f) == target_file_without_extension for f in files)


def find_project_using_file(graph: ProjectGraph, file: str) -> Project | None:
    """Return the first project owning the extensionless path *file*, or None."""
    for project in graph.nodes.values():
        if _contains_file(project.files, file):
            return project
    return None


def find_source_project(graph: ProjectGraph, source_file_path: str) -> Project | None:
    return find_project_using_file(graph, remove_ext(source_file_path))


def find_target_project(graph: ProjectGraph, target_file: str) -> Project | None:
    """Find the owner of *target_file*, treating directories as modules.

    Tries the path itself, then ``<path>/index``, then ``<path>/src/index``.
    """
    candidates = (
        target_file,
        normalize_path(os.path.join(target_file, "index")),
        normalize_path(os.path.join(target_file, "src", "index")),
    )
    for candidate in candidates:
        project = find_project_using_file(graph, candidate)
        if project is not None:
            return project
    return None


def find_project_using_import(
    graph: ProjectGraph,
    resolver: ImportResolver,
    file_path: str,
    specifier: str,
    scope: str = "",
) -> Project | None:
    """Resolve a non-relative *specifier* to a project node through *resolver*."""
    name = resolver.find_project_with_import(specifier, file_path, scope)
    if name is None:
        return None
    return graph.nodes.get(name)


def resolve_relative_import(specifier: str, project_path: str, source_file_path: str) -> str:
    """Return the workspace-relative path a relative *specifier* points at."""
    absolute = os.path.abspath(
        os.path.join(project_path, os.path.dirname(source_file_path), specifier)
    )
    return _workspace_relative(normalize_path(absolute), project_path)


def is_relative_import_into_another_project(
    specifier: str,
    project_path: str,
    graph: ProjectGraph,
    source_file_path: str,
) -> bool:
    """Return True if a relative *specifier* escapes into a different project.

    Both the importing file and the resolved target must belong to known
    projects; unresolved sides yield False.
    """
    if not is_relative(specifier):
        return False

    target_file = resolve_relative_import(specifier, project_path, source_file_path)
    source_project = find_source_project(graph, source_file_path)
    target_project = find_target_project(graph, target_file)
    if source_project is None or target_project is None:
        return False
    return source_project.name != target_project.name


def is_absolute_import_into_another_project(specifier: str) -> bool:
    """Return True if *specifier* addresses ``libs/`` or ``apps/`` from the workspace root."""
    return specifier.startswith(_CROSS_PROJECT_PREFIXES)
