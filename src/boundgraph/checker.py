"""Import checker: evaluate import specifiers against the graph and boundary config."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from boundgraph.config import load_config
from boundgraph.graph.lazy_edges import only_loads_lazily
from boundgraph.graph.loader import load_graph
from boundgraph.graph.model import is_external
from boundgraph.graph.reachability import check_circular_path
from boundgraph.projects import (
    find_project_using_import,
    find_source_project,
    find_target_project,
    is_absolute_import_into_another_project,
    is_relative,
    is_relative_import_into_another_project,
    resolve_relative_import,
)
from boundgraph.rules.constraints import find_violated_constraints
from boundgraph.rules.patterns import matches_any

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from boundgraph.config import BoundaryConfig
    from boundgraph.graph.model import Project, ProjectGraph
    from boundgraph.graph.reachability import ReachabilityCache
    from boundgraph.projects import ImportResolver

logger = logging.getLogger(__name__)

APP_TAG = "type:app"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class CheckError(Exception):
    """Raised when the graph or boundary configuration cannot be loaded."""


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Violation:
    """A single forbidden import."""

    kind: str  # "relative-import" | "absolute-import" | "app-import" | "circular" | "tag-constraint"
    source_file: str
    import_specifier: str
    source_project: str | None
    target_project: str | None
    message: str
    path: tuple[str, ...] = ()


@dataclass
class CheckResult:
    """Result of checking the imports of one file."""

    violations: list[Violation] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    imports_checked: int = 0
    elapsed_ms: float = 0.0


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


def _is_app(project: Project) -> bool:
    return APP_TAG in project.tags or project.root.startswith("apps/")


def _resolve_target(
    graph: ProjectGraph,
    source_file: str,
    specifier: str,
    *,
    project_path: str,
    resolver: ImportResolver | None,
    scope: str,
) -> Project | None:
    if is_relative(specifier):
        target_file = resolve_relative_import(specifier, project_path, source_file)
        return find_target_project(graph, target_file)
    if resolver is None:
        return None
    return find_project_using_import(graph, resolver, source_file, specifier, scope)


def check_import(
    graph: ProjectGraph,
    config: BoundaryConfig,
    source_file: str,
    specifier: str,
    *,
    project_path: str = ".",
    resolver: ImportResolver | None = None,
    scope: str = "",
    cache: ReachabilityCache | None = None,
) -> list[Violation]:
    """Evaluate one import of *source_file* and return the violations it causes.

    Parameters
    ----------
    graph:
        The workspace project graph.
    config:
        Allow patterns and tag constraints.
    source_file:
        Workspace-relative path of the importing file.
    specifier:
        The import string as written in the source.
    project_path:
        Workspace root on disk, used to resolve relative specifiers.
    resolver:
        Maps non-relative specifiers to project names.  Without one, such
        imports cannot be attributed to a project and are not checked.
    scope:
        Workspace package scope handed to *resolver*.
    cache:
        Reachability cache; the process-wide default is used when omitted.
    """
    if matches_any(config.allow, specifier):
        return []

    def _violation(
        kind: str,
        message: str,
        source: Project | None = None,
        target: Project | None = None,
        path: tuple[str, ...] = (),
    ) -> list[Violation]:
        return [
            Violation(
                kind=kind,
                source_file=source_file,
                import_specifier=specifier,
                source_project=source.name if source is not None else None,
                target_project=target.name if target is not None else None,
                message=message,
                path=path,
            )
        ]

    if is_relative_import_into_another_project(specifier, project_path, graph, source_file):
        return _violation(
            "relative-import",
            f"Import '{specifier}' reaches into another project with a relative path; "
            f"import the project by its public name instead",
            find_source_project(graph, source_file),
        )

    if is_absolute_import_into_another_project(specifier):
        return _violation(
            "absolute-import",
            f"Import '{specifier}' addresses another project's sources from the workspace root",
            find_source_project(graph, source_file),
        )

    source = find_source_project(graph, source_file)
    if source is None:
        logger.debug("No project owns %s, skipping '%s'", source_file, specifier)
        return []

    target = _resolve_target(
        graph,
        source_file,
        specifier,
        project_path=project_path,
        resolver=resolver,
        scope=scope,
    )
    if target is None or is_external(target.name) or target.name == source.name:
        return []

    chain = check_circular_path(graph, source, target, cache=cache)
    if chain:
        walk = (source.name, *chain)
        return _violation(
            "circular",
            f"Circular dependency between '{source.name}' and '{target.name}' detected: "
            + " -> ".join(walk),
            source,
            target,
            walk,
        )

    if _is_app(target):
        return _violation(
            "app-import",
            f"Project '{source.name}' imports application '{target.name}'; "
            f"applications cannot be imported",
            source,
            target,
        )

    if only_loads_lazily(graph, source.name, target.name, cache=cache):
        logger.debug("'%s' loads '%s' lazily, skipping tag constraints", source.name, target.name)
        return []

    violations: list[Violation] = []
    for constraint in find_violated_constraints(config.dep_constraints, source, target):
        allowed = ", ".join(constraint.only_depend_on_libs_with_tags)
        violations.extend(
            _violation(
                "tag-constraint",
                f"A project tagged '{constraint.source_tag}' can only depend on projects "
                f"tagged with one of: {allowed} ('{target.name}' has "
                f"{', '.join(sorted(target.tags)) or 'no tags'})",
                source,
                target,
            )
        )
    return violations


def check_imports(
    graph: ProjectGraph,
    config: BoundaryConfig,
    source_file: str,
    specifiers: Iterable[str],
    *,
    project_path: str = ".",
    resolver: ImportResolver | None = None,
    scope: str = "",
    cache: ReachabilityCache | None = None,
) -> CheckResult:
    """Check every specifier imported by *source_file*."""
    start = time.monotonic()
    result = CheckResult(warnings=list(config.warnings))
    for specifier in specifiers:
        result.imports_checked += 1
        result.violations.extend(
            check_import(
                graph,
                config,
                source_file,
                specifier,
                project_path=project_path,
                resolver=resolver,
                scope=scope,
                cache=cache,
            )
        )
    result.elapsed_ms = (time.monotonic() - start) * 1000
    return result


def run_check(
    graph_path: Path,
    config_path: Path,
    source_file: str,
    specifiers: Iterable[str],
    *,
    project_path: str = ".",
    resolver: ImportResolver | None = None,
    scope: str = "",
) -> CheckResult:
    """Load the graph and config from YAML files, then check *specifiers*.

    Raises
    ------
    CheckError
        When either file is missing or contains invalid configuration.
    """
    try:
        loaded = load_graph(graph_path)
    except (OSError, ValueError) as exc:
        msg = f"Invalid project graph: {exc}"
        raise CheckError(msg) from exc
    if loaded.errors:
        msg = "Invalid project graph: " + "; ".join(loaded.errors)
        raise CheckError(msg)

    try:
        config = load_config(config_path)
    except (OSError, ValueError) as exc:
        msg = f"Invalid boundaries configuration: {exc}"
        raise CheckError(msg) from exc

    result = check_imports(
        loaded.graph,
        config,
        source_file,
        specifiers,
        project_path=project_path,
        resolver=resolver,
        scope=scope,
    )
    result.warnings[:0] = loaded.warnings
    return result


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


def format_rich(result: CheckResult) -> str:
    """Format a CheckResult as human-readable text.

    Example output with violations::

        ✗ circular
          libs/feature/a/src/index.ts → @acme/b
          Circular dependency between 'a' and 'b' detected: a -> b -> a

        1 violation found (2 imports checked)
    """
    lines: list[str] = []

    for warning in result.warnings:
        lines.append(f"⚠ {warning}")
    if result.warnings:
        lines.append("")

    if not result.violations:
        lines.append(f"✓ No violations found ({result.imports_checked} imports checked)")
        return "\n".join(lines)

    for v in result.violations:
        lines.append(f"✗ {v.kind}")
        lines.append(f"  {v.source_file} → {v.import_specifier}")
        lines.append(f"  {v.message}")
        lines.append("")

    count = len(result.violations)
    noun = "violation" if count == 1 else "violations"
    lines.append(f"{count} {noun} found ({result.imports_checked} imports checked)")
    return "\n".join(lines)


def format_json(result: CheckResult) -> str:
    """Format a CheckResult as structured JSON with ``violations`` and ``summary``."""
    output: dict[str, object] = {
        "violations": [
            {
                "kind": v.kind,
                "source_file": v.source_file,
                "import": v.import_specifier,
                "source_project": v.source_project,
                "target_project": v.target_project,
                "path": list(v.path),
                "message": v.message,
            }
            for v in result.violations
        ],
        "warnings": result.warnings,
        "summary": {
            "imports_checked": result.imports_checked,
            "violations_count": len(result.violations),
            "elapsed_ms": result.elapsed_ms,
        },
    }
    return json.dumps(output, indent=2)


def format_porcelain(result: CheckResult) -> str:
    """Format one violation per line: ``kind:source_file:import:source:target``.

    Missing projects are empty strings.  Returns an empty string when there
    are no violations.
    """
    lines: list[str] = []
    for v in result.violations:
        source = v.source_project or ""
        target = v.target_project or ""
        lines.append(f"{v.kind}:{v.source_file}:{v.import_specifier}:{source}:{target}")
    return "\n".join(lines)
