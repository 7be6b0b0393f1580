"""Tag-based dependency constraints between projects."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from boundgraph.graph.model import Project

# Matches every project regardless of its tags.
WILDCARD_TAG = "*"


@dataclass(frozen=True)
class DepConstraint:
    """Projects tagged ``source_tag`` may only depend on projects carrying one of the listed tags."""

    source_tag: str
    only_depend_on_libs_with_tags: tuple[str, ...] = ()


def has_tag(project: Project, tag: str) -> bool:
    """Return True if *project* carries *tag*, or *tag* is the wildcard."""
    return tag in project.tags or tag == WILDCARD_TAG


def has_none_of_these_tags(project: Project, tags: Iterable[str]) -> bool:
    """Return True if *project* matches none of *tags*."""
    return not any(has_tag(project, tag) for tag in tags)


def find_constraints_for(
    constraints: Sequence[DepConstraint], source_project: Project
) -> list[DepConstraint]:
    """Return the constraints that apply to *source_project*, in supplied order."""
    return [c for c in constraints if has_tag(source_project, c.source_tag)]


def find_violated_constraints(
    constraints: Sequence[DepConstraint],
    source_project: Project,
    target_project: Project,
) -> list[DepConstraint]:
    """Return the applicable constraints that *target_project* does not satisfy."""
    return [
        c
        for c in find_constraints_for(constraints, source_project)
        if has_none_of_these_tags(target_project, c.only_depend_on_libs_with_tags)
    ]


def is_dependency_allowed(
    constraints: Sequence[DepConstraint],
    source_project: Project,
    target_project: Project,
) -> bool:
    """Return True if every constraint applicable to the source admits the target.

    A source with no applicable constraints is unconstrained.
    """
    return not find_violated_constraints(constraints, source_project, target_project)
