"""Boundary configuration: parse boundaries.yml into allow patterns and tag constraints."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import yaml

from boundgraph.rules.constraints import DepConstraint
from boundgraph.rules.patterns import ImportPattern, parse_patterns

if TYPE_CHECKING:
    from pathlib import Path

SUPPORTED_SCHEMA_VERSIONS: frozenset[int] = frozenset({1})


@dataclass(frozen=True)
class BoundaryConfig:
    """Allow list, tag constraints, and the warnings raised while parsing them."""

    allow: tuple[ImportPattern, ...] = ()
    dep_constraints: tuple[DepConstraint, ...] = ()
    warnings: tuple[str, ...] = field(default=(), compare=False)


def _parse_constraint(data: object, idx: int) -> DepConstraint:
    """Parse one ``depConstraints`` entry."""
    if not isinstance(data, dict):
        msg = f"boundaries.yml: depConstraints entry at index {idx} must be a mapping"
        raise ValueError(msg)

    source_tag = data.get("sourceTag")
    if source_tag is None or not isinstance(source_tag, str) or not source_tag.strip():
        msg = f"boundaries.yml: depConstraints entry at index {idx} missing required 'sourceTag'"
        raise ValueError(msg)

    tags_raw = data.get("onlyDependOnLibsWithTags", [])
    if not isinstance(tags_raw, list):
        msg = (
            f"boundaries.yml: depConstraints entry '{source_tag}': "
            f"'onlyDependOnLibsWithTags' must be a list"
        )
        raise ValueError(msg)

    return DepConstraint(
        source_tag=source_tag,
        only_depend_on_libs_with_tags=tuple(str(t) for t in tags_raw),
    )


def parse_config(data: object) -> BoundaryConfig:
    """Validate an already-loaded YAML document and build a :class:`BoundaryConfig`.

    Raises ``ValueError`` on schema errors.  Allow patterns that fail to
    compile are not errors; they are reported in ``warnings``.
    """
    if not isinstance(data, dict):
        msg = "boundaries.yml must be a YAML mapping"
        raise ValueError(msg)

    version = data.get("version")
    if version is None:
        msg = "boundaries.yml: missing required 'version' field"
        raise ValueError(msg)
    if isinstance(version, bool) or version not in SUPPORTED_SCHEMA_VERSIONS:
        expected = sorted(SUPPORTED_SCHEMA_VERSIONS)
        msg = f"boundaries.yml: unsupported version {version}, expected one of {expected}"
        raise ValueError(msg)

    allow_raw = data.get("allow", [])
    if not isinstance(allow_raw, list):
        msg = "boundaries.yml: 'allow' must be a list"
        raise ValueError(msg)

    constraints_raw = data.get("depConstraints", [])
    if not isinstance(constraints_raw, list):
        msg = "boundaries.yml: 'depConstraints' must be a list"
        raise ValueError(msg)

    patterns, warnings = parse_patterns(str(p) for p in allow_raw)
    constraints = [_parse_constraint(entry, idx) for idx, entry in enumerate(constraints_raw)]

    return BoundaryConfig(
        allow=tuple(patterns),
        dep_constraints=tuple(constraints),
        warnings=tuple(warnings),
    )


def load_config(config_path: Path) -> BoundaryConfig:
    """Read and validate ``boundaries.yml``."""
    with config_path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    return parse_config(data)
