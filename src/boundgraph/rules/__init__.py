"""Rules domain — allow-list patterns and tag constraints."""

from boundgraph.rules.constraints import (
    WILDCARD_TAG,
    DepConstraint,
    find_constraints_for,
    find_violated_constraints,
    has_none_of_these_tags,
    has_tag,
    is_dependency_allowed,
)
from boundgraph.rules.patterns import (
    ImportPattern,
    PatternKind,
    match_import_with_wildcard,
    matches_any,
    parse_pattern,
    parse_patterns,
)

__all__ = [
    "WILDCARD_TAG",
    "DepConstraint",
    "ImportPattern",
    "PatternKind",
    "find_constraints_for",
    "find_violated_constraints",
    "has_none_of_these_tags",
    "has_tag",
    "is_dependency_allowed",
    "match_import_with_wildcard",
    "matches_any",
    "parse_pattern",
    "parse_patterns",
]
