"""Allow-list patterns for import specifiers.

A configured pattern string is parsed once into an :class:`ImportPattern`.
The form is decided by the first rule that applies:

1. ``prefix/**``    -- any specifier starting with ``prefix/``
2. ``prefix/*``     -- ``prefix/`` followed by exactly one segment
3. ``head/**/tail`` -- specifier starts with ``head`` and ends with ``tail``
4. anything else    -- a regular expression searched in the specifier
"""

from __future__ import annotations

import enum
import functools
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_SPAN_TOKEN = "/**/"


class PatternKind(enum.Enum):
    """The matching form of an allow pattern."""

    PREFIX = "prefix"
    PREFIX_SEGMENT = "prefix_segment"
    PREFIX_SUFFIX_SPAN = "prefix_suffix_span"
    REGEX = "regex"


@dataclass(frozen=True)
class ImportPattern:
    """A parsed allow pattern.

    ``error`` is set when a regex pattern failed to compile; such a
    pattern never matches.
    """

    raw: str
    kind: PatternKind
    prefix: str = ""
    suffix: str = ""
    regex: re.Pattern[str] | None = None
    error: str | None = None

    def matches(self, specifier: str) -> bool:
        if self.kind is PatternKind.PREFIX:
            return specifier.startswith(self.prefix)
        if self.kind is PatternKind.PREFIX_SEGMENT:
            if not specifier.startswith(self.prefix):
                return False
            return "/" not in specifier[len(self.prefix) :]
        if self.kind is PatternKind.PREFIX_SUFFIX_SPAN:
            return specifier.startswith(self.prefix) and specifier.endswith(self.suffix)
        if self.regex is None:
            return False
        return self.regex.search(specifier) is not None


@functools.lru_cache(maxsize=256)
def parse_pattern(raw: str) -> ImportPattern:
    """Parse a configured allow pattern.

    A pattern that is neither a wildcard form nor a valid regular
    expression is returned with ``error`` set and logged as a warning.
    """
    if raw.endswith("/**"):
        return ImportPattern(raw=raw, kind=PatternKind.PREFIX, prefix=raw[:-2])
    if raw.endswith("/*"):
        return ImportPattern(raw=raw, kind=PatternKind.PREFIX_SEGMENT, prefix=raw[:-1])
    if _SPAN_TOKEN in raw:
        # Only the text up to a second "/**/" counts as the suffix.
        parts = raw.split(_SPAN_TOKEN)
        return ImportPattern(
            raw=raw,
            kind=PatternKind.PREFIX_SUFFIX_SPAN,
            prefix=parts[0],
            suffix=parts[1],
        )
    try:
        regex = re.compile(raw)
    except re.error as exc:
        error = f"Invalid allow pattern '{raw}': {exc}"
        logger.warning(error)
        return ImportPattern(raw=raw, kind=PatternKind.REGEX, error=error)
    return ImportPattern(raw=raw, kind=PatternKind.REGEX, regex=regex)


def parse_patterns(raws: Iterable[str]) -> tuple[list[ImportPattern], list[str]]:
    """Parse several patterns, returning them with any configuration warnings."""
    patterns = [parse_pattern(raw) for raw in raws]
    warnings = [p.error for p in patterns if p.error is not None]
    return patterns, warnings


def match_import_with_wildcard(allow_pattern: str, import_specifier: str) -> bool:
    """Return True if *import_specifier* matches the allow pattern string."""
    return parse_pattern(allow_pattern).matches(import_specifier)


def matches_any(patterns: Iterable[ImportPattern], import_specifier: str) -> bool:
    """Return True if any of *patterns* matches *import_specifier*."""
    return any(p.matches(import_specifier) for p in patterns)
