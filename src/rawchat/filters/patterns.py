"""Pattern compilation shared by the filter pipeline and notification rules."""

from __future__ import annotations

import logging
import re

from rawchat.errors import MalformedFilterRule

logger = logging.getLogger(__name__)

# Matches nothing; stands in for a rule that failed to compile.
NEVER_MATCHES = re.compile(r"(?!)")


def compile_pattern(match: str, regex: bool, flags: int = 0) -> re.Pattern[str]:
    """Compile a rule pattern. Literal patterns are escaped.

    Raises MalformedFilterRule for empty patterns and invalid regexes.
    """
    if not match:
        raise MalformedFilterRule("Empty rule pattern")
    if not regex:
        return re.compile(re.escape(match), flags)
    try:
        return re.compile(match, flags)
    except re.error as e:
        raise MalformedFilterRule(f"Invalid pattern {match!r}: {e}") from e


def compile_or_never(match: str, regex: bool, flags: int = 0) -> re.Pattern[str]:
    """Like compile_pattern, but falls back to an empty rule on errors."""
    try:
        return compile_pattern(match, regex, flags)
    except MalformedFilterRule as e:
        logger.warning("Ignoring malformed rule: %s", e)
        return NEVER_MATCHES
