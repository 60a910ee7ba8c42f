"""Fuzzy matching of search terms against application deployment refs."""
import logging
import re
from typing import Iterable, List, Sequence

from aoctl.errors import AmbiguousError, NotFoundError, ValidationError

logger = logging.getLogger("aoctl.fuzzy")


def join_search_args(args: Sequence[str]) -> str:
    """Turn ``["dev", "foo"]`` into ``"dev/foo"``; a single argument is kept as is."""
    if not args:
        raise ValidationError("No search term given")
    if len(args) > 2:
        raise ValidationError(f"Expected <env> <app> or a single search term, got {len(args)} arguments")
    return "/".join(args)


def find_matches(search: str, candidates: Iterable[str]) -> List[str]:
    """Return every candidate containing ``search``, or only the exact match if there is one."""
    candidates = list(candidates)
    if search in candidates:
        return [search]
    return sorted(c for c in candidates if search in c)


def resolve(search: str, candidates: Iterable[str], all_matches: bool = False) -> List[str]:
    """Resolve a search term to concrete application deployment refs.

    An exact match always wins. Otherwise every candidate containing the
    search term is a match.

    Args:
        search: User supplied term, e.g. ``foo``, ``dev`` or ``dev/foo``
        candidates: Known application deployment refs
        all_matches: Return all substring matches instead of failing on ambiguity

    Returns:
        Sorted list of matching refs

    Raises:
        NotFoundError: If nothing matches
        AmbiguousError: If several refs match and ``all_matches`` is False
    """
    matches = find_matches(search, candidates)
    if not matches:
        raise NotFoundError(f"No matches for {search}")
    if len(matches) > 1 and not all_matches:
        raise AmbiguousError(search, matches)

    logger.debug(f"Resolved '{search}' to {matches}")
    return matches


def compile_patterns(patterns: Iterable[str]) -> List["re.Pattern[str]"]:
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise ValidationError(f"Invalid exclude pattern '{pattern}': {e}") from e
    return compiled


def exclude(candidates: Iterable[str], patterns: Iterable[str]) -> List[str]:
    """Drop every candidate matched by any of ``patterns``.

    Patterns are applied in order, each one narrowing what the previous left.
    """
    remaining = list(candidates)
    for pattern in compile_patterns(patterns):
        before = len(remaining)
        remaining = [c for c in remaining if not pattern.search(c)]
        logger.debug(f"Exclude '{pattern.pattern}' removed {before - len(remaining)} application(s)")
    return remaining
