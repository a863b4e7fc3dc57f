"""Segment-based fuzzy matching between path strings.

Archive entries are stored with their full internal path, while analyzer
transcripts and JSON results usually name files by a shorter relative
form. These helpers reconcile the two by comparing path segments from
the end.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

_SEPARATORS = re.compile(r"[\\/]")

EXACT_SCORE = 1000
SUFFIX_SCORE = 500
BASENAME_SCORE = 50


def path_to_segments(path: str | None) -> list[str]:
    """Split a path on ``/`` or ``\\`` and drop empty components.

    Args:
        path: Path-like string, or None

    Returns:
        List of non-empty segments (empty for None or "")
    """
    if not path:
        return []
    return [segment for segment in _SEPARATORS.split(path) if segment]


def _is_suffix(shorter: Sequence[str], longer: Sequence[str]) -> bool:
    offset = len(longer) - len(shorter)
    return offset >= 0 and list(longer[offset:]) == list(shorter)


def paths_match(a: str | None, b: str | None) -> bool:
    """Check whether two paths refer to the same file.

    Rules, in priority order:
    1. A bare filename never matches a nested path (``entry.lua`` is not
       ``shield/entry.lua``).
    2. Paths with the same number of segments match when every segment is equal.
    3. Otherwise the shorter path must be a trailing slice of the longer one.

    Args:
        a: First path
        b: Second path

    Returns:
        True if the paths match
    """
    left = path_to_segments(a)
    right = path_to_segments(b)

    if (len(left) == 1 and len(right) > 1) or (len(right) == 1 and len(left) > 1):
        return False

    if len(left) == len(right):
        return left == right

    if len(left) < len(right):
        return _is_suffix(left, right)
    return _is_suffix(right, left)


def score_path_match(
    target: str | None,
    candidate: str | None,
    allow_basename: bool = True,
) -> int:
    """Score how well ``candidate`` matches ``target`` (0 means no match).

    With ``allow_basename`` off, a bare filename never reaches a nested
    candidate, as in ``paths_match``.
    """
    target_segments = path_to_segments(target)
    candidate_segments = path_to_segments(candidate)

    if not target_segments or not candidate_segments:
        return 0

    if target_segments == candidate_segments:
        return EXACT_SCORE + len(target_segments)

    if paths_match(target, candidate):
        return SUFFIX_SCORE + min(len(target_segments), len(candidate_segments))

    # A bare filename may still locate a nested entry when nothing better exists.
    if (
        allow_basename
        and len(target_segments) == 1
        and candidate_segments[-1] == target_segments[0]
    ):
        return BASENAME_SCORE

    return 0


def find_best_path_match(
    target: str | None,
    candidates: Iterable[str],
    allow_basename: bool = True,
) -> str | None:
    """Return the candidate that best matches ``target``.

    Exact matches outrank suffix matches, and longer matched suffixes
    outrank shorter ones. Among bare-filename hits the shallowest
    candidate wins. Remaining ties go to the earliest candidate.

    Args:
        target: Path to look up
        candidates: Paths to choose from
        allow_basename: Let a bare filename match a nested candidate

    Returns:
        Best matching candidate, or None if nothing matches
    """
    best: str | None = None
    best_key = (0, 0)

    for candidate in candidates:
        score = score_path_match(target, candidate, allow_basename)
        if not score:
            continue
        depth = len(path_to_segments(candidate)) if score == BASENAME_SCORE else 0
        key = (score, -depth)
        if best is None or key > best_key:
            best_key = key
            best = candidate

    return best
