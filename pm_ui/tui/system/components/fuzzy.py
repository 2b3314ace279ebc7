"""Subsequence fuzzy ranking for the package selector.

A candidate survives when every query character appears, in order, in its
name (or, failing that, its description), ignoring case. Survivors are ranked
by an alignment score that rewards contiguous runs and word-boundary hits and
penalises gaps, with a small similarity term so shorter, closer names win
among otherwise equal alignments. Ties keep the original candidate order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from rapidfuzz import fuzz
from rapidfuzz.distance import LCSseq

from pm_core.models import Package

MATCH_SCORE = 16.0
CONSECUTIVE_BONUS = 24.0
BOUNDARY_BONUS = 20.0
FIRST_CHAR_BONUS = 12.0
GAP_PENALTY = 3.0
LEADING_PENALTY = 1.0
MAX_LEADING_PENALTY = 10.0

# Any name match outranks every description match.
NAME_TIER = 10_000.0

_BOUNDARY_CHARS = frozenset("-_./ +:@")


@dataclass(frozen=True)
class FuzzyMatch:
    index: int
    score: float
    on_description: bool = False


def is_subsequence(query: str, text: str) -> bool:
    if not query:
        return True
    if len(query) > len(text):
        return False
    return LCSseq.similarity(query, text) == len(query)


def _align_from(query: str, text: str, start: int) -> Optional[float]:
    total = -min(start * LEADING_PENALTY, MAX_LEADING_PENALTY)
    previous = -1
    position = start
    for char in query:
        position = text.find(char, position)
        if position < 0:
            return None
        total += MATCH_SCORE
        if position == 0:
            total += FIRST_CHAR_BONUS
        if previous >= 0 and position == previous + 1:
            total += CONSECUTIVE_BONUS
        elif position == 0 or text[position - 1] in _BOUNDARY_CHARS:
            total += BOUNDARY_BONUS
        elif previous >= 0:
            total -= GAP_PENALTY * (position - previous - 1)
        previous = position
        position += 1
    return total


def alignment_score(query: str, text: str) -> Optional[float]:
    """Best greedy alignment of ``query`` in ``text``; both already lower-cased."""
    if not query:
        return 0.0
    if not is_subsequence(query, text):
        return None
    best: Optional[float] = None
    for start, char in enumerate(text):
        if char != query[0]:
            continue
        score = _align_from(query, text, start)
        if score is None:
            # Later starts see a strict suffix of the text.
            break
        if best is None or score > best:
            best = score
    return best


def score_text(query: str, text: str) -> Optional[float]:
    query = query.lower()
    text = text.lower()
    alignment = alignment_score(query, text)
    if alignment is None:
        return None
    return alignment + fuzz.ratio(query, text) / 100.0


def score_package(query: str, package: Package) -> Optional[tuple[float, bool]]:
    """Return ``(score, matched_on_description)`` or None when nothing matches."""
    name_score = score_text(query, package.name)
    if name_score is not None:
        return NAME_TIER + name_score, False
    if package.description:
        description_score = score_text(query, package.description)
        if description_score is not None:
            return description_score, True
    return None


def rank(query: str, candidates: Sequence[Package]) -> list[FuzzyMatch]:
    """Filter and order ``candidates`` for ``query``.

    An empty query keeps every candidate in its original order.
    """
    if query == "":
        return [FuzzyMatch(index, 0.0) for index in range(len(candidates))]

    matches: list[FuzzyMatch] = []
    for index, package in enumerate(candidates):
        scored = score_package(query.lower(), package)
        if scored is None:
            continue
        score, on_description = scored
        matches.append(FuzzyMatch(index, score, on_description))
    matches.sort(key=lambda match: (-match.score, match.index))
    return matches
