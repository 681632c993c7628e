"""Fuzzy subsequence scoring and candidate filtering."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

SCORE_MATCH = 16
SCORE_GAP_START = -3
SCORE_GAP_EXTENSION = -1

BONUS_BOUNDARY = 8
BONUS_CAMEL = 7
BONUS_CONSECUTIVE = -(SCORE_GAP_START + SCORE_GAP_EXTENSION)
BONUS_FIRST_CHAR_MULTIPLIER = 2


@dataclass(frozen=True)
class Candidate:
    """An item offered to the selector. `payload` is handed back untouched."""

    label: str
    payload: Any = None


@dataclass(frozen=True)
class MatchResult:
    index: int                     # position in the original candidate collection
    candidate: Candidate
    score: int
    positions: frozenset[int]

    @property
    def label(self) -> str:
        return self.candidate.label


def _bonus(text: str, pos: int) -> int:
    if pos == 0:
        return BONUS_BOUNDARY
    prev, cur = text[pos - 1], text[pos]
    if not prev.isalnum() and cur.isalnum():
        return BONUS_BOUNDARY
    if prev.islower() and cur.isupper():
        return BONUS_CAMEL
    if not prev.isdigit() and cur.isdigit():
        return BONUS_CAMEL
    return 0


def fuzzy_match(query: str, text: str) -> Optional[tuple[int, tuple[int, ...]]]:
    """
    Score `text` against `query`.

    Returns (score, matched character positions) or None when the query is not
    a subsequence of the text. Matching is smart-case: case-insensitive unless
    the query contains an upper-case letter. An empty query matches everything
    with score 0.

    The best alignment is found with a single pass per query character; a gap
    between two matched characters costs SCORE_GAP_START plus SCORE_GAP_EXTENSION
    per extra skipped character, so tighter spans always win.
    """
    if not query:
        return 0, ()
    if len(query) > len(text):
        return None

    if any(ch.isupper() for ch in query):
        needle, hay = list(query), list(text)
    else:
        needle = [ch.lower() for ch in query]
        hay = [ch.lower() for ch in text]

    n = len(hay)
    bonuses = [_bonus(text, pos) for pos in range(n)]
    prev_row: list[Optional[int]] = []
    links: list[list[Optional[int]]] = []

    for qi, qch in enumerate(needle):
        row: list[Optional[int]] = [None] * n
        link: list[Optional[int]] = [None] * n
        best_gap: Optional[int] = None
        best_gap_at: Optional[int] = None

        for pos in range(n):
            if qi > 0:
                if best_gap is not None:
                    best_gap += SCORE_GAP_EXTENSION
                if pos >= 2 and prev_row[pos - 2] is not None:
                    candidate = prev_row[pos - 2] + SCORE_GAP_START
                    if best_gap is None or candidate >= best_gap:
                        best_gap, best_gap_at = candidate, pos - 2

            if hay[pos] != qch:
                continue

            if qi == 0:
                row[pos] = SCORE_MATCH + bonuses[pos] * BONUS_FIRST_CHAR_MULTIPLIER
                continue

            best: Optional[int] = None
            if pos >= 1 and prev_row[pos - 1] is not None:
                best = prev_row[pos - 1] + SCORE_MATCH + max(bonuses[pos], BONUS_CONSECUTIVE)
                link[pos] = pos - 1
            if best_gap is not None:
                gapped = best_gap + SCORE_MATCH + bonuses[pos]
                if best is None or gapped > best:
                    best = gapped
                    link[pos] = best_gap_at
            row[pos] = best

        prev_row = row
        links.append(link)

    end: Optional[int] = None
    for pos, score in enumerate(prev_row):
        if score is not None and (end is None or score > prev_row[end]):
            end = pos
    if end is None:
        return None

    positions = [end]
    for qi in range(len(needle) - 1, 0, -1):
        positions.append(links[qi][positions[-1]])
    positions.reverse()
    return prev_row[end], tuple(positions)


def filter_candidates(query: str, candidates: Sequence[Candidate]) -> list[MatchResult]:
    """Matching candidates, best score first; equal scores keep their input order."""
    results = []
    for index, candidate in enumerate(candidates):
        matched = fuzzy_match(query, candidate.label)
        if matched is None:
            continue
        score, positions = matched
        results.append(MatchResult(index, candidate, score, frozenset(positions)))
    # sorted() is stable, which is what keeps ties in collection order
    return sorted(results, key=lambda result: -result.score)


def as_candidates(items: Iterable[Any]) -> list[Candidate]:
    """Coerce strings, Candidates, or objects with a `title` into Candidates."""
    out = []
    for item in items:
        if isinstance(item, Candidate):
            out.append(item)
        elif isinstance(item, str):
            out.append(Candidate(item, item))
        else:
            out.append(Candidate(str(getattr(item, "title", item)), item))
    return out
