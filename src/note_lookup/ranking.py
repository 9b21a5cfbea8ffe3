"""Ordering of candidate notes against a lookup query."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

from .distance import damerau_levenshtein
from .models import SEPARATOR, CandidateEntry

DISTANCE_THRESHOLD = 10

KeyFunc = Callable[[CandidateEntry], str]


def path_key(entry: CandidateEntry) -> str:
    return entry.path.lower()


def title_key(entry: CandidateEntry) -> str:
    return entry.title.lower()


def common_prefix_length(query: str, key: str) -> int:
    """Count the characters *query* and *key* share from the start."""

    length = 0
    for query_char, key_char in zip(query, key):
        if query_char != key_char:
            break
        length += 1
    return length


def closeness(query: str, key: str, threshold: int = DISTANCE_THRESHOLD) -> tuple[int, int]:
    """Sort key for *key* against *query*; smaller sorts first.

    Longer shared prefixes win, then smaller edit distance. Keys further than
    *threshold* edits away all tie.
    """

    return (-common_prefix_length(query, key), damerau_levenshtein(query, key, threshold))


def sort_by_closeness(
    entries: Iterable[CandidateEntry],
    query: str,
    key: KeyFunc = path_key,
    threshold: int = DISTANCE_THRESHOLD,
) -> list[CandidateEntry]:
    # sorted() is stable, so fully tied entries keep their input order
    return sorted(entries, key=lambda entry: closeness(query, key(entry), threshold))


def rank_by_path(
    entries: Sequence[CandidateEntry], query: str, threshold: int = DISTANCE_THRESHOLD
) -> list[CandidateEntry]:
    """Rank entries whose path contains *query*.

    Prefix matches always come before entries that merely contain the query.
    """

    starts_with: list[CandidateEntry] = []
    contains: list[CandidateEntry] = []
    for entry in entries:
        key = path_key(entry)
        if key.startswith(query):
            starts_with.append(entry)
        elif query in key:
            contains.append(entry)

    assert not {id(e) for e in starts_with} & {id(e) for e in contains}, "overlapping partitions"

    return sort_by_closeness(starts_with, query, path_key, threshold) + sort_by_closeness(
        contains, query, path_key, threshold
    )


def rank_by_title(
    entries: Sequence[CandidateEntry], query: str, threshold: int = DISTANCE_THRESHOLD
) -> list[CandidateEntry]:
    """Rank entries whose title contains *query*, ignoring their paths."""

    matching = [entry for entry in entries if query in title_key(entry)]
    return sort_by_closeness(matching, query, title_key, threshold)


def top_level(entries: Sequence[CandidateEntry]) -> list[CandidateEntry]:
    """Return entries without a hierarchy separator, in their original order."""

    return [entry for entry in entries if SEPARATOR not in entry.path]
