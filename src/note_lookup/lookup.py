"""Turn a typed lookup query into an ordered list of suggestions."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from .models import SEPARATOR, CandidateEntry, Collection, CreatePlaceholder, Found, Suggestion
from .ranking import rank_by_path, rank_by_title, top_level

TITLE_MARKER = "?"

logger = logging.getLogger(__name__)


class QueryMode(str, Enum):
    TITLE = "title"
    PATH = "path"
    BROWSE = "browse"


@dataclass(frozen=True, slots=True)
class QueryContext:
    """A classified query.

    ``normalized_query`` is lower-cased and trimmed. ``search_text`` is what
    candidates are matched against: the stripped title text in title mode and
    the lower-cased but *untrimmed* query in path mode, so that meaningful
    surrounding spaces still take part in matching.
    """

    raw_query: str
    normalized_query: str
    mode: QueryMode
    search_text: str

    @classmethod
    def classify(cls, raw_query: str) -> QueryContext:
        lowered = raw_query.lower()
        normalized = lowered.strip()
        if normalized.startswith(TITLE_MARKER):
            return cls(raw_query, normalized, QueryMode.TITLE, normalized[len(TITLE_MARKER) :])
        if not normalized:
            return cls(raw_query, normalized, QueryMode.BROWSE, "")
        return cls(raw_query, normalized, QueryMode.PATH, lowered)


def flatten_collections(collections: Iterable[Collection]) -> list[CandidateEntry]:
    entries: list[CandidateEntry] = []
    for collection in collections:
        entries.extend(collection.flatten_entries())
    return entries


def offers_creation(context: QueryContext, ranked: list[CandidateEntry]) -> bool:
    if context.mode is not QueryMode.PATH:
        return False
    query = context.normalized_query
    if not query or query.endswith(SEPARATOR):
        return False
    return not ranked or ranked[0].path.lower() != query


def resolve(raw_query: str, collections: Iterable[Collection]) -> list[Suggestion]:
    """Rank every entry of *collections* against *raw_query*.

    The result starts with a :class:`CreatePlaceholder` when the user typed a
    path that no existing entry matches exactly.
    """

    context = QueryContext.classify(raw_query)
    entries = flatten_collections(collections)

    if context.mode is QueryMode.TITLE:
        ranked = rank_by_title(entries, context.search_text)
    elif context.mode is QueryMode.BROWSE:
        ranked = top_level(entries)
    else:
        ranked = rank_by_path(entries, context.search_text)

    suggestions: list[Suggestion] = [Found(entry) for entry in ranked]
    if offers_creation(context, ranked):
        suggestions.insert(0, CreatePlaceholder())

    logger.debug(
        "Resolved %r in %s mode: %d of %d entries matched",
        raw_query,
        context.mode.value,
        len(ranked),
        len(entries),
    )
    return suggestions


def highlight_span(path: str, raw_query: str) -> tuple[int, int] | None:
    """Return the span of *path* that matches *raw_query*, if any.

    Title queries are never highlighted since they do not match the path.
    """

    if not raw_query or raw_query.startswith(TITLE_MARKER):
        return None
    start = path.lower().find(raw_query.lower())
    if start < 0:
        return None
    return start, start + len(raw_query)
