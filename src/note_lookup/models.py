"""Value types shared by the lookup engine and its callers."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, TypeAlias

SEPARATOR = "."


@dataclass(frozen=True, slots=True)
class CandidateEntry:
    """A note that can be offered by the lookup.

    ``collection`` is the name of the owning vault, not the vault itself.
    """

    path: str
    title: str
    collection: str
    exists: bool = True


class Collection(Protocol):
    """Anything that can enumerate its entries in a stable order."""

    name: str

    def flatten_entries(self) -> Sequence[CandidateEntry]: ...


@dataclass(frozen=True, slots=True)
class Found:
    entry: CandidateEntry


@dataclass(frozen=True, slots=True)
class CreatePlaceholder:
    """Offer to create a new note at the typed path."""


Suggestion: TypeAlias = Found | CreatePlaceholder
