"""Dot-path note hierarchy built from a vault directory."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import yaml

from .models import SEPARATOR, CandidateEntry
from .vaults import NOTE_SUFFIX, Vault

ROOT_NAME = "root"
FRONTMATTER_PATTERN = re.compile(r"^---\s*\n(.*?)\n---\s*\n?", re.DOTALL)

logger = logging.getLogger(__name__)


def generate_title(name: str, titlecase: bool) -> str:
    """Derive a display title from a path segment.

    ``my-note`` becomes ``My Note`` when *titlecase* is set.
    """

    if not titlecase:
        return name
    return " ".join(word[:1].upper() + word[1:] for word in name.split("-"))


def uses_titlecase(basename: str) -> bool:
    return basename.lower() == basename


def read_frontmatter(file: Path) -> dict[str, Any]:
    content = file.read_text(encoding="utf-8")
    match = FRONTMATTER_PATTERN.match(content)
    if not match:
        return {}
    loaded = yaml.safe_load(match.group(1)) or {}
    return dict(loaded) if isinstance(loaded, dict) else {}


def render_frontmatter(data: dict[str, Any]) -> str:
    rendered = yaml.safe_dump(data, sort_keys=True, allow_unicode=True).strip()
    return f"---\n{rendered}\n---\n"


class Note:
    """A node in the hierarchy; virtual when no file backs it."""

    def __init__(self, original_name: str, titlecase: bool) -> None:
        self.original_name = original_name
        self.name = original_name.lower()
        self.titlecase = titlecase
        self.parent: Note | None = None
        self.children: list[Note] = []
        self.file: Path | None = None
        self.title = generate_title(original_name, titlecase)

    def __repr__(self) -> str:
        return f"Note({self.path!r}, file={self.file!s})"

    def append_child(self, note: Note) -> None:
        note.parent = self
        self.children.append(note)

    def find_child(self, name: str) -> Note | None:
        lowered = name.lower()
        return next((child for child in self.children if child.name == lowered), None)

    def sort_children(self, recursive: bool = True) -> None:
        self.children.sort(key=lambda child: child.name)
        if recursive:
            for child in self.children:
                child.sort_children(recursive)

    @property
    def path(self) -> str:
        if self.parent is None:
            return self.name
        segments: list[str] = []
        node: Note | None = self
        while node is not None and node.parent is not None:
            segments.append(node.name)
            node = node.parent
        return SEPARATOR.join(reversed(segments))

    def sync_title(self, metadata: dict[str, Any] | None) -> None:
        title = (metadata or {}).get("title")
        if isinstance(title, str) and title.strip():
            self.title = title
        else:
            self.title = generate_title(self.original_name, self.titlecase)


class NoteTree:
    def __init__(self) -> None:
        self.root = Note(ROOT_NAME, True)

    @staticmethod
    def split_path(basename: str) -> list[str]:
        return basename.split(SEPARATOR)

    def add_file(self, file: Path) -> Note:
        """Attach *file* to the tree, creating virtual parents on the way."""

        basename = file.stem
        titlecase = uses_titlecase(basename)
        segments = self.split_path(basename)

        note = self.root
        if basename.lower() != ROOT_NAME:
            for segment in segments:
                child = note.find_child(segment)
                if child is None:
                    child = Note(segment, titlecase)
                    note.append_child(child)
                note = child

        note.file = file
        try:
            note.sync_title(read_frontmatter(file))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            logger.warning("Ignoring frontmatter of %s: %s", file, exc)
            note.sync_title(None)
        return note

    def walk(self, note: Note | None = None) -> Iterator[Note]:
        note = note or self.root
        yield note
        for child in note.children:
            yield from self.walk(child)

    def flatten(self) -> list[Note]:
        return list(self.walk())

    @classmethod
    def from_directory(cls, directory: Path) -> NoteTree:
        tree = cls()
        for file in sorted(directory.glob(f"*{NOTE_SUFFIX}")):
            if file.is_file():
                tree.add_file(file)
        tree.root.sort_children()
        return tree


class VaultNotes:
    """A vault snapshot exposed as a lookup collection."""

    def __init__(self, vault: Vault, tree: NoteTree) -> None:
        self.vault = vault
        self.tree = tree

    @property
    def name(self) -> str:
        return self.vault.name

    @classmethod
    def load(cls, vault: Vault) -> VaultNotes:
        tree = NoteTree.from_directory(vault.root)
        logger.debug("Loaded %d notes from vault %s", len(tree.flatten()), vault.name)
        return cls(vault, tree)

    def flatten_entries(self) -> list[CandidateEntry]:
        return [
            CandidateEntry(
                path=note.path,
                title=note.title,
                collection=self.vault.name,
                exists=note.file is not None,
            )
            for note in self.tree.walk()
        ]
