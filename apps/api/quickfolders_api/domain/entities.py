from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Union

INDEX_MARKER_KEY = "index_note"
NOTE_EXTENSION = "md"


@dataclass(frozen=True)
class Note:
    path: str
    mtime: float
    frontmatter: dict = field(default_factory=dict, compare=False)

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def basename(self) -> str:
        stem, dot, _ext = self.name.rpartition(".")
        return stem if dot else self.name

    @property
    def has_index_marker(self) -> bool:
        # Only a real YAML boolean counts; "true" as a string does not.
        return self.frontmatter.get(INDEX_MARKER_KEY) is True


@dataclass(frozen=True)
class Folder:
    path: str
    children: tuple[Union[Note, "Folder"], ...] = ()

    def notes(self) -> list[Note]:
        return [c for c in self.children if isinstance(c, Note)]

    def subfolders(self) -> list[Folder]:
        return [c for c in self.children if isinstance(c, Folder)]

    def walk_notes(self) -> Iterator[Note]:
        """Every note in the subtree, depth first, in child order."""
        for child in self.children:
            if isinstance(child, Note):
                yield child
            else:
                yield from child.walk_notes()
