from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Optional

from .domain.entities import INDEX_MARKER_KEY, NOTE_EXTENSION, Folder, Note
from .domain.exceptions import FrontmatterError, PathError
from .parsing import parse_frontmatter, render_markdown_with_frontmatter
from .util import atomic_write_text

logger = logging.getLogger("quickfolders.vault")

META_DIR_NAME = ".quickfolders"


def _clean_relative(path: str) -> PurePosixPath:
    if "\x00" in path:
        raise PathError("path_contains_nul")

    cleaned = path.strip().replace("\\", "/")
    p = PurePosixPath(cleaned)
    if p.is_absolute():
        raise PathError("path_absolute_not_allowed")
    if ".." in p.parts:
        raise PathError("path_traversal_not_allowed")
    if p.parts and p.parts[0] == META_DIR_NAME:
        raise PathError("path_reserved")
    return p


def normalize_note_path(path: str) -> str:
    if not path.strip():
        raise PathError("path_empty")
    p = _clean_relative(path)
    if p.suffix.lower() != f".{NOTE_EXTENSION}":
        p = p.with_suffix(f".{NOTE_EXTENSION}")
    return p.as_posix()


def normalize_folder_path(path: str) -> str:
    """Vault-relative folder path; the root is ``""``."""
    p = _clean_relative(path.strip().strip("/"))
    posix = p.as_posix()
    return "" if posix == "." else posix


def _is_note_file(p: Path) -> bool:
    return p.is_file() and p.suffix == f".{NOTE_EXTENSION}"


class Vault:
    """
    Read-only snapshots of the vault directory plus the index-marker command.

    Every lookup walks the disk again; nothing is cached between calls.
    """

    def __init__(self, vault_dir: Path) -> None:
        self.vault_dir = vault_dir

    def _abs_path(self, rel_path: str) -> Path:
        return (self.vault_dir / PurePosixPath(rel_path)).resolve()

    def _ensure_under_vault(self, abs_path: Path) -> None:
        root = self.vault_dir.resolve()
        if root not in abs_path.parents and abs_path != root:
            raise PathError("path_outside_vault")

    def _rel(self, abs_path: Path) -> str:
        rel = abs_path.relative_to(self.vault_dir.resolve()).as_posix()
        return "" if rel == "." else rel

    def _read_note(self, abs_path: Path) -> Optional[Note]:
        """None when the file vanished; undecodable content counts as a note without frontmatter."""
        rel = self._rel(abs_path)
        try:
            mtime = abs_path.stat().st_mtime
        except OSError:
            return None
        try:
            content = abs_path.read_text(encoding="utf-8")
        except (UnicodeDecodeError, OSError) as e:
            logger.debug("note_unreadable", extra={"path": rel, "error": type(e).__name__})
            return Note(path=rel, mtime=mtime)
        parsed = parse_frontmatter(content)
        if parsed.error:
            logger.debug("frontmatter_unreadable", extra={"path": rel, "error": parsed.error})
        return Note(path=rel, mtime=mtime, frontmatter=parsed.frontmatter)

    def _load_note(self, rel: str, abs_path: Path) -> Note:
        note = self._read_note(abs_path)
        if note is None:
            raise FileNotFoundError(rel)
        return note

    def _snapshot(self, abs_dir: Path) -> Folder:
        children: list = []
        for entry in sorted(abs_dir.iterdir(), key=lambda p: p.name):
            if entry.name.startswith("."):
                continue
            if entry.is_dir():
                children.append(self._snapshot(entry))
            elif _is_note_file(entry):
                note = self._read_note(entry)
                if note is not None:
                    children.append(note)
        return Folder(path=self._rel(abs_dir), children=tuple(children))

    def _outline(self, abs_dir: Path) -> Folder:
        children = [
            self._outline(entry)
            for entry in sorted(abs_dir.iterdir(), key=lambda p: p.name)
            if not entry.name.startswith(".") and entry.is_dir()
        ]
        return Folder(path=self._rel(abs_dir), children=tuple(children))

    def root(self) -> Folder:
        if not self.vault_dir.exists():
            return Folder(path="")
        return self._snapshot(self.vault_dir.resolve())

    def folder_outline(self) -> Folder:
        """Folder hierarchy only; note files are not opened."""
        if not self.vault_dir.exists():
            return Folder(path="")
        return self._outline(self.vault_dir.resolve())

    def get_folder(self, folder_path: str) -> Optional[Folder]:
        try:
            rel = normalize_folder_path(folder_path)
        except PathError:
            return None
        if not rel:
            return None
        abs_path = self._abs_path(rel)
        try:
            self._ensure_under_vault(abs_path)
        except PathError:
            return None
        if not abs_path.is_dir():
            return None
        return self._snapshot(abs_path)

    def get_note(self, note_path: str) -> Optional[Note]:
        try:
            rel = normalize_note_path(note_path)
        except PathError:
            return None
        abs_path = self._abs_path(rel)
        try:
            self._ensure_under_vault(abs_path)
        except PathError:
            return None
        if not _is_note_file(abs_path):
            return None
        return self._read_note(abs_path)

    def _note_file(self, note_path: str) -> tuple[str, Path]:
        rel = normalize_note_path(note_path)
        abs_path = self._abs_path(rel)
        self._ensure_under_vault(abs_path)
        if not _is_note_file(abs_path):
            raise FileNotFoundError(rel)
        return rel, abs_path

    def has_index_marker(self, note_path: str) -> bool:
        rel, abs_path = self._note_file(note_path)
        return self._load_note(rel, abs_path).has_index_marker

    def set_index_marker(self, note_path: str) -> Note:
        return self._update_marker(note_path, marked=True)

    def remove_index_marker(self, note_path: str) -> Note:
        return self._update_marker(note_path, marked=False)

    def _update_marker(self, note_path: str, *, marked: bool) -> Note:
        rel, abs_path = self._note_file(note_path)
        try:
            content = abs_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise FrontmatterError("note_unreadable") from e
        parsed = parse_frontmatter(content)
        if parsed.error:
            raise FrontmatterError("frontmatter_invalid")

        frontmatter = dict(parsed.frontmatter)
        if marked:
            if frontmatter.get(INDEX_MARKER_KEY) is True:
                return self._load_note(rel, abs_path)
            frontmatter[INDEX_MARKER_KEY] = True
        else:
            if INDEX_MARKER_KEY not in frontmatter:
                return self._load_note(rel, abs_path)
            frontmatter.pop(INDEX_MARKER_KEY)

        atomic_write_text(abs_path, render_markdown_with_frontmatter(frontmatter, parsed.body))
        logger.info("marker_set" if marked else "marker_removed", extra={"path": rel})
        return self._load_note(rel, abs_path)
