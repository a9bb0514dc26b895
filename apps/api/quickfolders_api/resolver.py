"""
Representative-note resolution for folders.

Given a folder snapshot and the current preferences, pick the one note that
should open when the folder is selected:

1. a direct child note carrying the ``index_note: true`` frontmatter marker;
2. a direct child note whose name matches the keyword;
3. the fallback strategy over direct child notes;
4. when there are no direct child notes, the empty-folder strategy, which
   may fall through to
5. the fallback strategy over every note in the subtree.

Everything here is pure: no I/O, no caching, same input gives same output.
"""

from __future__ import annotations

from typing import Iterable, Optional

from .domain.entities import NOTE_EXTENSION, Folder, Note
from .preferences import EmptyFolderStrategy, FallbackStrategy, Preferences


def _alphabetical_key(note: Note) -> tuple[str, str]:
    # Case-insensitive first, lowercase before uppercase on ties.
    return (note.name.casefold(), note.name.swapcase())


def most_recent(notes: Iterable[Note]) -> Optional[Note]:
    # sorted() is stable, so equal mtimes keep iteration order.
    ranked = sorted(notes, key=lambda n: n.mtime, reverse=True)
    return ranked[0] if ranked else None


def alphabetical_first(notes: Iterable[Note]) -> Optional[Note]:
    ranked = sorted(notes, key=_alphabetical_key)
    return ranked[0] if ranked else None


def apply_fallback(notes: list[Note], strategy: FallbackStrategy) -> Optional[Note]:
    if strategy is FallbackStrategy.MOST_RECENT:
        return most_recent(notes)
    if strategy is FallbackStrategy.ALPHABETICAL_FIRST:
        return alphabetical_first(notes)
    return None


def find_index_note(folder: Folder, prefs: Preferences) -> Optional[Note]:
    """Marker or keyword match among the folder's direct child notes."""
    notes = folder.notes()
    for note in notes:
        if note.has_index_marker:
            return note

    keyword = prefs.keyword.lower()

    if prefs.strict_matching:
        wanted = f"{keyword}.{NOTE_EXTENSION}"
        for note in notes:
            if note.name == wanted:
                return note
        return None

    for note in notes:
        if note.basename.lower() == keyword:
            return note
    for note in notes:
        if keyword in note.basename.lower():
            return note
    return None


def most_recent_subfolder_index(folder: Folder, prefs: Preferences) -> Optional[Note]:
    # Only immediate subfolders are asked for their own index; grandchildren are not searched.
    found = [index for index in (find_index_note(child, prefs) for child in folder.subfolders()) if index]
    return most_recent(found)


def resolve(folder: Folder, prefs: Preferences) -> Optional[Note]:
    index = find_index_note(folder, prefs)
    if index:
        return index

    direct = folder.notes()
    if direct:
        return apply_fallback(direct, prefs.fallback_strategy)

    strategy = prefs.empty_folder_strategy
    if strategy is EmptyFolderStrategy.NONE:
        return None
    if strategy is EmptyFolderStrategy.RECENT_INDEX_IN_SUBFOLDERS:
        result = most_recent_subfolder_index(folder, prefs)
    else:
        result = most_recent(folder.walk_notes())
    if result:
        return result

    return apply_fallback(list(folder.walk_notes()), prefs.fallback_strategy)
