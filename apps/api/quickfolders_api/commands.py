from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .domain.entities import NOTE_EXTENSION
from .explorer import Workspace
from .vault import Vault

logger = logging.getLogger("quickfolders.commands")

SET_AS_INDEX = "set-as-index"
REMOVE_AS_INDEX = "remove-as-index"


@dataclass(frozen=True)
class Command:
    id: str
    name: str
    check_callback: Callable[[bool], bool]


@dataclass(frozen=True)
class MenuItem:
    title: str
    icon: str
    action: str


class IndexCommands:
    """
    Marker commands acting on the workspace's active note.

    ``check_callback(checking=True)`` only answers whether the command is
    available; ``checking=False`` runs it and returns whether it ran.
    """

    def __init__(self, vault: Vault, workspace: Workspace) -> None:
        self.vault = vault
        self.workspace = workspace

    def commands(self) -> dict[str, Command]:
        return {
            SET_AS_INDEX: Command(SET_AS_INDEX, "Set current note as index", self.set_as_index),
            REMOVE_AS_INDEX: Command(REMOVE_AS_INDEX, "Remove current note as index", self.remove_as_index),
        }

    def _active_note(self) -> Optional[str]:
        path = self.workspace.active_path
        if not path or self.vault.get_note(path) is None:
            return None
        return path

    def set_as_index(self, checking: bool) -> bool:
        path = self._active_note()
        if path is None:
            return False
        if checking:
            return True
        self.vault.set_index_marker(path)
        return True

    def remove_as_index(self, checking: bool) -> bool:
        path = self._active_note()
        if path is None or not self.vault.has_index_marker(path):
            return False
        if checking:
            return True
        self.vault.remove_index_marker(path)
        return True

    def run(self, command_id: str) -> bool:
        command = self.commands().get(command_id)
        if command is None:
            raise KeyError(command_id)
        if not command.check_callback(True):
            logger.info("command_unavailable", extra={"command": command_id})
            return False
        return command.check_callback(False)


def file_menu_item(vault: Vault, path: str) -> Optional[MenuItem]:
    """The index entry for a note's file menu; non-notes get none."""
    if not path.endswith(f".{NOTE_EXTENSION}"):
        return None
    note = vault.get_note(path)
    if note is None:
        return None
    if note.has_index_marker:
        return MenuItem(title="Remove index note", icon="x-circle", action=REMOVE_AS_INDEX)
    return MenuItem(title="Set index note", icon="pin", action=SET_AS_INDEX)
