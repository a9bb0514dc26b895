from __future__ import annotations

import pytest

from quickfolders_api.commands import REMOVE_AS_INDEX, SET_AS_INDEX, IndexCommands, file_menu_item
from quickfolders_api.explorer import Workspace
from quickfolders_api.vault import Vault


@pytest.fixture
def commands(tmp_path, make_note) -> IndexCommands:
    make_note("Projects/plan.md", "Plan\n")
    return IndexCommands(Vault(tmp_path), Workspace())


def test_commands_unavailable_without_active_note(commands: IndexCommands) -> None:
    assert commands.set_as_index(checking=True) is False
    assert commands.run(SET_AS_INDEX) is False


def test_set_then_remove_on_active_note(commands: IndexCommands) -> None:
    commands.workspace.open_note("Projects/plan.md")
    assert commands.remove_as_index(checking=True) is False

    assert commands.run(SET_AS_INDEX) is True
    assert commands.vault.has_index_marker("Projects/plan.md")
    assert commands.run(SET_AS_INDEX) is True
    assert commands.vault.has_index_marker("Projects/plan.md")

    assert commands.run(REMOVE_AS_INDEX) is True
    assert not commands.vault.has_index_marker("Projects/plan.md")
    assert commands.run(REMOVE_AS_INDEX) is False


def test_unknown_command(commands: IndexCommands) -> None:
    with pytest.raises(KeyError):
        commands.run("explode")


def test_file_menu_item_follows_marker(commands: IndexCommands) -> None:
    vault = commands.vault
    item = file_menu_item(vault, "Projects/plan.md")
    assert (item.title, item.icon, item.action) == ("Set index note", "pin", SET_AS_INDEX)

    vault.set_index_marker("Projects/plan.md")
    item = file_menu_item(vault, "Projects/plan.md")
    assert (item.title, item.icon, item.action) == ("Remove index note", "x-circle", REMOVE_AS_INDEX)

    assert file_menu_item(vault, "Projects") is None
    assert file_menu_item(vault, "Projects/missing.md") is None
