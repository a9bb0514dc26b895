from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, ClassVar, Optional

from .domain.entities import Folder
from .vault import Vault

logger = logging.getLogger("quickfolders.explorer")

FOLDER_CLASS = "nav-folder"
FOLDER_TITLE_CLASS = "nav-folder-title"
FOLDER_TITLE_CONTENT_CLASS = "nav-folder-title-content"
ARROW_CLASSES = ("nav-folder-collapse-indicator", "collapse-icon", "tree-item-icon")
FOLDER_ID_ATTRIBUTE = "data-path"

CLICK = "click"
PRESS_EVENT_TYPES = ("mousedown", "mouseup", "pointerdown", "pointerup")


@dataclass(eq=False)
class ControlNode:
    tag: str
    classes: frozenset[str] = frozenset()
    attributes: dict[str, str] = field(default_factory=dict)
    parent: Optional[ControlNode] = field(default=None, repr=False)
    children: list[ControlNode] = field(default_factory=list, repr=False)

    def append(self, child: ControlNode) -> ControlNode:
        child.parent = self
        self.children.append(child)
        return child

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def closest(self, *class_names: str) -> Optional[ControlNode]:
        """Nearest node, starting at this one, carrying any of the classes."""
        wanted = set(class_names)
        node: Optional[ControlNode] = self
        while node is not None:
            if node.classes & wanted:
                return node
            node = node.parent
        return None


@dataclass(eq=False)
class PointerEvent:
    type: str
    target: ControlNode
    default_prevented: bool = False
    propagation_stopped: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True

    def stop_immediate_propagation(self) -> None:
        self.propagation_stopped = True


Listener = Callable[[PointerEvent], None]
CollapseGuard = Callable[[str], bool]


class Workspace:
    """A single active view; opening a note replaces whatever it showed."""

    def __init__(self) -> None:
        self.active_path: Optional[str] = None

    def open_note(self, note_path: str) -> None:
        if note_path == self.active_path:
            return
        self.active_path = note_path
        logger.info("note_open", extra={"path": note_path})


class ExplorerView:
    """
    Headless file explorer: one folder control per non-root folder, capture
    listeners ahead of the native click-to-toggle handler, and collapsed state
    per folder.
    """

    version: ClassVar[int] = 1

    def __init__(self, vault: Vault) -> None:
        self.vault = vault
        self.root = ControlNode("div", frozenset({"nav-files-container"}))
        self.collapsed: dict[str, bool] = {}
        self.collapse_guard: Optional[CollapseGuard] = None
        self._titles: dict[str, ControlNode] = {}
        self._capture_listeners: list[Listener] = []
        self.refresh()

    def refresh(self) -> None:
        """Rebuild the controls from the current folder hierarchy."""
        previous = self.collapsed
        self.root.children.clear()
        self._titles = {}
        self.collapsed = {}
        self._build(self.vault.folder_outline(), self.root)
        for folder_id in self._titles:
            self.collapsed[folder_id] = previous.get(folder_id, True)

    def _build(self, folder: Folder, container: ControlNode) -> None:
        for child in folder.subfolders():
            item = container.append(ControlNode("div", frozenset({FOLDER_CLASS})))
            title = item.append(
                ControlNode("div", frozenset({FOLDER_TITLE_CLASS}), {FOLDER_ID_ATTRIBUTE: child.path})
            )
            title.append(ControlNode("div", frozenset({ARROW_CLASSES[0]})))
            title.append(ControlNode("div", frozenset({FOLDER_TITLE_CONTENT_CLASS})))
            self._titles[child.path] = title
            self._build(child, item.append(ControlNode("div", frozenset({"nav-folder-children"}))))

    def add_capture_listener(self, listener: Listener) -> None:
        self._capture_listeners.append(listener)

    def remove_capture_listener(self, listener: Listener) -> None:
        if listener in self._capture_listeners:
            self._capture_listeners.remove(listener)

    def dispatch(self, event: PointerEvent) -> PointerEvent:
        for listener in list(self._capture_listeners):
            listener(event)
            if event.propagation_stopped:
                return event
        self._native_handler(event)
        return event

    def _native_handler(self, event: PointerEvent) -> None:
        if event.type != CLICK or event.default_prevented:
            return
        title = self.folder_title_for(event.target)
        if title is None:
            return
        folder_id = title.get_attribute(FOLDER_ID_ATTRIBUTE)
        if folder_id is None or folder_id not in self.collapsed:
            return
        on_arrow = self.is_arrow_element(event.target)
        self.set_collapsed(folder_id, not self.collapsed[folder_id], suppressible=not on_arrow)

    def folder_title_for(self, node: ControlNode) -> Optional[ControlNode]:
        return node.closest(FOLDER_TITLE_CLASS)

    def find_folder_control(self, folder_id: str) -> Optional[ControlNode]:
        return self._titles.get(folder_id)

    def is_arrow_element(self, node: ControlNode) -> bool:
        return node.closest(*ARROW_CLASSES) is not None

    def set_collapsed(self, folder_id: str, collapsed: bool, *, suppressible: bool = True) -> bool:
        if folder_id not in self.collapsed:
            return False
        if suppressible and self.collapse_guard is not None and self.collapse_guard(folder_id):
            logger.debug("toggle_suppressed", extra={"folder": folder_id})
            return False
        self.collapsed[folder_id] = collapsed
        return True

    def part_of(self, folder_id: str, part: str) -> Optional[ControlNode]:
        """The title, its arrow or its label, for synthesizing events."""
        title = self.find_folder_control(folder_id)
        if title is None or part == "title":
            return title
        wanted = ARROW_CLASSES[0] if part == "arrow" else FOLDER_TITLE_CONTENT_CLASS
        for child in title.children:
            if wanted in child.classes:
                return child
        return None
