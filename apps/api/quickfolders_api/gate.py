"""
Folder-click interception.

The gate listens in the capture phase of the explorer, opens the folder's
representative note on a title click, and, when folder toggling is disabled,
stops the host's own expand/collapse from firing. Hosts may apply the toggle
a little after the click itself, so every suppressed event also issues a
short suppression lease; the host's ``set_collapsed`` asks the gate whether a
lease is active before honoring a suppressible toggle.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .domain.ports import CollectionTree, FolderControlRegistry, NoteOpener
from .explorer import CLICK, FOLDER_ID_ATTRIBUTE, PRESS_EVENT_TYPES, ExplorerView, PointerEvent
from .preferences import Preferences
from .resolver import resolve

logger = logging.getLogger("quickfolders.gate")

DEFAULT_LEASE_SECONDS = 0.1


@dataclass(frozen=True)
class SuppressionLease:
    folder_id: Optional[str]
    expires_at: float

    def active(self, now: float) -> bool:
        return now < self.expires_at


@dataclass(frozen=True)
class GateOutcome:
    folder_id: Optional[str] = None
    opened: Optional[str] = None
    suppressed: bool = False


class InteractionGate:
    def __init__(
        self,
        tree: CollectionTree,
        registry: FolderControlRegistry,
        opener: NoteOpener,
        preferences: Callable[[], Preferences],
        *,
        lease_seconds: float = DEFAULT_LEASE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.tree = tree
        self.registry = registry
        self.opener = opener
        self.preferences = preferences
        self.lease_seconds = lease_seconds
        self.clock = clock
        self._lease: Optional[SuppressionLease] = None
        self.last_outcome = GateOutcome()

    def attach(self, view: ExplorerView) -> None:
        view.add_capture_listener(self.on_event)
        view.collapse_guard = self.toggle_blocked

    def detach(self, view: ExplorerView) -> None:
        view.remove_capture_listener(self.on_event)
        if view.collapse_guard == self.toggle_blocked:
            view.collapse_guard = None
        self._lease = None

    def toggle_blocked(self, folder_id: str) -> bool:
        lease = self._lease
        if lease is None:
            return False
        if not lease.active(self.clock()):
            self._lease = None
            return False
        return True

    def _grant_lease(self, folder_id: Optional[str]) -> None:
        self._lease = SuppressionLease(folder_id=folder_id, expires_at=self.clock() + self.lease_seconds)

    def on_event(self, event: PointerEvent) -> None:
        self.last_outcome = self.handle(event)

    def handle(self, event: PointerEvent) -> GateOutcome:
        if event.type == CLICK:
            return self._on_click(event)
        if event.type in PRESS_EVENT_TYPES:
            return self._on_press(event)
        return GateOutcome()

    def _on_press(self, event: PointerEvent) -> GateOutcome:
        title = self.registry.folder_title_for(event.target)
        if title is None:
            return GateOutcome()
        folder_id = title.get_attribute(FOLDER_ID_ATTRIBUTE)
        if self.registry.is_arrow_element(event.target):
            self._lease = None
            return GateOutcome(folder_id=folder_id)
        if self.preferences().allow_folder_toggle:
            return GateOutcome(folder_id=folder_id)

        self._grant_lease(folder_id)
        event.stop_immediate_propagation()
        event.prevent_default()
        return GateOutcome(folder_id=folder_id, suppressed=True)

    def _on_click(self, event: PointerEvent) -> GateOutcome:
        title = self.registry.folder_title_for(event.target)
        if title is None:
            return GateOutcome()

        on_arrow = self.registry.is_arrow_element(event.target)

        folder_id = title.get_attribute(FOLDER_ID_ATTRIBUTE)
        if not folder_id:
            logger.debug("folder_id_missing")
            return GateOutcome()

        folder = self.tree.get_folder(folder_id)
        if folder is None:
            logger.debug("folder_not_found", extra={"folder": folder_id})
            return GateOutcome(folder_id=folder_id)

        opened: Optional[str] = None
        if not on_arrow:
            note = resolve(folder, self.preferences())
            if note is not None:
                self.opener.open_note(note.path)
                opened = note.path
            else:
                logger.debug("no_representative_note", extra={"folder": folder_id})

        if on_arrow or self.preferences().allow_folder_toggle:
            return GateOutcome(folder_id=folder_id, opened=opened)

        event.stop_immediate_propagation()
        event.prevent_default()
        self._grant_lease(folder_id)
        return GateOutcome(folder_id=folder_id, opened=opened, suppressed=True)
