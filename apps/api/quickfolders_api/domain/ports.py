from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Optional, Protocol, runtime_checkable

from quickfolders_api.domain.entities import Folder, Note

if TYPE_CHECKING:
    from quickfolders_api.explorer import ControlNode


@runtime_checkable
class CollectionTree(Protocol):
    def get_folder(self, folder_path: str) -> Optional[Folder]:
        ...

    def get_note(self, note_path: str) -> Optional[Note]:
        ...


@runtime_checkable
class NoteOpener(Protocol):
    def open_note(self, note_path: str) -> None:
        ...


@runtime_checkable
class FolderControlRegistry(Protocol):
    version: ClassVar[int]

    def folder_title_for(self, node: ControlNode) -> Optional[ControlNode]:
        ...

    def find_folder_control(self, folder_id: str) -> Optional[ControlNode]:
        ...

    def is_arrow_element(self, node: ControlNode) -> bool:
        ...

    def set_collapsed(self, folder_id: str, collapsed: bool, *, suppressible: bool = True) -> bool:
        ...
