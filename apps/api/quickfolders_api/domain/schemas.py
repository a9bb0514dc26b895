from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

from quickfolders_api.preferences import EmptyFolderStrategy, FallbackStrategy


class NoteOut(BaseModel):
    path: str
    name: str
    basename: str
    updated_at: str
    is_index: bool = False


class ResolveOut(BaseModel):
    folder: str
    note: Optional[NoteOut] = None


class SettingsOut(BaseModel):
    fallback_strategy: FallbackStrategy
    empty_folder_strategy: EmptyFolderStrategy
    allow_folder_toggle: bool
    strict_matching: bool
    keyword: str


class SettingsUpdateIn(BaseModel):
    fallback_strategy: Optional[FallbackStrategy] = None
    empty_folder_strategy: Optional[EmptyFolderStrategy] = None
    allow_folder_toggle: Optional[bool] = None
    strict_matching: Optional[bool] = None
    keyword: Optional[str] = None


class IndexMarkerOut(BaseModel):
    path: str
    is_index: bool


class MenuItemOut(BaseModel):
    title: str
    icon: str
    action: str


class MenuOut(BaseModel):
    path: str
    item: Optional[MenuItemOut] = None


class CommandOut(BaseModel):
    id: str
    ran: bool
    active_path: Optional[str] = None


class ExplorerEventIn(BaseModel):
    path: str
    part: Literal["title", "arrow", "label"] = "label"
    type: Literal["click", "mousedown", "mouseup", "pointerdown", "pointerup"] = "click"


class ExplorerEventOut(BaseModel):
    folder: str
    opened: Optional[str] = None
    suppressed: bool = False
    collapsed: Optional[bool] = None


class ExplorerStateOut(BaseModel):
    collapsed: dict[str, bool] = Field(default_factory=dict)
    active_path: Optional[str] = None
