import logging
import threading

from fastapi import APIRouter, Depends, HTTPException, Request

from quickfolders_api.commands import IndexCommands, file_menu_item
from quickfolders_api.dependencies import (
    get_commands,
    get_explorer,
    get_explorer_lock,
    get_gate,
    get_preferences_store,
    get_vault,
    get_workspace,
)
from quickfolders_api.domain.entities import Note
from quickfolders_api.domain.exceptions import FrontmatterError, KeywordError, PathError
from quickfolders_api.domain.schemas import (
    CommandOut,
    ExplorerEventIn,
    ExplorerEventOut,
    ExplorerStateOut,
    IndexMarkerOut,
    MenuItemOut,
    MenuOut,
    NoteOut,
    ResolveOut,
    SettingsOut,
    SettingsUpdateIn,
)
from quickfolders_api.explorer import ExplorerView, PointerEvent, Workspace
from quickfolders_api.gate import InteractionGate
from quickfolders_api.preferences import PreferencesStore, validate_keyword
from quickfolders_api.resolver import resolve
from quickfolders_api.util import rfc3339_from_timestamp
from quickfolders_api.vault import Vault

router = APIRouter()
logger = logging.getLogger("quickfolders.api")


def _note_out(note: Note) -> NoteOut:
    return NoteOut(
        path=note.path,
        name=note.name,
        basename=note.basename,
        updated_at=rfc3339_from_timestamp(note.mtime),
        is_index=note.has_index_marker,
    )


@router.get("/health")
def health():
    return {"ok": True}


@router.get("/folders/resolve", response_model=ResolveOut)
def resolve_folder(
    path: str,
    vault: Vault = Depends(get_vault),
    store: PreferencesStore = Depends(get_preferences_store),
):
    folder = vault.get_folder(path)
    if folder is None:
        return ResolveOut(folder=path)
    note = resolve(folder, store.load())
    return ResolveOut(folder=folder.path, note=_note_out(note) if note else None)


@router.get("/settings", response_model=SettingsOut)
def get_settings_record(store: PreferencesStore = Depends(get_preferences_store)):
    return SettingsOut(**store.load().to_mapping())


@router.put("/settings", response_model=SettingsOut)
def update_settings(
    payload: SettingsUpdateIn,
    request: Request,
    store: PreferencesStore = Depends(get_preferences_store),
):
    changes = payload.model_dump(exclude_none=True)
    if "keyword" in changes:
        try:
            changes["keyword"] = validate_keyword(changes["keyword"])
        except KeywordError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
    prefs = store.load().updated(**changes)
    store.save(prefs)
    logger.info(
        "settings_update",
        extra={"rid": getattr(request.state, "request_id", ""), "fields": sorted(changes)},
    )
    return SettingsOut(**prefs.to_mapping())


@router.get("/notes/index-marker", response_model=IndexMarkerOut)
def get_index_marker(path: str, vault: Vault = Depends(get_vault)):
    note = vault.get_note(path)
    if note is None:
        raise HTTPException(status_code=404, detail="note_not_found")
    return IndexMarkerOut(path=note.path, is_index=note.has_index_marker)


def _update_marker(vault: Vault, path: str, *, marked: bool, request: Request) -> IndexMarkerOut:
    try:
        note = vault.set_index_marker(path) if marked else vault.remove_index_marker(path)
    except PathError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail="note_not_found") from e
    except FrontmatterError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    logger.info(
        "marker_update",
        extra={"rid": getattr(request.state, "request_id", ""), "path": note.path, "marked": marked},
    )
    return IndexMarkerOut(path=note.path, is_index=note.has_index_marker)


@router.put("/notes/index-marker", response_model=IndexMarkerOut)
def set_index_marker(path: str, request: Request, vault: Vault = Depends(get_vault)):
    return _update_marker(vault, path, marked=True, request=request)


@router.delete("/notes/index-marker", response_model=IndexMarkerOut)
def remove_index_marker(path: str, request: Request, vault: Vault = Depends(get_vault)):
    return _update_marker(vault, path, marked=False, request=request)


@router.get("/notes/menu", response_model=MenuOut)
def note_menu(path: str, vault: Vault = Depends(get_vault)):
    item = file_menu_item(vault, path)
    if item is None:
        return MenuOut(path=path)
    return MenuOut(path=path, item=MenuItemOut(title=item.title, icon=item.icon, action=item.action))


@router.post("/commands/{command_id}", response_model=CommandOut)
def run_command(
    command_id: str,
    request: Request,
    commands: IndexCommands = Depends(get_commands),
    workspace: Workspace = Depends(get_workspace),
):
    try:
        ran = commands.run(command_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail="command_not_found") from e
    except FrontmatterError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    if not ran:
        raise HTTPException(status_code=409, detail="command_unavailable")
    logger.info(
        "command_run",
        extra={"rid": getattr(request.state, "request_id", ""), "command": command_id, "path": workspace.active_path},
    )
    return CommandOut(id=command_id, ran=ran, active_path=workspace.active_path)


@router.post("/explorer/events", response_model=ExplorerEventOut)
def explorer_event(
    payload: ExplorerEventIn,
    explorer: ExplorerView = Depends(get_explorer),
    gate: InteractionGate = Depends(get_gate),
    lock: threading.Lock = Depends(get_explorer_lock),
):
    with lock:
        explorer.refresh()
        target = explorer.part_of(payload.path, payload.part)
        if target is None:
            return ExplorerEventOut(folder=payload.path)
        explorer.dispatch(PointerEvent(type=payload.type, target=target))
        outcome = gate.last_outcome
        return ExplorerEventOut(
            folder=payload.path,
            opened=outcome.opened,
            suppressed=outcome.suppressed,
            collapsed=explorer.collapsed.get(payload.path),
        )


@router.get("/explorer/state", response_model=ExplorerStateOut)
def explorer_state(
    explorer: ExplorerView = Depends(get_explorer),
    workspace: Workspace = Depends(get_workspace),
    lock: threading.Lock = Depends(get_explorer_lock),
):
    with lock:
        explorer.refresh()
        return ExplorerStateOut(collapsed=dict(explorer.collapsed), active_path=workspace.active_path)


@router.post("/workspace/open", response_model=ExplorerStateOut)
def open_note(
    path: str,
    vault: Vault = Depends(get_vault),
    explorer: ExplorerView = Depends(get_explorer),
    workspace: Workspace = Depends(get_workspace),
    lock: threading.Lock = Depends(get_explorer_lock),
):
    note = vault.get_note(path)
    if note is None:
        raise HTTPException(status_code=404, detail="note_not_found")
    with lock:
        workspace.open_note(note.path)
        return ExplorerStateOut(collapsed=dict(explorer.collapsed), active_path=workspace.active_path)
