import threading
from functools import lru_cache

from quickfolders_api.commands import IndexCommands
from quickfolders_api.config import load_settings
from quickfolders_api.explorer import ExplorerView, Workspace
from quickfolders_api.gate import InteractionGate
from quickfolders_api.preferences import PreferencesStore
from quickfolders_api.vault import Vault

@lru_cache()
def get_settings():
    return load_settings()

@lru_cache()
def get_vault():
    settings = get_settings()
    return Vault(settings.vault_dir)

@lru_cache()
def get_preferences_store():
    settings = get_settings()
    return PreferencesStore(settings.vault_dir)

@lru_cache()
def get_workspace():
    return Workspace()

@lru_cache()
def get_explorer():
    return ExplorerView(get_vault())

@lru_cache()
def get_gate():
    settings = get_settings()
    gate = InteractionGate(
        tree=get_vault(),
        registry=get_explorer(),
        opener=get_workspace(),
        preferences=get_preferences_store().load,
        lease_seconds=settings.toggle_lease_seconds,
    )
    gate.attach(get_explorer())
    return gate

@lru_cache()
def get_commands():
    return IndexCommands(get_vault(), get_workspace())

@lru_cache()
def get_explorer_lock():
    return threading.Lock()

def cache_clear_all():
    for provider in (
        get_settings,
        get_vault,
        get_preferences_store,
        get_workspace,
        get_explorer,
        get_gate,
        get_commands,
        get_explorer_lock,
    ):
        provider.cache_clear()
