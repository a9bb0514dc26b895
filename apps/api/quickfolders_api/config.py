from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Settings:
    vault_dir: Path
    api_auth_mode: str
    api_auth_token: str | None
    api_debug_log: bool
    toggle_lease_seconds: float
    log_level: str


def load_settings() -> Settings:
    vault_dir = Path(os.environ.get("VAULT_DIR", "./vault")).resolve()
    api_auth_mode = os.environ.get("API_AUTH_MODE", "none").strip().lower()
    api_auth_token = os.environ.get("API_AUTH_TOKEN")
    api_debug_log = os.environ.get("API_DEBUG_LOG", "false").lower() == "true"
    toggle_lease_seconds = int(os.environ.get("TOGGLE_LEASE_MS", "100")) / 1000.0
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
    return Settings(
        vault_dir=vault_dir,
        api_auth_mode=api_auth_mode,
        api_auth_token=api_auth_token,
        api_debug_log=api_debug_log,
        toggle_lease_seconds=toggle_lease_seconds,
        log_level=log_level,
    )
