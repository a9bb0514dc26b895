from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

from .domain.exceptions import KeywordError
from .util import atomic_write_json

logger = logging.getLogger("quickfolders.preferences")

MIN_KEYWORD_LENGTH = 3


class FallbackStrategy(str, Enum):
    MOST_RECENT = "recent"
    ALPHABETICAL_FIRST = "alphabetical"
    NONE = "none"


class EmptyFolderStrategy(str, Enum):
    RECENT_INDEX_IN_SUBFOLDERS = "recent_index"
    RECENT_NOTE_RECURSIVE = "recent_recursive"
    NONE = "none"


@dataclass(frozen=True)
class Preferences:
    fallback_strategy: FallbackStrategy = FallbackStrategy.MOST_RECENT
    empty_folder_strategy: EmptyFolderStrategy = EmptyFolderStrategy.RECENT_INDEX_IN_SUBFOLDERS
    allow_folder_toggle: bool = True
    strict_matching: bool = False
    keyword: str = "index"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> Preferences:
        """
        Merge a stored record over the defaults.

        Unknown keys are ignored and each malformed value falls back to its
        default on its own, so one bad field never discards the others.
        """
        defaults = cls()
        if not isinstance(data, Mapping):
            return defaults
        return cls(
            fallback_strategy=_coerce_enum(
                FallbackStrategy, data.get("fallback_strategy"), defaults.fallback_strategy, "fallback_strategy"
            ),
            empty_folder_strategy=_coerce_enum(
                EmptyFolderStrategy,
                data.get("empty_folder_strategy"),
                defaults.empty_folder_strategy,
                "empty_folder_strategy",
            ),
            allow_folder_toggle=_coerce_bool(
                data.get("allow_folder_toggle"), defaults.allow_folder_toggle, "allow_folder_toggle"
            ),
            strict_matching=_coerce_bool(data.get("strict_matching"), defaults.strict_matching, "strict_matching"),
            keyword=_coerce_keyword(data.get("keyword"), defaults.keyword),
        )

    def to_mapping(self) -> dict[str, Any]:
        out = asdict(self)
        out["fallback_strategy"] = self.fallback_strategy.value
        out["empty_folder_strategy"] = self.empty_folder_strategy.value
        return out

    def updated(self, **changes: Any) -> Preferences:
        return replace(self, **changes)


def _coerce_enum(enum_cls: type[Enum], raw: Any, default: Enum, key: str):
    if raw is None:
        return default
    try:
        return enum_cls(raw)
    except (TypeError, ValueError):
        logger.warning("preferences_invalid_value", extra={"key": key, "value": raw})
        return default


def _coerce_bool(raw: Any, default: bool, key: str) -> bool:
    if raw is None:
        return default
    if isinstance(raw, bool):
        return raw
    logger.warning("preferences_invalid_value", extra={"key": key, "value": raw})
    return default


def _coerce_keyword(raw: Any, default: str) -> str:
    if raw is None:
        return default
    if isinstance(raw, str) and raw.strip():
        # Short keywords that made it to disk are kept; the resolver copes.
        return raw.strip().lower()
    logger.warning("preferences_invalid_value", extra={"key": "keyword", "value": raw})
    return default


def validate_keyword(raw: str) -> str:
    keyword = raw.strip().lower()
    if len(keyword) < MIN_KEYWORD_LENGTH:
        raise KeywordError("keyword_too_short")
    return keyword


class PreferencesStore:
    def __init__(self, vault_dir: Path) -> None:
        self.vault_dir = vault_dir
        self.meta_dir = vault_dir / ".quickfolders"
        self.path = self.meta_dir / "settings.json"

    def load(self) -> Preferences:
        if not self.path.exists():
            return Preferences()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("preferences_unreadable", extra={"path": str(self.path)})
            return Preferences()
        return Preferences.from_mapping(data)

    def save(self, prefs: Preferences) -> None:
        self.meta_dir.mkdir(parents=True, exist_ok=True)
        atomic_write_json(self.path, prefs.to_mapping())
        logger.info("preferences_saved", extra={"path": str(self.path)})
