from __future__ import annotations

import json

import pytest

from quickfolders_api.domain.exceptions import KeywordError
from quickfolders_api.preferences import (
    EmptyFolderStrategy,
    FallbackStrategy,
    Preferences,
    PreferencesStore,
    validate_keyword,
)


def test_defaults() -> None:
    prefs = Preferences()
    assert prefs.fallback_strategy is FallbackStrategy.MOST_RECENT
    assert prefs.empty_folder_strategy is EmptyFolderStrategy.RECENT_INDEX_IN_SUBFOLDERS
    assert prefs.allow_folder_toggle is True
    assert prefs.strict_matching is False
    assert prefs.keyword == "index"


def test_missing_fields_take_defaults() -> None:
    prefs = Preferences.from_mapping({"fallback_strategy": "alphabetical", "unknown": 1})
    assert prefs == Preferences(fallback_strategy=FallbackStrategy.ALPHABETICAL_FIRST)


def test_malformed_fields_fall_back_one_by_one() -> None:
    prefs = Preferences.from_mapping(
        {
            "fallback_strategy": "sideways",
            "empty_folder_strategy": ["recent_index"],
            "allow_folder_toggle": "no",
            "strict_matching": True,
            "keyword": 42,
        }
    )
    assert prefs == Preferences(strict_matching=True)


def test_stored_short_keyword_is_kept_lowercased() -> None:
    assert Preferences.from_mapping({"keyword": " AB "}).keyword == "ab"


def test_non_mapping_gives_defaults() -> None:
    assert Preferences.from_mapping(["nope"]) == Preferences()
    assert Preferences.from_mapping(None) == Preferences()


def test_validate_keyword() -> None:
    assert validate_keyword("  Home ") == "home"
    with pytest.raises(KeywordError):
        validate_keyword(" ab ")


def test_store_round_trip(tmp_path) -> None:
    store = PreferencesStore(tmp_path)
    assert store.load() == Preferences()

    prefs = Preferences().updated(allow_folder_toggle=False, keyword="home")
    store.save(prefs)
    assert store.load() == prefs

    data = json.loads((tmp_path / ".quickfolders" / "settings.json").read_text(encoding="utf-8"))
    assert data == {
        "allow_folder_toggle": False,
        "empty_folder_strategy": "recent_index",
        "fallback_strategy": "recent",
        "keyword": "home",
        "strict_matching": False,
    }


def test_store_ignores_corrupt_file(tmp_path) -> None:
    path = tmp_path / ".quickfolders" / "settings.json"
    path.parent.mkdir(parents=True)
    path.write_text("{not json", encoding="utf-8")
    assert PreferencesStore(tmp_path).load() == Preferences()
