from __future__ import annotations

import os
from pathlib import Path

import pytest

from quickfolders_api.dependencies import cache_clear_all


@pytest.fixture(autouse=True)
def clear_dependency_caches():
    cache_clear_all()
    yield
    cache_clear_all()


def write_note(root: Path, rel: str, content: str = "", mtime: float | None = None) -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def make_note(tmp_path):
    def _make(rel: str, content: str = "", mtime: float | None = None) -> Path:
        return write_note(tmp_path, rel, content, mtime)

    return _make
