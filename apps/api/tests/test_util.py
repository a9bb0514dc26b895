from __future__ import annotations

import json
import os
from concurrent.futures import ThreadPoolExecutor

from quickfolders_api.util import atomic_write_json, atomic_write_text


def test_atomic_write_replaces_content_and_keeps_mode(tmp_path) -> None:
    path = tmp_path / "note.md"
    path.write_text("old\n", encoding="utf-8")
    os.chmod(path, 0o644)

    atomic_write_text(path, "new\r\nline\n")

    assert path.read_bytes() == b"new\r\nline\n"
    assert path.stat().st_mode & 0o777 == 0o644
    assert sorted(p.name for p in tmp_path.iterdir()) == ["note.md"]


def test_concurrent_writers_do_not_collide(tmp_path) -> None:
    path = tmp_path / ".quickfolders" / "settings.json"

    def write(i: int) -> None:
        for _ in range(20):
            atomic_write_json(path, {"writer": i})

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(write, range(8)))

    assert json.loads(path.read_text(encoding="utf-8"))["writer"] in range(8)
    assert sorted(p.name for p in path.parent.iterdir()) == ["settings.json"]
