from __future__ import annotations

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def client(tmp_path, monkeypatch, make_note) -> TestClient:
    monkeypatch.setenv("VAULT_DIR", str(tmp_path))
    monkeypatch.delenv("API_AUTH_MODE", raising=False)
    make_note("Projects/index.md", "Projects\n", mtime=10.0)
    make_note("Projects/zebra.md", "Z\n", mtime=30.0)
    make_note("Areas/Health/index.md", mtime=5.0)
    make_note("Areas/Money/Index.md", mtime=8.0)

    from main import create_app

    return TestClient(create_app())


def test_resolve_folder(client: TestClient) -> None:
    r = client.get("/folders/resolve", params={"path": "Projects"})
    assert r.status_code == 200
    body = r.json()
    assert body["folder"] == "Projects"
    assert body["note"]["path"] == "Projects/index.md"
    assert body["note"]["is_index"] is False
    assert body["note"]["updated_at"].endswith("Z")

    r2 = client.get("/folders/resolve", params={"path": "Areas"})
    assert r2.json()["note"]["path"] == "Areas/Money/Index.md"


def test_resolve_misses_are_null(client: TestClient) -> None:
    for path in ["Missing", "", "../etc", "Projects/index.md"]:
        r = client.get("/folders/resolve", params={"path": path})
        assert r.status_code == 200
        assert r.json()["note"] is None


def test_settings_round_trip_and_effect(client: TestClient) -> None:
    r = client.get("/settings")
    assert r.json() == {
        "fallback_strategy": "recent",
        "empty_folder_strategy": "recent_index",
        "allow_folder_toggle": True,
        "strict_matching": False,
        "keyword": "index",
    }

    r2 = client.put("/settings", json={"strict_matching": True, "keyword": "  INDEX "})
    assert r2.status_code == 200
    assert r2.json()["keyword"] == "index"
    assert r2.json()["fallback_strategy"] == "recent"

    # Strict matching skips Money/Index.md, leaving the older Health/index.md.
    r3 = client.get("/folders/resolve", params={"path": "Areas"})
    assert r3.json()["note"]["path"] == "Areas/Health/index.md"

    client.put("/settings", json={"strict_matching": False})
    r4 = client.get("/folders/resolve", params={"path": "Areas"})
    assert r4.json()["note"]["path"] == "Areas/Money/Index.md"


def test_settings_rejects_bad_values(client: TestClient) -> None:
    r = client.put("/settings", json={"keyword": "ab"})
    assert r.status_code == 400
    assert r.json()["detail"] == "keyword_too_short"

    r2 = client.put("/settings", json={"fallback_strategy": "sideways"})
    assert r2.status_code == 422

    assert client.get("/settings").json()["keyword"] == "index"


def test_index_marker_endpoints(client: TestClient) -> None:
    r = client.get("/notes/index-marker", params={"path": "Projects/zebra.md"})
    assert r.json() == {"path": "Projects/zebra.md", "is_index": False}

    for _ in range(2):
        r2 = client.put("/notes/index-marker", params={"path": "Projects/zebra.md"})
        assert r2.status_code == 200
        assert r2.json()["is_index"] is True

    r3 = client.get("/folders/resolve", params={"path": "Projects"})
    assert r3.json()["note"]["path"] == "Projects/zebra.md"
    assert r3.json()["note"]["is_index"] is True

    r4 = client.get("/notes/menu", params={"path": "Projects/zebra.md"})
    assert r4.json()["item"]["title"] == "Remove index note"

    r5 = client.delete("/notes/index-marker", params={"path": "Projects/zebra.md"})
    assert r5.json()["is_index"] is False

    assert client.put("/notes/index-marker", params={"path": "Nope.md"}).status_code == 404
    assert client.put("/notes/index-marker", params={"path": "../x.md"}).status_code == 400
    assert client.get("/notes/index-marker", params={"path": "Nope.md"}).status_code == 404


def test_folder_click_without_toggle(client: TestClient) -> None:
    client.put("/settings", json={"allow_folder_toggle": False})

    r = client.post("/explorer/events", json={"path": "Projects", "part": "label"})
    assert r.status_code == 200
    assert r.json() == {"folder": "Projects", "opened": "Projects/index.md", "suppressed": True, "collapsed": True}

    r2 = client.post("/explorer/events", json={"path": "Projects", "part": "arrow"})
    assert r2.json()["opened"] is None
    assert r2.json()["suppressed"] is False
    assert r2.json()["collapsed"] is False

    state = client.get("/explorer/state").json()
    assert state["active_path"] == "Projects/index.md"
    assert state["collapsed"]["Projects"] is False


def test_folder_click_with_toggle(client: TestClient) -> None:
    r = client.post("/explorer/events", json={"path": "Areas"})
    assert r.json() == {"folder": "Areas", "opened": "Areas/Money/Index.md", "suppressed": False, "collapsed": False}


def test_folder_click_on_unknown_folder(client: TestClient) -> None:
    r = client.post("/explorer/events", json={"path": "Missing"})
    assert r.status_code == 200
    assert r.json() == {"folder": "Missing", "opened": None, "suppressed": False, "collapsed": None}


def test_commands_act_on_active_note(client: TestClient) -> None:
    assert client.post("/commands/set-as-index").status_code == 409

    opened = client.post("/workspace/open", params={"path": "Projects/zebra.md"})
    assert opened.json()["active_path"] == "Projects/zebra.md"

    r = client.post("/commands/set-as-index")
    assert r.status_code == 200
    assert r.json() == {"id": "set-as-index", "ran": True, "active_path": "Projects/zebra.md"}
    assert client.get("/notes/index-marker", params={"path": "Projects/zebra.md"}).json()["is_index"] is True

    assert client.post("/commands/remove-as-index").status_code == 200
    assert client.post("/commands/remove-as-index").status_code == 409
    assert client.post("/commands/frobnicate").status_code == 404


def test_undecodable_note_does_not_break_folder_clicks(client: TestClient, tmp_path) -> None:
    (tmp_path / "Projects" / "legacy.md").write_bytes(b"caf\xe9\n")
    (tmp_path / "Old").mkdir()
    (tmp_path / "Old" / "latin.md").write_bytes(b"r\xe9sum\xe9\n")

    r = client.get("/folders/resolve", params={"path": "Projects"})
    assert r.status_code == 200
    assert r.json()["note"]["path"] == "Projects/index.md"

    r2 = client.post("/explorer/events", json={"path": "Projects"})
    assert r2.status_code == 200
    assert r2.json()["opened"] == "Projects/index.md"

    r3 = client.get("/folders/resolve", params={"path": "Old"})
    assert r3.json()["note"]["path"] == "Old/latin.md"

    assert client.get("/explorer/state").status_code == 200
    r4 = client.put("/notes/index-marker", params={"path": "Old/latin.md"})
    assert r4.status_code == 409
    assert r4.json()["detail"] == "note_unreadable"


def test_open_note_in_workspace(client: TestClient) -> None:
    r = client.post("/workspace/open", params={"path": "Projects/index"})
    assert r.status_code == 200
    assert r.json()["active_path"] == "Projects/index.md"
    assert client.post("/workspace/open", params={"path": "Nope.md"}).status_code == 404
