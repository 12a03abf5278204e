from __future__ import annotations

from fastapi.testclient import TestClient


def _client(tmp_path, monkeypatch) -> TestClient:
    monkeypatch.setenv("VAULT_DIR", str(tmp_path))
    monkeypatch.delenv("VERBOSE", raising=False)
    from main import create_app

    return TestClient(create_app())


def _seed(tmp_path) -> None:
    (tmp_path / "folder").mkdir()
    (tmp_path / "note1.md").write_text("Content with #important tag\n", encoding="utf-8")
    (tmp_path / "folder" / "test-note.md").write_text(
        "---\ntitle: Test Note\ntags: [test, important]\n---\nSee [[note1]]\n", encoding="utf-8"
    )
    (tmp_path / "folder" / "other.md").write_text("Just content\n", encoding="utf-8")


def test_request_id_header_present(tmp_path, monkeypatch) -> None:
    client = _client(tmp_path, monkeypatch)
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}
    assert r.headers.get("x-request-id")

    r2 = client.get("/health", headers={"X-Request-ID": "abc"})
    assert r2.headers["x-request-id"] == "abc"


def test_list_notes_without_inputs(tmp_path, monkeypatch) -> None:
    _seed(tmp_path)
    client = _client(tmp_path, monkeypatch)

    r = client.get("/notes")
    assert r.status_code == 200
    assert r.json() == {
        "items": ["folder/other.md", "folder/test-note.md", "note1.md"],
        "count": 3,
    }


def test_list_notes_intersects_inputs(tmp_path, monkeypatch) -> None:
    _seed(tmp_path)
    client = _client(tmp_path, monkeypatch)

    r = client.get("/notes", params={"path": "folder", "tag": "IMPORTANT"})
    assert r.status_code == 200
    assert r.json()["items"] == ["folder/test-note.md"]

    r2 = client.get("/notes", params=[("find", "note"), ("find", "test")])
    assert r2.json()["items"] == ["folder/test-note.md"]


def test_list_notes_missing_vault(tmp_path, monkeypatch) -> None:
    client = _client(tmp_path / "missing", monkeypatch)
    r = client.get("/notes")
    assert r.status_code == 503
    assert r.json()["detail"] == "vault_unavailable"


def test_note_info_omits_unrequested_fields(tmp_path, monkeypatch) -> None:
    _seed(tmp_path)
    client = _client(tmp_path, monkeypatch)

    r = client.get("/notes/info", params={"path": "folder/test-note"})
    assert r.status_code == 200
    body = r.json()
    assert body["path"] == "folder/test-note.md"
    assert body["title"] == "Test Note"
    assert body["frontmatter"] == {"title": "Test Note", "tags": ["test", "important"]}
    assert body["word_count"] == 2
    assert body["reading_time_minutes"] == 0.0
    assert body["size_human"].endswith(" B")
    assert "tags" not in body
    assert "links" not in body
    assert "backlinks" not in body


def test_note_info_with_tags_and_links(tmp_path, monkeypatch) -> None:
    _seed(tmp_path)
    client = _client(tmp_path, monkeypatch)

    r = client.get("/notes/info", params={"path": "note1.md", "tags": "true", "links": "true"})
    assert r.status_code == 200
    body = r.json()
    assert body["title"] == "note1"
    assert "frontmatter" not in body
    assert body["tags"] == ["important"]
    assert body["links"] == []
    assert body["backlinks"] == ["folder/test-note.md"]


def test_note_info_errors(tmp_path, monkeypatch) -> None:
    _seed(tmp_path)
    client = _client(tmp_path, monkeypatch)

    r404 = client.get("/notes/info", params={"path": "missing.md"})
    assert r404.status_code == 404
    assert r404.json()["detail"] == "note_not_found"

    r400 = client.get("/notes/info", params={"path": "../escape.md"})
    assert r400.status_code == 400
    assert r400.json()["detail"] == "path_traversal_not_allowed"
