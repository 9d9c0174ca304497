import pytest
from fastapi.testclient import TestClient

from diffpane.web.app import create_app


@pytest.fixture()
def client(tmp_path):
    return TestClient(create_app(data_dir=tmp_path))


def test_parse_endpoint(client):
    r = client.post("/api/diff/parse", json={"text": "+++ b/src/main.rs\n@@ -1,1 +1,1 @@\n-old\n+new"})
    assert r.status_code == 200
    body = r.json()
    assert body["file_name"] == "src/main.rs"
    assert body["stats"] == {"additions": 1, "deletions": 1, "hunks": 1}
    assert [(ln["kind"], ln["text"]) for ln in body["lines"]] == [
        ("header", "@@ -1,1 +1,1 @@"),
        ("deletion", "old"),
        ("addition", "new"),
    ]
    assert body["lines"][1]["old_line_number"] == 1
    assert body["lines"][2]["new_line_number"] == 1


def test_side_by_side_endpoint(client):
    r = client.post("/api/diff/side-by-side", json={"text": "-a\n-b\n+c"})
    assert r.status_code == 200
    body = r.json()
    assert len(body["left"]) == len(body["right"]) == 2
    assert [ln["text"] for ln in body["left"]] == ["a", "b"]
    assert body["right"][1]["id"] < 0
    assert "lines" not in body


def test_parse_empty_text(client):
    r = client.post("/api/diff/parse", json={"text": ""})
    assert r.status_code == 200
    assert r.json()["lines"] == []


TWO_FILES = (
    "diff --git a/a.py b/a.py\n--- a/a.py\n+++ b/a.py\n@@ -1 +1 @@\n-x\n+y\n"
    "diff --git a/b.py b/b.py\n--- a/b.py\n+++ b/b.py\n@@ -3 +3,2 @@\n z\n+w\n"
)


def test_parse_per_file(client):
    r = client.post("/api/diff/parse", json={"text": TWO_FILES, "per_file": True})
    assert r.status_code == 200
    files = r.json()["files"]
    assert [f["file_name"] for f in files] == ["a.py", "b.py"]
    assert files[1]["stats"] == {"additions": 1, "deletions": 0, "hunks": 1}
    assert files[1]["lines"][1]["new_line_number"] == 3


def test_side_by_side_per_file(client):
    r = client.post("/api/diff/side-by-side", json={"text": TWO_FILES, "per_file": True})
    assert r.status_code == 200
    body = r.json()
    assert body["mode"] == "side_by_side"
    assert [len(f["left"]) for f in body["files"]] == [2, 3]


def test_parse_oversized_hunk_header(client):
    r = client.post("/api/diff/parse", json={"text": "@@ -" + "1" * 5000 + " +1 @@\n+a"})
    assert r.status_code == 200
    assert r.json()["lines"][1]["new_line_number"] == 1


def test_settings_roundtrip(client):
    r = client.post("/api/settings/token", json={"source": "github", "host": "https://GitHub.com/acme", "token": "ghp_abcdef123456"})
    assert r.status_code == 200
    assert r.json()["host"] == "github.com"

    s = client.get("/api/settings").json()
    assert s["tokens"]["github"]["github.com"].endswith("3456")
    assert "ghp_" not in s["tokens"]["github"]["github.com"]
    assert s["display"]["mode"] == "inline"


def test_delete_token(client):
    client.post("/api/settings/token", json={"source": "github", "host": "github.com", "token": "abc123"})
    r = client.post("/api/settings/token/delete", json={"source": "github", "host": "github.com"})
    assert r.status_code == 200
    assert "github" not in client.get("/api/settings").json()["tokens"]


def test_display_settings(client):
    r = client.post("/api/settings/display", json={"mode": "split"})
    assert r.status_code == 200
    assert r.json()["mode"] == "side_by_side"
    assert client.get("/api/settings").json()["display"]["mode"] == "side_by_side"

    bad = client.post("/api/settings/display", json={"mode": "columns"})
    assert bad.status_code == 400


def test_fetch_requires_auth(client, monkeypatch):
    from diffpane.core.diff_service import DiffService
    from diffpane.core.errors import AuthRequiredError

    def boom(self, link: str):
        raise AuthRequiredError("github", "github.com", "token required")

    monkeypatch.setattr(DiffService, "fetch", boom)

    r = client.post("/api/diff/fetch", json={"link": "https://github.com/a/b/pull/1"})
    assert r.status_code == 401
    detail = r.json()["detail"]
    assert detail["source"] == "github"
    assert detail["host"] == "github.com"


def test_fetch_side_by_side(client, monkeypatch):
    from diffpane.core.diff_service import DiffService, load_diff

    def fake_fetch(self, link: str):
        return [load_diff("@@ -1 +1 @@\n-a\n+b", file_name="a.py")]

    monkeypatch.setattr(DiffService, "fetch", fake_fetch)

    r = client.post("/api/diff/fetch", json={"link": "https://github.com/a/b/pull/1", "mode": "side_by_side"})
    assert r.status_code == 200
    body = r.json()
    assert body["mode"] == "side_by_side"
    assert body["files"][0]["file_name"] == "a.py"
    assert [ln["text"] for ln in body["files"][0]["right"]] == ["@@ -1 +1 @@", "b"]


def test_fetch_invalid_link(client):
    r = client.post("/api/diff/fetch", json={"link": "not a url"})
    assert r.status_code == 400
