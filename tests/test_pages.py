from fastapi.testclient import TestClient

from diffpane.web.app import create_app


def test_pages_render(tmp_path):
    client = TestClient(create_app(data_dir=tmp_path))
    r = client.get("/")
    assert r.status_code == 200
    assert "diffpane" in r.text
    assert client.get("/index.html").status_code == 200
    assert client.get("/healthz").json() == {"ok": True}
    assert client.get("/static/style.css").status_code == 200
