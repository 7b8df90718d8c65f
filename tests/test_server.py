import pytest
from starlette.testclient import TestClient

from covid_lag.server import create_app, resolve_static_path


@pytest.fixture
def static_root(tmp_path):
    root = tmp_path / "static"
    (root / "charts").mkdir(parents=True)
    (root / "index.html").write_text("<h1>home</h1>", encoding="utf-8")
    (root / "index.ts").write_text("export {};", encoding="utf-8")
    (root / "app.js").write_text("console.log(1);", encoding="utf-8")
    (root / "charts" / "index.html").write_text("<h1>charts</h1>", encoding="utf-8")
    (root / "data.json").write_text("{}", encoding="utf-8")
    (tmp_path / "secret.txt").write_text("nope", encoding="utf-8")
    return root


@pytest.fixture
def client(static_root):
    return TestClient(create_app(static_root))


def test_root_serves_index_document(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.text == "<h1>home</h1>"


def test_directory_serves_its_index(client):
    response = client.get("/charts")

    assert response.status_code == 200
    assert response.text == "<h1>charts</h1>"


@pytest.mark.parametrize("path", ["/app.js", "/index.ts"])
def test_scripts_are_javascript(client, path):
    response = client.get(path)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/javascript")


def test_orig_suffix_is_stripped(client):
    response = client.get("/app.js.orig")

    assert response.status_code == 200
    assert response.text == "console.log(1);"
    assert response.headers["content-type"].startswith("text/javascript")


def test_missing_file_is_404(client):
    response = client.get("/nothing-here.html")

    assert response.status_code == 404
    assert response.text == "404 Not Found"


def test_hi_endpoint(client):
    response = client.get("/hi")

    assert response.status_code == 200
    assert response.json() == {"hi": "there"}
    assert response.headers["content-type"].startswith("text/plain")


def test_paths_cannot_escape_root(static_root):
    assert resolve_static_path(static_root, "/../secret.txt") is None
    assert resolve_static_path(static_root, "/charts/../../secret.txt") is None
    assert resolve_static_path(static_root, "/data.json") == (static_root / "data.json").resolve()


def test_malformed_path_is_404(client, static_root):
    assert resolve_static_path(static_root, "/a\x00b") is None

    response = client.get("/a%00b")

    assert response.status_code == 404
    assert response.text == "404 Not Found"
