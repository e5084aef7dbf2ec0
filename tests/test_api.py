import pytest
from fastapi.testclient import TestClient

from uasniffer.config import settings
from uasniffer.keywords import KeywordTableError, get_keyword_table
from uasniffer.main import app


CHROME = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


@pytest.fixture(scope="module")
def client():
    with TestClient(app) as client:
        yield client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_parse_single_item(client):
    response = client.post("/api/parse", json={"user_agent": CHROME, "source": "nginx"})
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["processed"] == 1
    assert body["errors"] == 0
    result = body["results"][0]
    assert result["device"] == "desktop"
    assert result["browser"] == {"name": "Chrome", "major_version": 91, "minor_version": 0}
    assert result["operating_system"]["name"] == "Windows"
    assert result["rendering_engine"]["name"] == "AppleWebKit"


def test_parse_plain_string(client):
    response = client.post("/api/parse", json="curl/7.68.0")
    body = response.json()
    assert body["status"] == "ok"
    assert body["results"][0]["device"] == "robot"


def test_parse_batch_with_invalid_items(client):
    response = client.post("/api/parse", json=[CHROME, {"user_agent": ""}, 42, {"user_agent": ["x"]}])
    body = response.json()
    assert body["status"] == "partial"
    assert body["processed"] == 2
    assert body["errors"] == 2
    assert [result["browser"]["name"] for result in body["results"]] == ["Chrome", "unknown"]


def test_parse_invalid_body(client):
    response = client.post(
        "/api/parse",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )
    assert response.status_code == 200
    assert response.json() == {"status": "error", "processed": 0, "errors": 1, "results": []}


def test_browser_report(client):
    response = client.get(
        "/api/browser",
        headers={
            "User-Agent": CHROME,
            "Accept-Language": "fr-FR, fr;q=0.9, en;q=0.8",
            "X-Forwarded-For": "203.0.113.195, 70.41.3.18",
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["user_agent"] == CHROME
    assert body["browser"]["name"] == "Chrome"
    assert body["preferred_language"] == "fr_fr"
    assert body["ip_address"] == "203.0.113.195"
    assert body["tests"]["is_chrome"] is True
    assert body["tests"]["is_windows"] is True
    assert body["tests"]["is_mobile"] is False


def test_keyword_stats(client):
    response = client.get("/stats/keywords")
    body = response.json()
    assert body["source"].endswith("ua-keywords.txt")
    assert body["keywords"] == sum(body["by_kind"].values())
    assert body["by_kind"]["OS"] > 0
    assert body["by_kind"]["NONE"] > 0


@pytest.fixture
def broken_keywords(tmp_path, monkeypatch):
    path = tmp_path / "ua-keywords.txt"
    path.write_text("chrome=BROWSER\nfirefox\n", encoding="utf-8")
    monkeypatch.setattr(settings, "keywords_path", str(path))
    get_keyword_table.cache_clear()
    yield path
    get_keyword_table.cache_clear()


def test_broken_keyword_table_aborts_startup(broken_keywords):
    with pytest.raises(KeywordTableError) as excinfo:
        with TestClient(app):
            pass
    assert excinfo.value.line_number == 2
    assert str(broken_keywords) in str(excinfo.value)
