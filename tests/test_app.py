"""Tests for cookie_scanner.app — HTTP transport."""

from __future__ import annotations

import pathlib
from unittest import mock

import pytest
from fastapi.testclient import TestClient

from cookie_scanner import app as app_mod
from cookie_scanner import config
from cookie_scanner.models import cookies
from cookie_scanner.utils import errors

RESULT = cookies.ScanResult(
    pre=[],
    post=[
        cookies.CookieRecord(
            url="https://example.com/",
            stage="post-consent",
            name="_ga",
            domain=".example.com",
            path="/",
            expires_iso="2030-01-01T00:00:00.000Z",
            first_party=True,
        )
    ],
    diff=[
        cookies.CookieRecord(
            url="https://example.com/",
            stage="added_after_consent",
            name="_ga",
            domain=".example.com",
            path="/",
            expires_iso="2030-01-01T00:00:00.000Z",
            first_party=True,
        )
    ],
)


class StubScanner:
    def __init__(self, result: cookies.ScanResult | None = None, error: Exception | None = None) -> None:
        self.result = result or RESULT
        self.error = error
        self.urls: list[str] = []

    async def scan(self, target_url: str) -> cookies.ScanResult:
        self.urls.append(target_url)
        if self.error:
            raise self.error
        return self.result


@pytest.fixture()
def stub() -> StubScanner:
    return StubScanner()


@pytest.fixture()
def client(stub: StubScanner):
    app_mod.app.dependency_overrides[app_mod.get_scanner] = lambda: stub
    yield TestClient(app_mod.app)
    app_mod.app.dependency_overrides.clear()


class TestHealth:
    def test_healthz(self, client: TestClient) -> None:
        response = client.get("/healthz")
        assert response.status_code == 200
        assert response.json() == {"ok": True}


class TestScanEndpoint:
    def test_json_body(self, client: TestClient, stub: StubScanner) -> None:
        response = client.post("/api/scan", json={"url": "https://example.com/"})

        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"pre", "post", "diff"}
        assert data["diff"][0]["stage"] == "added_after_consent"
        assert data["diff"][0]["expiresIso"] == "2030-01-01T00:00:00.000Z"
        assert data["diff"][0]["firstParty"] is True
        assert "httpOnly" in data["diff"][0]
        assert stub.urls == ["https://example.com/"]

    def test_form_body(self, client: TestClient, stub: StubScanner) -> None:
        response = client.post("/api/scan", data={"url": "https://example.com/shop"})
        assert response.status_code == 200
        assert stub.urls == ["https://example.com/shop"]

    def test_query_parameter(self, client: TestClient, stub: StubScanner) -> None:
        response = client.post("/api/scan?url=https://example.com")
        assert response.status_code == 200
        assert stub.urls == ["https://example.com/"]

    def test_plain_text_form_encoding(self, client: TestClient, stub: StubScanner) -> None:
        response = client.post(
            "/api/scan",
            content="url=https%3A%2F%2Fexample.com%2F",
            headers={"Content-Type": "text/plain"},
        )
        assert response.status_code == 200
        assert stub.urls == ["https://example.com/"]

    def test_missing_url(self, client: TestClient, stub: StubScanner) -> None:
        response = client.post("/api/scan", json={})
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Missing url or unreadable request body"
        assert "hint" in body
        assert stub.urls == []

    def test_ftp_url_rejected_before_scan(self, client: TestClient, stub: StubScanner) -> None:
        response = client.post("/api/scan", json={"url": "ftp://example.com"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid URL. Remember https://..."}
        assert stub.urls == []

    def test_body_too_large(self, client: TestClient, stub: StubScanner) -> None:
        response = client.post("/api/scan", content=b"x" * (1024 * 1024 + 1))
        assert response.status_code == 413
        assert stub.urls == []

    def test_chunked_body_too_large(self, client: TestClient, stub: StubScanner) -> None:
        chunks = iter([b"x" * (600 * 1024), b"x" * (600 * 1024)])
        response = client.post("/api/scan", content=chunks)
        assert response.status_code == 413
        assert stub.urls == []

    @pytest.mark.parametrize(
        ("error", "status"),
        [
            (errors.NavigationTimeout("Navigation exceeded 45000ms"), 504),
            (errors.BrowserLaunchFailure("no chromium"), 503),
            (errors.ScanFailure("Scan failed", RuntimeError("target closed")), 500),
        ],
    )
    def test_scan_failures(self, client: TestClient, stub: StubScanner, error: Exception, status: int) -> None:
        stub.error = error
        response = client.post("/api/scan", json={"url": "https://example.com/"})
        assert response.status_code == status
        body = response.json()
        assert body["error"] == "Scan failed"
        assert body["detail"] == str(error)

    def test_cors_preflight(self, client: TestClient) -> None:
        response = client.options(
            "/api/scan",
            headers={"Origin": "https://elsewhere.example", "Access-Control-Request-Method": "POST"},
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"


class TestStaticFiles:
    @pytest.fixture()
    def public_dir(self, tmp_path: pathlib.Path) -> pathlib.Path:
        (tmp_path / "index.html").write_text("<h1>scanner</h1>", encoding="utf-8")
        (tmp_path / "app.js").write_text("console.log('hi')", encoding="utf-8")
        return tmp_path

    @pytest.fixture()
    def static_client(self, client: TestClient, public_dir: pathlib.Path, settings: config.ScannerSettings):
        custom = settings.model_copy(update={"public_dir": public_dir})
        with mock.patch.object(app_mod.config, "get_settings", return_value=custom):
            yield client

    def test_serves_index(self, static_client: TestClient) -> None:
        response = static_client.get("/")
        assert response.status_code == 200
        assert "scanner" in response.text

    def test_serves_asset(self, static_client: TestClient) -> None:
        assert "console.log" in static_client.get("/app.js").text

    def test_unknown_path_falls_back_to_index(self, static_client: TestClient) -> None:
        response = static_client.get("/some/client/route")
        assert response.status_code == 200
        assert "scanner" in response.text

    def test_traversal_is_refused(self, public_dir: pathlib.Path) -> None:
        assert app_mod._resolve_static(public_dir, "../../etc/passwd") is None

    def test_missing_public_dir_is_404(self, client: TestClient, tmp_path: pathlib.Path, settings: config.ScannerSettings) -> None:
        custom = settings.model_copy(update={"public_dir": tmp_path / "missing"})
        with mock.patch.object(app_mod.config, "get_settings", return_value=custom):
            assert client.get("/").status_code == 404


class FakeRequest:
    """Just enough of a request to feed the body reader."""

    def __init__(self, chunks: list[bytes], headers: dict[str, str] | None = None) -> None:
        self.headers = headers or {}
        self._chunks = chunks
        self.consumed = 0

    async def stream(self):  # type: ignore[no-untyped-def]
        for chunk in self._chunks:
            self.consumed += 1
            yield chunk


class TestReadBody:
    @pytest.mark.asyncio
    async def test_declared_length_over_limit_is_rejected_unread(self) -> None:
        request = FakeRequest([b"x" * 10], {"content-length": "2048"})
        assert await app_mod._read_body(request, 1024) is None  # type: ignore[arg-type]
        assert request.consumed == 0

    @pytest.mark.asyncio
    async def test_stops_reading_once_over_limit(self) -> None:
        request = FakeRequest([b"x" * 600, b"x" * 600, b"x" * 600])
        assert await app_mod._read_body(request, 1024) is None  # type: ignore[arg-type]
        assert request.consumed == 2

    @pytest.mark.asyncio
    async def test_joins_chunks_within_limit(self) -> None:
        request = FakeRequest([b'{"url": ', b'"https://example.com/"}'])
        assert await app_mod._read_body(request, 1024) == b'{"url": "https://example.com/"}'  # type: ignore[arg-type]
