"""Tests for the FastAPI API."""

import pytest
from fastapi.testclient import TestClient

from livasense.models import Settings
from livasense.workspace import Workspace


URI = "file:///shapes.liva"
BROKEN = "Shape { area(): float }\nCircle : Shape { constructor() {} }\n"


@pytest.fixture
def api_client(monkeypatch):
    """Create test client with a fresh workspace."""
    from livasense import api

    monkeypatch.setattr(api, "_workspace", Workspace(Settings()))
    return TestClient(api.app)


@pytest.fixture
def opened(api_client, shapes_source):
    """Client with the shapes document open."""
    response = api_client.put("/api/documents", json={"uri": URI, "text": shapes_source})
    assert response.status_code == 200
    return api_client


class TestHealthCheck:
    def test_health(self, api_client):
        response = api_client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["document_count"] == 0
        assert "liva" in data["languages"]

    def test_workspace_loads_settings(self, data_dir, monkeypatch):
        from livasense import api
        from livasense.config_store import SettingsStore

        SettingsStore().init()
        SettingsStore().set_value("debounce_ms", "42")
        monkeypatch.setattr(api, "_workspace", None)

        assert api.get_workspace().settings.debounce_ms == 42


class TestAnalyze:
    def test_outline_and_diagnostics(self, api_client, outline_source):
        response = api_client.post("/api/analyze", json={"text": outline_source})
        assert response.status_code == 200
        data = response.json()

        assert [s["name"] for s in data["outline"]] == ["MAX_SIZE", "add", "Point"]
        point = data["outline"][2]
        assert point["kind"] == "class"
        assert [c["name"] for c in point["children"]] == ["x", "y", "length"]
        assert [d["severity"] for d in data["diagnostics"]] == ["warning"]

    def test_diagnostics(self, api_client):
        data = api_client.post("/api/analyze", json={"text": BROKEN}).json()
        assert len(data["diagnostics"]) == 1
        diag = data["diagnostics"][0]
        assert diag["severity"] == "error"
        assert diag["source"] == "liva-interfaces"
        assert diag["span"]["start_line"] == 1

    def test_include_variables_override(self, api_client):
        data = api_client.post(
            "/api/analyze", json={"text": "let a = 1\n", "include_variables": True}
        ).json()
        assert [s["kind"] for s in data["outline"]] == ["variable"]

    def test_missing_text(self, api_client):
        response = api_client.post("/api/analyze", json={})
        assert response.status_code == 422


class TestDocuments:
    def test_open_and_list(self, opened):
        data = opened.get("/api/documents").json()
        assert data["count"] == 1
        assert data["documents"][0] == {"uri": URI, "version": 0, "line_count": 30}

    def test_update_returns_diagnostics(self, api_client):
        response = api_client.put(
            "/api/documents", json={"uri": URI, "text": BROKEN, "version": 3}
        )
        data = response.json()
        assert data["version"] == 3
        assert data["stale"] is False
        assert len(data["diagnostics"]) == 1

        stored = api_client.get("/api/documents/diagnostics", params={"uri": URI}).json()
        assert stored["diagnostics"] == data["diagnostics"]

    def test_outline(self, opened):
        data = opened.get("/api/documents/outline", params={"uri": URI}).json()
        circle = data["outline"][2]
        assert circle["implements"] == ["Shape", "Drawable"]
        assert circle["children"][1]["kind"] == "constructor"

    def test_close(self, opened):
        response = opened.delete("/api/documents", params={"uri": URI})
        assert response.status_code == 200
        assert opened.get("/api/documents").json()["count"] == 0

    def test_unknown_document(self, api_client):
        response = api_client.get("/api/documents/outline", params={"uri": "file:///nope.liva"})
        assert response.status_code == 404
        assert response.json()["error_type"] == "DocumentNotFoundError"

    def test_negative_version_rejected(self, api_client):
        response = api_client.put("/api/documents", json={"uri": URI, "text": "", "version": -1})
        assert response.status_code == 422


class TestNavigation:
    def test_definition(self, opened):
        data = opened.post(
            "/api/definition", json={"uri": URI, "line": 25, "character": 14}
        ).json()
        assert data["locations"] == [
            {"start_line": 10, "start_character": 0, "end_line": 10, "end_character": 6}
        ]

    def test_references(self, opened):
        data = opened.post(
            "/api/references",
            json={"uri": URI, "line": 13, "character": 18, "include_declaration": True},
        ).json()
        assert len(data["locations"]) == 7

    def test_invalid_position(self, opened):
        response = opened.post("/api/definition", json={"uri": URI, "line": 500, "character": 0})
        assert response.status_code == 400
        assert response.json()["error_type"] == "InvalidPositionError"

    def test_signature_help(self, api_client):
        api_client.put("/api/documents", json={"uri": URI, "text": "add(a, b) => a + b\nadd(1, "})
        data = api_client.post(
            "/api/signature-help", json={"uri": URI, "line": 1, "character": 7}
        ).json()
        assert data["found"] is True
        assert data["label"] == "add(a, b)"
        assert data["active_parameter"] == 1

    def test_signature_help_not_found(self, opened):
        data = opened.post(
            "/api/signature-help", json={"uri": URI, "line": 0, "character": 0}
        ).json()
        assert data["found"] is False
        assert data["label"] is None
