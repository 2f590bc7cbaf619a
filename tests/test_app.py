"""Tests for the FastAPI app (app.py) routes and caching behaviour."""

from __future__ import annotations

import json
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock, patch

from export_parser import ValidationError
from helpers import make_sample_export


# ── Upload analysis ───────────────────────────


class TestApiAnalyze:
    def test_returns_result(self, client, fake_nlp):
        body = json.dumps(make_sample_export()).encode("utf-8")
        response = client.post("/api/analyze", content=body)
        assert response.status_code == 200
        data = response.json()
        assert data["overview"]["total_conversations"] == 3
        assert data["power_metrics"]["questions_asked"] == 1
        assert len(data["achievements"]) == 14

    def test_invalid_json_400(self, client):
        response = client.post("/api/analyze", content=b"not json {")
        assert response.status_code == 400
        assert "Invalid JSON" in response.json()["detail"]

    def test_wrong_shape_422(self, client):
        response = client.post("/api/analyze", content=b'{"a": 1}')
        assert response.status_code == 422
        assert "conversations.json" in response.json()["detail"]

    def test_empty_after_normalization_422(self, client):
        body = json.dumps([{"title": "x", "mapping": {}}]).encode("utf-8")
        response = client.post("/api/analyze", content=body)
        assert response.status_code == 422
        assert "No conversations" in response.json()["detail"]

    def test_health_responds_while_analysis_runs(self, client):
        """A long analysis must not block other routes."""
        started = threading.Event()
        release = threading.Event()
        result = MagicMock()
        result.as_dict.return_value = {"status": "done"}

        def slow_analysis(raw):
            started.set()
            release.wait(timeout=5)
            return result

        with patch("app.analyze_export_bytes", side_effect=slow_analysis):
            with ThreadPoolExecutor(max_workers=1) as pool:
                upload = pool.submit(client.post, "/api/analyze", content=b"[]")
                assert started.wait(timeout=5)

                t0 = time.monotonic()
                health = client.get("/health")
                elapsed = time.monotonic() - t0
                release.set()

                assert health.status_code == 200
                assert elapsed < 2
                assert upload.result(timeout=5).json() == {"status": "done"}


# ── Cached report routes ──────────────────────


class TestApiData:
    def test_returns_200(self, client):
        response = client.get("/api/data")
        assert response.status_code == 200

    def test_content_type_is_json(self, client):
        response = client.get("/api/data")
        assert "application/json" in response.headers["content-type"]

    def test_payload_matches_mock(self, client, mock_payload):
        """The API should return exactly the mocked payload."""
        data = client.get("/api/data").json()
        assert data == mock_payload

    def test_payload_has_sections(self, client):
        data = client.get("/api/data").json()
        for key in ("overview", "time_patterns", "personality", "achievements", "time_machine"):
            assert key in data, f"Missing key: {key}"


class TestApiRefresh:
    def test_response_has_status_refreshed(self, client):
        data = client.get("/api/refresh").json()
        assert data["status"] == "refreshed"

    def test_response_has_generated_at(self, client, mock_payload):
        data = client.get("/api/refresh").json()
        assert data["generated_at"] == mock_payload["generated_at"]


# ── Health check ──────────────────────────────


class TestHealthCheck:
    def test_healthz_returns_200(self, client):
        response = client.get("/healthz")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_health_returns_200(self, client):
        assert client.get("/health").status_code == 200


# ── Error handling ────────────────────────────


class TestMissingExportFile:
    def test_api_data_404_when_file_missing(self, client):
        with patch("app.build_analytics_payload", side_effect=FileNotFoundError("missing")):
            response = client.get("/api/data")
            assert response.status_code == 404

    def test_refresh_404_when_file_missing(self, client):
        with patch("app.build_analytics_payload", side_effect=FileNotFoundError("missing")):
            response = client.get("/api/refresh")
            assert response.status_code == 404


class TestInvalidExportFile:
    def test_api_data_422_when_export_invalid(self, client):
        with patch(
            "app.build_analytics_payload",
            side_effect=ValidationError("Invalid file: expected a ChatGPT conversations.json export."),
        ):
            response = client.get("/api/data")
            assert response.status_code == 422
            assert "Invalid file" in response.json()["detail"]


# ── Caching behaviour ────────────────────────


class TestCaching:
    def test_second_request_uses_cache(self, client):
        """After the first call populates the cache, build_analytics_payload
        is called only once for two requests."""
        with patch("app.build_analytics_payload") as mock_build:
            mock_build.return_value = {"generated_at": "2024-03-05T12:00:00"}

            client.get("/api/data")
            client.get("/api/data")
            assert mock_build.call_count == 1

    def test_refresh_forces_rebuild(self, client):
        """The /api/refresh endpoint should call build_analytics_payload
        even when the cache is fresh."""
        with patch("app.build_analytics_payload") as mock_build:
            mock_build.return_value = {"generated_at": "2024-03-05T12:00:00"}

            client.get("/api/data")
            client.get("/api/refresh")
            assert mock_build.call_count == 2

    def test_stale_cache_rebuilds(self, client):
        import app as app_module

        with patch("app.build_analytics_payload") as mock_build:
            mock_build.return_value = {"generated_at": "2024-03-05T12:00:00"}

            client.get("/api/data")
            app_module._cache["built_at"] -= app_module.CACHE_TTL_SECONDS + 1
            client.get("/api/data")
            assert mock_build.call_count == 2
