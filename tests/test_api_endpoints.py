"""
CrisisAI Responder - API Endpoint Tests

Tests for REST API endpoints using FastAPI TestClient.
These tests verify:
- Health and root endpoints
- Crisis, upload and voice classification endpoints
- Session log endpoints
- Error handling

Run with: pytest tests/test_api_endpoints.py -v
"""

import os

import pytest
from fastapi.testclient import TestClient

from crisis_responder.config import Settings

pytestmark = pytest.mark.integration


@pytest.fixture
def make_client(test_settings: Settings):
    """Build a client for an app with overridden settings."""
    from main import create_app

    clients = []

    def _make(**overrides) -> TestClient:
        settings = test_settings.model_copy(update=overrides)
        c = TestClient(create_app(settings))
        c.__enter__()
        clients.append(c)
        return c

    yield _make

    for c in clients:
        c.__exit__(None, None, None)


class TestHealthEndpoint:
    """Tests for the health check endpoint."""

    def test_health_returns_200(self, client: TestClient):
        response = client.get("/api/health")
        assert response.status_code == 200

    def test_health_structure(self, client: TestClient):
        data = client.get("/api/health").json()

        assert data["status"] == "online"
        assert data["service"] == "CrisisAI Multi-Modal Emergency Responder"
        assert data["version"] == "1.0.0"
        assert data["uptime"] >= 0
        assert "timestamp" in data
        assert data["rulesVersion"]

    def test_request_id_echoed(self, client: TestClient):
        response = client.get("/api/health", headers={"X-Request-ID": "req-test-1"})
        assert response.headers["X-Request-ID"] == "req-test-1"

    def test_request_id_generated(self, client: TestClient):
        response = client.get("/api/health")
        assert response.headers.get("X-Request-ID")


class TestRootEndpoint:

    def test_root_returns_service_info(self, client: TestClient):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "operational"
        assert "service" in data


class TestCrisisEndpoint:
    """Tests for POST /api/crisis."""

    def test_fire_report(self, client: TestClient):
        response = client.post("/api/crisis", json={"message": "There is a fire in my building"})

        assert response.status_code == 200
        data = response.json()
        assert data["type"] == "fire"
        assert data["severity"] == "CRITICAL"
        assert data["callEmergency"] is True
        assert data["processingMode"] == "text"
        assert len(data["steps"]) == 8
        assert data["resources"] == [
            {"name": "Fire Emergency: 911", "type": "call"},
            {"name": "National Fire Protection Association", "url": "https://www.nfpa.org"},
        ]

    def test_inline_images_counted(self, client: TestClient):
        response = client.post(
            "/api/crisis",
            json={"message": "", "images": ["aGVsbG8=", "d29ybGQ="], "mode": "image"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["type"] == "image-analysis"
        assert data["severity"] == "HIGH"
        assert data["callEmergency"] is True

    def test_gas_leak_keeps_low_severity(self, client: TestClient):
        data = client.post("/api/crisis", json={"message": "I smell gas"}).json()
        assert data["type"] == "gas-leak"
        assert data["severity"] == "LOW"
        assert data["callEmergency"] is True

    def test_empty_request_rejected(self, client: TestClient):
        response = client.post("/api/crisis", json={})

        assert response.status_code == 400
        assert response.json() == {
            "error": "No message or image provided",
            "code": "MISSING_INPUT",
        }

    def test_invalid_mode_rejected(self, client: TestClient):
        response = client.post("/api/crisis", json={"message": "help", "mode": "telepathy"})
        assert response.status_code == 422

    def test_long_message_accepted(self, client: TestClient):
        message = "there is a fire " + "x" * 10000
        response = client.post("/api/crisis", json={"message": message})

        assert response.status_code == 200
        assert response.json()["type"] == "fire"

        logs = client.get("/api/session").json()["logs"]
        assert logs[-1]["message"] == message


class TestVoiceEndpoint:
    """Tests for POST /api/voice."""

    def test_voice_transcript(self, client: TestClient):
        response = client.post("/api/voice", json={"transcript": "my friend is choking"})

        assert response.status_code == 200
        data = response.json()
        assert data["type"] == "choking"
        assert data["severity"] == "CRITICAL"
        assert data["processingMode"] == "voice"
        assert data["resources"] == []

    def test_missing_transcript(self, client: TestClient):
        response = client.post("/api/voice", json={"transcript": ""})

        assert response.status_code == 400
        assert response.json()["code"] == "MISSING_TRANSCRIPT"

    def test_long_transcript_accepted(self, client: TestClient):
        response = client.post(
            "/api/voice",
            json={"transcript": "someone is choking " + "uh " * 5000},
        )

        assert response.status_code == 200
        assert response.json()["type"] == "choking"


class TestUploadEndpoint:
    """Tests for POST /api/crisis/upload."""

    def test_upload_with_message(self, client: TestClient, png_bytes: bytes):
        response = client.post(
            "/api/crisis/upload",
            data={"message": "fire in the warehouse"},
            files=[("images", ("scene.png", png_bytes, "image/png"))],
        )

        assert response.status_code == 200
        data = response.json()
        assert data["type"] == "fire"
        assert data["severity"] == "CRITICAL"
        assert data["processingMode"] == "image"
        assert len(data["uploadedFiles"]) == 1
        assert data["uploadedFiles"][0]["name"].endswith("-scene.png")
        assert data["uploadedFiles"][0]["size"] == len(png_bytes)

    def test_image_only_upload(self, client: TestClient, png_bytes: bytes):
        response = client.post(
            "/api/crisis/upload",
            files=[
                ("images", ("a.png", png_bytes, "image/png")),
                ("images", ("b.jpg", png_bytes, "image/jpeg")),
            ],
        )

        assert response.status_code == 200
        data = response.json()
        assert data["type"] == "image-analysis"
        assert data["severity"] == "HIGH"
        assert len(data["uploadedFiles"]) == 2

    def test_rejects_non_image(self, client: TestClient):
        response = client.post(
            "/api/crisis/upload",
            files=[("images", ("notes.txt", b"hello", "text/plain"))],
        )

        assert response.status_code == 415
        assert response.json()["error"] == "Only image files are allowed"

    def test_rejects_too_many_files(self, client: TestClient, png_bytes: bytes):
        files = [("images", (f"{i}.png", png_bytes, "image/png")) for i in range(6)]
        response = client.post("/api/crisis/upload", files=files)

        assert response.status_code == 400
        assert response.json()["code"] == "TOO_MANY_FILES"

    def test_rejects_oversized_file(self, make_client, png_bytes: bytes):
        client = make_client(max_upload_bytes=16)
        response = client.post(
            "/api/crisis/upload",
            files=[("images", ("big.png", png_bytes, "image/png"))],
        )

        assert response.status_code == 413
        assert response.json()["code"] == "FILE_TOO_LARGE"

    def test_rejects_empty_upload(self, client: TestClient):
        response = client.post("/api/crisis/upload", data={"mode": "image"})

        assert response.status_code == 400
        assert response.json()["code"] == "MISSING_INPUT"

    def test_persists_when_enabled(self, make_client, test_settings: Settings, png_bytes: bytes, tmp_path):
        upload_dir = tmp_path / "stored"
        client = make_client(persist_uploads=True, upload_dir=str(upload_dir))

        response = client.post(
            "/api/crisis/upload",
            files=[("images", ("scene.png", png_bytes, "image/png"))],
        )

        assert response.status_code == 200
        name = response.json()["uploadedFiles"][0]["name"]
        assert (upload_dir / name).read_bytes() == png_bytes

    def test_not_persisted_by_default(self, client: TestClient, test_settings: Settings, png_bytes: bytes):
        client.post(
            "/api/crisis/upload",
            files=[("images", ("scene.png", png_bytes, "image/png"))],
        )
        assert not os.path.exists(test_settings.upload_dir)


class TestSessionEndpoints:
    """Tests for the session log endpoints."""

    def test_session_log_records_calls(self, client: TestClient):
        client.post("/api/crisis", json={"message": "car accident"})
        client.post("/api/voice", json={"transcript": "I feel dizzy"})

        data = client.get("/api/session").json()

        assert data["total"] == 2
        assert [log["mode"] for log in data["logs"]] == ["text", "voice"]
        assert data["logs"][0]["severity"] == "HIGH"
        assert data["logs"][1]["severity"] == "MEDIUM"
        assert data["logs"][1]["imageCount"] == 0
        assert data["logs"][0]["message"] == "car accident"

    def test_rejected_requests_not_recorded(self, client: TestClient):
        client.post("/api/crisis", json={})
        assert client.get("/api/session").json()["total"] == 0

    def test_clear_session(self, client: TestClient):
        client.post("/api/crisis", json={"message": "smoke everywhere"})

        response = client.delete("/api/session")
        assert response.status_code == 200
        assert response.json() == {"message": "Session cleared"}

        assert client.get("/api/session").json() == {"total": 0, "logs": []}

    def test_each_app_owns_its_log(self, client: TestClient, make_client):
        client.post("/api/crisis", json={"message": "smoke everywhere"})
        other = make_client()
        assert other.get("/api/session").json()["total"] == 0


class TestErrorHandling:

    def test_unexpected_error_returns_500(self, app):
        class BrokenPipeline:
            async def respond(self, *args, **kwargs):
                raise RuntimeError("boom")

        with TestClient(app, raise_server_exceptions=False) as c:
            app.state.pipeline = BrokenPipeline()
            response = c.post("/api/crisis", json={"message": "fire"})

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error", "code": "INTERNAL_ERROR"}

    def test_unexpected_error_keeps_request_id(self, app):
        class BrokenPipeline:
            async def respond(self, *args, **kwargs):
                raise RuntimeError("boom")

        with TestClient(app, raise_server_exceptions=False) as c:
            app.state.pipeline = BrokenPipeline()
            response = c.post(
                "/api/crisis",
                json={"message": "fire"},
                headers={"X-Request-ID": "req-boom"},
            )

        assert response.status_code == 500
        assert response.headers["X-Request-ID"] == "req-boom"
