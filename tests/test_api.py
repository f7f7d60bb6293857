"""HTTP API tests through the ASGI app."""

import hashlib
import hmac
import json

import pytest
from httpx import ASGITransport, AsyncClient

from main import app
from src.api.dependencies import get_lifecycle_manager, get_webhook_handler
from src.core.errors import ExternalServiceError
from src.core.webhooks import VoiceWebhookHandler
from src.models.interview import SessionStatus

USER = {"X-User-Id": "user_1"}


@pytest.fixture
async def client(lifecycle, settings):
    handler = VoiceWebhookHandler(lifecycle, secret=settings.vapi_webhook_secret)
    app.dependency_overrides[get_lifecycle_manager] = lambda: lifecycle
    app.dependency_overrides[get_webhook_handler] = lambda: handler

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def setup_session(client, track="javascript", difficulty="medium") -> dict:
    response = await client.post(
        "/api/interviews/setup",
        json={"track": track, "difficulty": difficulty, "focus_areas": ["closures"]},
        headers=USER,
    )
    assert response.status_code == 200
    return response.json()


async def pay_and_start(client, session_id: str):
    await client.post(
        f"/api/interviews/{session_id}/payment",
        json={"payment_status": "CAPTURED"},
        headers=USER,
    )
    return await client.post(f"/api/interviews/{session_id}/start", headers=USER)


class TestInterviewRoutes:

    @pytest.mark.asyncio
    async def test_setup_returns_quote_and_questions(self, client):
        data = await setup_session(client)

        assert data["estimated_duration_minutes"] == 20
        assert data["pricing"]["user_price"] == 149
        assert data["pricing"]["margin"] == -1147
        assert "timeAllocation" in data["questions"][0]

    @pytest.mark.asyncio
    async def test_user_header_is_required(self, client):
        response = await client.post("/api/interviews/setup", json={"track": "dsa"})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_start_without_payment_is_402(self, client):
        data = await setup_session(client)

        response = await client.post(f"/api/interviews/{data['session_id']}/start", headers=USER)

        assert response.status_code == 402

    @pytest.mark.asyncio
    async def test_start_by_other_user_is_403(self, client):
        data = await setup_session(client)

        response = await client.post(
            f"/api/interviews/{data['session_id']}/start",
            headers={"X-User-Id": "intruder"},
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_session_is_404(self, client):
        response = await client.post("/api/interviews/missing/start", headers=USER)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_voice_failure_is_502(self, client, voice_provider):
        data = await setup_session(client)
        voice_provider.initiate_error = ExternalServiceError("voice", "503")

        response = await pay_and_start(client, data["session_id"])

        assert response.status_code == 502

    @pytest.mark.asyncio
    async def test_complete_before_start_is_409(self, client):
        data = await setup_session(client)

        response = await client.post(f"/api/interviews/{data['session_id']}/complete", headers=USER)

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_full_flow(self, client, text_provider, provider_report_json):
        data = await setup_session(client)
        session_id = data["session_id"]

        started = await pay_and_start(client, session_id)
        assert started.status_code == 200
        assert started.json()["call_id"] == "call_123"

        pending = await client.get(f"/api/reports/{session_id}", headers=USER)
        assert pending.status_code == 409

        text_provider.responses = [provider_report_json]
        completed = await client.post(
            f"/api/interviews/{session_id}/complete",
            json={"end_call": False},
            headers=USER,
        )
        assert completed.status_code == 200
        assert completed.json()["status"] == "COMPLETED"

        report = await client.get(f"/api/reports/{session_id}", headers=USER)
        assert report.status_code == 200
        assert report.json()["overallScore"] == 78
        assert report.json()["sessionId"] == session_id

        history = await client.get("/api/interviews/history", headers=USER)
        assert history.status_code == 200
        assert history.json()["total"] == 1
        assert history.json()["interviews"][0]["score"] == 78


class TestWebhookRoute:

    @pytest.mark.asyncio
    async def test_call_end_completes_in_background(self, client, repository, settings):
        data = await setup_session(client)
        await pay_and_start(client, data["session_id"])

        body = json.dumps({"type": "call-end", "call": {"id": "call_123", "duration": 600}}).encode()
        signature = hmac.new(settings.vapi_webhook_secret.encode(), body, hashlib.sha256).hexdigest()

        response = await client.post(
            "/api/webhooks/vapi",
            content=body,
            headers={"x-vapi-signature": signature, "Content-Type": "application/json"},
        )

        assert response.status_code == 200
        assert response.json() == {"received": True}
        session = await repository.get_session(data["session_id"])
        assert session.duration_seconds == 600
        assert session.status == SessionStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_bad_signature_is_401(self, client):
        response = await client.post(
            "/api/webhooks/vapi",
            content=b'{"type": "call-end"}',
            headers={"x-vapi-signature": "bad"},
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_json_is_400(self, client):
        response = await client.post("/api/webhooks/vapi", content=b"not json")

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_malformed_event_type_is_acknowledged(self, client):
        response = await client.post(
            "/api/webhooks/vapi",
            content=b'{"type": ["call-end"], "callId": "call_123"}',
        )

        assert response.status_code == 200
        assert response.json() == {"received": True}


class TestMetadataRoutes:

    @pytest.mark.asyncio
    async def test_tracks(self, client):
        response = await client.get("/api/metadata/tracks")

        ids = [t["id"] for t in response.json()]
        assert ids == ["javascript", "machine-coding", "dsa", "system-design", "behavioral"]

    @pytest.mark.asyncio
    async def test_pricing(self, client):
        response = await client.get("/api/metadata/pricing")

        tiers = {t["id"]: t for t in response.json()}
        assert tiers["medium"]["price"] == 149
        assert tiers["expert"]["duration_minutes"] == 30
        assert tiers["medium"]["cost_breakdown"]["total"] == 1296

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.json()["status"] == "healthy"
