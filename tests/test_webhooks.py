"""Tests for voice webhook intake."""

import hashlib
import hmac
import json

import pytest

from src.core.errors import WebhookSignatureError
from src.core.webhooks import VoiceWebhookHandler
from src.models.interview import PAYMENT_CAPTURED, SessionStatus

SECRET = "whsec_test"


def sign(body: bytes, secret: str = SECRET) -> str:
    return hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


@pytest.fixture
def handler(lifecycle):
    return VoiceWebhookHandler(lifecycle, secret=SECRET)


@pytest.fixture
async def started_session(lifecycle):
    created = await lifecycle.create_session("user_1", "dsa", "hard", ["graphs"])
    await lifecycle.record_payment_status(created.session_id, PAYMENT_CAPTURED)
    await lifecycle.start_interview(created.session_id, "user_1")
    return created.session_id


class TestSignature:

    def test_valid_signature_passes(self, handler):
        body = b'{"type": "call-start"}'

        handler.verify_signature(body, sign(body))

    def test_invalid_signature_rejected(self, handler):
        body = b'{"type": "call-start"}'

        with pytest.raises(WebhookSignatureError):
            handler.verify_signature(body, sign(body, "wrong-secret"))

    def test_missing_signature_is_not_checked(self, handler):
        handler.verify_signature(b"{}", None)

    def test_no_secret_configured_skips_check(self, lifecycle):
        handler = VoiceWebhookHandler(lifecycle, secret=None)

        handler.verify_signature(b"{}", "anything")


class TestDispatch:

    @pytest.mark.asyncio
    async def test_call_end_records_duration_and_requests_completion(
        self, handler, repository, started_session
    ):
        body = json.dumps({"type": "call-end", "call": {"id": "call_123", "duration": 1185.4}}).encode()

        outcome = await handler.handle(body, sign(body))

        assert outcome.complete_session_id == started_session
        session = await repository.get_session(started_session)
        assert session.duration_seconds == 1185
        assert session.status == SessionStatus.IN_PROGRESS

    @pytest.mark.asyncio
    async def test_call_end_for_completed_session_schedules_nothing(
        self, handler, lifecycle, started_session
    ):
        await lifecycle.complete_interview(started_session)
        body = json.dumps({"type": "call.ended", "callId": "call_123", "duration": 60}).encode()

        outcome = await handler.handle(body)

        assert outcome.session_id == started_session
        assert outcome.complete_session_id is None

    @pytest.mark.asyncio
    async def test_recording_url_is_stored(self, handler, repository, started_session):
        body = json.dumps({
            "type": "call.recording",
            "callId": "call_123",
            "recording": {"url": "https://recordings.example/call_123.mp3"},
        }).encode()

        await handler.handle(body)

        session = await repository.get_session(started_session)
        assert session.recording_url == "https://recordings.example/call_123.mp3"

    @pytest.mark.asyncio
    async def test_call_failure_is_recorded_without_status_change(
        self, handler, repository, started_session
    ):
        body = json.dumps({
            "type": "call-failed",
            "call": {"id": "call_123"},
            "error": "customer-did-not-answer",
            "reason": "no-answer",
        }).encode()

        outcome = await handler.handle(body)

        assert outcome.complete_session_id is None
        session = await repository.get_session(started_session)
        assert session.status == SessionStatus.IN_PROGRESS
        assert session.metadata == {"error": "customer-did-not-answer", "failureReason": "no-answer"}

    @pytest.mark.asyncio
    async def test_unknown_call_is_acknowledged(self, handler):
        body = json.dumps({"type": "call-end", "callId": "call_unknown"}).encode()

        outcome = await handler.handle(body)

        assert outcome.received is True
        assert outcome.session_id is None
        assert outcome.complete_session_id is None

    @pytest.mark.asyncio
    async def test_unknown_event_is_acknowledged(self, handler, started_session):
        body = json.dumps({"type": "speech-update", "callId": "call_123"}).encode()

        outcome = await handler.handle(body)

        assert outcome.received is True
        assert outcome.complete_session_id is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("event_type", [["call-end"], {"name": "call-end"}, 42, None])
    async def test_malformed_event_type_is_acknowledged(
        self, handler, repository, started_session, event_type
    ):
        body = json.dumps({"type": event_type, "callId": "call_123", "duration": 10}).encode()

        outcome = await handler.handle(body)

        assert outcome.received is True
        assert outcome.event_type is None
        assert outcome.complete_session_id is None
        assert (await repository.get_session(started_session)).duration_seconds is None

    @pytest.mark.asyncio
    async def test_bad_signature_rejects_before_dispatch(self, handler, repository, started_session):
        body = json.dumps({"type": "call-end", "callId": "call_123", "duration": 10}).encode()

        with pytest.raises(WebhookSignatureError):
            await handler.handle(body, "deadbeef")

        assert (await repository.get_session(started_session)).duration_seconds is None

    @pytest.mark.asyncio
    async def test_non_object_payload_is_rejected(self, handler):
        with pytest.raises(ValueError):
            await handler.handle(b"[1, 2]")
