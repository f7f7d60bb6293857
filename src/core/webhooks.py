"""
Voice webhook intake for PrepKit interviews

Verifies and dispatches call events pushed by the voice provider. Call
completion is not run inline: the handler tells the caller which session
to complete, and the HTTP layer schedules it in the background.
"""

import hashlib
import hmac
import json
import logging
from typing import Any

from pydantic import BaseModel

from src.core.errors import WebhookSignatureError
from src.core.session_lifecycle import SessionLifecycleManager
from src.models.interview import SessionStatus

logger = logging.getLogger(__name__)


class WebhookOutcome(BaseModel):
    """Result of handling a single webhook event."""

    received: bool = True
    event_type: str | None = None
    session_id: str | None = None

    # Set when the caller should run complete_interview for this session
    complete_session_id: str | None = None


class VoiceWebhookHandler:
    """Dispatches voice provider call events onto interview sessions."""

    CALL_STARTED = {"call-start", "call.started"}
    CALL_ENDED = {"call-end", "call.ended"}
    TRANSCRIPT = {"transcript", "call.transcript"}
    RECORDING = {"recording", "call.recording"}
    CALL_FAILED = {"call-failed", "call.failed"}

    def __init__(self, lifecycle: SessionLifecycleManager, secret: str | None = None):
        self.lifecycle = lifecycle
        self.secret = secret

    def verify_signature(self, body: bytes, signature: str | None) -> None:
        """
        Check the hex HMAC-SHA256 signature of the raw body.

        Verification only applies when both a secret is configured and a
        signature was sent.

        Raises:
            WebhookSignatureError: If the signature does not match
        """
        if not self.secret or not signature:
            return

        digest = hmac.new(self.secret.encode(), body, hashlib.sha256).hexdigest()
        if not hmac.compare_digest(signature.encode(), digest.encode()):
            logger.error("Invalid voice webhook signature")
            raise WebhookSignatureError("Invalid signature")

    @staticmethod
    def _call_id(event: dict[str, Any]) -> str | None:
        call = event.get("call")
        if isinstance(call, dict) and call.get("id"):
            return str(call["id"])
        if event.get("callId"):
            return str(event["callId"])
        return None

    @staticmethod
    def _duration(event: dict[str, Any]) -> int:
        call = event.get("call")
        if isinstance(call, dict) and call.get("duration"):
            return int(float(call["duration"]))
        return int(float(event.get("duration") or 0))

    @staticmethod
    def _recording_url(event: dict[str, Any]) -> str | None:
        if event.get("recordingUrl"):
            return event["recordingUrl"]
        recording = event.get("recording")
        if isinstance(recording, dict):
            return recording.get("url")
        return None

    async def handle(self, body: bytes, signature: str | None = None) -> WebhookOutcome:
        """
        Verify and dispatch one webhook payload.

        Raises:
            WebhookSignatureError: If the signature does not match
            ValueError: If the body is not a JSON object
        """
        self.verify_signature(body, signature)

        event = json.loads(body)
        if not isinstance(event, dict):
            raise ValueError("Webhook payload must be a JSON object")

        event_type = event.get("type")
        if not isinstance(event_type, str):
            logger.warning(f"Ignoring voice webhook with malformed type: {event_type!r}")
            return WebhookOutcome()

        call_id = self._call_id(event)
        logger.info(f"Voice webhook event: {event_type} (call {call_id})")

        session = await self.lifecycle.get_session_by_call_id(call_id) if call_id else None
        if not session:
            logger.warning(f"Session not found for voice call: {call_id}")
            return WebhookOutcome(event_type=event_type)

        outcome = WebhookOutcome(event_type=event_type, session_id=session.session_id)

        if event_type in self.CALL_STARTED:
            logger.info(f"Voice call started for session {session.session_id}")

        elif event_type in self.CALL_ENDED:
            await self.lifecycle.record_call_duration(session.session_id, self._duration(event))
            if session.status == SessionStatus.IN_PROGRESS:
                outcome.complete_session_id = session.session_id

        elif event_type in self.TRANSCRIPT:
            # Fetched from the provider on completion
            pass

        elif event_type in self.RECORDING:
            url = self._recording_url(event)
            if url:
                await self.lifecycle.record_recording(session.session_id, url)

        elif event_type in self.CALL_FAILED:
            await self.lifecycle.record_call_failure(
                session.session_id,
                error=event.get("error") or event.get("message"),
                reason=event.get("reason"),
            )

        else:
            logger.info(f"Unhandled voice webhook event type: {event_type}")

        return outcome
