"""
Voice Session Orchestration for PrepKit interviews

Bridges an interview session to the Vapi voice agent:
- Builds the assistant configuration embedding the generated questions
- Starts the call (fatal on failure, there is no fallback for a live call)
- Fetches the transcript after the call
- Ends the call on a best-effort basis
"""

import logging
from datetime import datetime
from typing import Any, Protocol

import httpx
from pydantic import BaseModel, Field, ValidationError

from src.config.settings import Settings, get_settings
from src.core.errors import ExternalServiceError
from src.models.question import CamelModel, Question
from src.prompts.interviewer import InterviewerPrompts

logger = logging.getLogger(__name__)


# ============================================================================
# PROVIDER MODELS
# ============================================================================

class VoiceSettings(CamelModel):
    provider: str
    voice_id: str
    speed: float = 1.0


class AssistantConfig(CamelModel):
    """Voice agent configuration sent when initiating a call."""

    name: str
    model: str
    first_message: str
    system_prompt: str
    voice: VoiceSettings


class CallMetadata(CamelModel):
    session_id: str
    interview_type: str
    user_id: str


class CallHandle(BaseModel):
    """Result of initiating a call."""

    call_id: str
    status: str = "initiated"
    created_at: datetime = Field(default_factory=datetime.utcnow)


class VoiceProvider(Protocol):
    """Voice/telephony conversational-AI provider."""

    async def initiate(self, assistant: AssistantConfig, metadata: CallMetadata) -> CallHandle:
        ...

    async def get_details(self, call_id: str) -> dict[str, Any]:
        ...

    async def end(self, call_id: str) -> None:
        ...


# ============================================================================
# VAPI CLIENT
# ============================================================================

class VapiClient:
    """
    Async HTTP client for the Vapi call API.

    Every failure (transport, timeout, non-2xx, malformed body) is raised
    as ExternalServiceError.
    """

    SERVICE_NAME = "voice"

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.settings = settings or get_settings()
        self.client = client or httpx.AsyncClient(
            base_url=self.settings.vapi_base_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {self.settings.vapi_private_key}",
                "Content-Type": "application/json",
            },
            timeout=self.settings.voice_timeout_seconds,
        )

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = await self.client.request(method, path, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPError as e:
            logger.error(f"Vapi API error on {method} {path}: {e}")
            raise ExternalServiceError(self.SERVICE_NAME, str(e)) from e

    @staticmethod
    def _json_object(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise ExternalServiceError(VapiClient.SERVICE_NAME, "malformed response body") from e
        if not isinstance(data, dict):
            raise ExternalServiceError(VapiClient.SERVICE_NAME, "unexpected response shape")
        return data

    async def initiate(self, assistant: AssistantConfig, metadata: CallMetadata) -> CallHandle:
        payload = {
            "assistant": assistant.model_dump(by_alias=True),
            "metadata": metadata.model_dump(by_alias=True),
            "phoneNumberId": self.settings.vapi_phone_number_id,
            "customer": {"number": self.settings.vapi_customer_number},
        }
        response = await self._request("POST", "/call/phone", json=payload)
        data = self._json_object(response)

        if not data.get("id"):
            raise ExternalServiceError(self.SERVICE_NAME, "call response missing id")

        fields = {"call_id": str(data["id"]), "status": data.get("status") or "initiated"}
        if data.get("createdAt"):
            fields["created_at"] = data["createdAt"]
        try:
            return CallHandle(**fields)
        except ValidationError as e:
            raise ExternalServiceError(self.SERVICE_NAME, f"malformed call response: {e}") from e

    async def get_details(self, call_id: str) -> dict[str, Any]:
        response = await self._request("GET", f"/call/{call_id}")
        return self._json_object(response)

    async def end(self, call_id: str) -> None:
        await self._request("DELETE", f"/call/{call_id}")


# ============================================================================
# ORCHESTRATOR
# ============================================================================

class VoiceSessionOrchestrator:
    """Starts, inspects and ends the voice call for an interview session."""

    def __init__(self, provider: VoiceProvider, settings: Settings | None = None):
        self.provider = provider
        self.settings = settings or get_settings()
        self.prompts = InterviewerPrompts()

    def build_assistant_config(self, questions: list[Question]) -> AssistantConfig:
        """Assistant configuration with the questions embedded in its system prompt."""
        return AssistantConfig(
            name=self.settings.assistant_name,
            model=self.settings.assistant_model,
            first_message=self.prompts.FIRST_MESSAGE,
            system_prompt=self.prompts.voice_system_prompt(questions),
            voice=VoiceSettings(
                provider=self.settings.voice_provider,
                voice_id=self.settings.voice_id,
                speed=self.settings.voice_speed,
            ),
        )

    async def start(
        self,
        session_id: str,
        questions: list[Question],
        user_id: str,
        track: str,
    ) -> CallHandle:
        """
        Start the voice interview.

        Raises:
            ExternalServiceError: If the provider could not start the call
        """
        assistant = self.build_assistant_config(questions)
        metadata = CallMetadata(session_id=session_id, interview_type=track, user_id=user_id)

        handle = await self.provider.initiate(assistant, metadata)
        logger.info(f"Started voice call {handle.call_id} for session {session_id}")
        return handle

    async def fetch_transcript(self, call_id: str) -> str:
        """
        Fetch the call transcript.

        Prefers the provider transcript; otherwise rebuilds one from the
        role-tagged messages. Returns an empty string if neither exists.

        Raises:
            ExternalServiceError: If call details could not be fetched
        """
        details = await self.provider.get_details(call_id)

        transcript = details.get("transcript")
        if isinstance(transcript, str) and transcript.strip():
            return transcript

        messages = details.get("messages")
        if isinstance(messages, list):
            lines = []
            for msg in messages:
                if not isinstance(msg, dict):
                    continue
                role = msg.get("role")
                content = msg.get("content") or msg.get("message")
                if role and content:
                    lines.append(f"{str(role).upper()}: {content}")
            return "\n\n".join(lines)

        return ""

    async def end(self, call_id: str) -> None:
        """End the call. Failures are logged and swallowed."""
        try:
            await self.provider.end(call_id)
        except ExternalServiceError as e:
            logger.warning(f"Failed to end voice call {call_id}: {e}")
