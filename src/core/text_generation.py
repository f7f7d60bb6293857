"""
Text Generation Provider for PrepKit interviews

Thin async client around the Gemini generateContent REST endpoint.
Used for both question generation and report scoring.
Integrated with Langfuse for observability and tracing.
"""

import logging
from typing import Any, Protocol

import httpx
from langfuse import Langfuse
from pydantic import BaseModel, Field

from src.config.settings import Settings, get_settings
from src.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)


class GenerationConfig(BaseModel):
    """Sampling parameters for a single generation call."""

    temperature: float = Field(default=0.7, ge=0, le=2)
    max_output_tokens: int = Field(default=2048, ge=1)
    top_p: float | None = Field(default=None, ge=0, le=1)
    top_k: int | None = Field(default=None, ge=1)
    json_output: bool = True

    def to_payload(self) -> dict:
        """Render as a Gemini generationConfig object."""
        payload = {
            "temperature": self.temperature,
            "maxOutputTokens": self.max_output_tokens,
        }
        if self.top_p is not None:
            payload["topP"] = self.top_p
        if self.top_k is not None:
            payload["topK"] = self.top_k
        if self.json_output:
            payload["responseMimeType"] = "application/json"
        return payload


class TextGenerationProvider(Protocol):
    """Anything that turns a prompt into generated text."""

    async def generate(self, prompt: str, config: GenerationConfig) -> str:
        ...


def build_langfuse(settings: Settings) -> Langfuse | None:
    """Create a Langfuse client when tracing is enabled and keys are set."""
    if not settings.langfuse_enabled:
        return None
    if not (settings.langfuse_secret_key and settings.langfuse_public_key):
        logger.info("Langfuse keys not configured, tracing disabled")
        return None
    try:
        langfuse = Langfuse(
            secret_key=settings.langfuse_secret_key,
            public_key=settings.langfuse_public_key,
            host=settings.langfuse_base_url,
        )
    except Exception as e:
        logger.warning(f"Failed to initialize Langfuse: {e}")
        return None
    logger.info("Langfuse initialized for LLM observability")
    return langfuse


class GeminiClient:
    """
    Gemini text-generation client.

    Raises ExternalServiceError on transport failures, timeouts, non-2xx
    responses, or a response without any candidate text.

    Observability:
    - Every generate() call is recorded as a Langfuse generation when
      tracing is configured
    """

    SERVICE_NAME = "text-generation"

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
        langfuse: Any | None = None,
    ):
        self.settings = settings or get_settings()
        self.model = self.settings.gemini_model

        # HTTP client for API calls
        self.client = client or httpx.AsyncClient(
            base_url=self.settings.gemini_base_url.rstrip("/"),
            headers={
                "x-goog-api-key": self.settings.gemini_api_key,
                "Content-Type": "application/json",
            },
            timeout=self.settings.text_generation_timeout_seconds,
        )

        self.langfuse = langfuse if langfuse is not None else build_langfuse(self.settings)

    async def close(self):
        """Close the HTTP client and flush Langfuse."""
        await self.client.aclose()
        if self.langfuse:
            try:
                self.langfuse.flush()
            except Exception as e:
                logger.warning(f"Failed to flush Langfuse: {e}")

    # =========================================================================
    # TRACING
    # =========================================================================

    def _start_generation(self, prompt: str, config: GenerationConfig):
        if not self.langfuse:
            return None
        try:
            return self.langfuse.start_generation(
                name="gemini_generate_content",
                model=self.model,
                input=prompt,
                model_parameters=config.to_payload(),
            )
        except Exception as lf_err:
            logger.warning(f"Langfuse generation start failed: {lf_err}")
            return None

    def _end_generation(self, generation, output: str | None = None, error: str | None = None):
        if generation is None:
            return
        try:
            if error is not None:
                generation.update(level="ERROR", status_message=error)
            else:
                generation.update(output=output)
            generation.end()
        except Exception as lf_err:
            logger.warning(f"Langfuse generation end failed: {lf_err}")

    # =========================================================================
    # GENERATION
    # =========================================================================

    def _extract_content(self, result: dict) -> str:
        """Extract text content from a generateContent response."""
        candidates = result.get("candidates")
        if candidates is None:
            return ""
        if not isinstance(candidates, list):
            raise ExternalServiceError(self.SERVICE_NAME, "unexpected response shape")
        if not candidates:
            return ""

        candidate = candidates[0]
        if not isinstance(candidate, dict):
            raise ExternalServiceError(self.SERVICE_NAME, "unexpected response shape")
        content = candidate.get("content") or {}
        if not isinstance(content, dict):
            raise ExternalServiceError(self.SERVICE_NAME, "unexpected response shape")
        parts = content.get("parts") or []
        if not isinstance(parts, list):
            raise ExternalServiceError(self.SERVICE_NAME, "unexpected response shape")

        text_parts = []
        for part in parts:
            if isinstance(part, dict) and isinstance(part.get("text"), str):
                text_parts.append(part["text"])
        return "".join(text_parts)

    async def generate(self, prompt: str, config: GenerationConfig) -> str:
        """
        Generate text for a prompt.

        Args:
            prompt: The prompt to send
            config: Sampling parameters

        Returns:
            Model response text
        """
        generation = self._start_generation(prompt, config)
        try:
            content = await self._generate(prompt, config)
        except ExternalServiceError as e:
            self._end_generation(generation, error=str(e))
            raise
        self._end_generation(generation, output=content)
        return content

    async def _generate(self, prompt: str, config: GenerationConfig) -> str:
        payload = {
            "contents": [
                {"role": "user", "parts": [{"text": prompt}]}
            ],
            "generationConfig": config.to_payload(),
        }

        try:
            response = await self.client.post(
                f"/models/{self.model}:generateContent",
                json=payload,
            )
            response.raise_for_status()
            result = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Gemini API error: {e}")
            raise ExternalServiceError(self.SERVICE_NAME, str(e)) from e
        except ValueError as e:
            logger.error(f"Gemini API returned non-JSON body: {e}")
            raise ExternalServiceError(self.SERVICE_NAME, "malformed response body") from e

        if not isinstance(result, dict):
            raise ExternalServiceError(self.SERVICE_NAME, "unexpected response shape")

        content = self._extract_content(result)
        if not content:
            raise ExternalServiceError(self.SERVICE_NAME, "empty response")
        return content
