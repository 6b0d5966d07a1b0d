"""LLM service for Gemini structured-output generation."""

import asyncio
import json
import logging
from typing import Any

import httpx

from shelflife.config import get_settings

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    """Recipe generation call failed; callers fall back to canned recipes."""


class NotConfiguredError(GenerationError):
    """No Gemini API key is configured."""


class TransportError(GenerationError):
    """Network failure or timeout talking to the generation API."""


class UpstreamError(GenerationError):
    """The generation API answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str | None = None) -> None:
        self.status_code = status_code
        super().__init__(message or f"Generation API returned HTTP {status_code}")


class MalformedResponse(GenerationError):
    """Response body was absent, not JSON, or did not match the schema."""


class LLMService:
    """Service for interacting with the Gemini generateContent endpoint."""

    def __init__(self, timeout: float | None = None) -> None:
        self.settings = get_settings()
        self.base_url = self.settings.gemini_base_url.rstrip("/")
        self.model = self.settings.gemini_model
        self.api_key = self.settings.gemini_api_key
        # Hard bound on the whole call, not just a single socket read
        self.timeout = timeout if timeout is not None else self.settings.recipe_generation_timeout

    @property
    def is_configured(self) -> bool:
        """Check if a Gemini API key is configured."""
        return bool(self.api_key)

    async def generate(
        self,
        prompt: str,
        response_schema: dict[str, Any] | None = None,
        temperature: float = 0.7,
        max_tokens: int = 2048,
    ) -> str:
        """Generate a response and return the text of the first candidate."""
        if not self.is_configured:
            raise NotConfiguredError("Gemini API key not configured")

        generation_config: dict[str, Any] = {
            "temperature": temperature,
            "maxOutputTokens": max_tokens,
        }
        if response_schema is not None:
            generation_config["responseMimeType"] = "application/json"
            generation_config["responseSchema"] = response_schema

        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }

        try:
            data = await asyncio.wait_for(self._post(payload), timeout=self.timeout)
        except TimeoutError as e:
            raise TransportError(f"Generation API timed out after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise UpstreamError(e.response.status_code) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Generation API request failed: {e}") from e
        except ValueError as e:
            raise MalformedResponse(f"Generation API returned invalid JSON: {e}") from e

        return self._extract_text(data)

    async def generate_json(
        self,
        prompt: str,
        response_schema: dict[str, Any] | None = None,
        temperature: float = 0.7,
        max_tokens: int = 2048,
    ) -> Any:
        """Generate structured JSON output."""
        result = await self.generate(
            prompt=prompt,
            response_schema=response_schema,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        # Clean up response - remove markdown code blocks if present
        result = result.strip()
        if result.startswith("```json"):
            result = result[7:]
        if result.startswith("```"):
            result = result[3:]
        if result.endswith("```"):
            result = result[:-3]
        result = result.strip()

        try:
            return json.loads(result)
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse LLM response as JSON: {e}")
            logger.warning(f"Raw response: {result[:500]}")
            raise MalformedResponse(f"Candidate text is not valid JSON: {e}") from e

    async def _post(self, payload: dict[str, Any]) -> Any:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                f"{self.base_url}/models/{self.model}:generateContent",
                params={"key": self.api_key},
                json=payload,
            )
            response.raise_for_status()
            return response.json()

    @staticmethod
    def _extract_text(data: Any) -> str:
        """Pull ``candidates[0].content.parts[0].text`` out of a response body."""
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise MalformedResponse("Generation API response has no candidate text") from e
        if not isinstance(text, str):
            raise MalformedResponse("Candidate text is not a string")
        return text

