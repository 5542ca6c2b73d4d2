"""Narration collaborator: page text -> spoken audio via ElevenLabs.

Failures here are local to narration and never touch the Story.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from backend.config import NARRATION_CONSTANTS, get_narration_api_key
from backend.core.errors import NarrationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NarrationAudio:
    data: bytes
    mime_type: str = NARRATION_CONSTANTS["output_mime_type"]


class NarrationClient:
    """Thin client for the ElevenLabs text-to-speech endpoint."""

    def __init__(self, api_key: Optional[str] = None, voice_id: Optional[str] = None):
        self.api_key = api_key if api_key is not None else get_narration_api_key()
        self.voice_id = voice_id or NARRATION_CONSTANTS["voice_id"]

    @property
    def url(self) -> str:
        return f"{NARRATION_CONSTANTS['base_url']}/{self.voice_id}"

    async def narrate(self, text: str) -> NarrationAudio:
        """
        Synthesize narration for a page.

        Blank text yields empty audio without calling the service.

        Raises:
            NarrationError: Missing API key, transport failure or non-2xx reply
        """
        if not self.api_key:
            raise NarrationError("ELEVENLABS_API_KEY is not configured")

        if not text or not text.strip():
            return NarrationAudio(data=b"")

        try:
            async with httpx.AsyncClient(timeout=NARRATION_CONSTANTS["timeout"]) as client:
                response = await client.post(
                    self.url,
                    headers={
                        "Accept": NARRATION_CONSTANTS["output_mime_type"],
                        "Content-Type": "application/json",
                        "xi-api-key": self.api_key,
                    },
                    json={
                        "text": text,
                        "model_id": NARRATION_CONSTANTS["model_id"],
                        "voice_settings": {
                            "stability": NARRATION_CONSTANTS["stability"],
                            "similarity_boost": NARRATION_CONSTANTS["similarity_boost"],
                        },
                    },
                )
        except httpx.HTTPError as e:
            logger.error(f"Narration request failed: {type(e).__name__}: {e}")
            raise NarrationError(f"Narration request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            detail = _error_detail(response)
            logger.error(f"ElevenLabs API error {response.status_code}: {detail}")
            raise NarrationError(f"Failed to generate narration: {detail}")

        return NarrationAudio(data=response.content)


def _error_detail(response) -> str:
    """Best-effort message from an ElevenLabs error body."""
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"

    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, dict):
        return detail.get("message") or f"HTTP {response.status_code}"
    return detail or f"HTTP {response.status_code}"
