"""
Async adapter over the google-genai client.

This is the only module that talks to google.genai. It converts our tagged
content parts into SDK parts on the way out and normalises the SDK's reply
(candidates -> content -> parts) into a GenerationResponse on the way in, so
the generators never make positional assumptions about what came back.
"""

import base64
import logging
from typing import Optional, Sequence, Union

import httpx
from google.genai import errors as genai_errors
from google.genai import types

from backend.config import (
    GENAI_CONSTANTS,
    get_genai_client,
    get_text_model,
    get_image_model,
)
from .errors import BackendError
from .types import ContentPart, GenerationResponse, Image, ImagePart, TextPart

logger = logging.getLogger(__name__)

# Failures that are surfaced as BackendError (timeouts included)
TRANSPORT_EXCEPTIONS = (
    genai_errors.APIError,
    httpx.HTTPError,
    TimeoutError,
    ConnectionError,
)


def _enum_name(value) -> Optional[str]:
    if value is None:
        return None
    return str(getattr(value, "value", value))


def _to_sdk_part(part: ContentPart) -> types.Part:
    if isinstance(part, TextPart):
        return types.Part.from_text(text=part.text)
    if isinstance(part, ImagePart):
        return types.Part.from_bytes(data=part.image.data, mime_type=part.image.mime_type)
    raise TypeError(f"Unsupported content part: {type(part).__name__}")


def normalize_response(response) -> GenerationResponse:
    """Convert a GenerateContentResponse into a GenerationResponse."""
    block_reason = None
    feedback = getattr(response, "prompt_feedback", None)
    if feedback is not None:
        block_reason = _enum_name(getattr(feedback, "block_reason", None))

    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return GenerationResponse(blocked=True, block_reason=block_reason)

    candidate = candidates[0]
    content = getattr(candidate, "content", None)
    raw_parts = getattr(content, "parts", None) if content is not None else None
    if not raw_parts:
        finish_reason = _enum_name(getattr(candidate, "finish_reason", None))
        return GenerationResponse(blocked=True, block_reason=block_reason or finish_reason)

    parts = []
    for raw in raw_parts:
        if getattr(raw, "thought", None):
            continue
        inline_data = getattr(raw, "inline_data", None)
        if inline_data is not None:
            data = inline_data.data or b""
            if isinstance(data, str):
                data = base64.b64decode(data)
            mime_type = inline_data.mime_type or GENAI_CONSTANTS["image_mime_type"]
            parts.append(ImagePart(Image(data=data, mime_type=mime_type)))
        elif getattr(raw, "text", None) is not None:
            parts.append(TextPart(raw.text))

    return GenerationResponse(parts=tuple(parts), block_reason=block_reason)


class GenerativeBackend:
    """
    Capability-based generative service: "generate content" and "generate image".

    Holds no story state. Each call is a single attempt; failures surface as
    BackendError with the SDK/transport exception chained.
    """

    def __init__(self, client=None):
        self.client = client if client is not None else get_genai_client()

    async def generate_content(
        self,
        parts: Union[str, Sequence[ContentPart]],
        *,
        temperature: float,
        system_instruction: Optional[str] = None,
        response_schema=None,
        modalities: Optional[list[str]] = None,
        thinking_budget: Optional[int] = None,
        model: Optional[str] = None,
    ) -> GenerationResponse:
        """
        Multimodal prompt -> text and/or image parts.

        Args:
            parts: A plain prompt string or a sequence of TextPart/ImagePart
            temperature: Sampling temperature
            system_instruction: Optional system instruction
            response_schema: Optional pydantic model; requests JSON output
            modalities: Optional response modalities, e.g. ["IMAGE", "TEXT"]
            thinking_budget: Optional thinking budget (0 disables reasoning)
            model: Model override (defaults to the configured text model)

        Returns:
            GenerationResponse with tagged parts
        """
        contents = parts if isinstance(parts, str) else [_to_sdk_part(p) for p in parts]

        config_kwargs = {
            "temperature": temperature,
            "system_instruction": system_instruction,
            "response_modalities": modalities,
        }
        if response_schema is not None:
            config_kwargs["response_mime_type"] = "application/json"
            config_kwargs["response_schema"] = response_schema
        if thinking_budget is not None:
            config_kwargs["thinking_config"] = types.ThinkingConfig(thinking_budget=thinking_budget)
        config = types.GenerateContentConfig(**config_kwargs)

        model = model or get_text_model()
        try:
            response = await self.client.aio.models.generate_content(
                model=model,
                contents=contents,
                config=config,
            )
        except TRANSPORT_EXCEPTIONS as e:
            logger.error(f"generate_content failed on {model}: {type(e).__name__}: {e}")
            raise BackendError(f"generate_content failed: {e}") from e

        normalized = normalize_response(response)
        if normalized.blocked:
            logger.warning(
                f"generate_content on {model} returned no usable candidates "
                f"(block_reason={normalized.block_reason})"
            )
        return normalized

    async def generate_image(
        self,
        prompt: str,
        *,
        count: int = 1,
        output_mime_type: str = GENAI_CONSTANTS["image_mime_type"],
        aspect_ratio: str = GENAI_CONSTANTS["aspect_ratio"],
        model: Optional[str] = None,
    ) -> list[Image]:
        """
        Text prompt -> images. Images without bytes are dropped.

        Returns:
            List of Image (possibly empty)
        """
        model = model or get_image_model()
        try:
            response = await self.client.aio.models.generate_images(
                model=model,
                prompt=prompt,
                config=types.GenerateImagesConfig(
                    number_of_images=count,
                    output_mime_type=output_mime_type,
                    aspect_ratio=aspect_ratio,
                ),
            )
        except TRANSPORT_EXCEPTIONS as e:
            logger.error(f"generate_images failed on {model}: {type(e).__name__}: {e}")
            raise BackendError(f"generate_images failed: {e}") from e

        images = []
        for generated in getattr(response, "generated_images", None) or []:
            image = getattr(generated, "image", None)
            if image is not None and image.image_bytes:
                images.append(Image(data=image.image_bytes, mime_type=image.mime_type or output_mime_type))
            elif getattr(generated, "rai_filtered_reason", None):
                logger.warning(f"Image filtered: {generated.rai_filtered_reason}")
        return images
