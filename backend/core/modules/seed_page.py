"""
Module for generating the first page of a story.

Two strategies, chosen by whether the user supplied a seed image:

- With a seed image: one structured call writes the opening paragraph and an
  image description together, then the illustration is generated from that
  description plus the style anchor. The raw user prompt never reaches the
  image model.
- Text only: the illustration is generated first, straight from the prompt
  plus the style anchor, and the paragraph is then written to match whatever
  was actually drawn.

The orderings differ on purpose and are kept separate.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from backend.config import STORY_CONSTANTS
from ..errors import (
    EmptyTextError,
    ImageGenerationError,
    MalformedResponseError,
    MissingPromptError,
    SafetyBlockedError,
)
from ..generative_backend import GenerativeBackend
from ..prompts import (
    SEED_FROM_IMAGE_SYSTEM_INSTRUCTION,
    SEED_FROM_IMAGE_PROMPT,
    SEED_FROM_IMAGE_ONLY_PROMPT,
    SEED_TEXT_SYSTEM_INSTRUCTION,
    SEED_TEXT_PROMPT,
)
from ..types import (
    GenerationResponse,
    Image,
    ImagePart,
    Page,
    SeedPageContent,
    TextPart,
    compose_image_prompt,
)

logger = logging.getLogger(__name__)


class SeedPageGenerator:
    """Produce page 1 from a prompt and/or a seed image."""

    def __init__(self, backend: GenerativeBackend):
        self.backend = backend

    async def generate(
        self,
        prompt: str,
        style_anchor: str,
        seed_image: Optional[Image] = None,
    ) -> Page:
        """
        Generate the first page.

        Args:
            prompt: The user's prompt (may be blank when a seed image is given)
            style_anchor: The story's style anchor
            seed_image: Optional user-supplied image

        Returns:
            A complete Page (never partial)
        """
        prompt = (prompt or "").strip()
        if seed_image is not None:
            return await self._from_seed_image(prompt, seed_image, style_anchor)
        return await self._from_text(prompt, style_anchor)

    # === Strategy A: seed image -> (text + description) -> image ===

    async def _from_seed_image(self, prompt: str, seed_image: Image, style_anchor: str) -> Page:
        text_prompt = SEED_FROM_IMAGE_PROMPT.format(prompt=prompt) if prompt else SEED_FROM_IMAGE_ONLY_PROMPT
        response = await self.backend.generate_content(
            [ImagePart(seed_image), TextPart(text_prompt)],
            system_instruction=SEED_FROM_IMAGE_SYSTEM_INSTRUCTION,
            response_schema=SeedPageContent,
            temperature=STORY_CONSTANTS["seed_temperature"],
        )
        content = self._parse_seed_content(response)

        story_text = content.story_text.strip()
        if not story_text:
            raise EmptyTextError("Structured reply had an empty story paragraph")

        image = await self._generate_image(
            compose_image_prompt(content.image_description.strip(), style_anchor)
        )
        return Page(text=story_text, image=image)

    def _parse_seed_content(self, response: GenerationResponse) -> SeedPageContent:
        if response.blocked:
            raise SafetyBlockedError(
                "Opening page request was blocked", block_reason=response.block_reason
            )

        raw = response.text.strip()
        if not raw:
            raise MalformedResponseError("Received an empty response from the AI")

        try:
            content = SeedPageContent.model_validate_json(raw)
        except ValidationError as e:
            logger.error(f"Failed to parse JSON response: {raw[:200]}")
            raise MalformedResponseError("Received a malformed response from the AI") from e

        if not content.image_description.strip():
            raise MalformedResponseError("Structured reply had an empty image description")
        return content

    # === Strategy B: prompt -> image -> text ===

    async def _from_text(self, prompt: str, style_anchor: str) -> Page:
        if not prompt:
            raise MissingPromptError("A story prompt is required to begin")

        image = await self._generate_image(compose_image_prompt(prompt, style_anchor))

        response = await self.backend.generate_content(
            [ImagePart(image), TextPart(SEED_TEXT_PROMPT.format(prompt=prompt))],
            system_instruction=SEED_TEXT_SYSTEM_INSTRUCTION,
            temperature=STORY_CONSTANTS["seed_temperature"],
        )
        if response.blocked:
            raise SafetyBlockedError(
                "Opening paragraph request was blocked", block_reason=response.block_reason
            )

        story_text = response.text.strip()
        if not story_text:
            raise EmptyTextError("The AI failed to write the story for the first page")
        return Page(text=story_text, image=image)

    async def _generate_image(self, image_prompt: str) -> Image:
        images = await self.backend.generate_image(image_prompt, count=1)
        if not images or not images[0].data:
            raise ImageGenerationError("Image generation failed or returned no data")
        return images[0]
