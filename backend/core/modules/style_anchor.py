"""
Module for deriving the style anchor of a story.

The anchor is a short "master prompt" suffix naming the recurring characters
and the art style. It is derived once per story and appended verbatim to every
later image prompt, which is the only lever we have for visual consistency
since the backend keeps no state between calls.
"""

import logging
from typing import Optional

from backend.config import STORY_CONSTANTS
from ..errors import EmptyStyleError, MissingPromptError
from ..generative_backend import GenerativeBackend
from ..prompts import STYLE_ANCHOR_TEMPLATE, STYLE_ANCHOR_FROM_IMAGE_TEMPLATE
from ..types import Image, ImagePart, TextPart

logger = logging.getLogger(__name__)


class StyleAnchorDeriver:
    """Turn the user's opening idea into a reusable style/character suffix."""

    def __init__(self, backend: GenerativeBackend):
        self.backend = backend

    async def derive(self, idea: str, seed_image: Optional[Image] = None) -> str:
        """
        Derive the style anchor with one fast backend call.

        Args:
            idea: The user's free-text opening idea
            seed_image: Used as the reference when the idea is blank

        Returns:
            Non-empty, trimmed style suffix

        Raises:
            MissingPromptError: Neither an idea nor a seed image was given
            EmptyStyleError: The backend replied with nothing usable
        """
        idea = (idea or "").strip()
        if idea:
            parts = STYLE_ANCHOR_TEMPLATE.format(idea=idea)
        elif seed_image is not None:
            parts = [ImagePart(seed_image), TextPart(STYLE_ANCHOR_FROM_IMAGE_TEMPLATE)]
        else:
            raise MissingPromptError("A prompt is required to derive a story style")

        response = await self.backend.generate_content(
            parts,
            temperature=STORY_CONSTANTS["style_temperature"],
            thinking_budget=STORY_CONSTANTS["style_thinking_budget"],
        )

        style_anchor = response.text.strip()
        if not style_anchor:
            logger.warning(f"Empty style anchor (block_reason={response.block_reason})")
            raise EmptyStyleError("The backend returned an empty style anchor")

        logger.info(f"Derived style anchor: {style_anchor[:80]}")
        return style_anchor
