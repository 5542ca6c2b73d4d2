"""
Module for extending a story by one page.

The next page is produced in a single multimodal call: the previous page's
illustration goes in as an editable reference together with a composite
prompt (style anchor, numbered recap, instruction, two-step directions), and
the edit model answers with interleaved text and image parts.
"""

import logging
from typing import Optional, Sequence

from backend.config import STORY_CONSTANTS, get_edit_model
from ..errors import IncompleteGenerationError, MissingPromptError, SafetyBlockedError
from ..generative_backend import GenerativeBackend
from ..prompts import EXTEND_PAGE_TEMPLATE, format_story_so_far
from ..types import GenerationResponse, Image, ImagePart, Page, TextPart

logger = logging.getLogger(__name__)

RESPONSE_MODALITIES = ["IMAGE", "TEXT"]


def build_extend_prompt(history: Sequence[Page], instruction: str, style_anchor: str) -> str:
    """Build the composite prompt for the next page."""
    return EXTEND_PAGE_TEMPLATE.format(
        style_anchor=style_anchor,
        story_so_far=format_story_so_far([page.text for page in history]),
        instruction=instruction,
    )


def scan_page_parts(response: GenerationResponse) -> tuple[Optional[str], Optional[Image]]:
    """
    Pick the page text and image out of a reply, in whatever order they came.

    Non-blank text parts are joined; the first image part carrying data wins.
    """
    texts = [part.text.strip() for part in response.text_parts if part.text and part.text.strip()]
    text = "\n\n".join(texts) or None

    image = None
    for part in response.image_parts:
        if part.image.data:
            image = part.image
            break
    return text, image


class PageExtender:
    """Produce page N+1 by editing page N's image and writing the next paragraph."""

    def __init__(self, backend: GenerativeBackend):
        self.backend = backend

    async def extend(
        self,
        history: Sequence[Page],
        instruction: str,
        style_anchor: str,
    ) -> Page:
        """
        Generate the next page. Does not modify ``history``.

        Args:
            history: Ordered pages so far (at least one)
            instruction: What should happen next
            style_anchor: The story's style anchor

        Returns:
            The new Page; the caller decides whether to append it

        Raises:
            SafetyBlockedError: No candidates/parts came back
            IncompleteGenerationError: Text or image part missing
        """
        if not history:
            raise ValueError("Page history must contain at least one page")
        instruction = (instruction or "").strip()
        if not instruction:
            raise MissingPromptError("Tell the story what happens next")

        previous_page = history[-1]
        prompt = build_extend_prompt(history, instruction, style_anchor)

        response = await self.backend.generate_content(
            [ImagePart(previous_page.image), TextPart(prompt)],
            modalities=RESPONSE_MODALITIES,
            temperature=STORY_CONSTANTS["extend_temperature"],
            model=get_edit_model(),
        )

        if response.blocked:
            logger.error(
                f"Page {len(history) + 1} blocked, possibly by a safety filter "
                f"(block_reason={response.block_reason})"
            )
            raise SafetyBlockedError(
                "The backend returned no usable candidates", block_reason=response.block_reason
            )

        text, image = scan_page_parts(response)
        if text is None or image is None:
            missing = "text" if text is None else "image"
            logger.error(f"Incomplete response for page {len(history) + 1}: {missing} missing")
            raise IncompleteGenerationError(f"Continuation response is missing its {missing}")

        return Page(text=text, image=image)
