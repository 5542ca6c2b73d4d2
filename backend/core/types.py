"""
Centralized domain types for the story generation pipeline.

All dataclasses that are used across multiple modules are defined here
to make data flow explicit and avoid circular imports.
"""

import base64
from dataclasses import dataclass, field
from typing import Optional, Union

from pydantic import BaseModel, Field


# =============================================================================
# Image & Page Types
# =============================================================================


@dataclass(frozen=True)
class Image:
    """An illustration: raw bytes plus MIME type. Never mutated."""

    data: bytes
    mime_type: str = "image/jpeg"

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def to_data_uri(self) -> str:
        """Inline form used by HTML export."""
        return f"data:{self.mime_type};base64,{self.to_base64()}"

    @classmethod
    def from_base64(cls, data: str, mime_type: str) -> "Image":
        return cls(data=base64.b64decode(data), mime_type=mime_type)


@dataclass(frozen=True)
class Page:
    """A single story page: one prose paragraph and its illustration."""

    text: str
    image: Image

    def __post_init__(self):
        if not self.text or not self.text.strip():
            raise ValueError("Page text must not be empty")
        if not self.image.data:
            raise ValueError("Page image must carry data")


class Story:
    """
    An append-only sequence of pages sharing one style anchor.

    ``pages`` returns a tuple snapshot; ``append`` swaps in a new tuple so a
    reader never observes a half-written sequence.
    """

    def __init__(self, style_anchor: str, pages: tuple = ()):
        if not style_anchor:
            raise ValueError("A story needs a style anchor before any page exists")
        self._style_anchor = style_anchor
        self._pages: tuple[Page, ...] = tuple(pages)

    @property
    def style_anchor(self) -> str:
        return self._style_anchor

    @property
    def pages(self) -> tuple[Page, ...]:
        return self._pages

    @property
    def page_count(self) -> int:
        return len(self._pages)

    def append(self, page: Page) -> None:
        self._pages = self._pages + (page,)

    def __repr__(self) -> str:
        return f"Story(pages={self.page_count}, style_anchor={self._style_anchor!r})"


# =============================================================================
# Backend I/O Types
# =============================================================================


@dataclass(frozen=True)
class TextPart:
    text: str


@dataclass(frozen=True)
class ImagePart:
    image: Image


ContentPart = Union[TextPart, ImagePart]


@dataclass(frozen=True)
class GenerationResponse:
    """
    Normalised reply from the generative backend.

    ``blocked`` is set when the backend produced no candidates or no content
    parts at all, which is how a safety filter shows up.
    """

    parts: tuple = field(default_factory=tuple)
    blocked: bool = False
    block_reason: Optional[str] = None

    @property
    def text(self) -> str:
        return "".join(p.text for p in self.parts if isinstance(p, TextPart))

    @property
    def text_parts(self) -> list[TextPart]:
        return [p for p in self.parts if isinstance(p, TextPart)]

    @property
    def image_parts(self) -> list[ImagePart]:
        return [p for p in self.parts if isinstance(p, ImagePart)]


class SeedPageContent(BaseModel):
    """Structured reply for the first page when a seed image is supplied."""

    story_text: str = Field(
        description="A paragraph of the story continuing from the prompt. "
        "It should be engaging for all ages. Maximum 100 words."
    )
    image_description: str = Field(
        description="A short, descriptive, and vivid prompt for an image generation model "
        "to create an illustration for this part of the story. Focus on characters, setting, "
        "and action. Do NOT include style descriptions like 'storybook style' as that will "
        "be added later."
    )


def compose_image_prompt(description: str, style_anchor: str) -> str:
    """Append the style anchor verbatim to an image description.

    Anchors are usually written as a trailing clause (", featuring ...").
    When one is not, a comma is inserted so the clause still reads as a suffix.
    """
    base = description.rstrip()
    if style_anchor[:1] in (",", ";"):
        return f"{base}{style_anchor}"
    return f"{base}, {style_anchor}"
