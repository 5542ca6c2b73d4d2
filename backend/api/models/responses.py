"""Pydantic models for API responses."""

from typing import Optional

from pydantic import BaseModel, Field

from backend.core.types import Page, Story


class PageResponse(BaseModel):
    """A single page of the story.

    The illustration is served separately from ``image_url``.
    """

    page_number: int
    text: str
    mime_type: str
    image_url: str

    @classmethod
    def from_page(cls, session_id: str, page_number: int, page: Page) -> "PageResponse":
        return cls(
            page_number=page_number,
            text=page.text,
            mime_type=page.image.mime_type,
            image_url=f"/sessions/{session_id}/story/pages/{page_number}/image",
        )


class StoryResponse(BaseModel):
    """The story's pages and its style anchor."""

    style_anchor: str
    page_count: int
    pages: list[PageResponse]

    @classmethod
    def from_story(cls, session_id: str, story: Story) -> "StoryResponse":
        pages = story.pages  # one snapshot
        return cls(
            style_anchor=story.style_anchor,
            page_count=len(pages),
            pages=[PageResponse.from_page(session_id, i, p) for i, p in enumerate(pages, start=1)],
        )


class SessionResponse(BaseModel):
    """A story session and its current story, if any."""

    id: str
    state: str
    busy: bool = False
    story: Optional[StoryResponse] = None


class ContinueStoryResponse(BaseModel):
    """Response after a page is appended."""

    page: PageResponse
    page_count: int


class ErrorResponse(BaseModel):
    """Body returned for pipeline errors."""

    detail: str
    error_type: str = Field(description="Error class name, e.g. SafetyBlockedError")
