"""Pydantic models for API requests."""

from typing import Optional

from pydantic import BaseModel, Field


class SeedImageRequest(BaseModel):
    """A seed image sent inline as base64."""

    data: str = Field(..., min_length=1, description="Base64-encoded image bytes")
    mime_type: str = Field(
        ...,
        pattern=r"^image/[a-z0-9.+-]+$",
        description="MIME type of the image",
        examples=["image/png", "image/jpeg"],
    )


class StartStoryRequest(BaseModel):
    """Request body for starting a new story."""

    prompt: str = Field(
        default="",
        max_length=1000,
        description="The opening idea for the story",
        examples=["A brave knight discovers a mysterious cave"],
    )
    image: Optional[SeedImageRequest] = Field(
        default=None,
        description="Optional seed image grounding the first page",
    )


class ContinueStoryRequest(BaseModel):
    """Request body for adding a page to the story."""

    instruction: str = Field(
        ...,
        min_length=1,
        max_length=1000,
        description="What happens next",
        examples=["The knight finds a sleeping dragon"],
    )
