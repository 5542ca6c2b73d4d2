"""Pydantic models for API requests and responses."""

from .requests import SeedImageRequest, StartStoryRequest, ContinueStoryRequest
from .responses import (
    PageResponse,
    StoryResponse,
    SessionResponse,
    ContinueStoryResponse,
    ErrorResponse,
)

__all__ = [
    "SeedImageRequest",
    "StartStoryRequest",
    "ContinueStoryRequest",
    "PageResponse",
    "StoryResponse",
    "SessionResponse",
    "ContinueStoryResponse",
    "ErrorResponse",
]
