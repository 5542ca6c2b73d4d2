# Story Weaver - Core Domain

# Re-export types for convenient access
from .types import (
    Image,
    Page,
    Story,
    TextPart,
    ImagePart,
    GenerationResponse,
    SeedPageContent,
)

__all__ = [
    "Image",
    "Page",
    "Story",
    "TextPart",
    "ImagePart",
    "GenerationResponse",
    "SeedPageContent",
]
