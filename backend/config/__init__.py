"""
Configuration module for the Story Weaver.

Re-exports all configuration for convenient access.
"""

from .story import STORY_CONSTANTS, MIDDLE_PAGE_INSTRUCTION, ENDING_PAGE_INSTRUCTION
from .genai import (
    GENAI_CONSTANTS,
    get_api_key,
    get_genai_client,
    get_text_model,
    get_image_model,
    get_edit_model,
)
from .narration import NARRATION_CONSTANTS, get_narration_api_key

__all__ = [
    # Story
    "STORY_CONSTANTS",
    "MIDDLE_PAGE_INSTRUCTION",
    "ENDING_PAGE_INSTRUCTION",
    # Generative backend
    "GENAI_CONSTANTS",
    "get_api_key",
    "get_genai_client",
    "get_text_model",
    "get_image_model",
    "get_edit_model",
    # Narration
    "NARRATION_CONSTANTS",
    "get_narration_api_key",
]
