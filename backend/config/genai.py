"""
Generative backend configuration for the Story Weaver.

Text and structured replies use Gemini Flash, first-page illustrations use
Imagen, and page continuations use Gemini Flash Image (image editing with
interleaved text output).
"""

import os
from dotenv import load_dotenv
from google import genai
from google.genai import types

from backend.core.errors import ConfigurationError

# Load environment variables from .env file
load_dotenv()

GENAI_CONSTANTS = {
    "text_model": "gemini-2.5-flash",
    "image_model": "imagen-4.0-generate-001",
    "edit_model": "gemini-2.5-flash-image",
    "image_mime_type": "image/jpeg",
    "aspect_ratio": "1:1",  # Pages are always square
    "timeout_ms": 120_000,
}


def get_api_key() -> str:
    """Read the backend credential from the environment (GOOGLE_API_KEY, then GEMINI_API_KEY)."""
    return os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY") or ""


def get_genai_client() -> genai.Client:
    """
    Build the google-genai client.

    Fails fast with ConfigurationError, before any network call, when no
    credential is set.
    """
    api_key = get_api_key()
    if not api_key:
        raise ConfigurationError(
            "GOOGLE_API_KEY not found in environment. Set it in .env file."
        )

    timeout = int(os.getenv("GENAI_TIMEOUT_MS", GENAI_CONSTANTS["timeout_ms"]))
    return genai.Client(
        api_key=api_key,
        http_options=types.HttpOptions(timeout=timeout),
    )


def get_text_model() -> str:
    return os.getenv("STORY_TEXT_MODEL", GENAI_CONSTANTS["text_model"])


def get_image_model() -> str:
    return os.getenv("STORY_IMAGE_MODEL", GENAI_CONSTANTS["image_model"])


def get_edit_model() -> str:
    """Model used to edit the previous illustration while writing the next page."""
    return os.getenv("STORY_EDIT_MODEL", GENAI_CONSTANTS["edit_model"])
