"""API configuration constants.

Single source of truth for settings used across the API layer.
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()

# Sessions are held in memory only; the oldest idle session is evicted past this
MAX_SESSIONS = int(os.getenv("STORY_MAX_SESSIONS", "100"))

# Seed image upload limit (bytes)
MAX_SEED_IMAGE_BYTES = 4 * 1024 * 1024

SEED_IMAGE_MIME_TYPES = ("image/png", "image/jpeg", "image/webp", "image/heic", "image/heif")

# Export
EXPORT_TITLE = "My AI Story"
EXPORT_FILENAME = "ai-storybook"

# Logging
LOG_JSON = os.getenv("LOG_FORMAT", "json").lower() == "json"
LOG_LEVEL = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
