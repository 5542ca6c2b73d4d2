"""Narration (text-to-speech) configuration using ElevenLabs."""

import os
from dotenv import load_dotenv

load_dotenv()

NARRATION_CONSTANTS = {
    "base_url": "https://api.elevenlabs.io/v1/text-to-speech",
    # A gentle storytelling voice
    "voice_id": os.getenv("ELEVENLABS_VOICE_ID", "21m00Tcm4TlvDq8ikWAM"),
    "model_id": "eleven_multilingual_v2",
    "stability": 0.5,
    "similarity_boost": 0.75,
    "output_mime_type": "audio/mpeg",
    "timeout": 60.0,
}


def get_narration_api_key() -> str:
    return os.getenv("ELEVENLABS_API_KEY", "")
