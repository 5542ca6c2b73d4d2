"""Services backing the story API."""

from .export import render_html, render_pdf
from .narration import NarrationAudio, NarrationClient
from .session_store import SessionStore

__all__ = ["SessionStore", "NarrationClient", "NarrationAudio", "render_html", "render_pdf"]
