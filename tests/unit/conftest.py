"""Pytest fixtures for pipeline and API tests."""

from io import BytesIO
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient
from PIL import Image as PILImage

from backend.api.dependencies import get_narration_client, get_session_store
from backend.api.main import app
from backend.api.services.narration import NarrationClient
from backend.api.services.session_store import SessionStore
from backend.core.generative_backend import GenerativeBackend
from backend.core.programs.story_orchestrator import StoryOrchestrator
from backend.core.types import GenerationResponse, Image, ImagePart, Page, TextPart


def _png(color: str) -> bytes:
    buffer = BytesIO()
    PILImage.new("RGB", (8, 8), color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def make_image():
    """Factory for distinct small PNG images."""

    def _make(color: str = "red") -> Image:
        return Image(data=_png(color), mime_type="image/png")

    return _make


@pytest.fixture
def make_page(make_image):
    def _make(text: str = "Once upon a time.", color: str = "red") -> Page:
        return Page(text=text, image=make_image(color))

    return _make


@pytest.fixture
def text_response():
    """Factory for a text-only backend reply."""

    def _make(*texts: str) -> GenerationResponse:
        return GenerationResponse(parts=tuple(TextPart(t) for t in texts))

    return _make


@pytest.fixture
def page_response():
    """Factory for a continuation reply with one text part and one image part."""

    def _make(text: str, image: Image, image_first: bool = False) -> GenerationResponse:
        parts = (TextPart(text), ImagePart(image))
        return GenerationResponse(parts=parts[::-1] if image_first else parts)

    return _make


@pytest.fixture
def blocked_response():
    return GenerationResponse(blocked=True, block_reason="SAFETY")


@pytest.fixture
def mock_backend():
    """GenerativeBackend with both capabilities mocked."""
    return AsyncMock(spec=GenerativeBackend)


@pytest.fixture
def session_store(mock_backend):
    """Session store whose orchestrators share the mocked backend."""
    return SessionStore(lambda session_id: StoryOrchestrator(backend=mock_backend))


@pytest.fixture
def mock_narrator():
    return AsyncMock(spec=NarrationClient)


@pytest.fixture
def client_with_mocks(session_store, mock_narrator):
    """TestClient with the session store and narration client overridden."""
    app.dependency_overrides[get_session_store] = lambda: session_store
    app.dependency_overrides[get_narration_client] = lambda: mock_narrator

    with TestClient(app) as client:
        yield client, session_store, mock_narrator

    app.dependency_overrides.clear()
