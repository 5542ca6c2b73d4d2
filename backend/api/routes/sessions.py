"""Story session endpoints."""

import base64
import binascii
import time

from fastapi import APIRouter, HTTPException, Query, Response, status

from backend.core.errors import NoActiveStoryError, StoryError
from backend.core.types import Image, Page

from ..config import EXPORT_FILENAME, EXPORT_TITLE, MAX_SEED_IMAGE_BYTES, SEED_IMAGE_MIME_TYPES
from ..dependencies import Narrator, Orchestrator, Store
from ..logging import story_logger
from ..models.requests import ContinueStoryRequest, SeedImageRequest, StartStoryRequest
from ..models.responses import (
    ContinueStoryResponse,
    ErrorResponse,
    PageResponse,
    SessionResponse,
    StoryResponse,
)
from ..services.export import render_html, render_pdf

router = APIRouter()

ERROR_RESPONSES = {
    409: {"model": ErrorResponse, "description": "Story is busy or not started"},
    422: {"model": ErrorResponse, "description": "Invalid input or content blocked"},
    502: {"model": ErrorResponse, "description": "The generative backend failed"},
}


def _session_response(session_id: str, orchestrator) -> SessionResponse:
    story = orchestrator.story
    return SessionResponse(
        id=session_id,
        state=orchestrator.state.value,
        busy=orchestrator.is_busy,
        story=StoryResponse.from_story(session_id, story) if story else None,
    )


def _decode_seed_image(image: SeedImageRequest) -> Image:
    """Decode an uploaded seed image, accepting plain base64 or a data URI."""
    if image.mime_type not in SEED_IMAGE_MIME_TYPES:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"Unsupported image type {image.mime_type}",
        )

    encoded = image.data
    if encoded.startswith("data:") and "," in encoded:
        encoded = encoded.split(",", 1)[1]

    try:
        data = base64.b64decode(encoded, validate=True)
    except binascii.Error:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Seed image is not valid base64",
        )

    if not data:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Seed image is empty",
        )
    if len(data) > MAX_SEED_IMAGE_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Seed image exceeds {MAX_SEED_IMAGE_BYTES // (1024 * 1024)} MB",
        )
    return Image(data=data, mime_type=image.mime_type)


def _get_page(orchestrator, page_number: int) -> Page:
    story = orchestrator.story
    if story is None:
        raise NoActiveStoryError("No story has been started in this session")

    pages = story.pages
    if not 1 <= page_number <= len(pages):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Page {page_number} not found",
        )
    return pages[page_number - 1]


@router.post(
    "",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a story session",
)
async def create_session(store: Store):
    session_id, orchestrator = store.create()
    return _session_response(session_id, orchestrator)


@router.get(
    "/{session_id}",
    response_model=SessionResponse,
    summary="Get a session",
    description="Current state and story of a session. Poll this while a story is being written.",
)
async def get_session(session_id: str, orchestrator: Orchestrator):
    return _session_response(session_id, orchestrator)


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Discard a session and its story",
)
async def delete_session(session_id: str, store: Store):
    if not store.delete(session_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session {session_id} not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{session_id}/story",
    response_model=StoryResponse,
    summary="Start a new story",
    description="Write the opening three pages, replacing any existing story in the session.",
    responses=ERROR_RESPONSES,
)
async def start_story(session_id: str, request: StartStoryRequest, orchestrator: Orchestrator):
    seed_image = _decode_seed_image(request.image) if request.image else None

    story_logger.generation_started(session_id, "start")
    started = time.time()
    try:
        story = await orchestrator.start(request.prompt, seed_image=seed_image)
    except StoryError as e:
        story_logger.generation_failed(session_id, e, stage=orchestrator.state.value)
        raise
    story_logger.generation_completed(session_id, "start", time.time() - started)

    return StoryResponse.from_story(session_id, story)


@router.post(
    "/{session_id}/story/pages",
    response_model=ContinueStoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a page",
    description="Generate the next page from an instruction. A failed attempt leaves the story unchanged.",
    responses=ERROR_RESPONSES,
)
async def continue_story(session_id: str, request: ContinueStoryRequest, orchestrator: Orchestrator):
    story_logger.generation_started(session_id, "continue")
    started = time.time()
    try:
        page = await orchestrator.continue_story(request.instruction)
    except StoryError as e:
        story_logger.generation_failed(session_id, e, stage=orchestrator.state.value)
        raise
    story_logger.generation_completed(session_id, "continue", time.time() - started)

    page_count = orchestrator.story.page_count
    return ContinueStoryResponse(
        page=PageResponse.from_page(session_id, page_count, page),
        page_count=page_count,
    )


@router.get(
    "/{session_id}/story/pages/{page_number}/image",
    summary="Get page illustration",
    responses={200: {"content": {"image/jpeg": {}, "image/png": {}}}, 404: {"description": "Page not found"}},
)
async def get_page_image(session_id: str, page_number: int, orchestrator: Orchestrator):
    page = _get_page(orchestrator, page_number)
    return Response(content=page.image.data, media_type=page.image.mime_type)


@router.post(
    "/{session_id}/story/pages/{page_number}/narration",
    summary="Narrate a page",
    description="Read the page aloud. Narration failures never affect the story.",
    responses={200: {"content": {"audio/mpeg": {}}}, 502: {"model": ErrorResponse}},
)
async def narrate_page(session_id: str, page_number: int, orchestrator: Orchestrator, narrator: Narrator):
    page = _get_page(orchestrator, page_number)
    audio = await narrator.narrate(page.text)
    return Response(content=audio.data, media_type=audio.mime_type)


@router.get(
    "/{session_id}/story/export",
    summary="Export the story",
    description="Download the story as a standalone HTML document or a PDF.",
    responses={200: {"content": {"text/html": {}, "application/pdf": {}}}},
)
async def export_story(
    session_id: str,
    orchestrator: Orchestrator,
    format: str = Query(default="html", pattern="^(html|pdf)$", description="Export format"),
    title: str = Query(default=EXPORT_TITLE, max_length=200, description="Document title"),
):
    story = orchestrator.story
    if story is None:
        raise NoActiveStoryError("No story has been started in this session")

    pages = story.pages  # snapshot; a concurrent append is not observed
    if format == "pdf":
        content = render_pdf(pages, title=title)
        media_type = "application/pdf"
    else:
        content = render_html(pages, title=title)
        media_type = "text/html"

    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}.{format}"'},
    )
