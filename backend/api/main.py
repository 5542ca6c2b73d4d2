"""FastAPI application for the Story Weaver."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.core.errors import (
    BackendError,
    ConfigurationError,
    EmptyStyleError,
    EmptyTextError,
    ExportError,
    ImageGenerationError,
    IncompleteGenerationError,
    MalformedResponseError,
    MissingPromptError,
    NarrationError,
    NoActiveStoryError,
    SafetyBlockedError,
    StoryBusyError,
    StoryError,
)

from .config import LOG_JSON, LOG_LEVEL
from .logging import configure_logging
from .routes import sessions

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    ConfigurationError: 503,
    MissingPromptError: 422,
    EmptyStyleError: 422,
    EmptyTextError: 422,
    SafetyBlockedError: 422,
    ExportError: 422,
    MalformedResponseError: 502,
    ImageGenerationError: 502,
    IncompleteGenerationError: 502,
    BackendError: 502,
    NarrationError: 502,
    StoryBusyError: 409,
    NoActiveStoryError: 409,
}


def status_code_for(error: StoryError) -> int:
    for cls in type(error).__mro__:
        if cls in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[cls]
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    configure_logging(json_format=LOG_JSON, level=LOG_LEVEL)
    logger.info("Storybook API started")
    yield


app = FastAPI(
    title="Story Weaver API",
    description="""
Co-write illustrated children's stories with a generative model.

## Workflow
1. POST `/sessions` to open a session
2. POST `/sessions/{id}/story` with a prompt and/or seed image to write the first three pages
3. POST `/sessions/{id}/story/pages` with an instruction to add a page
4. Fetch illustrations, narration and HTML/PDF exports via the nested endpoints
    """,
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for web frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StoryError)
async def story_error_handler(request: Request, exc: StoryError):
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc}")
    else:
        logger.info(f"{type(exc).__name__} on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.user_message, "error_type": type(exc).__name__},
    )


app.include_router(sessions.router, prefix="/sessions", tags=["Sessions"])


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
