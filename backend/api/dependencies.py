"""FastAPI dependency injection for the backend, sessions and collaborators."""

from functools import lru_cache
from typing import Annotated

from dotenv import find_dotenv, load_dotenv
from fastapi import Depends, HTTPException, status

# Load .env from project root (find_dotenv searches parent directories)
load_dotenv(find_dotenv())

from backend.core.generative_backend import GenerativeBackend  # noqa: E402
from backend.core.programs.story_orchestrator import StoryOrchestrator  # noqa: E402

from .logging import story_logger  # noqa: E402
from .services.narration import NarrationClient  # noqa: E402
from .services.session_store import SessionStore  # noqa: E402


@lru_cache(maxsize=1)
def get_backend() -> GenerativeBackend:
    """Shared generative backend. Raises ConfigurationError without a credential."""
    return GenerativeBackend()


def build_orchestrator(session_id: str) -> StoryOrchestrator:
    """Orchestrator for one session, reporting its stages to the story logger."""

    def on_progress(stage: str, detail: str, completed, total, duration: float) -> None:
        story_logger.stage_completed(session_id, stage, duration=duration)

    return StoryOrchestrator(backend=get_backend(), on_progress=on_progress)


@lru_cache(maxsize=1)
def get_session_store() -> SessionStore:
    return SessionStore(build_orchestrator)


def get_orchestrator(
    session_id: str,
    store: Annotated[SessionStore, Depends(get_session_store)],
) -> StoryOrchestrator:
    """Look up the session's orchestrator.

    Raises:
        HTTPException: 404 if the session does not exist
    """
    orchestrator = store.get(session_id)
    if orchestrator is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session {session_id} not found",
        )
    return orchestrator


def get_narration_client() -> NarrationClient:
    return NarrationClient()


# Type aliases for cleaner route signatures
Store = Annotated[SessionStore, Depends(get_session_store)]
Orchestrator = Annotated[StoryOrchestrator, Depends(get_orchestrator)]
Narrator = Annotated[NarrationClient, Depends(get_narration_client)]
