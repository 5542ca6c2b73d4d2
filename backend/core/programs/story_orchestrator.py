"""
Story orchestration for one story-construction session.

Start workflow (strictly sequential, each step consumes the previous output):
1. Derive the style anchor from the opening idea
2. Generate page 1 (seed image strategy or text-only strategy)
3. Extend to page 2 with the "gentle challenge" instruction
4. Extend to page 3 with the "sweet resolution" instruction

Continue workflow: extend the current story by one page from a user
instruction, appending only on success.

The orchestrator is the single writer of its Story. A second mutation issued
while one is in flight is rejected with StoryBusyError instead of queueing.
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Callable, Optional

from backend.config import MIDDLE_PAGE_INSTRUCTION, ENDING_PAGE_INSTRUCTION, STORY_CONSTANTS
from ..errors import NoActiveStoryError, StoryBusyError
from ..generative_backend import GenerativeBackend
from ..modules.page_extender import PageExtender
from ..modules.seed_page import SeedPageGenerator
from ..modules.style_anchor import StyleAnchorDeriver
from ..types import Image, Page, Story

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Lifecycle of a story session."""

    IDLE = "idle"
    STYLE_DERIVED = "style_derived"
    SEED_CREATED = "seed_created"
    PAGE2_CREATED = "page2_created"
    READY = "ready"
    EXTENDING = "extending"


class StoryOrchestrator:
    """
    Sequence StyleAnchorDeriver -> SeedPageGenerator -> PageExtender x2, then
    serve PageExtender calls for user continuations.

    Args:
        backend: Generative backend shared by all steps. Built from the
            environment when omitted (fails fast on a missing credential).
        middle_instruction: Editorial instruction for page 2
        ending_instruction: Editorial instruction for page 3
        on_progress: Optional callback(stage, detail, completed, total, duration),
            where duration is the seconds spent reaching this stage
    """

    def __init__(
        self,
        backend: Optional[GenerativeBackend] = None,
        middle_instruction: str = MIDDLE_PAGE_INSTRUCTION,
        ending_instruction: str = ENDING_PAGE_INSTRUCTION,
        on_progress: Optional[Callable[[str, str, Optional[int], Optional[int], float], None]] = None,
    ):
        backend = backend if backend is not None else GenerativeBackend()
        self.style_deriver = StyleAnchorDeriver(backend)
        self.seed_generator = SeedPageGenerator(backend)
        self.page_extender = PageExtender(backend)

        self.middle_instruction = middle_instruction
        self.ending_instruction = ending_instruction
        self.on_progress = on_progress

        self.state = SessionState.IDLE
        self._story: Optional[Story] = None
        self._stage_started = time.monotonic()
        self._lock = asyncio.Lock()

    @property
    def story(self) -> Optional[Story]:
        """The published story, or None before a start succeeds."""
        return self._story

    @property
    def is_busy(self) -> bool:
        return self._lock.locked()

    def _transition(self, state: SessionState, detail: str, completed: int = None, total: int = None) -> None:
        now = time.monotonic()
        duration = now - self._stage_started
        self._stage_started = now
        logger.info(f"Session state {self.state.value} -> {state.value}: {detail} ({duration:.1f}s)")
        self.state = state
        if self.on_progress:
            self.on_progress(state.value, detail, completed, total, duration)

    def _ensure_idle_writer(self) -> None:
        if self._lock.locked():
            raise StoryBusyError(f"Story is busy ({self.state.value})")

    async def start(self, prompt: str, seed_image: Optional[Image] = None) -> Story:
        """
        Build a new 3-page story, discarding the current one.

        The story is published only once all three pages exist. On any
        failure the session returns to IDLE with no story and the error
        propagates.

        Args:
            prompt: The user's opening idea
            seed_image: Optional image grounding page 1

        Returns:
            The new Story
        """
        self._ensure_idle_writer()
        async with self._lock:
            self._story = None
            self.state = SessionState.IDLE
            total = STORY_CONSTANTS["initial_page_count"]
            started = time.time()
            self._stage_started = time.monotonic()

            try:
                style_anchor = await self.style_deriver.derive(prompt, seed_image=seed_image)
                self._transition(SessionState.STYLE_DERIVED, "Art style chosen", 0, total)

                page1 = await self.seed_generator.generate(prompt, style_anchor, seed_image=seed_image)
                self._transition(SessionState.SEED_CREATED, "Page 1 written", 1, total)

                page2 = await self.page_extender.extend([page1], self.middle_instruction, style_anchor)
                self._transition(SessionState.PAGE2_CREATED, "Page 2 written", 2, total)

                page3 = await self.page_extender.extend(
                    [page1, page2], self.ending_instruction, style_anchor
                )
            except BaseException as e:
                logger.warning(
                    f"Story start failed in state {self.state.value}: {type(e).__name__}: {e}"
                )
                self.state = SessionState.IDLE
                raise

            story = Story(style_anchor, (page1, page2, page3))
            self._story = story
            self._transition(
                SessionState.READY,
                f"Story ready in {time.time() - started:.1f}s",
                total,
                total,
            )
            return story

    async def continue_story(self, instruction: str) -> Page:
        """
        Append one page generated from the user's instruction.

        A failed continuation leaves the existing pages untouched and the
        session READY.

        Returns:
            The appended Page
        """
        self._ensure_idle_writer()
        async with self._lock:
            story = self._story
            if self.state is not SessionState.READY or story is None:
                raise NoActiveStoryError("Start a story before continuing it")

            page_number = story.page_count + 1
            self._stage_started = time.monotonic()
            self._transition(SessionState.EXTENDING, f"Writing page {page_number}")
            try:
                page = await self.page_extender.extend(story.pages, instruction, story.style_anchor)
            except BaseException as e:
                logger.warning(f"Continuation failed for page {page_number}: {type(e).__name__}: {e}")
                self.state = SessionState.READY
                raise

            story.append(page)
            self._transition(SessionState.READY, f"Page {page_number} written", page_number, page_number)
            return page

    def reset(self) -> None:
        """Discard the current story."""
        self._ensure_idle_writer()
        self._story = None
        self.state = SessionState.IDLE
