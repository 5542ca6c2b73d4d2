"""
Error taxonomy for the story generation pipeline.

Every error carries a ``user_message`` that the API and CLI surface verbatim.
Nothing in the pipeline retries: the first unmet guarantee raises one of
these and the enclosing start/continue operation is abandoned.
"""


class StoryError(Exception):
    """Base class for all story pipeline errors."""

    user_message = "Something went wrong while weaving your story. Please try again."

    def __init__(self, message: str = None, user_message: str = None):
        super().__init__(message or self.user_message)
        if user_message:
            self.user_message = user_message


class ConfigurationError(StoryError):
    """A required credential or setting is missing."""

    user_message = "The story service is not configured. Please contact the administrator."


class MissingPromptError(StoryError):
    user_message = "Every story needs a beginning! Please write a prompt or add an image."


class EmptyStyleError(StoryError):
    user_message = "The AI couldn't decide on an art style. Please try a different prompt."


class EmptyTextError(StoryError):
    user_message = "The AI failed to write the story for this page. Please try a different prompt."


class MalformedResponseError(StoryError):
    user_message = "Received a malformed response from the AI. Please try again."


class ImageGenerationError(StoryError):
    user_message = "The illustration could not be painted. Please try again."


class IncompleteGenerationError(StoryError):
    """The continuation reply lacked a text part or an image part."""

    user_message = (
        "The AI failed to generate a complete story page (text or image missing). "
        "Please try again."
    )


class SafetyBlockedError(StoryError):
    """The backend returned no usable candidates, usually a content filter.

    Unlike IncompleteGenerationError this should not be retried verbatim.
    """

    user_message = (
        "The AI was unable to continue the story. This might be due to a content "
        "filter. Please try a different prompt."
    )

    def __init__(self, message: str = None, block_reason: str = None):
        super().__init__(message)
        self.block_reason = block_reason


class BackendError(StoryError):
    """Transport or API failure talking to the generative backend (timeouts included)."""

    user_message = "The magic spell failed! The crystal ball is cloudy. Please try again."


class StoryBusyError(StoryError):
    user_message = "This story is still being written. Please wait for the current page to finish."


class NoActiveStoryError(StoryError):
    user_message = "There is no story yet. Start one first!"


class NarrationError(StoryError):
    user_message = "The storyteller's voice is lost! Could not generate narration."


class ExportError(StoryError):
    user_message = "The story could not be exported."
