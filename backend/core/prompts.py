"""
Prompt templates for the story pipeline.

Kept apart from the modules so wording can be tuned without touching the
call sequencing.
"""

STYLE_ANCHOR_TEMPLATE = (
    'Based on the user\'s idea: "{idea}", create a short "master prompt" suffix that defines '
    "the main character(s) and a consistent, magical art style for a children's storybook. "
    'For example: ", featuring a brave little squirrel with a tiny acorn helmet, in a soft, '
    'warm watercolor illustration style."'
)

STYLE_ANCHOR_FROM_IMAGE_TEMPLATE = (
    "Based on the provided picture, create a short \"master prompt\" suffix that defines the "
    "main character(s) and a consistent, magical art style for a children's storybook. "
    'For example: ", featuring a brave little squirrel with a tiny acorn helmet, in a soft, '
    'warm watercolor illustration style."'
)

SEED_FROM_IMAGE_SYSTEM_INSTRUCTION = (
    "You are a master storyteller, creating an illustrated children's book. Your task is to "
    "write the **beginning** of a three-part short story based on the user's idea, along with "
    "a corresponding image prompt. Establish the characters and setting in a magical, "
    "adventurous tone."
)

SEED_FROM_IMAGE_PROMPT = 'Start a story based on this image and prompt: "{prompt}"'

SEED_FROM_IMAGE_ONLY_PROMPT = "Start a story based on this image."

SEED_TEXT_SYSTEM_INSTRUCTION = (
    "You are a master storyteller. Based on the user's idea and the provided image (which "
    "illustrates that idea), write the **beginning** paragraph of a magical children's story. "
    "The story should be suitable for all ages and match the scene in the image."
)

SEED_TEXT_PROMPT = 'The user\'s original idea was: "{prompt}"'

EXTEND_PAGE_TEMPLATE = """You are an author and illustrator for a children's storybook. The defined art style is: "{style_anchor}".

Here is the story so far:
{story_so_far}

Your task is to create the very next page based on this user instruction: "{instruction}".

Follow these two steps precisely:
1.  **Write a new story paragraph:** This paragraph should continue the story based on the user's instruction. It must be self-contained for this page.
2.  **Edit the input image:** Modify the image to create a new illustration that visually represents the story paragraph you just wrote. The change should be clear and magical.

You MUST output both the text and the new image."""


def format_story_so_far(texts: list[str]) -> str:
    """Numbered recap of prior pages: 'Page 1: ...' separated by blank lines."""
    return "\n\n".join(f"Page {i}: {text}" for i, text in enumerate(texts, start=1))
