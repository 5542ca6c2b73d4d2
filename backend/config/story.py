"""
Story generation constants for the Story Weaver.

The editorial instructions for pages 2 and 3 live here so they can be
swapped without touching orchestration logic.
"""

STORY_CONSTANTS = {
    "initial_page_count": 3,
    "style_temperature": 0.7,  # Favor variety for the art style
    "style_thinking_budget": 0,  # Style call must be fast
    "seed_temperature": 0.8,
    "extend_temperature": 0.7,
    "max_seed_words": 100,
}

MIDDLE_PAGE_INSTRUCTION = (
    "Continue the story with a heartwarming middle part. "
    "Introduce a gentle, positive challenge or a moment of discovery."
)

ENDING_PAGE_INSTRUCTION = (
    "Conclude this short story with a sweet and happy ending, "
    "resolving any challenges and leaving a warm feeling."
)
