from .story_orchestrator import StoryOrchestrator, SessionState

__all__ = ["StoryOrchestrator", "SessionState"]
