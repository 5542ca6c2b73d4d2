"""Structured logging infrastructure for the API layer.

Provides JSON-formatted logging for production and human-readable
logging for development, plus a StoryLogger helper for story generation events.
"""

import json
import logging
import sys
from datetime import datetime, timezone

EXTRA_FIELDS = ("session_id", "stage", "operation", "duration", "error_type", "failed_at_stage")


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add extra fields if present
        for name in EXTRA_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def configure_logging(json_format: bool = True, level: int = logging.INFO) -> None:
    """Configure structured logging for the application."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    root_logger.addHandler(handler)


class StoryLogger:
    """Logger for story generation events with structured fields."""

    def __init__(self):
        self.logger = logging.getLogger("story_generation")

    def generation_started(self, session_id: str, operation: str) -> None:
        self.logger.info(
            f"Story {operation} started",
            extra={"session_id": session_id, "stage": "started", "operation": operation},
        )

    def stage_completed(self, session_id: str, stage: str, duration: float = None) -> None:
        extra = {"session_id": session_id, "stage": stage}
        if duration is not None:
            extra["duration"] = round(duration, 2)
        self.logger.info(f"Stage completed: {stage}", extra=extra)

    def generation_completed(self, session_id: str, operation: str, duration: float) -> None:
        self.logger.info(
            f"Story {operation} completed",
            extra={
                "session_id": session_id,
                "stage": "completed",
                "operation": operation,
                "duration": round(duration, 2),
            },
        )

    def generation_failed(self, session_id: str, error: Exception, stage: str = None) -> None:
        extra = {"session_id": session_id, "stage": "failed", "error_type": type(error).__name__}
        if stage:
            extra["failed_at_stage"] = stage
        self.logger.error(f"Story generation failed: {error}", extra=extra, exc_info=True)


# Global story logger instance
story_logger = StoryLogger()
