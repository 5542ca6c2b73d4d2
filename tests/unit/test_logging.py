"""Unit tests for structured API logging."""

import json
import logging
from unittest.mock import patch

from backend.api.dependencies import build_orchestrator
from backend.api.logging import JSONFormatter, StoryLogger, story_logger


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("story_generation", logging.INFO, __file__, 1, "Stage completed", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_includes_session_fields(self):
        record = make_record(session_id="abc", stage="seed_created", duration=1.5)

        data = json.loads(JSONFormatter().format(record))

        assert data["message"] == "Stage completed"
        assert data["level"] == "INFO"
        assert data["session_id"] == "abc"
        assert data["stage"] == "seed_created"
        assert data["timestamp"].endswith("Z")

    def test_omits_absent_fields(self):
        data = json.loads(JSONFormatter().format(make_record()))

        assert "session_id" not in data
        assert "error_type" not in data


class TestStoryLogger:
    def test_failure_records_error_type_and_stage(self, caplog):
        with caplog.at_level(logging.ERROR, logger="story_generation"):
            try:
                raise RuntimeError("boom")
            except RuntimeError as e:
                StoryLogger().generation_failed("abc", e, stage="page2_created")

        record = caplog.records[-1]
        assert record.error_type == "RuntimeError"
        assert record.failed_at_stage == "page2_created"
        assert record.session_id == "abc"

    def test_zero_duration_is_still_recorded(self, caplog):
        with caplog.at_level(logging.INFO, logger="story_generation"):
            StoryLogger().stage_completed("abc", "extending", duration=0.0)

        assert caplog.records[-1].duration == 0.0


class TestSessionStageLogging:
    def test_session_orchestrator_logs_stage_with_duration(self, mock_backend):
        with patch("backend.api.dependencies.get_backend", return_value=mock_backend), \
                patch.object(story_logger, "stage_completed") as stage_completed:
            orchestrator = build_orchestrator("abc")
            orchestrator.on_progress("seed_created", "Page 1 written", 1, 3, 2.5)

        stage_completed.assert_called_once_with("abc", "seed_created", duration=2.5)
