"""Unit tests for the story-writing CLI."""

import argparse
from unittest.mock import patch

import pytest

from backend.core.programs.story_orchestrator import StoryOrchestrator
from cli.generate_story import output_path_for, write_story

PAGE_TEXTS = ["The knight set off.", "She met a shy dragon.", "They became best friends."]


def make_args(**overrides) -> argparse.Namespace:
    args = {
        "prompt": "a brave knight",
        "image": None,
        "continue_with": [],
        "output": None,
        "title": "My AI Story",
        "stdout": False,
        "verbose": False,
    }
    args.update(overrides)
    return argparse.Namespace(**args)


@pytest.fixture
def scripted_backend(mock_backend, make_image, text_response, page_response):
    """Backend scripted for a successful start; extra responses are appended per test."""
    mock_backend.generate_image.return_value = [make_image("red")]
    mock_backend.generate_content.side_effect = [
        text_response(", featuring a brave knight, in soft watercolor."),
        text_response(PAGE_TEXTS[0]),
        page_response(PAGE_TEXTS[1], make_image("green")),
        page_response(PAGE_TEXTS[2], make_image("blue")),
    ]
    return mock_backend


def patched_orchestrator(backend):
    return patch(
        "cli.generate_story.StoryOrchestrator",
        lambda on_progress=None: StoryOrchestrator(backend=backend, on_progress=on_progress),
    )


class TestWriteStory:
    @pytest.mark.asyncio
    async def test_saves_story_as_html(self, scripted_backend, tmp_path):
        output = tmp_path / "s.html"

        with patched_orchestrator(scripted_backend):
            exit_code = await write_story(make_args(output=str(output)))

        assert exit_code == 0
        html = output.read_text(encoding="utf-8")
        for text in PAGE_TEXTS:
            assert text in html

    @pytest.mark.asyncio
    async def test_blocked_continuation_keeps_written_pages(
        self, scripted_backend, blocked_response, tmp_path, capsys
    ):
        scripted_backend.generate_content.side_effect = list(
            scripted_backend.generate_content.side_effect
        ) + [blocked_response]
        output = tmp_path / "s.html"

        with patched_orchestrator(scripted_backend):
            exit_code = await write_story(make_args(continue_with=["scary"], output=str(output)))

        assert exit_code == 1
        html = output.read_text(encoding="utf-8")
        for text in PAGE_TEXTS:
            assert text in html
        assert "Stopped after 3 pages" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_later_continuations_are_skipped_after_failure(
        self, scripted_backend, blocked_response, page_response, make_image, capsys
    ):
        scripted_backend.generate_content.side_effect = list(
            scripted_backend.generate_content.side_effect
        ) + [blocked_response, page_response("Never written.", make_image("yellow"))]

        with patched_orchestrator(scripted_backend):
            exit_code = await write_story(make_args(continue_with=["scary", "happy"], stdout=True))

        out = capsys.readouterr().out
        assert exit_code == 1
        assert "--- Page 3 ---" in out
        assert "--- Page 4 ---" not in out
        assert scripted_backend.generate_content.call_count == 5

    @pytest.mark.asyncio
    async def test_failed_start_writes_nothing(self, mock_backend, blocked_response, tmp_path, capsys):
        mock_backend.generate_content.side_effect = [blocked_response]
        output = tmp_path / "s.html"

        with patched_orchestrator(mock_backend):
            exit_code = await write_story(make_args(output=str(output)))

        assert exit_code == 1
        assert not output.exists()
        assert capsys.readouterr().err.startswith("Error:")


class TestOutputPath:
    def test_explicit_output_is_used(self):
        assert output_path_for("anything", "story.pdf").name == "story.pdf"

    def test_default_name_is_slug_of_prompt(self):
        path = output_path_for("A Brave Knight!")

        assert path.suffix == ".html"
        assert path.name.startswith("a_brave_knight_")
