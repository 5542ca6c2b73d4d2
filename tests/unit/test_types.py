"""Unit tests for backend/core/types.py."""

import pytest

from backend.core.types import (
    GenerationResponse,
    Image,
    ImagePart,
    Page,
    Story,
    TextPart,
    compose_image_prompt,
)


# =============================================================================
# Image / Page
# =============================================================================


class TestImage:
    def test_base64_round_trip_preserves_bytes(self):
        image = Image(data=b"\x89PNG\x00\xff", mime_type="image/png")

        restored = Image.from_base64(image.to_base64(), "image/png")

        assert restored == image

    def test_data_uri_includes_mime_type(self):
        image = Image(data=b"abc", mime_type="image/png")

        assert image.to_data_uri() == "data:image/png;base64,YWJj"


class TestPage:
    def test_rejects_blank_text(self, make_image):
        with pytest.raises(ValueError):
            Page(text="   ", image=make_image())

    def test_rejects_image_without_data(self):
        with pytest.raises(ValueError):
            Page(text="Hello", image=Image(data=b""))

    def test_is_immutable(self, make_page):
        page = make_page()

        with pytest.raises(AttributeError):
            page.text = "changed"


# =============================================================================
# Story
# =============================================================================


class TestStory:
    def test_requires_style_anchor(self):
        with pytest.raises(ValueError):
            Story("")

    def test_append_grows_pages_in_order(self, make_page):
        first, second = make_page("One."), make_page("Two.")
        story = Story(", in watercolor", (first,))

        story.append(second)

        assert story.pages == (first, second)
        assert story.page_count == 2

    def test_snapshot_is_unaffected_by_later_append(self, make_page):
        story = Story(", in watercolor", (make_page("One."),))
        snapshot = story.pages

        story.append(make_page("Two."))

        assert len(snapshot) == 1
        assert story.page_count == 2

    def test_style_anchor_is_fixed(self, make_page):
        story = Story(", in watercolor", (make_page(),))

        with pytest.raises(AttributeError):
            story.style_anchor = "other"


# =============================================================================
# GenerationResponse
# =============================================================================


class TestGenerationResponse:
    def test_text_joins_text_parts_only(self, make_image):
        response = GenerationResponse(
            parts=(TextPart("Hello "), ImagePart(make_image()), TextPart("world"))
        )

        assert response.text == "Hello world"
        assert len(response.text_parts) == 2
        assert len(response.image_parts) == 1

    def test_empty_response_defaults(self):
        response = GenerationResponse()

        assert response.text == ""
        assert response.blocked is False
        assert response.image_parts == []


# =============================================================================
# compose_image_prompt
# =============================================================================


class TestComposeImagePrompt:
    def test_appends_leading_comma_anchor_verbatim(self):
        anchor = ", featuring a tiny fox, in soft watercolor."

        result = compose_image_prompt("A fox in a meadow", anchor)

        assert result == "A fox in a meadow, featuring a tiny fox, in soft watercolor."

    def test_inserts_comma_when_anchor_lacks_one(self):
        result = compose_image_prompt("A fox in a meadow ", "featuring a tiny fox")

        assert result == "A fox in a meadow, featuring a tiny fox"

    def test_anchor_text_is_never_altered(self):
        anchor = ",  odd   spacing; KEEP CASE"

        assert compose_image_prompt("Scene", anchor).endswith(anchor)
