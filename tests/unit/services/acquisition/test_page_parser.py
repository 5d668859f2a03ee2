"""Unit tests for rendered page metadata parsing."""

from __future__ import annotations

import pytest

from recipe_extraction.schemas.enums import Platform
from recipe_extraction.services.acquisition.page_parser import (
    clean_text,
    parse_page_metadata,
)


pytestmark = pytest.mark.unit


TIKTOK_HTML = """
<html><head>
  <title>TikTok - Make Your Day</title>
  <meta property="og:title" content="Crispy chili oil eggs #breakfast">
  <meta property="og:description" content="Fry eggs in chili oil. Ingredients: 2 eggs, 1 tbsp chili oil">
  <meta property="og:image" content="https://p16.tiktokcdn.com/cover.jpeg">
  <meta property="og:url" content="https://www.tiktok.com/@chef.jo/video/7234567890123456789">
</head><body></body></html>
"""

INSTAGRAM_HTML = """
<html><head>
  <meta property="og:title" content="Jo Cooks (@chef.jo) on Instagram: &quot;Lemon pasta&quot;">
  <meta name="description" content="12K likes - Lemon pasta in 15 minutes">
  <meta property="og:image" content="https://scontent.cdninstagram.com/reel.jpg">
</head><body></body></html>
"""

YOUTUBE_HTML = """
<html><head>
  <meta property="og:title" content="Garlic Noodles - YouTube">
  <meta name="author" content="Jo Cooks">
</head><body>
  <h1 class="style-scope ytd-watch-metadata">Garlic Noodles</h1>
  <div id="description-inline-expander">
     Ingredients:
     200g noodles

     6   cloves garlic
  </div>
</body></html>
"""


class TestParsePageMetadata:
    """Tests for parse_page_metadata."""

    def test_tiktok_open_graph(self) -> None:
        """Should read Open Graph tags and the author handle."""
        metadata = parse_page_metadata(TIKTOK_HTML, Platform.TIKTOK)

        assert metadata.title == "Crispy chili oil eggs #breakfast"
        assert metadata.description.startswith("Fry eggs in chili oil.")
        assert metadata.image == "https://p16.tiktokcdn.com/cover.jpeg"
        assert metadata.author == "chef.jo"
        assert metadata.has_content

    def test_instagram_author_from_title(self) -> None:
        """Should pull the handle out of the Instagram title format."""
        metadata = parse_page_metadata(INSTAGRAM_HTML, Platform.INSTAGRAM)

        assert metadata.author == "chef.jo"
        assert metadata.description == "12K likes - Lemon pasta in 15 minutes"
        assert metadata.image == "https://scontent.cdninstagram.com/reel.jpg"

    def test_youtube_rendered_elements_win(self) -> None:
        """Should prefer the rendered title and description elements."""
        metadata = parse_page_metadata(YOUTUBE_HTML, Platform.YOUTUBE)

        assert metadata.title == "Garlic Noodles"
        assert metadata.description == "Ingredients:\n200g noodles\n6 cloves garlic"
        assert metadata.author == "Jo Cooks"

    def test_falls_back_to_title_tag(self) -> None:
        """Should use the <title> element without Open Graph tags."""
        metadata = parse_page_metadata(
            "<html><head><title> Some   post </title></head></html>", Platform.TIKTOK
        )

        assert metadata.title == "Some post"
        assert metadata.description is None

    def test_falls_back_to_document_title(self) -> None:
        """Should use the browser's document title as a last resort."""
        metadata = parse_page_metadata(
            "<html><body></body></html>",
            Platform.INSTAGRAM,
            document_title="Instagram",
        )

        assert metadata.title == "Instagram"

    def test_empty_page_has_no_content(self) -> None:
        """Should report no usable content for an empty page."""
        metadata = parse_page_metadata("", Platform.TIKTOK)

        assert metadata.title is None
        assert not metadata.has_content


class TestCleanText:
    """Tests for clean_text."""

    def test_collapses_whitespace_and_blank_lines(self) -> None:
        """Should collapse spaces and drop empty lines."""
        assert clean_text("  a   b \n\n\t c  \n") == "a b\nc"
