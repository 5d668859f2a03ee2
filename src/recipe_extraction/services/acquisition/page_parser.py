"""Extract post metadata from rendered page HTML.

Works on the HTML snapshot taken from the headless browser, so parsing stays
synchronous and testable with literal fixtures.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Tag

from recipe_extraction.schemas.enums import Platform
from recipe_extraction.services.acquisition.models import PageMetadata


_TIKTOK_HANDLE = re.compile(r"/@([^/?#]+)")
_INSTAGRAM_TITLE_AUTHOR = re.compile(r"^\s*(?:.+?\(@(?P<handle>[^)]+)\)|(?P<name>[^:]+?))\s+on Instagram")
_WHITESPACE = re.compile(r"[ \t\r\f\v]+")

# Rendered YouTube watch-page elements, most specific first
_YOUTUBE_TITLE_SELECTORS = ("h1.ytd-watch-metadata", "h1.title", "#title h1")
_YOUTUBE_DESCRIPTION_SELECTORS = (
    "#description-inline-expander",
    "ytd-text-inline-expander",
    "#description",
)


def _meta(soup: BeautifulSoup, *keys: str) -> str | None:
    for key in keys:
        tag = soup.find("meta", attrs={"property": key}) or soup.find(
            "meta", attrs={"name": key}
        )
        if isinstance(tag, Tag):
            content = tag.get("content")
            if isinstance(content, str) and content.strip():
                return content.strip()
    return None


def _select_text(soup: BeautifulSoup, selectors: tuple[str, ...]) -> str | None:
    for selector in selectors:
        node = soup.select_one(selector)
        if node is None:
            continue
        text = clean_text(node.get_text("\n"))
        if text:
            return text
    return None


def clean_text(value: str) -> str:
    """Collapse runs of spaces and blank lines left over from markup."""
    lines = (_WHITESPACE.sub(" ", line).strip() for line in value.splitlines())
    return "\n".join(line for line in lines if line)


def parse_page_metadata(
    html: str,
    platform: Platform,
    *,
    document_title: str | None = None,
) -> PageMetadata:
    """Parse Open Graph tags and platform-specific elements.

    Args:
        html: Rendered page HTML.
        platform: Platform the page belongs to.
        document_title: ``document.title`` as reported by the browser, used
            when the page has no usable title tag.
    """
    soup = BeautifulSoup(html, "html.parser")

    title = _meta(soup, "og:title", "twitter:title")
    description = _meta(soup, "og:description", "description", "twitter:description")
    image = _meta(soup, "og:image", "og:image:url", "twitter:image")
    url = _meta(soup, "og:url")
    author: str | None = None

    if platform is Platform.YOUTUBE:
        title = _select_text(soup, _YOUTUBE_TITLE_SELECTORS) or title
        description = _select_text(soup, _YOUTUBE_DESCRIPTION_SELECTORS) or description
        author = _meta(soup, "author") or _select_text(soup, ("#owner #channel-name a",))
    elif platform is Platform.TIKTOK:
        if url and (found := _TIKTOK_HANDLE.search(url)):
            author = found.group(1)
    elif platform is Platform.INSTAGRAM and title:
        if found := _INSTAGRAM_TITLE_AUTHOR.match(title):
            author = found.group("handle") or found.group("name")

    if not title:
        title_tag = soup.find("title")
        raw = title_tag.get_text() if isinstance(title_tag, Tag) else document_title
        title = clean_text(raw) if raw else None

    return PageMetadata(
        title=title or None,
        description=description or None,
        image=image,
        url=url,
        author=author.strip() if author else None,
    )
