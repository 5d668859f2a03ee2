"""Classify social-media URLs and extract platform content IDs.

Pure string matching, no network I/O. Each platform owns an ordered list of
URL patterns; within a platform the first matching pattern wins. A pattern
only applies to the hosts it names, so a lookalike path on another domain
(``example.com/watch?v=...``) never resolves.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar
from urllib.parse import urlsplit

from recipe_extraction.observability.logging import get_logger
from recipe_extraction.schemas.enums import Platform
from recipe_extraction.services.platforms.exceptions import InvalidURLError
from recipe_extraction.services.platforms.models import PlatformMatch, UrlShape


logger = get_logger(__name__)

_YOUTUBE_ID = r"(?P<id>[A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])"
_INSTAGRAM_CODE = r"(?P<id>[A-Za-z0-9_-]+)"
_HOST_PREFIXES = ("www.", "m.", "mobile.")

_YOUTUBE_HOSTS = frozenset({"youtube.com", "music.youtube.com", "youtube-nocookie.com"})
_TIKTOK_HOSTS = frozenset({"tiktok.com"})
_TIKTOK_SHORT_HOSTS = frozenset({"vm.tiktok.com", "vt.tiktok.com"})
_INSTAGRAM_HOSTS = frozenset({"instagram.com", "instagr.am"})


@dataclass(frozen=True, slots=True)
class UrlPattern:
    """One URL convention of a platform.

    ``regex`` is matched against ``path?query`` and must define an ``id``
    group; an optional ``handle`` group captures the author.
    """

    shape: UrlShape
    hosts: frozenset[str]
    regex: re.Pattern[str]

    def match(self, host: str, target: str) -> re.Match[str] | None:
        if host not in self.hosts:
            return None
        return self.regex.search(target)


class PlatformResolver:
    """Resolve URLs to a ``PlatformMatch``."""

    PATTERNS: ClassVar[dict[Platform, tuple[UrlPattern, ...]]] = {
        Platform.YOUTUBE: (
            UrlPattern(
                UrlShape.SHORTS, _YOUTUBE_HOSTS, re.compile(rf"^/shorts/{_YOUTUBE_ID}")
            ),
            UrlPattern(
                UrlShape.WATCH,
                _YOUTUBE_HOSTS,
                re.compile(rf"^/watch/?\?(?:[^#]*&)?v={_YOUTUBE_ID}"),
            ),
            UrlPattern(
                UrlShape.EMBED,
                _YOUTUBE_HOSTS,
                re.compile(rf"^/(?:embed|v|e|live)/{_YOUTUBE_ID}"),
            ),
            UrlPattern(
                UrlShape.SHORT_LINK, frozenset({"youtu.be"}), re.compile(rf"^/{_YOUTUBE_ID}")
            ),
        ),
        Platform.TIKTOK: (
            UrlPattern(
                UrlShape.VIDEO,
                _TIKTOK_HOSTS,
                re.compile(r"^/@(?P<handle>[^/?#]+)/video/(?P<id>\d+)"),
            ),
            UrlPattern(
                UrlShape.EMBED,
                _TIKTOK_HOSTS,
                re.compile(r"^/embed(?:/v2)?/(?P<id>\d+)"),
            ),
            UrlPattern(
                UrlShape.SHORT_LINK,
                _TIKTOK_HOSTS,
                re.compile(r"^/t/(?P<id>[A-Za-z0-9]+)"),
            ),
            UrlPattern(
                UrlShape.SHORT_LINK,
                _TIKTOK_SHORT_HOSTS,
                re.compile(r"^/(?P<id>[A-Za-z0-9]+)"),
            ),
        ),
        Platform.INSTAGRAM: (
            UrlPattern(
                UrlShape.STORY,
                _INSTAGRAM_HOSTS,
                re.compile(r"^/stories/(?P<handle>[^/?#]+)/(?P<id>\d+)"),
            ),
            UrlPattern(
                UrlShape.REEL,
                _INSTAGRAM_HOSTS,
                re.compile(rf"^/(?:(?P<handle>[A-Za-z0-9._]+)/)?reels?/{_INSTAGRAM_CODE}"),
            ),
            UrlPattern(
                UrlShape.TV, _INSTAGRAM_HOSTS, re.compile(rf"^/tv/{_INSTAGRAM_CODE}")
            ),
            UrlPattern(
                UrlShape.POST,
                _INSTAGRAM_HOSTS,
                re.compile(rf"^/(?:(?P<handle>[A-Za-z0-9._]+)/)?p/{_INSTAGRAM_CODE}"),
            ),
        ),
    }

    def resolve(
        self,
        url: str,
        declared_platform: Platform | str | None = None,
    ) -> PlatformMatch:
        """Classify ``url``.

        Args:
            url: URL as submitted; a missing scheme is tolerated.
            declared_platform: Optional caller hint. When given, only that
                platform's patterns are tried.

        Returns:
            The first match, or a match with ``Platform.UNKNOWN``.
        """
        normalized = _normalize_url(url)
        host, target = _split_host_and_target(normalized)

        candidates = self._candidate_platforms(declared_platform, url)
        for platform in candidates:
            for pattern in self.PATTERNS[platform]:
                found = pattern.match(host, target)
                if found is None:
                    continue
                groups = found.groupdict()
                return PlatformMatch(
                    platform=platform,
                    content_id=groups["id"],
                    secondary_id=groups.get("handle"),
                    url_shape=pattern.shape,
                    source_url=normalized,
                )

        return PlatformMatch(platform=Platform.UNKNOWN, source_url=normalized)

    def resolve_supported(
        self,
        url: str,
        declared_platform: Platform | str | None = None,
    ) -> PlatformMatch:
        """Like ``resolve`` but reject anything that is not supported.

        Raises:
            InvalidURLError: If no pattern matches, or the URL does not match
                the declared platform.
        """
        match = self.resolve(url, declared_platform)
        if match.is_supported:
            return match

        declared = self._coerce_platform(declared_platform, url)
        if declared is not None:
            detected = self.resolve(url)
            reason = (
                f"URL does not match declared platform {declared}"
                if detected.platform is Platform.UNKNOWN
                else f"URL is a {detected.platform} URL, not {declared}"
            )
        else:
            reason = "Unsupported social media platform"
        logger.info("Rejected URL", url=url, reason=reason)
        raise InvalidURLError(url, reason)

    def _candidate_platforms(
        self, declared_platform: Platform | str | None, url: str
    ) -> tuple[Platform, ...]:
        declared = self._coerce_platform(declared_platform, url)
        if declared is None:
            return tuple(self.PATTERNS)
        return (declared,)

    @staticmethod
    def _coerce_platform(value: Platform | str | None, url: str) -> Platform | None:
        if value is None or not str(value).strip():
            return None
        try:
            platform = Platform(str(value).strip().lower())
        except ValueError:
            msg = f"Unknown platform: {value}"
            raise InvalidURLError(url, msg, field="platform") from None
        return None if platform is Platform.UNKNOWN else platform


def _normalize_url(url: str) -> str:
    stripped = url.strip()
    if "://" not in stripped:
        stripped = f"https://{stripped.lstrip('/')}"
    return stripped


def _split_host_and_target(url: str) -> tuple[str, str]:
    parts = urlsplit(url)
    host = (parts.hostname or "").lower()
    for prefix in _HOST_PREFIXES:
        if host.startswith(prefix):
            host = host[len(prefix) :]
            break
    target = parts.path or "/"
    if parts.query:
        target = f"{target}?{parts.query}"
    return host, target
