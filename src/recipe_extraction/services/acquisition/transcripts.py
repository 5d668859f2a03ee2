"""YouTube transcript retrieval.

youtube-transcript-api is synchronous, so lookups run in a worker thread
under an overall timeout.
"""

from __future__ import annotations

import asyncio
import re
from xml.etree.ElementTree import ParseError

import requests
from youtube_transcript_api import (
    CouldNotRetrieveTranscript,
    YouTubeTranscriptApi,
    YouTubeTranscriptApiException,
)

from recipe_extraction.observability.logging import get_logger
from recipe_extraction.services.acquisition.exceptions import (
    TranscriptUnavailableError,
)


logger = get_logger(__name__)

_SPACES = re.compile(r"\s+")
_CUE_MARKERS = re.compile(r"\[(?:music|applause|laughter)\]", re.IGNORECASE)


class TranscriptFetcher:
    """Fetch and flatten captions for a YouTube video."""

    def __init__(
        self,
        languages: list[str],
        *,
        timeout: float = 20.0,
        max_chars: int = 15000,
        api: YouTubeTranscriptApi | None = None,
    ) -> None:
        self.languages = languages
        self.timeout = timeout
        self.max_chars = max_chars
        self._api = api or YouTubeTranscriptApi()

    def _fetch_sync(self, video_id: str) -> str:
        fetched = self._api.fetch(video_id, languages=self.languages)
        text = " ".join(snippet.text for snippet in fetched)
        text = _SPACES.sub(" ", _CUE_MARKERS.sub(" ", text)).strip()
        return text[: self.max_chars]

    async def fetch(self, video_id: str) -> str:
        """Return the transcript as one block of text.

        Raises:
            TranscriptUnavailableError: If captions are disabled, missing,
                empty, unparseable, or could not be fetched in time.
        """
        try:
            text = await asyncio.wait_for(
                asyncio.to_thread(self._fetch_sync, video_id),
                timeout=self.timeout,
            )
        except CouldNotRetrieveTranscript as e:
            msg = f"No transcript for {video_id}: {type(e).__name__}"
            raise TranscriptUnavailableError(msg) from e
        except YouTubeTranscriptApiException as e:
            msg = f"Transcript lookup for {video_id} failed: {type(e).__name__}"
            raise TranscriptUnavailableError(msg) from e
        except ParseError as e:
            # Empty or truncated caption XML
            msg = f"Transcript for {video_id} could not be parsed: {e}"
            raise TranscriptUnavailableError(msg) from e
        except TimeoutError as e:
            msg = f"Transcript lookup for {video_id} timed out after {self.timeout}s"
            raise TranscriptUnavailableError(msg) from e
        except requests.RequestException as e:
            msg = f"Transcript request for {video_id} failed: {e}"
            raise TranscriptUnavailableError(msg) from e

        if not text:
            msg = f"Transcript for {video_id} is empty"
            raise TranscriptUnavailableError(msg)

        logger.debug("Transcript fetched", video_id=video_id, chars=len(text))
        return text
