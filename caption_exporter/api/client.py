"""Async HTTP client for YouTube's player and timed-text endpoints.

WHY: The caption pipeline needs two documents — the player response that
lists caption tracks, and the timed-text document of one track. This
module hides the innertube request shape, headers and format selection
behind two methods so the core never touches HTTP.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. YouTubeClient is an
async context manager — enter it to open the connection pool, exit to
close it. fetch_player_response POSTs the innertube player request;
fetch_track_document GETs the track URL with fmt=srv3 forced.

RULES:
- Always use the async context manager (async with YouTubeClient() as client:)
- Non-200 responses raise YouTubeAPIError with status code and body
- A player response whose playability status is not OK raises VideoUnplayableError
- httpx network errors propagate unchanged; there are no retries here
- Timeouts come from config.HTTP_TIMEOUT_S
"""

from __future__ import annotations

import logging
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import httpx

from caption_exporter.api.models import PlayerResponse, TrackDocument
from caption_exporter.config import (
    HTTP_TIMEOUT_S,
    PLAYER_ENDPOINT,
    TRACK_FORMAT,
    YOUTUBE_BASE_URL,
    YOUTUBE_CLIENT_NAME,
    YOUTUBE_CLIENT_VERSION,
    YOUTUBE_HL,
    YOUTUBE_USER_AGENT,
)

logger = logging.getLogger(__name__)


class YouTubeAPIError(Exception):
    """Raised when a YouTube endpoint returns a non-200 response.

    WHY: Callers need a typed exception to distinguish upstream rejections
    from network errors or malformed data.

    RULES:
    - Always include status_code and message
    - message is the response body text
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"YouTube API error {status_code}: {message}")


class VideoUnplayableError(Exception):
    """Raised when the player response reports the video as unplayable.

    Private, removed, age-restricted and region-blocked videos all land
    here; the upstream reason is kept in the message.
    """

    def __init__(self, video_id: str, status: str, reason: str | None = None) -> None:
        self.video_id = video_id
        self.status = status
        self.reason = reason
        super().__init__(
            f"Video {video_id} is not playable: {status} ({reason or 'no reason given'})"
        )


class YouTubeClient:
    """Async client for the two caption documents of a YouTube video.

    WHY: Provides the fetch collaborators of the caption pipeline over a
    single pooled connection, with one place for headers and timeouts.

    HOW: Wraps httpx.AsyncClient. Tests pass a ``transport`` (e.g.
    httpx.MockTransport) to serve canned documents.

    RULES:
    - Use as: async with YouTubeClient() as client: ...
    - base_url defaults to YOUTUBE_BASE_URL from config
    - client_name/client_version default to the config innertube identity
    """

    def __init__(
        self,
        base_url: str | None = None,
        client_name: str | None = None,
        client_version: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or YOUTUBE_BASE_URL).rstrip("/")
        self._client_name = client_name or YOUTUBE_CLIENT_NAME
        self._client_version = client_version or YOUTUBE_CLIENT_VERSION
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> YouTubeClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "User-Agent": YOUTUBE_USER_AGENT,
                "Accept-Language": YOUTUBE_HL,
            },
            timeout=httpx.Timeout(HTTP_TIMEOUT_S),
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "YouTubeClient must be used as an async context manager: "
                "async with YouTubeClient() as client: ..."
            )
        return self._client

    # ------------------------------------------------------------------
    # Player response
    # ------------------------------------------------------------------

    async def fetch_player_response(self, video_id: str) -> PlayerResponse:
        """Fetch and parse the innertube player response for a video.

        Args:
            video_id: An 11-character video ID.

        Returns:
            The parsed PlayerResponse (possibly with no caption tracks).

        Raises:
            YouTubeAPIError: On non-200 responses.
            VideoUnplayableError: If the playability status is not OK.
        """
        client = self._ensure_client()
        body = {
            "videoId": video_id,
            "context": {
                "client": {
                    "clientName": self._client_name,
                    "clientVersion": self._client_version,
                    "hl": YOUTUBE_HL,
                },
            },
        }

        logger.debug("Fetching player response for %s", video_id)
        resp = await client.post(PLAYER_ENDPOINT, params={"prettyPrint": "false"}, json=body)
        if resp.status_code != 200:
            raise YouTubeAPIError(resp.status_code, resp.text)

        player_response = PlayerResponse.from_dict(resp.json())
        if not player_response.is_playable:
            raise VideoUnplayableError(
                video_id,
                player_response.playability_status or "UNKNOWN",
                player_response.playability_reason,
            )
        return player_response

    # ------------------------------------------------------------------
    # Track document
    # ------------------------------------------------------------------

    async def fetch_track_document(self, url: str) -> TrackDocument:
        """Fetch and parse the srv3 timed-text document of one track.

        Args:
            url: The track URL from a TrackDescriptor.

        Returns:
            The parsed TrackDocument.

        Raises:
            YouTubeAPIError: On non-200 responses.
            ExtractionError: If the body is not well-formed XML.
        """
        client = self._ensure_client()

        logger.debug("Fetching closed caption track %s", url)
        resp = await client.get(_with_format(url, TRACK_FORMAT))
        if resp.status_code != 200:
            raise YouTubeAPIError(resp.status_code, resp.text)

        return TrackDocument.from_xml(resp.content)


def _with_format(url: str, fmt: str) -> str:
    """Return ``url`` with its ``fmt`` query parameter set to ``fmt``."""
    parts = urlsplit(url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != "fmt"]
    query.append(("fmt", fmt))
    return urlunsplit(parts._replace(query=urlencode(query)))
