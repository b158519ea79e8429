"""Closed caption operations: manifest, track, SRT write and download.

WHY: Callers think in terms of "which tracks does this video have",
"give me this track" and "save this track as SRT". This module wires the
fetch collaborators to the extractor, parser and SRT formatter so each of
those is one call.

HOW: ClosedCaptionClient takes a CaptionTransport — any object with the
two async fetch methods (YouTubeClient in production, canned fakes in
tests). Every operation fetches, validates and returns; nothing is cached
and the client holds no state besides the transport, so concurrent calls
are safe.

RULES:
- get_manifest and get_track are all-or-nothing: no partial results
- write_to needs the whole track first (progress needs the total count)
- download opens the file only after the track has been fetched and
  parsed, and only if cancellation is not yet requested; it always closes
  the file — on success, error or cancellation
- A cancelled or failed download leaves a valid SRT prefix; atomic
  replacement is the caller's job (write elsewhere, then rename)
- Transport, sink and extraction errors propagate unchanged
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol, TextIO, Union

from caption_exporter.api.models import PlayerResponse, TrackDocument
from caption_exporter.core.extractor import extract_catalog
from caption_exporter.core.ir import Manifest, Track, TrackDescriptor
from caption_exporter.core.parser import parse_track
from caption_exporter.core.video_id import parse_video_id
from caption_exporter.exceptions import OperationCancelledError
from caption_exporter.formatters.srt import (
    CancellationSignal,
    ProgressCallback,
    SRTFormatter,
)

logger = logging.getLogger(__name__)


class CaptionTransport(Protocol):
    """The two fetch collaborators the caption pipeline depends on."""

    async def fetch_player_response(self, video_id: str) -> PlayerResponse:
        ...

    async def fetch_track_document(self, url: str) -> TrackDocument:
        ...


class ClosedCaptionClient:
    """Operations related to the closed captions of a video.

    Usage::

        async with YouTubeClient() as transport:
            captions = ClosedCaptionClient(transport)
            manifest = await captions.get_manifest("https://youtu.be/dQw4w9WgXcQ")
            track_info = manifest.get_by_language("en")
            await captions.download(track_info, Path("video.en.srt"))
    """

    def __init__(self, transport: CaptionTransport, formatter: Optional[SRTFormatter] = None) -> None:
        self._transport = transport
        self._formatter = formatter or SRTFormatter()

    async def get_manifest(self, video: str) -> Manifest:
        """Fetch the manifest of caption tracks available for a video.

        Args:
            video: A video ID or any supported YouTube video URL.

        Raises:
            InvalidVideoIdError: If ``video`` is not a recognisable ID or URL.
            ExtractionError: If any track record is malformed.
        """
        video_id = parse_video_id(video)
        player_response = await self._transport.fetch_player_response(video_id)
        manifest = Manifest(tuple(extract_catalog(player_response)))
        logger.info("Found %d caption track(s) for %s", len(manifest), video_id)
        return manifest

    async def get_track(self, track_info: TrackDescriptor) -> Track:
        """Fetch and parse the captions of the given track.

        Raises:
            ExtractionError: If a caption part has no offset.
        """
        document = await self._transport.fetch_track_document(track_info.url)
        track = Track(tuple(parse_track(document)))
        logger.info("Parsed %d caption(s) from %s", len(track), track_info)
        return track

    async def write_to(
        self,
        track_info: TrackDescriptor,
        sink: TextIO,
        progress: Optional[ProgressCallback] = None,
        cancellation: Optional[CancellationSignal] = None,
    ) -> None:
        """Write the given track to an open text sink in SRT format.

        The sink is not closed.

        Raises:
            OperationCancelledError: If ``cancellation`` is set mid-write.
        """
        # Streaming straight from the document would be nicer, but progress
        # needs the total caption count up front.
        track = await self.get_track(track_info)
        self._formatter.write(track, sink, progress, cancellation)

    async def download(
        self,
        track_info: TrackDescriptor,
        file_path: Union[str, Path],
        progress: Optional[ProgressCallback] = None,
        cancellation: Optional[CancellationSignal] = None,
    ) -> None:
        """Download the given track to ``file_path`` in SRT format.

        The file is created or truncated, written as UTF-8 with ``\\n``
        line endings, and closed on every exit path.

        Raises:
            OperationCancelledError: If ``cancellation`` is set before or during
                the write. If set before, the file is left untouched.
        """
        track = await self.get_track(track_info)
        if cancellation is not None and cancellation.is_set():
            raise OperationCancelledError("Download of {} cancelled before writing.".format(track_info))
        with open(file_path, "w", encoding="utf-8", newline="\n") as f:
            self._formatter.write(track, f, progress, cancellation)
        logger.info("Saved %s to %s", track_info, file_path)
