"""Immutable data model for caption manifests and tracks.

WHY: The upstream player response and timed-text documents are loosely
typed — every field may be missing. The pipeline validates once at the
boundary (extractor, parser) and from then on works only with these
fully non-optional values, so formatters and callers never null-check.

HOW: Frozen dataclasses form two small hierarchies:
  Language        — code + display name
  TrackDescriptor — one fetchable caption track (URL, language, ASR flag)
  Manifest        — ordered descriptors for one video
  CaptionPart     — a sub-segment of a caption (word-level timing)
  Caption         — one caption line with timing and parts
  Track           — ordered captions for one language

RULES:
- All values are immutable; sequences are stored as tuples
- Order is always upstream/source order, never re-sorted
- Times are datetime.timedelta measured from the start of the track
- Lookups are linear scans (tens of tracks, low thousands of captions)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Iterator, Optional, Tuple

from caption_exporter.exceptions import CaptionNotFoundError, TrackNotFoundError


@dataclass(frozen=True)
class Language:
    """Language of a caption track, e.g. ``Language("en", "English")``."""

    code: str
    name: str

    def __str__(self) -> str:
        return "{} ({})".format(self.code, self.name)


@dataclass(frozen=True)
class TrackDescriptor:
    """Metadata identifying one fetchable closed caption track.

    WHY: A manifest lists tracks before any caption content is fetched.
    The descriptor carries just enough to fetch the track later and to
    let the caller choose between languages and auto-generated tracks.

    RULES:
    - Created only by the catalog extractor, never mutated
    - is_auto_generated is the upstream flag passed through verbatim
    """

    url: str
    language: Language
    is_auto_generated: bool = False

    def __str__(self) -> str:
        return "CC Track ({})".format(self.language.code)


@dataclass(frozen=True)
class Manifest:
    """Catalog of caption tracks available for a video, in upstream order.

    The first track is usually the platform's default, so callers that just
    want "a track in language X" get the preferred one from
    try_get_by_language.
    """

    tracks: Tuple[TrackDescriptor, ...] = ()

    def __len__(self) -> int:
        return len(self.tracks)

    def __iter__(self) -> Iterator[TrackDescriptor]:
        return iter(self.tracks)

    def __getitem__(self, index: int) -> TrackDescriptor:
        return self.tracks[index]

    def try_get_by_language(self, language_code: str) -> Optional[TrackDescriptor]:
        """Return the first track in the given language, or None.

        The comparison is case-insensitive on the language code.
        """
        wanted = language_code.lower()
        for track in self.tracks:
            if track.language.code.lower() == wanted:
                return track
        return None

    def get_by_language(self, language_code: str) -> TrackDescriptor:
        track = self.try_get_by_language(language_code)
        if track is None:
            raise TrackNotFoundError(
                "No closed caption track available for language '{}'.".format(language_code)
            )
        return track

    def filter(self, auto_generated: Optional[bool] = None) -> Tuple[TrackDescriptor, ...]:
        """Return tracks whose auto-generated flag matches, or all when None."""
        if auto_generated is None:
            return self.tracks
        return tuple(t for t in self.tracks if t.is_auto_generated == auto_generated)


@dataclass(frozen=True)
class CaptionPart:
    """A sub-segment of a caption line, used for word-level highlighting.

    RULES:
    - text is non-empty (may be whitespace)
    - offset is measured from the start of the track
    """

    text: str
    offset: timedelta


@dataclass(frozen=True)
class Caption:
    """One caption line with timing and optional parts.

    WHY: This is the unit the SRT formatter writes as one block. Parts are
    kept so callers can build karaoke-style output without refetching.

    RULES:
    - text is non-empty but may consist only of whitespace (line breaks)
    - offset >= 0 and duration >= 0
    - parts keep source order and may be empty
    """

    text: str
    offset: timedelta
    duration: timedelta
    parts: Tuple[CaptionPart, ...] = field(default_factory=tuple)

    @property
    def end(self) -> timedelta:
        return self.offset + self.duration

    def try_get_part_by_time(self, time: timedelta) -> Optional[CaptionPart]:
        """Return the first part starting at or after ``time``, or None."""
        for part in self.parts:
            if part.offset >= time:
                return part
        return None

    def get_part_by_time(self, time: timedelta) -> CaptionPart:
        part = self.try_get_part_by_time(time)
        if part is None:
            raise CaptionNotFoundError("No caption part found at {}.".format(time))
        return part


@dataclass(frozen=True)
class Track:
    """All captions of one closed caption track, in presentation order."""

    captions: Tuple[Caption, ...] = ()

    def __len__(self) -> int:
        return len(self.captions)

    def __iter__(self) -> Iterator[Caption]:
        return iter(self.captions)

    def __getitem__(self, index: int) -> Caption:
        return self.captions[index]

    def try_get_by_time(self, time: timedelta) -> Optional[Caption]:
        """Return the first caption displayed at ``time`` (bounds inclusive), or None."""
        for caption in self.captions:
            if caption.offset <= time <= caption.end:
                return caption
        return None

    def get_by_time(self, time: timedelta) -> Caption:
        caption = self.try_get_by_time(time)
        if caption is None:
            raise CaptionNotFoundError("No caption found at {}.".format(time))
        return caption
