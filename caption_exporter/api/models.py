"""Raw upstream documents: player response and timed-text track.

WHY: The player response JSON and the srv3 timed-text XML are loosely
typed — any field can be absent, and the shape drifts over time. These
dataclasses capture exactly what the pipeline reads, with every field
Optional, so validation happens in one place (core.extractor and
core.parser) instead of being scattered through dict lookups.

HOW: Each dataclass maps to one upstream object. Factory methods
(from_dict, from_xml) only reshape data; they never raise for a missing
field and never drop records — that policy belongs to the core.

RULES:
- Absent upstream fields become None, never a placeholder value
- Times are integer milliseconds, as sent upstream
- RawCaptionPart.offset_ms is measured from the start of the track
- Malformed XML raises ExtractionError; malformed JSON is the transport's problem
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union
from xml.etree import ElementTree

from caption_exporter.exceptions import ExtractionError


@dataclass
class RawTrack:
    """One entry of ``captions.playerCaptionsTracklistRenderer.captionTracks``.

    RULES:
    - url comes from baseUrl
    - language_name comes from name.simpleText, or the joined name.runs
    - is_auto_generated is True for kind == "asr" or a vssId starting with "a."
      and None when the entry carries neither marker
    """

    url: Optional[str] = None
    language_code: Optional[str] = None
    language_name: Optional[str] = None
    is_auto_generated: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> RawTrack:
        name = data.get("name") or {}
        language_name = name.get("simpleText")
        if language_name is None and name.get("runs"):
            language_name = "".join(run.get("text", "") for run in name["runs"])

        is_auto_generated: Optional[bool] = None
        if "kind" in data or "vssId" in data:
            is_auto_generated = (
                data.get("kind") == "asr"
                or str(data.get("vssId", "")).startswith("a.")
            )

        return cls(
            url=data.get("baseUrl"),
            language_code=data.get("languageCode"),
            language_name=language_name,
            is_auto_generated=is_auto_generated,
        )


@dataclass
class PlayerResponse:
    """The parts of the innertube player response the caption pipeline reads.

    A video without captions has no ``captions`` section at all; that yields
    an empty track list rather than an error.
    """

    tracks: List[RawTrack] = field(default_factory=list)
    playability_status: Optional[str] = None
    playability_reason: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PlayerResponse:
        renderer = (data.get("captions") or {}).get("playerCaptionsTracklistRenderer") or {}
        playability = data.get("playabilityStatus") or {}
        return cls(
            tracks=[RawTrack.from_dict(t) for t in renderer.get("captionTracks") or []],
            playability_status=playability.get("status"),
            playability_reason=playability.get("reason"),
        )

    @property
    def is_playable(self) -> bool:
        return self.playability_status in (None, "OK")


@dataclass
class RawCaptionPart:
    text: Optional[str] = None
    offset_ms: Optional[int] = None


@dataclass
class RawCaption:
    text: Optional[str] = None
    offset_ms: Optional[int] = None
    duration_ms: Optional[int] = None
    parts: List[RawCaptionPart] = field(default_factory=list)


@dataclass
class TrackDocument:
    """A fetched timed-text track: the ordered raw captions it contains."""

    captions: List[RawCaption] = field(default_factory=list)

    @classmethod
    def from_xml(cls, content: Union[str, bytes]) -> TrackDocument:
        """Parse an srv3 timed-text document.

        WHY: srv3 is the only timed-text format that carries per-word parts
        alongside caption-level timing.

        HOW: Every ``<p t= d=>`` under ``<body>`` becomes a RawCaption whose
        text is the concatenated text content of the element. Every
        ``<s t=>`` child becomes a RawCaptionPart. ``s/@t`` is relative to
        its parent ``p``; it is shifted to a track offset here, and a
        missing ``s/@t`` means "at the start of the caption".

        RULES:
        - Character entities are decoded by the XML parser
        - Non-integer time attributes are treated as absent
        - A part offset is absent only when its caption offset is absent
        - Raises ExtractionError if the document is not well-formed XML
        """
        try:
            root = ElementTree.fromstring(content)
        except ElementTree.ParseError as e:
            raise ExtractionError("Could not parse closed caption track document: {}".format(e)) from e

        body = root.find("body")
        if body is None:
            body = root

        captions: List[RawCaption] = []
        for p in body.iter("p"):
            offset_ms = _int_attr(p, "t")
            parts: List[RawCaptionPart] = []
            for s in p.iter("s"):
                relative_ms = _int_attr(s, "t")
                part_offset_ms: Optional[int] = None
                if offset_ms is not None:
                    part_offset_ms = offset_ms + (relative_ms or 0)
                parts.append(RawCaptionPart(text="".join(s.itertext()), offset_ms=part_offset_ms))

            captions.append(
                RawCaption(
                    text="".join(p.itertext()),
                    offset_ms=offset_ms,
                    duration_ms=_int_attr(p, "d"),
                    parts=parts,
                )
            )

        return cls(captions=captions)


def _int_attr(element: ElementTree.Element, name: str) -> Optional[int]:
    """Read an integer attribute, returning None when absent or malformed."""
    value = element.get(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None
