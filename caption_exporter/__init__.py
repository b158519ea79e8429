"""Caption Exporter — YouTube closed captions to SubRip (SRT).

WHY: YouTube exposes caption tracks through its player response, but in
formats no editor or player reads directly. This package lists the tracks
of a video, parses one into a validated in-memory model and writes it as
an SRT file, without the authenticated Data API.

HOW: Three-stage pipeline — fetch (api client), validate (core extractor
and parser), format (SRT formatter). Each stage is independently testable;
the fetch stage is injected so the rest runs against canned documents.

RULES:
- core modules never use httpx; they only see the CaptionTransport protocol
- The data model in core.ir is immutable and fully non-optional
- SRT is the only output format
"""

from caption_exporter.core.captions import CaptionTransport, ClosedCaptionClient
from caption_exporter.core.ir import (
    Caption,
    CaptionPart,
    Language,
    Manifest,
    Track,
    TrackDescriptor,
)
from caption_exporter.exceptions import (
    CaptionExporterError,
    ExtractionError,
    OperationCancelledError,
)

__version__ = "0.1.0"

__all__ = [
    "Caption",
    "CaptionExporterError",
    "CaptionPart",
    "CaptionTransport",
    "ClosedCaptionClient",
    "ExtractionError",
    "Language",
    "Manifest",
    "OperationCancelledError",
    "Track",
    "TrackDescriptor",
]
