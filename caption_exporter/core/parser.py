"""Track content parsing: raw timed-text captions → validated Captions.

WHY: Timed-text documents contain entries the SRT output must not see —
empty lines, and (on auto-generated tracks) entries without timing. Some
of these are expected upstream quirks to skip quietly; others mean the
document is corrupt and the whole track must be rejected. This module is
the one place that draws that line.

HOW: Single pass over the raw captions in source order:
  1. empty text            → drop the caption
  2. no offset or duration → drop the caption (known ASR quirk)
     negative timing       → treated the same as missing timing
  3. parts: empty text     → drop the part
            no offset      → ExtractionError, abort the whole parse
            negative offset → same as no offset
  4. emit a Caption with its surviving parts

RULES:
- Empty means "" or None; whitespace-only text is kept (it carries line breaks)
- Dropping a caption never affects the captions around it
- A part without an offset has no legitimate source, so it is fatal
- Every emitted offset and duration is >= 0
- Source order is kept for captions and parts alike; nothing is re-sorted
- Skips are logged at DEBUG only; they are not errors
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import List, Optional, Tuple

from caption_exporter.api.models import RawCaption, TrackDocument
from caption_exporter.core.ir import Caption, CaptionPart
from caption_exporter.exceptions import ExtractionError

logger = logging.getLogger(__name__)


def parse_track(document: TrackDocument) -> List[Caption]:
    """Convert a raw track document into an ordered list of Captions.

    Args:
        document: Fetched timed-text document for one track.

    Returns:
        The validated captions, in source order.

    Raises:
        ExtractionError: If a non-empty caption part has no valid offset.
    """
    captions: List[Caption] = []
    skipped = 0

    for raw in document.captions:
        # Skip empty captions, but not captions containing only whitespace
        if not raw.text:
            skipped += 1
            continue

        # Auto-generated tracks may omit offset or duration
        if not _is_timing(raw.offset_ms) or not _is_timing(raw.duration_ms):
            skipped += 1
            continue

        captions.append(
            Caption(
                text=raw.text,
                offset=timedelta(milliseconds=raw.offset_ms),
                duration=timedelta(milliseconds=raw.duration_ms),
                parts=_parse_parts(raw),
            )
        )

    if skipped:
        logger.debug("Skipped %d empty or untimed caption(s)", skipped)
    return captions


def _parse_parts(raw: RawCaption) -> Tuple[CaptionPart, ...]:
    parts: List[CaptionPart] = []
    for raw_part in raw.parts:
        if not raw_part.text:
            continue
        if not _is_timing(raw_part.offset_ms):
            raise ExtractionError("Could not extract caption part offset.")
        parts.append(CaptionPart(raw_part.text, timedelta(milliseconds=raw_part.offset_ms)))
    return tuple(parts)


def _is_timing(value: Optional[int]) -> bool:
    return value is not None and value >= 0
