"""Track catalog extraction from the player response.

WHY: The player response lists caption tracks as loosely-typed records.
Callers need a validated, ordered list of TrackDescriptor values they can
present and fetch from, with no None leaking into the data model.

HOW: Walks the raw tracks in upstream order, requires URL, language code
and language name on each, and builds a TrackDescriptor per record.

RULES:
- All-or-nothing: one malformed record raises ExtractionError and no
  partial catalog is returned (a malformed record signals a schema change)
- The error message names the missing field
- is_auto_generated is passed through verbatim, False when absent
- Upstream order is preserved; the first track is the platform default
- The input is never mutated
"""

from __future__ import annotations

import logging
from typing import List

from caption_exporter.api.models import PlayerResponse
from caption_exporter.core.ir import Language, TrackDescriptor
from caption_exporter.exceptions import ExtractionError

logger = logging.getLogger(__name__)


def extract_catalog(player_response: PlayerResponse) -> List[TrackDescriptor]:
    """Build the ordered list of caption track descriptors.

    Args:
        player_response: Parsed player response for one video.

    Returns:
        One TrackDescriptor per upstream track, in upstream order.

    Raises:
        ExtractionError: If any track lacks a URL, language code or name.
    """
    descriptors: List[TrackDescriptor] = []

    for raw in player_response.tracks:
        if not raw.url:
            raise ExtractionError("Could not extract track URL.")
        if not raw.language_code:
            raise ExtractionError("Could not extract track language code.")
        if not raw.language_name:
            raise ExtractionError("Could not extract track language name.")

        descriptors.append(
            TrackDescriptor(
                url=raw.url,
                language=Language(raw.language_code, raw.language_name),
                is_auto_generated=bool(raw.is_auto_generated),
            )
        )

    logger.debug("Extracted %d caption track(s)", len(descriptors))
    return descriptors
