"""Video ID parsing from raw IDs and the common YouTube URL shapes.

WHY: Users paste whatever they have — a bare ID, a watch URL, a short
youtu.be link, an embed or shorts URL. The player endpoint only takes the
11-character ID.

HOW: A bare ID is matched directly; otherwise a small ordered list of URL
patterns is tried and the first captured ID wins.

RULES:
- IDs are exactly 11 characters of [A-Za-z0-9_-]
- Surrounding whitespace is ignored
- parse_video_id raises InvalidVideoIdError; try_parse_video_id returns None
"""

from __future__ import annotations

import re
from typing import Optional

from caption_exporter.exceptions import InvalidVideoIdError

_ID_RE = re.compile(r"^[A-Za-z0-9_-]{11}$")

_URL_PATTERNS = [
    re.compile(r"youtube\..+?/watch.*?[?&]v=([A-Za-z0-9_-]{11})"),
    re.compile(r"youtu\.be/([A-Za-z0-9_-]{11})"),
    re.compile(r"youtube\..+?/embed/([A-Za-z0-9_-]{11})"),
    re.compile(r"youtube\..+?/shorts/([A-Za-z0-9_-]{11})"),
    re.compile(r"youtube\..+?/live/([A-Za-z0-9_-]{11})"),
]


def try_parse_video_id(value: str) -> Optional[str]:
    value = value.strip()
    if _ID_RE.match(value):
        return value

    for pattern in _URL_PATTERNS:
        match = pattern.search(value)
        if match:
            return match.group(1)

    return None


def parse_video_id(value: str) -> str:
    """Return the video ID contained in ``value``.

    Raises:
        InvalidVideoIdError: If ``value`` is neither an ID nor a video URL.
    """
    video_id = try_parse_video_id(value)
    if video_id is None:
        raise InvalidVideoIdError("Invalid YouTube video ID or URL: '{}'".format(value))
    return video_id
