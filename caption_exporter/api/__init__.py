"""YouTube API package — async HTTP access to player and timed-text documents.

WHY: The caption pipeline needs the player response (track list) and the
timed-text document of a track. This package owns every HTTP detail and
the raw, all-optional shapes of those two documents.

HOW: YouTubeClient wraps httpx.AsyncClient and implements the
CaptionTransport protocol. models.py holds the raw dataclasses.

RULES:
- All HTTP calls go through YouTubeClient (no direct httpx usage elsewhere)
- Raw models never validate; core.extractor and core.parser do
"""

from caption_exporter.api.client import VideoUnplayableError, YouTubeAPIError, YouTubeClient
from caption_exporter.api.models import PlayerResponse, TrackDocument

__all__ = [
    "PlayerResponse",
    "TrackDocument",
    "VideoUnplayableError",
    "YouTubeAPIError",
    "YouTubeClient",
]
