"""Configuration constants and .env loading.

WHY: Centralizes the upstream endpoint, innertube client identity, HTTP
timeout and CLI defaults so they are easy to find and override without
touching the transport or the pipeline.

HOW: python-dotenv loads the .env file on import. Every value is a
module-level constant read via os.getenv with a working default.

RULES:
- Nothing here is secret; no API key is required for public captions
- All defaults can be overridden via environment variables
- Client name/version must describe a client whose player response
  includes the captions section (WEB does)
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Upstream endpoint and innertube client identity
# ---------------------------------------------------------------------------

YOUTUBE_BASE_URL = os.getenv("YOUTUBE_BASE_URL", "https://www.youtube.com")
YOUTUBE_CLIENT_NAME = os.getenv("YOUTUBE_CLIENT_NAME", "WEB")
YOUTUBE_CLIENT_VERSION = os.getenv("YOUTUBE_CLIENT_VERSION", "2.20250101.00.00")
YOUTUBE_HL = os.getenv("YOUTUBE_HL", "en")
YOUTUBE_USER_AGENT = os.getenv(
    "YOUTUBE_USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36",
)

PLAYER_ENDPOINT = "/youtubei/v1/player"
"""Innertube player endpoint, relative to YOUTUBE_BASE_URL."""

TRACK_FORMAT = "srv3"
"""Timed-text format requested for every track document."""

# ---------------------------------------------------------------------------
# Transport and CLI defaults
# ---------------------------------------------------------------------------

HTTP_TIMEOUT_S = float(os.getenv("HTTP_TIMEOUT_S", "30"))
DEFAULT_CAPTION_LANGUAGE = os.getenv("DEFAULT_CAPTION_LANGUAGE", "en")
